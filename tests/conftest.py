"""
Pytest configuration and shared fixtures.

Nothing here talks to the network: every PerplexityClient is wired to an
httpx.MockTransport whose handler answers with a canned response and
records each request it sees.

Fixtures provided:
- settings: Settings with a fake API key
- completion_body: a minimal successful /chat/completions body
- recorded_requests: list every fake transport appends its requests to
- make_client: factory building a PerplexityClient around a handler
"""

import httpx
import pytest

from perplexity_core import PerplexityClient, Settings

TEST_API_KEY = "pplx-test-key"


@pytest.fixture
def settings():
    """Settings with a fake key and the real endpoint/model defaults."""
    return Settings(api_key=TEST_API_KEY)


@pytest.fixture
def completion_body():
    """Builds a successful response body with optional citations."""

    def _build(content="pong", citations=None):
        body = {"choices": [{"message": {"role": "assistant", "content": content}}]}
        if citations is not None:
            body["citations"] = citations
        return body

    return _build


@pytest.fixture
def recorded_requests():
    return []


@pytest.fixture
def make_client(settings, recorded_requests):
    """Returns a factory: handler -> PerplexityClient over a MockTransport.

    ``handler`` may be an ``httpx.Response``, a dict (sent as a 200 JSON
    body), or a callable taking the request.
    """

    def _factory(handler):
        def _handle(request: httpx.Request) -> httpx.Response:
            recorded_requests.append(request)
            if callable(handler):
                return handler(request)
            if isinstance(handler, httpx.Response):
                return handler
            return httpx.Response(200, json=handler)

        return PerplexityClient(settings, transport=httpx.MockTransport(_handle))

    return _factory


