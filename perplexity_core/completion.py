# =============================================================================
# perplexity_core/completion.py  —  Perplexity chat-completion client
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Performs exactly ONE round trip to the Perplexity /chat/completions
#   endpoint and turns the JSON answer into the text the tool returns.
#
# THE TWO STEPS:
#   1. PerplexityClient.perform_chat_completion()  — HTTP + JSON decoding
#   2. format_completion()                         — content + citation block
#   Formatting is a pure function, so it can be tested without any HTTP.
#
# ERROR PATHS (all terminal, nothing is retried):
#   - no HTTP response at all      → PerplexityNetworkError
#   - non-2xx status               → PerplexityAPIError
#   - 2xx body that isn't JSON     → PerplexityResponseError
#   - JSON without the answer text → PerplexityResponseError
#
# CONCURRENCY:
#   The request is awaited on httpx.AsyncClient, so the MCP event loop keeps
#   serving other requests while Perplexity thinks.  Every call opens its own
#   AsyncClient; there is no state shared between calls.
# =============================================================================

import logging
from typing import Any, Mapping, Optional, Sequence, Union

import httpx

from perplexity_core.config import Settings
from perplexity_core.errors import (
    PerplexityAPIError,
    PerplexityNetworkError,
    PerplexityResponseError,
)
from perplexity_core.models import ChatCompletion, Message

logger = logging.getLogger(__name__)

UNREADABLE_ERROR_BODY = "Unable to parse error response"


def format_completion(content: str, citations: Sequence[str] = ()) -> str:
    """Append a numbered citation block to the answer text.

    With citations ``["https://a", "https://b"]`` the result ends with::

        \\n\\nCitations:\\n[1] https://a\\n[2] https://b\\n

    No citations (empty or missing) means the content is returned as-is.
    """
    if not citations:
        return content

    lines = [f"[{index}] {citation}\n" for index, citation in enumerate(citations, 1)]
    return content + "\n\nCitations:\n" + "".join(lines)


def _message_payload(message: Union[Message, Mapping[str, Any]]) -> dict:
    if isinstance(message, Message):
        return message.model_dump()
    return dict(message)


class PerplexityClient:
    """Thin async client for the Perplexity Sonar chat-completion API.

    Args:
        settings: API key, endpoint, model and timeout.
        transport: Optional httpx transport.  Tests pass an
            ``httpx.MockTransport`` here; production leaves it ``None``.
    """

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._settings = settings
        self._transport = transport

    @property
    def model(self) -> str:
        return self._settings.model

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._settings.api_key}",
        }

    async def perform_chat_completion(
        self, messages: Sequence[Union[Message, Mapping[str, Any]]]
    ) -> str:
        """Send the conversation to Perplexity and return the formatted answer.

        Args:
            messages: The conversation, oldest message first.

        Returns:
            The answer text, followed by a "Citations:" block when Perplexity
            returned any citations.

        Raises:
            PerplexityNetworkError: the request could not be sent or the
                response could not be received.
            PerplexityAPIError: Perplexity answered with a non-2xx status.
            PerplexityResponseError: the body was not valid JSON, or did not
                contain ``choices[0].message.content``.
        """
        body = {
            "model": self._settings.model,
            "messages": [_message_payload(m) for m in messages],
        }
        logger.debug(
            "POST %s model=%s messages=%d",
            self._settings.api_url,
            self._settings.model,
            len(body["messages"]),
        )

        async with httpx.AsyncClient(
            timeout=self._settings.timeout_seconds,
            transport=self._transport,
        ) as client:
            try:
                async with client.stream(
                    "POST",
                    self._settings.api_url,
                    json=body,
                    headers=self._headers(),
                ) as response:
                    completion = await self._read_completion(response)
            except httpx.RequestError as e:
                raise PerplexityNetworkError(
                    f"Network error while calling Perplexity API: {e!r}"
                ) from e

        logger.debug(
            "Perplexity answered with %d chars and %d citations",
            len(completion.content),
            len(completion.citations),
        )
        return format_completion(completion.content, completion.citations)

    @staticmethod
    async def _read_completion(response: httpx.Response) -> ChatCompletion:
        if not response.is_success:
            try:
                await response.aread()
                error_text = response.text
            except httpx.HTTPError:
                error_text = UNREADABLE_ERROR_BODY
            raise PerplexityAPIError(
                response.status_code, response.reason_phrase, error_text
            )

        await response.aread()
        try:
            data = response.json()
        except ValueError as e:
            raise PerplexityResponseError(
                f"Failed to parse JSON response from Perplexity API: {e}"
            ) from e

        return ChatCompletion.from_response(data)
