# =============================================================================
# perplexity_core/errors.py  —  Exception types
# =============================================================================
#
# Every failure of a single completion call raises a PerplexityError
# subclass.  The tool server catches them at the call-tool boundary and turns
# them into MCP INTERNAL_ERROR responses; the message text is passed through
# to the client unchanged.
#
# ConfigError is separate: it only happens at startup and stops the process.
# =============================================================================


class ConfigError(Exception):
    """Required configuration is missing or malformed."""


class PerplexityError(Exception):
    """Base class for failures talking to the Perplexity API."""


class PerplexityNetworkError(PerplexityError):
    """The request never got an HTTP response (DNS, connect, TLS, reset...)."""


class PerplexityAPIError(PerplexityError):
    """Perplexity answered with a non-2xx status."""

    def __init__(self, status_code: int, reason: str, body: str):
        self.status_code = status_code
        self.reason = reason
        self.body = body
        super().__init__(f"Perplexity API error: {status_code} {reason}\n{body}")


class PerplexityResponseError(PerplexityError):
    """The 2xx response body was not the JSON we expected."""
