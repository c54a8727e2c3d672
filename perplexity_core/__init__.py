# =============================================================================
# perplexity_core/__init__.py
# =============================================================================
# This package contains ALL the logic for talking to the Perplexity API.
#
# ARCHITECTURAL RULE:
#   Nothing in this package imports FastMCP or any MCP type.  The tool
#   server in perplexity_tools/ wraps these functions; the functions
#   themselves know nothing about the protocol they are exposed through.
# =============================================================================

from perplexity_core.completion import PerplexityClient, format_completion
from perplexity_core.config import Settings, load_settings
from perplexity_core.errors import (
    ConfigError,
    PerplexityAPIError,
    PerplexityError,
    PerplexityNetworkError,
    PerplexityResponseError,
)
from perplexity_core.models import ChatCompletion, Message

__all__ = [
    "ChatCompletion",
    "ConfigError",
    "Message",
    "PerplexityAPIError",
    "PerplexityClient",
    "PerplexityError",
    "PerplexityNetworkError",
    "PerplexityResponseError",
    "Settings",
    "format_completion",
    "load_settings",
]
