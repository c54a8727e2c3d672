# =============================================================================
# perplexity_core/config.py  —  Settings loaded from the environment
# =============================================================================
#
# The API key is read ONCE, at startup, and carried around in an immutable
# Settings value.  Nothing else in the code base reads os.environ, so tests
# can build a Settings (or a client) directly without touching the process
# environment.
#
# ENVIRONMENT VARIABLES:
#   PERPLEXITY_API_KEY          (required) bearer token for api.perplexity.ai
#   PERPLEXITY_TIMEOUT_SECONDS  (optional) HTTP timeout; unset = no timeout
#
# The entry point calls python-dotenv's load_dotenv() before load_settings(),
# so both can also live in a .env file.
# =============================================================================

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from perplexity_core.errors import ConfigError

API_URL = "https://api.perplexity.ai/chat/completions"
DEFAULT_MODEL = "sonar-pro"


@dataclass(frozen=True)
class Settings:
    api_key: str
    api_url: str = API_URL
    model: str = DEFAULT_MODEL
    # None means the request waits as long as the transport lets it.
    timeout_seconds: Optional[float] = None


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from the environment.

    Args:
        environ: Mapping to read from.  Defaults to ``os.environ``.

    Raises:
        ConfigError: if PERPLEXITY_API_KEY is missing or empty, or if
            PERPLEXITY_TIMEOUT_SECONDS is not a positive number.
    """
    env = os.environ if environ is None else environ

    api_key = env.get("PERPLEXITY_API_KEY")
    if not api_key:
        raise ConfigError("PERPLEXITY_API_KEY environment variable is required")

    raw_timeout = env.get("PERPLEXITY_TIMEOUT_SECONDS")
    timeout_seconds = None
    if raw_timeout:
        try:
            timeout_seconds = float(raw_timeout)
        except ValueError:
            raise ConfigError(
                f"PERPLEXITY_TIMEOUT_SECONDS must be a number, got {raw_timeout!r}"
            ) from None
        if timeout_seconds <= 0:
            raise ConfigError(
                f"PERPLEXITY_TIMEOUT_SECONDS must be positive, got {raw_timeout!r}"
            )

    return Settings(api_key=api_key, timeout_seconds=timeout_seconds)
