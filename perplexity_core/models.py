# =============================================================================
# perplexity_core/models.py  —  Data Models
# =============================================================================
#
# These models define the shape of the data that flows through the
# server: the conversation messages a client sends in, and the parsed
# completion that comes back from Perplexity.
#
# The field descriptions on Message end up in the tool's JSON input schema,
# which is what an MCP client (and the LLM behind it) reads to learn how to
# call perplexity_ask.
# =============================================================================

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from perplexity_core.errors import PerplexityResponseError


# -----------------------------------------------------------------------------
# Message — one turn of the conversation
# -----------------------------------------------------------------------------
# A list of these is the whole input of the tool.  Order matters: it is the
# conversation history, oldest first.  Only role and content are required;
# any other key a client puts on a message is kept and forwarded as-is.
# -----------------------------------------------------------------------------
class Message(BaseModel):
    """A single conversation message."""

    model_config = ConfigDict(extra="allow")

    role: str = Field(description="Role of the message (e.g., system, user, assistant)")
    content: str = Field(description="The content of the message")


# -----------------------------------------------------------------------------
# ChatCompletion — the parts of the Perplexity response we use
# -----------------------------------------------------------------------------
@dataclass
class ChatCompletion:
    """Answer text plus the citation URLs Perplexity returned with it."""

    content: str
    citations: list[str] = field(default_factory=list)

    @classmethod
    def from_response(cls, data: Any) -> "ChatCompletion":
        """Build a ChatCompletion from a decoded /chat/completions body.

        Raises:
            PerplexityResponseError: if ``choices[0].message.content`` is
                missing or is not a string.
        """
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise PerplexityResponseError(
                "Unexpected response shape from Perplexity API: "
                f"missing choices[0].message.content ({e!r})"
            ) from e
        if not isinstance(content, str):
            raise PerplexityResponseError(
                "Unexpected response shape from Perplexity API: "
                f"choices[0].message.content is {type(content).__name__}, not str"
            )

        citations = data.get("citations") if isinstance(data, dict) else None
        if not isinstance(citations, list):
            citations = []
        return cls(content=content, citations=citations)
