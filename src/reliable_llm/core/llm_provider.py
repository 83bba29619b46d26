"""
Chat provider abstraction for reliable-llm.

Defines the capability contract every chat-completion backend implements,
plus the provider-neutral request/response data model. The resilience layer
(``reliable_llm.core.providers.reliable``) implements the same contract so a
wrapped provider can be used anywhere a plain one is expected.

Example:
    from reliable_llm.core.llm_provider import (
        ChatProvider, ChatMessage, ChatRequest, ChatResponse
    )

    class EchoProvider(ChatProvider):
        name = "echo"

        def chat_with_system(self, system_prompt, message, model, temperature):
            return message

        def chat(self, request, model, temperature):
            return ChatResponse(content=request.messages[-1].content)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Tuple


# =============================================================================
# Enums
# =============================================================================


class ChatRole(str, Enum):
    """Role of a message in a chat conversation.

    SYSTEM: System instructions/context
    USER: User input
    ASSISTANT: Model response
    TOOL: Tool/function call result
    """

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


class FinishReason(str, Enum):
    """Reason why the model stopped generating."""

    STOP = "stop"
    LENGTH = "length"
    TOOL_CALL = "tool_call"
    CONTENT_FILTER = "content_filter"
    ERROR = "error"


# =============================================================================
# Data Classes - Messages
# =============================================================================


@dataclass(frozen=True)
class ToolCall:
    """A tool/function call requested by the model.

    Attributes:
        id: Unique identifier for this tool call
        name: Name of the tool/function to call
        arguments: JSON-encoded arguments for the call
    """

    id: str
    name: str
    arguments: str  # JSON string


@dataclass(frozen=True)
class ChatMessage:
    """A role-tagged message in a chat conversation.

    Attributes:
        role: The role of the message sender
        content: The text content of the message
        name: Optional name for the sender
        tool_call_id: ID of the tool call this responds to (if role is TOOL)
    """

    role: ChatRole
    content: str
    name: Optional[str] = None
    tool_call_id: Optional[str] = None

    @classmethod
    def system(cls, content: str) -> "ChatMessage":
        return cls(role=ChatRole.SYSTEM, content=content)

    @classmethod
    def user(cls, content: str) -> "ChatMessage":
        return cls(role=ChatRole.USER, content=content)

    @classmethod
    def assistant(cls, content: str) -> "ChatMessage":
        return cls(role=ChatRole.ASSISTANT, content=content)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for API calls."""
        result: Dict[str, Any] = {"role": self.role.value, "content": self.content}
        if self.name:
            result["name"] = self.name
        if self.tool_call_id:
            result["tool_call_id"] = self.tool_call_id
        return result


# =============================================================================
# Data Classes - Requests / Responses
# =============================================================================


@dataclass(frozen=True)
class ChatRequest:
    """An ordered, immutable sequence of chat messages.

    Attributes:
        messages: The conversation messages, oldest first
        tools: Tool/function definitions for native tool calling
    """

    messages: Tuple[ChatMessage, ...]
    tools: Optional[Tuple[Dict[str, Any], ...]] = None

    def __post_init__(self) -> None:
        # Accept any iterable but always store a tuple.
        if not isinstance(self.messages, tuple):
            object.__setattr__(self, "messages", tuple(self.messages))
        if self.tools is not None and not isinstance(self.tools, tuple):
            object.__setattr__(self, "tools", tuple(self.tools))

    @classmethod
    def of(cls, *messages: ChatMessage) -> "ChatRequest":
        return cls(messages=messages)

    @classmethod
    def from_messages(cls, messages: Iterable[ChatMessage]) -> "ChatRequest":
        return cls(messages=tuple(messages))


@dataclass(frozen=True)
class TokenUsage:
    """Token usage statistics."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


@dataclass
class ChatResponse:
    """Response from a chat completion.

    Attributes:
        content: The assistant's text reply (None for pure tool-call turns)
        tool_calls: Tool calls requested by the model
        finish_reason: Why generation stopped
        usage: Token usage statistics
        model: Model that generated the response
    """

    content: Optional[str] = None
    tool_calls: Tuple[ToolCall, ...] = ()
    finish_reason: FinishReason = FinishReason.STOP
    usage: TokenUsage = field(default_factory=TokenUsage)
    model: Optional[str] = None

    def has_tool_calls(self) -> bool:
        return bool(self.tool_calls)


# =============================================================================
# Abstract Base Class
# =============================================================================


class ChatProvider(ABC):
    """Abstract base class for chat-completion providers.

    Implementations perform blocking network calls and signal failure by
    raising; the exception's textual description is what the resilience
    layer classifies, so messages should carry the upstream status code
    (see ``reliable_llm.core.errors``).

    Attributes:
        name: Display name of the provider (e.g., 'openai', 'anthropic')
    """

    name: str = "base"

    @abstractmethod
    def chat_with_system(
        self,
        system_prompt: Optional[str],
        message: str,
        model: str,
        temperature: float,
    ) -> str:
        """Send a single user message with optional system instructions.

        Args:
            system_prompt: System instructions, or None
            message: The user message
            model: Model identifier
            temperature: Sampling temperature

        Returns:
            The completion text

        Raises:
            Exception: Any provider failure; its text is used for classification
        """

    @abstractmethod
    def chat(self, request: ChatRequest, model: str, temperature: float) -> ChatResponse:
        """Send a full conversation and return a structured response.

        Args:
            request: The ordered message list
            model: Model identifier
            temperature: Sampling temperature

        Returns:
            ChatResponse with content and optional structured fields
        """

    def supports_native_tools(self) -> bool:
        """Whether the provider accepts tool definitions natively."""
        return False

    def get_name(self) -> str:
        return self.name

    def close(self) -> None:
        """Release any held resources (HTTP sessions, sockets)."""

    def __enter__(self) -> "ChatProvider":
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.close()


__all__ = [
    "ChatRole",
    "FinishReason",
    "ToolCall",
    "ChatMessage",
    "ChatRequest",
    "TokenUsage",
    "ChatResponse",
    "ChatProvider",
]
