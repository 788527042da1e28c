from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union


class MessageRole(str, Enum):
    user = "user"
    assistant = "assistant"
    system = "system"
    function = "function"
    tool = "tool"
    model = "model"


@dataclass(frozen=True)
class TextPart:
    text: str
    type: str = "text"

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "text", "text": self.text}


@dataclass(frozen=True)
class ImagePart:
    """Reference to an image by URL (http(s) or data: URI)."""

    url: str
    type: str = "image"

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "image", "image_url": {"url": self.url}}


ContentPart = Union[TextPart, ImagePart]
MessageContent = Union[str, Tuple[ContentPart, ...]]


@dataclass
class FunctionCall:
    """Legacy single function call; arguments stay a JSON string."""

    name: str
    arguments: str

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "arguments": self.arguments}


@dataclass
class ToolCall:
    id: str
    function: FunctionCall
    type: str = "function"

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "type": self.type, "function": self.function.to_dict()}


@dataclass
class FunctionDeclaration:
    """Schema a tool exposes to the model."""

    name: str
    description: str = ""
    parameters: Dict[str, Any] = field(default_factory=lambda: {"type": "object", "properties": {}})

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "description": self.description, "parameters": self.parameters}


def _coerce_content(content: Any) -> MessageContent:
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    if isinstance(content, (TextPart, ImagePart)):
        return (content,)
    parts: List[ContentPart] = []
    for part in content:
        if isinstance(part, (TextPart, ImagePart)):
            parts.append(part)
        elif isinstance(part, dict) and part.get("type") == "text":
            parts.append(TextPart(text=str(part.get("text", ""))))
        elif isinstance(part, dict) and part.get("type") in ("image", "image_url"):
            img = part.get("image_url")
            url = img.get("url") if isinstance(img, dict) else img
            parts.append(ImagePart(url=str(url or "")))
        else:
            raise TypeError(f"Unsupported message content part: {part!r}")
    return tuple(parts)


@dataclass(frozen=True)
class Message:
    """A single conversation turn. Immutable once constructed."""

    role: MessageRole
    content: MessageContent = ""
    name: Optional[str] = None
    function_call: Optional[FunctionCall] = None
    tool_call_id: Optional[str] = None
    tool_calls: Optional[Tuple[ToolCall, ...]] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "role", MessageRole(self.role))
        object.__setattr__(self, "content", _coerce_content(self.content))
        if self.tool_calls is not None:
            object.__setattr__(self, "tool_calls", tuple(self.tool_calls))

    @property
    def text(self) -> str:
        """Plain text of the message; image parts are skipped."""
        if isinstance(self.content, str):
            return self.content
        return " ".join(p.text for p in self.content if isinstance(p, TextPart) and p.text)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "role": self.role.value,
            "content": self.content if isinstance(self.content, str) else [p.to_dict() for p in self.content],
        }
        if self.name is not None:
            data["name"] = self.name
        if self.function_call is not None:
            data["function_call"] = self.function_call.to_dict()
        if self.tool_call_id is not None:
            data["tool_call_id"] = self.tool_call_id
        if self.tool_calls:
            data["tool_calls"] = [tc.to_dict() for tc in self.tool_calls]
        return data

    @classmethod
    def user(cls, content: Any) -> "Message":
        return cls(role=MessageRole.user, content=content)

    @classmethod
    def system(cls, content: str) -> "Message":
        return cls(role=MessageRole.system, content=content)

    @classmethod
    def assistant(cls, content: Any = "", **kwargs: Any) -> "Message":
        return cls(role=MessageRole.assistant, content=content, **kwargs)


@dataclass
class LLMResponse:
    """Provider response, either a partial stream element or a final one."""

    content: Optional[str] = None
    function_call: Optional[FunctionCall] = None
    tool_calls: Optional[List[ToolCall]] = None
    role: str = "assistant"
    is_partial: bool = False
    raw_response: Any = None
    author: Optional[str] = None

    @property
    def has_calls(self) -> bool:
        return bool(self.function_call) or bool(self.tool_calls)

    def to_message(self) -> Message:
        """Convert a final response into the assistant turn it represents."""
        try:
            role = MessageRole(self.role)
        except ValueError:
            role = MessageRole.assistant
        return Message(
            role=role,
            content=self.content or "",
            name=self.author,
            function_call=self.function_call,
            tool_calls=tuple(self.tool_calls) if self.tool_calls else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "content": self.content,
            "role": self.role,
            "is_partial": self.is_partial,
        }
        if self.function_call is not None:
            data["function_call"] = self.function_call.to_dict()
        if self.tool_calls:
            data["tool_calls"] = [tc.to_dict() for tc in self.tool_calls]
        if self.raw_response is not None:
            data["raw_response"] = self.raw_response
        return data


@dataclass
class RunResult:
    """Terminal result of a non-streaming agent run."""

    agent_name: str
    response: Optional[LLMResponse] = None
    messages: List[Message] = field(default_factory=list)
    children: Dict[str, "RunResult"] = field(default_factory=dict)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def content(self) -> Optional[str]:
        return self.response.content if self.response else None


def ensure_messages(messages: Optional[Sequence[Any]]) -> List[Message]:
    """Accept Message objects or wire-shaped dicts and return Message objects."""
    result: List[Message] = []
    for m in messages or []:
        if isinstance(m, Message):
            result.append(m)
            continue
        if not isinstance(m, dict):
            raise TypeError(f"Unsupported message type: {type(m).__name__}")
        fc = m.get("function_call")
        tcs = m.get("tool_calls")
        result.append(
            Message(
                role=m.get("role") or "user",
                content=m.get("content"),
                name=m.get("name"),
                function_call=FunctionCall(**fc) if isinstance(fc, dict) else fc,
                tool_call_id=m.get("tool_call_id"),
                tool_calls=tuple(
                    ToolCall(
                        id=tc.get("id", ""),
                        type=tc.get("type", "function"),
                        function=FunctionCall(**tc.get("function", {"name": "", "arguments": ""})),
                    )
                    if isinstance(tc, dict)
                    else tc
                    for tc in tcs
                )
                if tcs
                else None,
            )
        )
    return result
