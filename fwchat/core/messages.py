"""Conversation data model and its chat-completions wire format."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

ROLES = ("user", "assistant", "system", "tool")


@dataclass(frozen=True)
class ToolCall:
    """A fully assembled tool call requested by the model."""

    id: str
    name: str
    arguments: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": "function",
            "function": {"name": self.name, "arguments": self.arguments},
        }


@dataclass(frozen=True)
class ToolParameter:
    name: str
    type: str
    description: str = ""
    required: bool = True


@dataclass(frozen=True)
class ToolDefinition:
    """Schema of a capability the model may call."""

    name: str
    description: str
    parameters: Tuple[ToolParameter, ...] = ()

    @property
    def primary_parameter(self) -> Optional[str]:
        """Name of the parameter that receives raw text when arguments are malformed."""
        for param in self.parameters:
            if param.required:
                return param.name
        return self.parameters[0].name if self.parameters else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": {
                    "type": "object",
                    "properties": {
                        p.name: {"type": p.type, "description": p.description}
                        for p in self.parameters
                    },
                    "required": [p.name for p in self.parameters if p.required],
                },
            },
        }


@dataclass(frozen=True)
class Message:
    """One entry of the conversation history.

    ``tool_calls`` is only valid on assistant messages, ``tool_call_id`` and
    ``name`` only on tool messages.
    """

    role: str
    content: Optional[str] = None
    tool_calls: Tuple[ToolCall, ...] = ()
    tool_call_id: Optional[str] = None
    name: Optional[str] = None

    def __post_init__(self) -> None:
        if self.role not in ROLES:
            raise ValueError(f"Unknown message role: {self.role!r}")
        if self.tool_calls and self.role != "assistant":
            raise ValueError("Only assistant messages may carry tool calls")
        if self.role != "tool" and (self.tool_call_id or self.name):
            raise ValueError("Only tool messages may reference a tool call")
        if self.role == "tool" and not self.tool_call_id:
            raise ValueError("Tool messages must reference a tool call id")
        # Lists passed in by callers are frozen so snapshots stay immutable.
        object.__setattr__(self, "tool_calls", tuple(self.tool_calls))

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"role": self.role, "content": self.content}
        if self.tool_calls:
            data["tool_calls"] = [tc.to_dict() for tc in self.tool_calls]
        if self.tool_call_id:
            data["tool_call_id"] = self.tool_call_id
        if self.name:
            data["name"] = self.name
        return data
