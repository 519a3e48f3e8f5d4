from .client import FireworksClient
from .conversation import Conversation, TurnState
from .history import ConversationHistory
from .messages import Message, ToolCall, ToolDefinition, ToolParameter
from .tools import ToolRegistry
# decoder and accumulator are internal to the client; import them from their modules.

__all__ = [
    "FireworksClient",
    "Conversation",
    "TurnState",
    "ConversationHistory",
    "Message",
    "ToolCall",
    "ToolDefinition",
    "ToolParameter",
    "ToolRegistry",
]
