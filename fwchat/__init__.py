"""Interactive CLI for chatting with Fireworks-hosted models.

Features
--------
1. Streaming output: tokens are printed as the server-sent-event stream arrives.
2. Built-in web search tool: the model may call ``web_search`` (Google Custom Search)
   mid-conversation; results are fed back and the follow-up answer is streamed.
3. Slash commands: ``/clear``, ``/help``, ``/exit`` and ``/quit``.

Run ``python -m fwchat`` or the ``fwchat`` console script.
"""
# Re-export useful symbols for convenience
from .core import Conversation, ConversationHistory, FireworksClient, Message, ToolCall, ToolRegistry
from .cli import ChatCLI, run_cli

__all__ = [
    "Conversation",
    "ConversationHistory",
    "FireworksClient",
    "Message",
    "ToolCall",
    "ToolRegistry",
    "ChatCLI",
    "run_cli",
]
