"""Data models for pagecall conversations and sampling configuration."""

from pagecall.models.config import DEFAULT_MODEL, SamplingConfig
from pagecall.models.messages import Conversation, Message, Role, ToolCallRequest

__all__ = [
    "Conversation",
    "DEFAULT_MODEL",
    "Message",
    "Role",
    "SamplingConfig",
    "ToolCallRequest",
]
