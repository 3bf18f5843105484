"""Result models for service operations."""

from storyloom.models.results.llm import (
    AgentConfig, Prompt, ChatMessage, JsonSchemaSpec, ResponseFormat,
    ChatPayload, AgentLogEntry,
)
from storyloom.models.results.memory import CharacterMappingResult, MemoryCleared

__all__ = [
    "AgentConfig", "Prompt", "ChatMessage", "JsonSchemaSpec", "ResponseFormat",
    "ChatPayload", "AgentLogEntry",
    "CharacterMappingResult", "MemoryCleared",
]
