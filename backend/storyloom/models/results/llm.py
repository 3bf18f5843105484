"""
Request and telemetry models for completion calls.
"""

from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

from storyloom.models.enums import AgentCategory, AttemptStatus


class AgentConfig(BaseModel):
    """Sampling parameters and candidate models raced for one agent."""
    models: list[str] = Field(min_length=1)
    temperature: Optional[float] = None
    top_p: Optional[float] = None
    max_tokens: Optional[int] = None
    stream: bool = False


class Prompt(BaseModel):
    system: str
    user: str


class ChatMessage(BaseModel):
    role: Literal["system", "user"]
    content: str


class JsonSchemaSpec(BaseModel):
    name: str
    strict: bool = True
    schema_: dict[str, Any] = Field(alias="schema")

    model_config = {"populate_by_name": True}


class ResponseFormat(BaseModel):
    type: Literal["json_schema"] = "json_schema"
    json_schema: JsonSchemaSpec


class ChatPayload(BaseModel):
    """One completion request sent to a single candidate model."""
    model: str
    messages: list[ChatMessage]
    response_format: ResponseFormat
    temperature: Optional[float] = None
    top_p: Optional[float] = None
    max_tokens: Optional[int] = None
    stream: bool = False


class AgentLogEntry(BaseModel):
    """Telemetry row for one racing attempt. Never read back by the agents."""
    agent: str
    category: AgentCategory
    model: str
    status: AttemptStatus
    input: Any = None
    output: Any = None
    request_time: datetime
    respond_time: datetime
    elapsed: int = Field(description="Milliseconds between request and settle")
