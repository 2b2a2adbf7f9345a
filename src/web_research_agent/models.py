"""Shared models used across the web research agent."""

from __future__ import annotations

import enum
import uuid
from datetime import datetime, timezone
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SessionState(str, enum.Enum):
    """Lifecycle states of a browser session."""

    UNINITIALIZED = "uninitialized"
    LAUNCHED = "launched"
    PAGE_ACTIVE = "page_active"
    CLOSED = "closed"


class ParameterType(str, enum.Enum):
    """Semantic types a tool parameter may declare."""

    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"


class ToolParameter(BaseModel):
    """A single named argument accepted by a tool."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: ParameterType = ParameterType.STRING
    description: str = ""
    required: bool = True


class ToolDescriptor(BaseModel):
    """Name, purpose and argument schema of a tool exposed to the oracle."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    description: str
    parameters: tuple[ToolParameter, ...] = ()

    @field_validator("parameters")
    @classmethod
    def _unique_parameter_names(
        cls, value: tuple[ToolParameter, ...]
    ) -> tuple[ToolParameter, ...]:
        names = [param.name for param in value]
        if len(names) != len(set(names)):
            raise ValueError("Parameter names must be unique")
        return value

    def json_schema(self) -> dict[str, Any]:
        """Return the parameters as a JSON schema object."""

        return {
            "type": "object",
            "properties": {
                param.name: {"type": param.type.value, "description": param.description}
                for param in self.parameters
            },
            "required": [param.name for param in self.parameters if param.required],
            "additionalProperties": False,
        }


def _new_call_id() -> str:
    return f"call_{uuid.uuid4().hex[:12]}"


class ToolCallRequest(BaseModel):
    """A request from the oracle to invoke one tool."""

    model_config = ConfigDict(frozen=True)

    tool_name: str
    arguments: dict[str, Any] = Field(default_factory=dict)
    call_id: str = Field(default_factory=_new_call_id)
    arguments_error: Optional[str] = Field(
        default=None,
        description="Set when the oracle sent arguments that could not be decoded.",
    )


class ToolCallResult(BaseModel):
    """Outcome of a dispatched tool call. Failures are reported here, never raised."""

    model_config = ConfigDict(frozen=True)

    tool_name: str
    call_id: str
    success: bool
    payload: str = ""
    error_detail: Optional[str] = None


class SearchResult(BaseModel):
    """A single search engine hit."""

    model_config = ConfigDict(frozen=True)

    title: str
    url: str


class UserMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["user"] = "user"
    text: str


class OracleMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["oracle"] = "oracle"
    text: str


class ToolCallBatch(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["tool_calls"] = "tool_calls"
    requests: tuple[ToolCallRequest, ...]


class ToolResultBatch(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["tool_results"] = "tool_results"
    results: tuple[ToolCallResult, ...]


Turn = Annotated[
    Union[UserMessage, OracleMessage, ToolCallBatch, ToolResultBatch],
    Field(discriminator="kind"),
]

TURN_TYPES = (UserMessage, OracleMessage, ToolCallBatch, ToolResultBatch)


class FinalAnswer(BaseModel):
    """Oracle decided the task is complete."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["final_answer"] = "final_answer"
    text: str


class ToolCalls(BaseModel):
    """Oracle requested one or more tool invocations, to be run in order."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["tool_calls"] = "tool_calls"
    requests: tuple[ToolCallRequest, ...] = Field(min_length=1)


OracleResponse = Annotated[Union[FinalAnswer, ToolCalls], Field(discriminator="kind")]


class NotificationLevel(str, enum.Enum):
    """Severity of notification events."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    SUCCESS = "success"


class NotificationEvent(BaseModel):
    """Event emitted to notify users."""

    type: str
    message: str
    level: NotificationLevel = NotificationLevel.INFO
    data: dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
