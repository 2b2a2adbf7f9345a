"""Registry of the tools the decision oracle may call."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    ValidationError,
    create_model,
)

from ..browser.base import BrowserActionError
from ..models import ParameterType, ToolCallRequest, ToolCallResult, ToolDescriptor

LOGGER = logging.getLogger(__name__)

UNKNOWN_TOOL = "unknown tool"

ToolHandler = Callable[..., str]

_ANNOTATIONS: dict[ParameterType, Any] = {
    ParameterType.STRING: StrictStr,
    ParameterType.INTEGER: StrictInt,
    ParameterType.NUMBER: Union[StrictInt, StrictFloat],
    ParameterType.BOOLEAN: StrictBool,
}


class ToolRegistryError(RuntimeError):
    """Raised when the registry is built incorrectly."""


class DuplicateToolError(ToolRegistryError):
    """Raised when two tools are registered under the same name."""


@dataclass(frozen=True)
class ToolCapability:
    """A descriptor bound to the handler that implements it."""

    descriptor: ToolDescriptor
    handler: ToolHandler
    arguments_model: type[BaseModel]

    @property
    def name(self) -> str:
        return self.descriptor.name


class CapabilityRegistry:
    """Map tool names to capabilities and turn every call into a result.

    :meth:`dispatch` is the single place where lower-layer failures are
    converted into :class:`ToolCallResult` data, so callers never see an
    exception from tool execution.
    """

    def __init__(self) -> None:
        self._capabilities: dict[str, ToolCapability] = {}

    def register(self, descriptor: ToolDescriptor, handler: ToolHandler) -> ToolCapability:
        if descriptor.name in self._capabilities:
            raise DuplicateToolError(f"Tool {descriptor.name!r} is already registered")
        capability = ToolCapability(
            descriptor=descriptor,
            handler=handler,
            arguments_model=_build_arguments_model(descriptor),
        )
        self._capabilities[descriptor.name] = capability
        LOGGER.debug("Registered tool %s", descriptor.name)
        return capability

    def get(self, name: str) -> Optional[ToolCapability]:
        return self._capabilities.get(name)

    def names(self) -> list[str]:
        return list(self._capabilities)

    def catalog(self) -> list[ToolDescriptor]:
        """Descriptors in registration order, as shown to the oracle."""

        return [capability.descriptor for capability in self._capabilities.values()]

    def __contains__(self, name: object) -> bool:
        return name in self._capabilities

    def __len__(self) -> int:
        return len(self._capabilities)

    def __iter__(self) -> Iterator[ToolCapability]:
        return iter(self._capabilities.values())

    def dispatch(self, request: ToolCallRequest) -> ToolCallResult:
        capability = self._capabilities.get(request.tool_name)
        if capability is None:
            LOGGER.warning("Oracle requested unknown tool %r", request.tool_name)
            return _failure(request, UNKNOWN_TOOL)
        if request.arguments_error:
            detail = f"invalid arguments: {request.arguments_error}"
            LOGGER.warning("Rejected call to %s: %s", request.tool_name, detail)
            return _failure(request, detail)
        try:
            arguments = capability.arguments_model.model_validate(request.arguments)
        except ValidationError as exc:
            detail = _describe_validation_error(exc)
            LOGGER.warning("Rejected call to %s: %s", request.tool_name, detail)
            return _failure(request, detail)

        LOGGER.info("Running tool %s", request.tool_name)
        try:
            payload = capability.handler(**arguments.model_dump(exclude_unset=True))
        except BrowserActionError as exc:
            detail = f"{type(exc).__name__}: {exc}"
            LOGGER.warning("Tool %s failed: %s", request.tool_name, detail)
            return _failure(request, detail)
        except Exception:
            LOGGER.exception("Unexpected error while running tool %s", request.tool_name)
            return _failure(request, f"internal error while running {request.tool_name}")
        return ToolCallResult(
            tool_name=request.tool_name,
            call_id=request.call_id,
            success=True,
            payload=payload,
        )


def _failure(request: ToolCallRequest, detail: str) -> ToolCallResult:
    return ToolCallResult(
        tool_name=request.tool_name,
        call_id=request.call_id,
        success=False,
        error_detail=detail,
    )


def _build_arguments_model(descriptor: ToolDescriptor) -> type[BaseModel]:
    fields: dict[str, Any] = {}
    for param in descriptor.parameters:
        annotation = _ANNOTATIONS[param.type]
        if param.required:
            fields[param.name] = (annotation, ...)
        else:
            fields[param.name] = (Optional[annotation], None)
    return create_model(
        f"{descriptor.name}_arguments",
        __config__=ConfigDict(extra="forbid"),
        **fields,
    )


def _describe_validation_error(exc: ValidationError) -> str:
    problems: list[str] = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "arguments"
        if error["type"] == "missing":
            problems.append(f"missing required argument '{field}'")
        elif error["type"] == "extra_forbidden":
            problems.append(f"unexpected argument '{field}'")
        else:
            problems.append(f"invalid argument '{field}': {error['msg']}")
    return "invalid arguments: " + "; ".join(problems)
