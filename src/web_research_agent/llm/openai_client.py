"""Decision oracle backed by OpenAI-compatible chat completion endpoints."""

from __future__ import annotations

import json
import logging
from typing import Any, Optional, Sequence

import httpx

from ..config import LLMConfig
from ..models import (
    FinalAnswer,
    OracleMessage,
    OracleResponse,
    ToolCallBatch,
    ToolCalls,
    ToolDescriptor,
    ToolResultBatch,
    Turn,
    UserMessage,
)
from .base import DecisionOracle, OracleError
from .json_parser import build_request, parse_oracle_response
from .prompt_builder import PromptBuilder

LOGGER = logging.getLogger(__name__)

_RESERVED_PARAMETERS = {"system_prompt", "temperature"}


class OpenAIChatOracle(DecisionOracle):
    """Call an OpenAI-compatible chat completion API to decide the next step."""

    def __init__(
        self,
        config: LLMConfig,
        *,
        client: Optional[httpx.Client] = None,
        prompt_builder: Optional[PromptBuilder] = None,
    ) -> None:
        if not config.model:
            raise ValueError("LLM model must be specified for OpenAIChatOracle")
        self._config = config
        headers = {"Content-Type": "application/json"}
        if config.api_key:
            headers["Authorization"] = f"Bearer {config.api_key}"
        self._client = client or httpx.Client(
            base_url=config.base_url or "https://api.openai.com/v1",
            timeout=config.timeout,
            headers=headers,
        )
        system_prompt = config.parameters.get("system_prompt")
        self._prompt_builder = prompt_builder or (
            PromptBuilder(system_prompt) if system_prompt else PromptBuilder()
        )
        self._temperature = config.parameters.get("temperature", 0.0)

    def decide(
        self,
        history: Sequence[Turn],
        catalog: Sequence[ToolDescriptor],
    ) -> OracleResponse:
        native = self._config.native_tools
        payload: dict[str, Any] = {
            "model": self._config.model,
            "messages": self._build_messages(history, catalog),
            "temperature": self._temperature,
        }
        if native and catalog:
            payload["tools"] = [_tool_spec(descriptor) for descriptor in catalog]
        payload.update(
            {k: v for k, v in self._config.parameters.items() if k not in _RESERVED_PARAMETERS}
        )
        LOGGER.debug("Requesting next step from %s", self._config.model)
        try:
            response = self._client.post("/chat/completions", json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException as exc:
            raise OracleError(f"Oracle did not answer within {self._config.timeout:g}s") from exc
        except httpx.HTTPStatusError as exc:
            raise OracleError(
                f"Oracle request failed with HTTP {exc.response.status_code}"
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise OracleError("Oracle request failed") from exc
        try:
            message = data["choices"][0]["message"]
            return self._parse_message(message)
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            raise OracleError("Unexpected response format from oracle") from exc

    def close(self) -> None:
        self._client.close()

    def _parse_message(self, message: dict[str, Any]) -> OracleResponse:
        tool_calls = message.get("tool_calls") or []
        if tool_calls:
            requests = []
            for call in tool_calls:
                function = call.get("function") or {}
                requests.append(
                    build_request(function.get("name"), function.get("arguments"), call.get("id"))
                )
            return ToolCalls(requests=tuple(requests))
        content = message.get("content") or ""
        if self._config.native_tools:
            return FinalAnswer(text=content)
        return parse_oracle_response(content)

    def _build_messages(
        self,
        history: Sequence[Turn],
        catalog: Sequence[ToolDescriptor],
    ) -> list[dict[str, Any]]:
        native = self._config.native_tools
        messages: list[dict[str, Any]] = [
            {
                "role": "system",
                "content": self._prompt_builder.system_prompt(catalog, native_tools=native),
            }
        ]
        for turn in history:
            if isinstance(turn, UserMessage):
                messages.append({"role": "user", "content": turn.text})
            elif isinstance(turn, OracleMessage):
                messages.append({"role": "assistant", "content": turn.text})
            elif isinstance(turn, ToolCallBatch):
                messages.append(_calls_message(turn, native=native))
            elif isinstance(turn, ToolResultBatch):
                if native:
                    for result in turn.results:
                        messages.append(
                            {
                                "role": "tool",
                                "tool_call_id": result.call_id,
                                "content": self._prompt_builder.format_result(result),
                            }
                        )
                else:
                    messages.append(
                        {
                            "role": "user",
                            "content": self._prompt_builder.format_results(turn.results),
                        }
                    )
        return messages


def _tool_spec(descriptor: ToolDescriptor) -> dict[str, Any]:
    return {
        "type": "function",
        "function": {
            "name": descriptor.name,
            "description": descriptor.description,
            "parameters": descriptor.json_schema(),
        },
    }


def _calls_message(batch: ToolCallBatch, *, native: bool) -> dict[str, Any]:
    if not native:
        body = {
            "tool_calls": [
                {"name": request.tool_name, "arguments": request.arguments}
                for request in batch.requests
            ]
        }
        return {"role": "assistant", "content": json.dumps(body)}
    return {
        "role": "assistant",
        "content": None,
        "tool_calls": [
            {
                "id": request.call_id,
                "type": "function",
                "function": {
                    "name": request.tool_name,
                    "arguments": json.dumps(request.arguments),
                },
            }
            for request in batch.requests
        ],
    }
