"""Utilities for parsing LLM text replies into oracle responses."""

from __future__ import annotations

import json
from typing import Any, Mapping, Optional

from ..models import FinalAnswer, OracleResponse, ToolCallRequest, ToolCalls


def extract_json_object(text: str) -> dict[str, Any]:
    """Extract the first JSON object found in *text* and return it as a dict."""

    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = _strip_code_fence(cleaned)
    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start == -1 or end == -1 or end <= start:
        raise ValueError("No JSON object found in LLM response")
    snippet = cleaned[start : end + 1]
    data = json.loads(snippet)
    if not isinstance(data, dict):
        raise ValueError("LLM response JSON is not an object")
    return data


def parse_arguments(raw: Optional[str | Mapping[str, Any]]) -> dict[str, Any]:
    """Decode tool-call arguments, which providers send as a JSON string."""

    if raw is None or raw == "":
        return {}
    if isinstance(raw, Mapping):
        return dict(raw)
    if not isinstance(raw, str):
        raise ValueError("arguments must be a JSON object")
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError("arguments must be a JSON object")
    return data


def build_request(
    name: Any,
    raw_arguments: Any,
    call_id: Optional[str] = None,
) -> ToolCallRequest:
    """Build a request even from a malformed call.

    A missing name becomes ``""`` and undecodable arguments are recorded in
    ``arguments_error``, so the registry reports them back to the oracle.
    """

    tool_name = name if isinstance(name, str) else ""
    arguments: dict[str, Any] = {}
    arguments_error: Optional[str] = None
    try:
        arguments = parse_arguments(raw_arguments)
    except json.JSONDecodeError:
        arguments_error = "arguments are not valid JSON"
    except ValueError as exc:
        arguments_error = str(exc)
    if call_id:
        return ToolCallRequest(
            tool_name=tool_name,
            arguments=arguments,
            arguments_error=arguments_error,
            call_id=call_id,
        )
    return ToolCallRequest(
        tool_name=tool_name, arguments=arguments, arguments_error=arguments_error
    )


def parse_oracle_response(text: str) -> OracleResponse:
    """Parse a JSON-mode reply.

    A JSON object with a ``tool_calls`` key becomes :class:`ToolCalls`; a
    ``final_answer`` string or any reply without JSON is a :class:`FinalAnswer`.
    Malformed calls are kept as requests the registry will reject.
    """

    try:
        data = extract_json_object(text)
    except ValueError:
        return FinalAnswer(text=text.strip())
    answer = data.get("final_answer")
    calls = data.get("tool_calls")
    if calls or ("tool_calls" in data and not isinstance(answer, str)):
        if not isinstance(calls, list) or not calls:
            return ToolCalls(requests=(build_request(None, None),))
        return ToolCalls(requests=tuple(_parse_call(call) for call in calls))
    if isinstance(answer, str):
        return FinalAnswer(text=answer)
    return FinalAnswer(text=text.strip())


def _parse_call(call: Any) -> ToolCallRequest:
    if not isinstance(call, Mapping):
        return build_request(None, None)
    return build_request(call.get("name"), call.get("arguments"))


def _strip_code_fence(block: str) -> str:
    parts = block.split("```")
    if len(parts) >= 3:
        body = parts[1]
        if body.startswith("json"):
            body = body[len("json"):]
        return body
    return block.strip("`")
