"""Prompt construction utilities."""

from __future__ import annotations

import json
from textwrap import dedent
from typing import Iterable

from ..models import ToolCallResult, ToolDescriptor

_BASE_PROMPT = dedent(
    """
    You are a research assistant operating a web browser through tools.
    Work step by step: launch the browser, search the web, read the most
    relevant pages, then answer the user's request with a concise, well-sourced
    summary. Cite the URLs you relied on. If a tool fails, read the error and
    decide whether to retry differently or explain the problem to the user.
    """
).strip()


class PromptBuilder:
    """Build the system prompt and tool-result messages for the oracle."""

    def __init__(self, base_prompt: str = _BASE_PROMPT) -> None:
        self._base_prompt = base_prompt

    def system_prompt(self, catalog: Iterable[ToolDescriptor], *, native_tools: bool) -> str:
        if native_tools:
            return self._base_prompt
        catalog_section = self._catalog_section(catalog) or "(no tools available)"
        instructions = dedent(
            """
            Available tools:
            {catalog}

            Reply with a single JSON object and nothing else.
            To call tools, reply {{"tool_calls": [{{"name": "<tool>", "arguments": {{...}}}}]}}.
            Calls run in the order given, and their results are sent back to you.
            When you have the answer, reply {{"final_answer": "<your answer>"}}.
            Use double quotes only.
            """
        ).strip()
        return f"{self._base_prompt}\n\n{instructions.format(catalog=catalog_section)}"

    @staticmethod
    def format_result(result: ToolCallResult) -> str:
        if result.success:
            return result.payload
        return f"ERROR: {result.error_detail or 'tool failed'}"

    def format_results(self, results: Iterable[ToolCallResult]) -> str:
        lines = [
            f"[{result.tool_name}] {self.format_result(result)}" for result in results
        ]
        return "Tool results:\n" + "\n".join(lines)

    @staticmethod
    def _catalog_section(catalog: Iterable[ToolDescriptor]) -> str:
        entries = []
        for descriptor in catalog:
            schema = json.dumps(descriptor.json_schema()["properties"])
            entries.append(f"- {descriptor.name}: {descriptor.description} Arguments: {schema}")
        return "\n".join(entries)
