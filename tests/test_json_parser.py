import pytest

from web_research_agent.llm.json_parser import (
    build_request,
    extract_json_object,
    parse_arguments,
    parse_oracle_response,
)
from web_research_agent.models import FinalAnswer, ToolCalls


def test_extract_json_object_from_code_fence():
    text = """```json\n{"tool_calls": [], "final_answer": "done"}\n```"""
    result = extract_json_object(text)
    assert result["tool_calls"] == []
    assert result["final_answer"] == "done"


def test_parse_tool_calls_reply():
    response = parse_oracle_response(
        'Sure. {"tool_calls": [{"name": "search_for", "arguments": {"query": "llamas"}},'
        ' {"name": "extract_search_results"}]}'
    )

    assert isinstance(response, ToolCalls)
    assert [request.tool_name for request in response.requests] == [
        "search_for",
        "extract_search_results",
    ]
    assert response.requests[0].arguments == {"query": "llamas"}
    assert response.requests[1].arguments == {}


def test_parse_final_answer_reply():
    response = parse_oracle_response('{"final_answer": "Llamas are camelids."}')

    assert response == FinalAnswer(text="Llamas are camelids.")


def test_plain_text_is_a_final_answer():
    response = parse_oracle_response("  Llamas live in the Andes.  ")

    assert response == FinalAnswer(text="Llamas live in the Andes.")


def test_call_without_name_is_kept_for_the_registry_to_reject():
    response = parse_oracle_response('{"tool_calls": [{"arguments": {}}]}')

    assert isinstance(response, ToolCalls)
    assert response.requests[0].tool_name == ""
    assert response.requests[0].arguments_error is None


def test_undecodable_arguments_are_recorded_on_the_request():
    response = parse_oracle_response(
        '{"tool_calls": [{"name": "search_for", "arguments": "{\\"query\\": "},'
        ' {"name": "fetch_page_content", "arguments": [1, 2]}, "not a call"]}'
    )

    assert isinstance(response, ToolCalls)
    first, second, third = response.requests
    assert first.tool_name == "search_for"
    assert first.arguments == {}
    assert first.arguments_error == "arguments are not valid JSON"
    assert second.arguments_error == "arguments must be a JSON object"
    assert third.tool_name == ""


@pytest.mark.parametrize("body", ['{"tool_calls": []}', '{"tool_calls": "search"}'])
def test_empty_or_invalid_tool_call_list_is_not_a_final_answer(body):
    response = parse_oracle_response(body)

    assert isinstance(response, ToolCalls)
    assert len(response.requests) == 1
    assert response.requests[0].tool_name == ""


def test_final_answer_wins_over_empty_tool_call_list():
    response = parse_oracle_response('{"tool_calls": [], "final_answer": "done"}')

    assert response == FinalAnswer(text="done")


def test_build_request_keeps_call_id():
    request = build_request("search_for", '{"query": "x"}', "call_7")

    assert request.call_id == "call_7"
    assert request.arguments == {"query": "x"}
    assert request.arguments_error is None


def test_parse_arguments_accepts_strings_and_mappings():
    assert parse_arguments('{"url": "https://x.test"}') == {"url": "https://x.test"}
    assert parse_arguments({"url": "https://x.test"}) == {"url": "https://x.test"}
    assert parse_arguments("") == {}
    with pytest.raises(ValueError):
        parse_arguments("[1, 2]")
