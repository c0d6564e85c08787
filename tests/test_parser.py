"""
Tests for tool-call extraction and prompt text.
"""

from lmstudio_mcp.agent.models import ToolResultInput
from lmstudio_mcp.agent.parser import parse_tool_calls
from lmstudio_mcp.agent.prompts import build_tool_system_prompt, format_tool_results
from lmstudio_mcp.sessions import ToolSchema


def test_direct_json():
    """A bare tool_calls object should parse."""
    calls = parse_tool_calls('{"tool_calls":[{"name":"search","arguments":{"q":"x"}}]}')

    assert len(calls) == 1
    assert calls[0].name == "search"
    assert calls[0].arguments == {"q": "x"}


def test_surrounding_whitespace_is_ignored():
    """Whitespace around the JSON should not matter."""
    calls = parse_tool_calls('\n  {"tool_calls":[{"name":"search"}]}  \n')

    assert [c.name for c in calls] == ["search"]
    assert calls[0].arguments is None


def test_fenced_json_block():
    """A json-tagged fenced block should parse."""
    text = 'I will search.\n```json\n{"tool_calls":[{"name":"search","arguments":{"q":"x"}}]}\n```'

    calls = parse_tool_calls(text)

    assert [c.name for c in calls] == ["search"]


def test_untagged_fenced_block():
    """An untagged fenced block should parse."""
    text = 'Sure:\n```\n{"tool_calls":[{"name":"fetch","arguments":{"url":"u"}}]}\n```'

    assert [c.name for c in parse_tool_calls(text)] == ["fetch"]


def test_only_first_fenced_block_is_considered():
    """Only the first fenced block should be examined."""
    text = (
        '```json\n{"note": "not a call"}\n```\n'
        '```json\n{"tool_calls":[{"name":"search"}]}\n```'
    )

    assert parse_tool_calls(text) is None


def test_plain_text_is_final_answer():
    """Prose should be a final answer."""
    assert parse_tool_calls("The capital of France is Paris.") is None


def test_json_without_tool_calls_is_final_answer():
    """JSON without tool_calls should be a final answer."""
    assert parse_tool_calls('{"other_key":[1,2]}') is None


def test_malformed_json_is_final_answer():
    """Malformed JSON should be a final answer."""
    assert parse_tool_calls('{"tool_calls": [') is None


def test_tool_calls_not_a_list():
    """A non-list tool_calls should be a final answer."""
    assert parse_tool_calls('{"tool_calls": "search"}') is None


def test_json_array_is_final_answer():
    """A top-level JSON array should be a final answer."""
    assert parse_tool_calls('[{"tool_calls": []}]') is None


def test_entries_without_name_are_dropped():
    """Entries without a string name should be skipped."""
    calls = parse_tool_calls('{"tool_calls":[{"arguments":{}}, "x", {"name":"ok"}]}')

    assert [c.name for c in calls] == ["ok"]


def test_empty_tool_calls_list():
    """An empty tool_calls list should parse to no calls."""
    assert parse_tool_calls('{"tool_calls":[]}') == []


def test_deeply_nested_json_is_final_answer():
    """JSON nested past the decoder's limit should be a final answer."""
    assert parse_tool_calls("[" * 100_000) is None


def test_deeply_nested_fenced_block_is_final_answer():
    """A deeply nested fenced block should be a final answer."""
    text = "```json\n{\"a\": " + "[" * 100_000 + "}\n```"

    assert parse_tool_calls(text) is None


def test_arguments_passed_through_unvalidated():
    """Arguments should be passed through as given."""
    calls = parse_tool_calls('{"tool_calls":[{"name":"calc","arguments":[1,"two",null]}]}')

    assert calls[0].arguments == [1, "two", None]


def test_system_prompt_lists_tools():
    """The system prompt should list each tool and the call format."""
    prompt = build_tool_system_prompt([
        ToolSchema(name="search", description="Search the web", parameters={"type": "object", "required": ["q"]}),
        ToolSchema(name="now"),
    ])

    assert prompt.startswith("You have access to the following tools:\n\n- search: Search the web")
    assert '  Parameters: {"type":"object","required":["q"]}' in prompt
    assert "\n- now\n" in prompt
    assert '{"tool_calls": [{"name": "tool_name", "arguments": {"arg1": "value1"}}]}' in prompt
    assert prompt.endswith("just output the JSON or your final answer.")


def test_format_tool_results():
    """Tool results should render one line per result."""
    text = format_tool_results([
        ToolResultInput(name="search", result="3 hits"),
        ToolResultInput(name="fetch", result="<html>"),
    ])

    assert text == "[search]: 3 hits\n[fetch]: <html>"
