from adkpy.agent.core.llm.stream_accumulator import StreamAccumulator
from adkpy.agent.core.runtime.models import FunctionCall, LLMResponse, ToolCall


def _tool_chunk(*fragments):
    return LLMResponse(
        is_partial=True,
        tool_calls=[ToolCall(id=i, function=FunctionCall(name=n, arguments=a)) for i, n, a in fragments],
    )


def test_tool_call_fragments_concatenate():
    acc = StreamAccumulator()
    acc.apply(_tool_chunk(("a", "fo", '{"x":')))
    acc.apply(_tool_chunk(("a", "o", "1}")))

    final = acc.final_response()
    assert len(final.tool_calls) == 1
    call = final.tool_calls[0]
    assert call.id == "a"
    assert call.function.name == "foo"
    assert call.function.arguments == '{"x":1}'
    assert final.is_partial is False


def test_interleaved_ids_keep_first_seen_order():
    acc = StreamAccumulator()
    acc.apply(_tool_chunk(("a", "first", "{")))
    acc.apply(_tool_chunk(("b", "second", "{")))
    acc.apply(_tool_chunk(("a", "", "}")))
    last = acc.apply(_tool_chunk(("b", "", "}")))

    assert [tc.id for tc in last.tool_calls] == ["a", "b"]
    assert [tc.function.arguments for tc in last.tool_calls] == ["{}", "{}"]


def test_partials_carry_cumulative_state():
    acc = StreamAccumulator()
    first = acc.apply(_tool_chunk(("a", "lookup", '{"q"')))
    second = acc.apply(_tool_chunk(("a", "", ': "x"}')))

    assert first.tool_calls[0].function.arguments == '{"q"'
    assert second.tool_calls[0].function.arguments == '{"q": "x"}'
    # Earlier partials are snapshots and do not change afterwards
    assert first.tool_calls[0].function.arguments == '{"q"'


def test_id_and_type_unchanged_by_later_fragments():
    acc = StreamAccumulator()
    acc.apply(LLMResponse(is_partial=True, tool_calls=[ToolCall(id="a", type="function", function=FunctionCall("f", ""))]))
    acc.apply(LLMResponse(is_partial=True, tool_calls=[ToolCall(id="a", type="other", function=FunctionCall("", "{}"))]))
    call = acc.final_response().tool_calls[0]
    assert call.id == "a"
    assert call.type == "function"


def test_legacy_function_call_concatenates():
    acc = StreamAccumulator()
    acc.apply(LLMResponse(is_partial=True, function_call=FunctionCall(name="get_", arguments='{"city":')))
    chunk = acc.apply(LLMResponse(is_partial=True, function_call=FunctionCall(name="weather", arguments='"Oslo"}')))

    assert chunk.function_call.name == "get_weather"
    assert chunk.function_call.arguments == '{"city":"Oslo"}'
    assert acc.final_response().tool_calls is None


def test_idless_fragments_attributed_by_index():
    acc = StreamAccumulator()
    acc.apply(_tool_chunk(("call_a", "one", "")), indices=[0])
    acc.apply(_tool_chunk(("call_b", "two", "")), indices=[1])
    acc.apply(_tool_chunk(("", "", '{"n":1}')), indices=[0])
    acc.apply(_tool_chunk(("", "", '{"n":2}')), indices=[1])

    calls = acc.final_response().tool_calls
    assert [(tc.id, tc.function.arguments) for tc in calls] == [
        ("call_a", '{"n":1}'),
        ("call_b", '{"n":2}'),
    ]


def test_idless_fragment_without_index_goes_to_last_call():
    acc = StreamAccumulator()
    acc.apply(_tool_chunk(("a", "f", "{")))
    acc.apply(_tool_chunk(("", "", "}")))
    assert acc.final_response().tool_calls[0].function.arguments == "{}"


def test_content_is_accumulated():
    acc = StreamAccumulator()
    acc.apply(LLMResponse(content="Hel", is_partial=True))
    acc.apply(LLMResponse(content=None, is_partial=True))
    acc.apply(LLMResponse(content="lo", is_partial=True))
    assert acc.final_response().content == "Hello"
    assert acc.final_response().has_calls is False
