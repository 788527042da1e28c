import pytest

from adkpy.agent.base_agent import BaseAgent
from adkpy.agent.core.runtime.context import RunOptions
from adkpy.agent.core.runtime.models import FunctionCall, LLMResponse, Message, ToolCall
from adkpy.agent.llm_agent import Agent
from adkpy.agent.tools import ExitLoopTool
from adkpy.agent.workflows import SequentialAgent


class AppendingAgent(BaseAgent):
    """Appends one assistant message naming itself"""

    def __init__(self, name, error=None):
        super().__init__(name)
        self.error = error
        self.seen = []

    async def _run_async_impl(self, ctx):
        self.seen.append([m.text for m in ctx.messages])
        if self.error is not None:
            raise self.error
        ctx.append_message(Message.assistant(f"from {self.name}"))
        yield LLMResponse(content=f"from {self.name}")


def _options():
    return RunOptions(messages=[Message.user("start")])


@pytest.mark.asyncio
async def test_children_run_in_order_on_shared_history():
    first, second = AppendingAgent("first"), AppendingAgent("second")
    pipeline = SequentialAgent("pipeline", sub_agents=[first, second])

    result = await pipeline.run(_options())

    assert [m.text for m in result.messages] == ["from first", "from second"]
    assert second.seen == [["start", "from first"]]
    assert result.content == "from second"
    assert list(result.children) == ["first", "second"]
    assert result.children["first"].messages[0].text == "from first"


@pytest.mark.asyncio
async def test_history_grows_by_one_per_child():
    pipeline = SequentialAgent("pipeline", sub_agents=[AppendingAgent("a"), AppendingAgent("b")])
    initial = [Message.user("x"), Message.assistant("y")]

    result = await pipeline.run(RunOptions(messages=initial))

    assert len(initial) + len(result.messages) == 4


@pytest.mark.asyncio
async def test_streaming_preserves_child_order_and_authors():
    pipeline = SequentialAgent("pipeline", sub_agents=[AppendingAgent("a"), AppendingAgent("b")])
    responses = [r async for r in pipeline.run_streaming(_options())]
    assert [r.author for r in responses] == ["a", "b"]


@pytest.mark.asyncio
async def test_child_failure_aborts_sequence():
    boom = RuntimeError("step failed")
    last = AppendingAgent("last")
    pipeline = SequentialAgent("pipeline", sub_agents=[AppendingAgent("ok"), AppendingAgent("bad", error=boom), last])

    with pytest.raises(RuntimeError) as exc_info:
        await pipeline.run(_options())

    assert exc_info.value is boom
    assert last.seen == []


@pytest.mark.asyncio
async def test_model_agents_see_previous_output(make_llm):
    writer_llm = make_llm(LLMResponse(content="draft"))
    reviewer_llm = make_llm(LLMResponse(content="looks good"))
    pipeline = SequentialAgent(
        "pipeline",
        sub_agents=[Agent("writer", model=writer_llm), Agent("reviewer", model=reviewer_llm)],
    )

    result = await pipeline.run(_options())

    assert [m.text for m in reviewer_llm.requests[0].messages] == ["start", "draft"]
    assert result.content == "looks good"


@pytest.mark.asyncio
async def test_empty_sequence_completes():
    result = await SequentialAgent("empty").run(_options())
    assert result.response is None
    assert result.messages == []


@pytest.mark.asyncio
async def test_escalation_by_earlier_child_does_not_cut_later_tool_rounds(make_llm):
    critic_llm = make_llm(
        LLMResponse(tool_calls=[ToolCall(id="c1", function=FunctionCall(name="exit_loop", arguments="{}"))]),
    )
    writer_llm = make_llm(
        LLMResponse(tool_calls=[ToolCall(id="w1", function=FunctionCall(name="lookup", arguments='{"query": "x"}'))]),
        LLMResponse(content="final draft"),
    )

    def lookup(query: str) -> str:
        return f"notes on {query}"

    critic = Agent("critic", model=critic_llm, tools=[ExitLoopTool()])
    writer = Agent("writer", model=writer_llm, tools=[lookup])
    pipeline = SequentialAgent("seq", sub_agents=[critic, writer])

    result = await pipeline.run(_options())

    assert len(critic_llm.requests) == 1
    assert len(writer_llm.requests) == 2
    assert result.children["writer"].content == "final draft"
    assert result.content == "final draft"
