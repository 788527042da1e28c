import pytest

from adkpy.agent.base_agent import BaseAgent
from adkpy.agent.exceptions import (
    AgentTreeError,
    AlreadyParentedError,
    DuplicateSiblingNameError,
    InvalidAgentNameError,
    ReservedAgentNameError,
)
from adkpy.agent.llm_agent import Agent
from adkpy.agent.workflows import SequentialAgent


class NoopAgent(BaseAgent):
    async def _run_async_impl(self, ctx):
        return
        yield


def test_attach_sets_parent_and_order():
    root = NoopAgent("root")
    a, b = NoopAgent("a"), NoopAgent("b")
    assert root.add_sub_agent(a) is root
    root.add_sub_agent(b)
    assert root.sub_agents == [a, b]
    assert a.parent_agent is root and b.parent_agent is root


def test_attach_to_second_parent_fails_and_keeps_first():
    first, second = NoopAgent("first"), NoopAgent("second")
    child = NoopAgent("child")
    first.add_sub_agent(child)

    with pytest.raises(AlreadyParentedError) as exc_info:
        second.add_sub_agent(child)

    assert exc_info.value.agent_name == "child"
    assert exc_info.value.parent_name == "second"
    assert child.parent_agent is first
    assert first.sub_agents == [child]
    assert second.sub_agents == []


def test_duplicate_sibling_name_first_attach_wins():
    parent = NoopAgent("parent")
    one, two = NoopAgent("worker"), NoopAgent("worker")
    parent.add_sub_agent(one)

    with pytest.raises(DuplicateSiblingNameError):
        parent.add_sub_agent(two)

    assert parent.sub_agents == [one]
    assert two.parent_agent is None


def test_duplicate_sibling_name_reverse_order():
    parent = NoopAgent("parent")
    one, two = NoopAgent("worker"), NoopAgent("worker")
    parent.add_sub_agent(two)

    with pytest.raises(DuplicateSiblingNameError):
        parent.add_sub_agent(one)

    assert parent.sub_agents == [two]


def test_same_name_allowed_under_different_parents():
    left, right = NoopAgent("left"), NoopAgent("right")
    left.add_sub_agent(NoopAgent("worker"))
    right.add_sub_agent(NoopAgent("worker"))
    assert left.find_sub_agent("worker") is not right.find_sub_agent("worker")


def _build_tree():
    leaf = NoopAgent("leaf")
    mid = NoopAgent("mid", sub_agents=[leaf])
    other = NoopAgent("other")
    root = NoopAgent("root", sub_agents=[mid, other])
    return root, mid, other, leaf


def test_find_agent_returns_root_from_any_node():
    root, mid, other, leaf = _build_tree()
    for node in (root, mid, other, leaf):
        assert node.root_agent.find_agent("root") is root
    assert root.find_agent("root") is root


def test_find_agent_depth_first_and_missing():
    root, mid, other, leaf = _build_tree()
    assert root.find_agent("leaf") is leaf
    assert root.find_agent("other") is other
    assert root.find_agent("nobody") is None
    # Searches only the subtree below the node
    assert mid.find_agent("other") is None


def test_find_agent_prefers_earlier_branch():
    deep = NoopAgent("dup")
    shallow = NoopAgent("dup")
    root = NoopAgent("root", sub_agents=[NoopAgent("a", sub_agents=[deep]), NoopAgent("b", sub_agents=[shallow])])
    assert root.find_agent("dup") is deep


def test_find_sub_agent_only_direct_children():
    root, mid, other, leaf = _build_tree()
    assert root.find_sub_agent("mid") is mid
    assert root.find_sub_agent("leaf") is None


def test_root_agent_walks_parents():
    root, mid, other, leaf = _build_tree()
    assert leaf.root_agent is root
    assert root.root_agent is root


@pytest.mark.parametrize("name", ["", "1agent", "has space", "dash-name", "dot.name"])
def test_invalid_names_rejected(name):
    with pytest.raises(InvalidAgentNameError):
        NoopAgent(name)


@pytest.mark.parametrize("name", ["agent", "_private", "Agent2", "snake_case_name"])
def test_valid_names_accepted(name):
    assert NoopAgent(name).name == name


def test_reserved_user_name_rejected():
    with pytest.raises(ReservedAgentNameError) as exc_info:
        NoopAgent("user")
    assert isinstance(exc_info.value, AgentTreeError)


def test_failed_constructor_does_not_reparent_children():
    free = NoopAgent("free")
    taken = NoopAgent("taken")
    NoopAgent("owner", sub_agents=[taken])

    with pytest.raises(AlreadyParentedError):
        NoopAgent("newcomer", sub_agents=[free, taken])

    assert free.parent_agent is None


def test_failed_agent_tool_setup_does_not_reparent_children(make_llm):
    child = NoopAgent("child")

    def lookup(query: str) -> str:
        return query

    with pytest.raises(ValueError):
        Agent("a", model=make_llm(), sub_agents=[child], tools=[lookup, lookup])

    assert child.parent_agent is None
    other = SequentialAgent("other", sub_agents=[child])
    assert child.parent_agent is other


def test_constructor_rejects_duplicate_children():
    a1, a2 = NoopAgent("a"), NoopAgent("a")
    with pytest.raises(DuplicateSiblingNameError):
        NoopAgent("parent", sub_agents=[a1, a2])
    assert a1.parent_agent is None
