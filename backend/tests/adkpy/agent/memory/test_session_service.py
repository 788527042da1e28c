import pytest

from adkpy.agent.core.runtime.models import Message
from adkpy.agent.memory.session_service import InMemorySessionService


@pytest.mark.asyncio
async def test_create_get_delete():
    service = InMemorySessionService()
    session = await service.create_session(user_id="u1", state={"k": "v"})

    assert (await service.get_session(session.id)) is session
    assert session.state == {"k": "v"}
    assert await service.delete_session(session.id)
    assert not await service.delete_session(session.id)
    assert await service.get_session(session.id) is None


@pytest.mark.asyncio
async def test_append_and_list_messages_in_order():
    service = InMemorySessionService()
    session = await service.create_session(session_id="s1")
    await service.append_message("s1", Message.user("one"))
    await service.append_messages("s1", [Message.assistant("two"), Message.user("three")])

    assert session.id == "s1"
    assert [m.text for m in await service.list_messages("s1")] == ["one", "two", "three"]
    assert [m.text for m in await service.list_messages("s1", limit=2)] == ["two", "three"]
    assert await service.list_messages("s1", limit=0) == []
    assert await service.list_messages("unknown") == []


@pytest.mark.asyncio
async def test_append_to_unknown_session_creates_it():
    service = InMemorySessionService()
    await service.append_message("fresh", Message.user("hi"))
    session = await service.get_session("fresh")
    assert session is not None
    assert [m.text for m in session.messages] == ["hi"]


@pytest.mark.asyncio
async def test_list_sessions_filters_and_orders_by_activity():
    service = InMemorySessionService()
    older = await service.create_session(user_id="u1")
    newer = await service.create_session(user_id="u1")
    await service.create_session(user_id="u2")
    await service.append_message(older.id, Message.user("bump"))

    sessions = await service.list_sessions(user_id="u1")
    assert [s.id for s in sessions] == [older.id, newer.id]
    assert len(await service.list_sessions()) == 3
