"""
Session storage for agent conversations

Sessions are consumed by the runtime only through append and query. The
in-memory implementation here keeps everything in process; persistence
backends implement BaseSessionService.
"""

import logging
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from ..core.runtime.models import Message

logger = logging.getLogger(__name__)


@dataclass
class Session:
    """Conversation session"""
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    user_id: Optional[str] = None
    messages: List[Message] = field(default_factory=list)
    state: Dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    last_activity: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    metadata: Dict[str, Any] = field(default_factory=dict)


class BaseSessionService(ABC):
    """Abstract base class for session storage backends"""

    @abstractmethod
    async def create_session(self, user_id: Optional[str] = None, session_id: Optional[str] = None,
                             state: Optional[Dict[str, Any]] = None) -> Session:
        pass

    @abstractmethod
    async def get_session(self, session_id: str) -> Optional[Session]:
        pass

    @abstractmethod
    async def append_messages(self, session_id: str, messages: Iterable[Message]) -> None:
        pass

    @abstractmethod
    async def list_messages(self, session_id: str, limit: Optional[int] = None) -> List[Message]:
        pass

    @abstractmethod
    async def list_sessions(self, user_id: Optional[str] = None) -> List[Session]:
        pass

    @abstractmethod
    async def delete_session(self, session_id: str) -> bool:
        pass

    async def append_message(self, session_id: str, message: Message) -> None:
        await self.append_messages(session_id, [message])


class InMemorySessionService(BaseSessionService):
    """In-memory implementation of session storage"""

    def __init__(self):
        self.sessions: Dict[str, Session] = {}

    async def create_session(self, user_id: Optional[str] = None, session_id: Optional[str] = None,
                             state: Optional[Dict[str, Any]] = None) -> Session:
        session = Session(user_id=user_id, state=dict(state or {}))
        if session_id:
            session.id = session_id
        self.sessions[session.id] = session
        logger.debug(f"Created session {session.id}")
        return session

    async def get_session(self, session_id: str) -> Optional[Session]:
        return self.sessions.get(session_id)

    async def append_messages(self, session_id: str, messages: Iterable[Message]) -> None:
        session = self.sessions.get(session_id)
        if session is None:
            # Appending to an unknown session creates it
            session = await self.create_session(session_id=session_id)
        session.messages.extend(messages)
        session.last_activity = datetime.now(timezone.utc)

    async def list_messages(self, session_id: str, limit: Optional[int] = None) -> List[Message]:
        session = self.sessions.get(session_id)
        if session is None:
            return []
        if limit is not None:
            return list(session.messages[-limit:]) if limit > 0 else []
        return list(session.messages)

    async def list_sessions(self, user_id: Optional[str] = None) -> List[Session]:
        sessions = [s for s in self.sessions.values() if user_id is None or s.user_id == user_id]
        sessions.sort(key=lambda s: s.last_activity, reverse=True)
        return sessions

    async def delete_session(self, session_id: str) -> bool:
        return self.sessions.pop(session_id, None) is not None
