"""
Long-term memory for agents

A memory service ingests finished sessions and answers keyword queries over
them. Results are scored by the share of query terms a message contains; a
session's score is that of its best matching message.
"""

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional, Set

from ..core.runtime.models import Message
from .session_service import Session

logger = logging.getLogger(__name__)

_TERM_RE = re.compile(r"\w+")


@dataclass
class MemoryResult:
    """Matching messages from one remembered session"""
    session_id: str
    messages: List[Message]
    score: float
    user_id: Optional[str] = None


@dataclass
class SearchMemoryOptions:
    user_id: Optional[str] = None
    session_id: Optional[str] = None
    limit: int = 10
    # Minimum score in (0, 1] a session needs to be returned
    threshold: float = 0.0


@dataclass
class SearchMemoryResponse:
    memories: List[MemoryResult] = field(default_factory=list)


class BaseMemoryService(ABC):
    """Abstract base class for memory backends"""

    @abstractmethod
    async def add_session_to_memory(self, session: Session) -> None:
        pass

    @abstractmethod
    async def search_memory(self, query: str,
                            options: Optional[SearchMemoryOptions] = None) -> SearchMemoryResponse:
        pass


@dataclass
class _StoredSession:
    session_id: str
    user_id: Optional[str]
    messages: List[Message]
    stored_at: datetime


def _terms(text: str) -> Set[str]:
    return set(_TERM_RE.findall(text.lower()))


class InMemoryMemoryService(BaseMemoryService):
    """In-memory keyword search over remembered sessions"""

    def __init__(self):
        self.sessions: Dict[str, _StoredSession] = {}

    async def add_session_to_memory(self, session: Session) -> None:
        # Re-adding a session replaces the earlier snapshot
        self.sessions[session.id] = _StoredSession(
            session_id=session.id,
            user_id=session.user_id,
            messages=list(session.messages),
            stored_at=datetime.now(timezone.utc),
        )
        logger.debug(f"Stored session {session.id} in memory ({len(session.messages)} messages)")

    async def search_memory(self, query: str,
                            options: Optional[SearchMemoryOptions] = None) -> SearchMemoryResponse:
        options = options or SearchMemoryOptions()
        query_terms = _terms(query)
        if not query_terms or options.limit <= 0:
            return SearchMemoryResponse()

        scored = []
        for stored in self.sessions.values():
            if options.user_id is not None and stored.user_id != options.user_id:
                continue
            if options.session_id is not None and stored.session_id != options.session_id:
                continue

            best = 0.0
            matches: List[Message] = []
            for message in stored.messages:
                text = message.text
                if not text:
                    continue
                score = len(query_terms & _terms(text)) / len(query_terms)
                if score > 0:
                    matches.append(message)
                    best = max(best, score)
            if matches and best >= options.threshold:
                scored.append((stored, MemoryResult(
                    session_id=stored.session_id,
                    messages=matches,
                    score=best,
                    user_id=stored.user_id,
                )))

        # Best score first, most recently stored first on ties
        scored.sort(key=lambda item: (item[1].score, item[0].stored_at), reverse=True)
        memories = [result for _, result in scored[:options.limit]]
        logger.debug(f"Memory search for {query!r} matched {len(memories)} session(s)")
        return SearchMemoryResponse(memories=memories)
