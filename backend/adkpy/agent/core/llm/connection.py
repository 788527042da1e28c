"""
Duplex (live) connections to a model backend

A connection is a producer task pushing responses into an asyncio.Queue.
Consumers either register callbacks (on_response / on_error / on_end) or pull
with ``async for response in connection.responses()``. ``close()`` is
idempotent, flips ``is_active`` immediately and cancels in-flight production.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from contextlib import aclosing
from typing import TYPE_CHECKING, AsyncGenerator, Callable, List, Optional, Set

from ..runtime.config import LLMRequest
from ..runtime.models import LLMResponse, Message
from .base import ProviderError

if TYPE_CHECKING:
    from .base import BaseLLM

logger = logging.getLogger(__name__)

_END = object()


class _Failure:
    """Queue item carrying a backend error to pullers"""

    def __init__(self, error: BaseException) -> None:
        self.error = error


class BaseLLMConnection(ABC):
    """Base class for LLM connections"""

    def __init__(self) -> None:
        self._is_active = True
        self._response_callbacks: List[Callable[[LLMResponse], None]] = []
        self._error_callbacks: List[Callable[[BaseException], None]] = []
        self._end_callbacks: List[Callable[[], None]] = []

    @property
    def is_active(self) -> bool:
        return self._is_active

    @abstractmethod
    def send(self, message: str) -> None:
        """Send a user message over the connection"""
        raise NotImplementedError

    def on_response(self, callback: Callable[[LLMResponse], None]) -> None:
        self._response_callbacks.append(callback)

    def on_error(self, callback: Callable[[BaseException], None]) -> None:
        self._error_callbacks.append(callback)

    def on_end(self, callback: Callable[[], None]) -> None:
        self._end_callbacks.append(callback)

    def close(self) -> None:
        """Close the connection. Safe to call more than once."""
        if not self._is_active:
            return
        self._is_active = False
        self._on_close()
        self._emit_end()

    def _on_close(self) -> None:
        """Release backend resources; subclasses override"""
        pass

    def _emit_response(self, response: LLMResponse) -> None:
        for callback in list(self._response_callbacks):
            try:
                callback(response)
            except Exception as e:
                logger.error(f"Response callback failed: {e}")

    def _emit_error(self, error: BaseException) -> None:
        if not self._error_callbacks:
            logger.error(f"Unhandled connection error: {error}")
        for callback in list(self._error_callbacks):
            try:
                callback(error)
            except Exception as e:
                logger.error(f"Error callback failed: {e}")

    def _emit_end(self) -> None:
        for callback in list(self._end_callbacks):
            try:
                callback()
            except Exception as e:
                logger.error(f"End callback failed: {e}")


class StreamingLLMConnection(BaseLLMConnection):
    """Live connection that drives streaming generation for every sent message.

    The conversation seeded by the initial request grows with each user
    message and each final assistant response. Sends are served one at a time
    in call order.
    """

    def __init__(self, llm: "BaseLLM", llm_request: LLMRequest) -> None:
        super().__init__()
        self.llm = llm
        self.config = llm_request.config
        self.history: List[Message] = list(llm_request.messages)
        self._queue: asyncio.Queue = asyncio.Queue()
        self._tasks: Set[asyncio.Task] = set()
        self._turn_lock = asyncio.Lock()

    def send(self, message: str) -> None:
        if not self._is_active:
            raise ProviderError("Cannot send on a closed connection", model=self.llm.model)
        loop = asyncio.get_running_loop()
        task = loop.create_task(self._produce(message))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _produce(self, message: str) -> None:
        async with self._turn_lock:
            if not self._is_active:
                return
            self.history.append(Message.user(message))
            request = LLMRequest(messages=list(self.history), config=self.config)
            final: Optional[LLMResponse] = None
            try:
                async with aclosing(self.llm.generate_content_async(request, stream=True)) as responses:
                    async for response in responses:
                        if not self._is_active:
                            return
                        if not response.is_partial:
                            final = response
                        await self._queue.put(response)
                        self._emit_response(response)
            except Exception as e:
                logger.error(f"Live generation failed for model {self.llm.model}: {e}")
                self._queue.put_nowait(_Failure(e))
                self._emit_error(e)
                # A failed backend ends the connection
                self.close()
                return
            if final is not None:
                self.history.append(final.to_message())

    async def responses(self) -> AsyncGenerator[LLMResponse, None]:
        """
        Pull responses until the connection is closed

        A backend failure is re-raised here after the responses that preceded it.
        """
        while True:
            item = await self._queue.get()
            if item is _END:
                return
            if isinstance(item, _Failure):
                raise item.error
            yield item

    async def wait_idle(self) -> None:
        """Wait for every pending send to finish producing"""
        while True:
            pending = [task for task in self._tasks if not task.done()]
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)

    def _on_close(self) -> None:
        try:
            current = asyncio.current_task()
        except RuntimeError:
            # Closed outside an event loop
            current = None
        for task in list(self._tasks):
            if task is not current:
                task.cancel()
        self._queue.put_nowait(_END)
