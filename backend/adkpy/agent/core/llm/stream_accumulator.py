"""
Reconstruction of function/tool calls from streamed fragments

Streaming backends deliver a call's name and arguments split across chunks,
and several tool calls can be in flight in one stream, told apart by id.
StreamAccumulator holds the per-stream state; one instance serves exactly one
streaming call and is discarded afterwards.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from ..runtime.models import FunctionCall, LLMResponse, ToolCall

logger = logging.getLogger(__name__)


class StreamAccumulator:
    """Accumulates partial function/tool calls across stream chunks.

    Argument text for a call id is the in-order concatenation of every
    fragment seen for that id. Tool calls are reported in first-seen order.
    """

    def __init__(self) -> None:
        self.function_call: Optional[FunctionCall] = None
        self.tool_calls: Dict[str, ToolCall] = {}
        self._index_to_id: Dict[int, str] = {}
        self._last_id: Optional[str] = None
        self._content: List[str] = []

    def add_function_fragment(self, fragment: FunctionCall) -> None:
        if self.function_call is None:
            self.function_call = FunctionCall(name=fragment.name or "", arguments=fragment.arguments or "")
        else:
            self.function_call.name += fragment.name or ""
            self.function_call.arguments += fragment.arguments or ""

    def add_tool_fragment(self, fragment: ToolCall, index: Optional[int] = None) -> None:
        call_id = fragment.id or None
        if call_id is None and index is not None:
            call_id = self._index_to_id.get(index)
        if call_id is None:
            call_id = self._last_id
        if call_id is None:
            # No id seen yet for this stream; key by position until one arrives
            call_id = f"call_{index if index is not None else len(self.tool_calls)}"

        existing = self.tool_calls.get(call_id)
        if existing is None:
            self.tool_calls[call_id] = ToolCall(
                id=call_id,
                type=fragment.type or "function",
                function=FunctionCall(
                    name=fragment.function.name or "",
                    arguments=fragment.function.arguments or "",
                ),
            )
        else:
            existing.function.name += fragment.function.name or ""
            existing.function.arguments += fragment.function.arguments or ""

        if index is not None:
            self._index_to_id[index] = call_id
        self._last_id = call_id

    def add_content(self, text: Optional[str]) -> None:
        if text:
            self._content.append(text)

    @property
    def content(self) -> Optional[str]:
        return "".join(self._content) if self._content else None

    def snapshot_function_call(self) -> Optional[FunctionCall]:
        if self.function_call is None:
            return None
        return FunctionCall(name=self.function_call.name, arguments=self.function_call.arguments)

    def snapshot_tool_calls(self) -> Optional[List[ToolCall]]:
        if not self.tool_calls:
            return None
        return [
            ToolCall(
                id=tc.id,
                type=tc.type,
                function=FunctionCall(name=tc.function.name, arguments=tc.function.arguments),
            )
            for tc in self.tool_calls.values()
        ]

    def apply(self, chunk: LLMResponse, indices: Optional[List[Optional[int]]] = None) -> LLMResponse:
        """Fold one partial chunk into the state and return it carrying cumulative calls.

        ``indices`` optionally gives the backend's stream index for each tool
        call fragment in ``chunk.tool_calls``.
        """
        self.add_content(chunk.content)
        if chunk.function_call is not None:
            self.add_function_fragment(chunk.function_call)
            chunk.function_call = self.snapshot_function_call()
        if chunk.tool_calls:
            for pos, fragment in enumerate(chunk.tool_calls):
                index = indices[pos] if indices and pos < len(indices) else None
                self.add_tool_fragment(fragment, index)
            chunk.tool_calls = self.snapshot_tool_calls()
        return chunk

    def final_response(self, role: str = "assistant", raw_response=None) -> LLMResponse:
        """Build the terminal, non-partial response from everything accumulated"""
        return LLMResponse(
            content=self.content,
            function_call=self.snapshot_function_call(),
            tool_calls=self.snapshot_tool_calls(),
            role=role,
            is_partial=False,
            raw_response=raw_response,
        )
