"""
Model-backed agent

``Agent`` builds a provider request from its instruction, the conversation
history and its tool declarations, resolves a provider adapter through the
LLM registry and runs the tool-call loop: every function/tool call in a final
response is executed and its result is fed back for a follow-up model call.
"""

import json
import logging
from contextlib import aclosing
from typing import Any, AsyncGenerator, Dict, Iterable, List, Optional, Tuple, Union

from .base_agent import BaseAgent
from .core.auth.handler import AuthHandler
from .core.llm.base import BaseLLM, ProviderError
from .core.llm.registry import LLMRegistry, get_default_registry
from .core.runtime.config import LLMRequest, LLMRequestConfig
from .core.runtime.context import InvocationContext, ToolContext
from .core.runtime.models import LLMResponse, Message, MessageRole
from .environment import get_agent_settings
from .tools.base_tool import BaseTool, FunctionTool, ToolResult
from .tools.tool_registry import ToolRegistry

logger = logging.getLogger(__name__)

_UNSET: Any = object()


class Agent(BaseAgent):
    """
    Leaf agent that talks to a language model and calls tools

    Args:
        name: Agent name, unique among its siblings
        model: Model identifier resolved through ``registry``, or an adapter instance
        instruction: System instruction prepended to every request
        tools: BaseTool instances or plain callables (wrapped in FunctionTool)
        registry: LLM registry; the process-wide default when omitted
        generate_content_config: Sampling parameters for every request
        max_tool_rounds: Cap on tool-call rounds per turn; defaults to
            AGENT_MAX_TOOL_LOOPS, None means unbounded
        auth_handler: Authentication handle exposed to tools
        tool_parameters: Initial parameter bag for each ToolContext
    """

    def __init__(
        self,
        name: str,
        model: Union[str, BaseLLM],
        instruction: str = "",
        description: str = "",
        tools: Optional[Iterable[Any]] = None,
        sub_agents: Optional[Iterable[BaseAgent]] = None,
        registry: Optional[LLMRegistry] = None,
        generate_content_config: Optional[LLMRequestConfig] = None,
        max_tool_rounds: Optional[int] = _UNSET,
        auth_handler: Optional[AuthHandler] = None,
        tool_parameters: Optional[Dict[str, Any]] = None,
    ):
        # Tools are validated before the base constructor attaches sub_agents
        tool_registry = ToolRegistry(
            tool if isinstance(tool, BaseTool) else FunctionTool(tool) for tool in tools or []
        )
        super().__init__(name, description=description, sub_agents=sub_agents)
        self.model = model
        self.instruction = instruction
        self.registry = registry
        self.generate_content_config = generate_content_config or LLMRequestConfig()
        if max_tool_rounds is _UNSET:
            max_tool_rounds = get_agent_settings().max_tool_loops
        self.max_tool_rounds = max_tool_rounds
        self.auth_handler = auth_handler
        self.tool_parameters = dict(tool_parameters or {})
        self.tools = tool_registry
        self._llm: Optional[BaseLLM] = model if isinstance(model, BaseLLM) else None

    @property
    def canonical_model(self) -> BaseLLM:
        """The resolved adapter; resolution happens on first use"""
        if self._llm is None:
            registry = self.registry or get_default_registry()
            self._llm = registry.new_llm(self.model)
        return self._llm

    def build_request(self, ctx: InvocationContext) -> LLMRequest:
        messages: List[Message] = []
        if self.instruction:
            messages.append(Message.system(self.instruction))
        messages.extend(ctx.messages)

        settings = get_agent_settings()
        config = self.generate_content_config
        update: Dict[str, Any] = {"functions": self.tools.declarations()}
        if config.temperature is None:
            update["temperature"] = settings.temperature
        if config.max_tokens is None and settings.max_tokens is not None:
            update["max_tokens"] = settings.max_tokens
        return LLMRequest(messages=messages, config=config.model_copy(update=update))

    async def _run_async_impl(self, ctx: InvocationContext) -> AsyncGenerator[LLMResponse, None]:
        llm = self.canonical_model
        stream = ctx.run_config.is_streaming
        tool_rounds = 0

        while True:
            request = self.build_request(ctx)
            ctx.increment_llm_call_count()

            final: Optional[LLMResponse] = None
            last: Optional[LLMResponse] = None
            async with aclosing(llm.generate_content_async(request, stream=stream)) as responses:
                async for response in responses:
                    response.author = self.name
                    last = response
                    if not response.is_partial:
                        final = response
                    yield response

            # Some adapters end a stream on a partial instead of a final response
            if final is None:
                final = last
            if final is None:
                logger.error(f"Agent {self.name}: model {llm.model} returned no response")
                raise ProviderError(f"No response from model {llm.model}", model=llm.model)

            ctx.append_message(final.to_message())
            if not final.has_calls:
                return

            tool_rounds += 1
            messages, escalated = await self._execute_calls(ctx, final)
            for message in messages:
                ctx.append_message(message)

            if escalated:
                logger.info(f"Agent {self.name}: invocation escalated by a tool; ending turn")
                return
            if self.max_tool_rounds is not None and tool_rounds >= self.max_tool_rounds:
                logger.warning(
                    f"Agent {self.name}: Reached max tool-call loops ({self.max_tool_rounds}). Stopping to prevent a loop."
                )
                return

    async def _execute_calls(self, ctx: InvocationContext,
                             response: LLMResponse) -> Tuple[List[Message], bool]:
        """
        Run every call in ``response``

        Returns the tool/function result messages and whether one of these
        calls escalated the invocation.
        """
        messages: List[Message] = []
        tool_contexts: List[ToolContext] = []
        if response.tool_calls:
            for tc in response.tool_calls:
                tool_context = self._tool_context(ctx, tc.id)
                tool_contexts.append(tool_context)
                content = await self.call_tool(ctx, tc.function.name, tc.function.arguments, tc.id, tool_context)
                messages.append(
                    Message(role=MessageRole.tool, content=content, name=tc.function.name, tool_call_id=tc.id)
                )
        elif response.function_call is not None:
            fc = response.function_call
            tool_context = self._tool_context(ctx)
            tool_contexts.append(tool_context)
            content = await self.call_tool(ctx, fc.name, fc.arguments, tool_context=tool_context)
            messages.append(Message(role=MessageRole.function, content=content, name=fc.name))
        return messages, any(tc.escalated for tc in tool_contexts)

    def _tool_context(self, ctx: InvocationContext, call_id: Optional[str] = None) -> ToolContext:
        return ToolContext(
            ctx,
            auth=self.auth_handler,
            parameters=self.tool_parameters,
            function_call_id=call_id,
        )

    async def call_tool(self, ctx: InvocationContext, tool_name: str, arguments: str,
                        call_id: Optional[str] = None,
                        tool_context: Optional[ToolContext] = None) -> str:
        """
        Execute one tool call and return the JSON text handed back to the model

        Failures are reported to the model rather than raised:
            {"success": false, "error": "..."}
        """
        tool = self.tools.get(tool_name)
        if tool is None:
            logger.warning(f"Agent {self.name}: model called unknown tool {tool_name!r}")
            return _dump(ToolResult(success=False, error=f"Tool {tool_name} not found"))

        args, error = _parse_arguments(arguments)
        if error is not None:
            logger.warning(f"Agent {self.name}: invalid arguments for {tool_name}: {error}")
            return _dump(ToolResult(success=False, error=f"Invalid JSON arguments for {tool_name}: {error}"))

        if tool_context is None:
            tool_context = self._tool_context(ctx, call_id)
        logger.info(f"Agent {self.name}: executing tool {tool_name}")
        try:
            result = await tool.run_async(args, tool_context)
        except Exception as e:
            logger.warning(f"Agent {self.name}: tool {tool_name} failed: {e}", exc_info=True)
            return _dump(ToolResult(success=False, error=f"Tool execution failed: {e}"))

        if isinstance(result, ToolResult):
            return _dump(result)
        return _dump(ToolResult(success=True, data=result))


def _parse_arguments(arguments: Optional[str]) -> Tuple[Dict[str, Any], Optional[str]]:
    if not arguments or not arguments.strip():
        return {}, None
    try:
        parsed = json.loads(arguments)
    except json.JSONDecodeError as e:
        return {}, str(e)
    if not isinstance(parsed, dict):
        return {}, f"expected a JSON object, got {type(parsed).__name__}"
    return parsed, None


def _dump(result: ToolResult) -> str:
    return json.dumps(result.to_dict(), default=str)
