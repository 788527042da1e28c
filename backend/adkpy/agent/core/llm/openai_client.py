from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, AsyncGenerator, Dict, List, Optional, Tuple

from .base import BaseLLM, ProviderError, ProviderNotConfigured
from .connection import BaseLLMConnection, StreamingLLMConnection
from .stream_accumulator import StreamAccumulator
from ..runtime.config import LLMRequest
from ..runtime.models import (
    FunctionCall,
    FunctionDeclaration,
    ImagePart,
    LLMResponse,
    Message,
    MessageRole,
    TextPart,
    ToolCall,
)
from ...clients import get_openai_client

logger = logging.getLogger(__name__)


def get_openai_token_param(model_name: str, max_tokens: int) -> dict:
    """
    Get the correct token parameter for OpenAI API calls based on model family.

    GPT-5 and o-series models use 'max_completion_tokens', while GPT-4 and earlier use 'max_tokens'.
    """
    name = (model_name or "").lower()
    if "gpt-5" in name or name.startswith(("o1", "o3", "o4")):
        return {"max_completion_tokens": max_tokens}
    return {"max_tokens": max_tokens}


@dataclass
class OpenAILLMConfig:
    """Client settings and default sampling parameters"""
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    organization: Optional[str] = None
    temperature: float = 0.7
    top_p: float = 1.0
    max_tokens: Optional[int] = None
    frequency_penalty: float = 0.0
    presence_penalty: float = 0.0


class OpenAILLM(BaseLLM):
    """Adapter for OpenAI chat completions (and OpenAI-compatible backends).

    Streaming calls yield partial responses whose function/tool calls carry
    the cumulative reconstruction so far, then exactly one final response
    (``is_partial=False``) with the full text and calls.
    """

    # Stripped from the model identifier before it is sent on the wire
    model_prefix: str = ""
    provider_name: str = "OpenAI"

    def __init__(self, model: str, config: Optional[OpenAILLMConfig] = None, client: Any = None) -> None:
        super().__init__(model)
        self.llm_config = config or OpenAILLMConfig()
        self._client = client
        self.default_params: Dict[str, Any] = {
            "temperature": self.llm_config.temperature,
            "top_p": self.llm_config.top_p,
            "max_tokens": self.llm_config.max_tokens,
            "frequency_penalty": self.llm_config.frequency_penalty,
            "presence_penalty": self.llm_config.presence_penalty,
        }

    @classmethod
    def supported_models(cls) -> List[str]:
        return [
            r"^gpt-4.*",
            r"^gpt-3\.5-.*",
            r"^gpt-5.*",
            r"^o[134](-.*)?$",
            r"^text-davinci-.*",
        ]

    @property
    def wire_model(self) -> str:
        if self.model_prefix and self.model.startswith(self.model_prefix):
            return self.model[len(self.model_prefix):]
        return self.model

    @property
    def client(self) -> Any:
        if self._client is None:
            try:
                self._client = self._create_client()
            except ValueError as e:
                # Normalize to ProviderNotConfigured for runtime consistency
                raise ProviderNotConfigured(str(e)) from e
        return self._client

    def _create_client(self) -> Any:
        return get_openai_client(
            api_key=self.llm_config.api_key,
            base_url=self.llm_config.base_url,
            organization=self.llm_config.organization,
        )

    # -----------------------------
    # Request conversion
    # -----------------------------
    def convert_message(self, message: Message) -> Dict[str, Any]:
        """Convert a Message into an OpenAI chat message dict"""
        role = message.role
        text = message.text

        if role in (MessageRole.assistant, MessageRole.model):
            out: Dict[str, Any] = {"role": "assistant", "content": text}
            if message.function_call is not None:
                out["function_call"] = message.function_call.to_dict()
            if message.tool_calls:
                out["tool_calls"] = [tc.to_dict() for tc in message.tool_calls]
                if not text:
                    out["content"] = None
            return out
        if role == MessageRole.function:
            # Function messages require a name
            return {"role": "function", "name": message.name or "", "content": text}
        if role == MessageRole.tool:
            return {"role": "tool", "content": text, "tool_call_id": message.tool_call_id or "unknown"}

        out = {"role": role.value, "content": text}
        if role == MessageRole.user and message.name:
            out["name"] = message.name
        # Multimodal content for user and system messages
        if not isinstance(message.content, str):
            parts: List[Dict[str, Any]] = []
            for part in message.content:
                if isinstance(part, TextPart):
                    parts.append({"type": "text", "text": part.text})
                elif isinstance(part, ImagePart):
                    parts.append({"type": "image_url", "image_url": {"url": part.url}})
            if parts:
                out["content"] = parts
        return out

    @staticmethod
    def convert_functions_to_tools(functions: List[FunctionDeclaration]) -> List[Dict[str, Any]]:
        return [
            {
                "type": "function",
                "function": {
                    "name": f.name,
                    "description": f.description,
                    "parameters": f.parameters,
                },
            }
            for f in functions or []
        ]

    def build_params(self, llm_request: LLMRequest, stream: bool) -> Dict[str, Any]:
        cfg = llm_request.config

        def pick(name: str) -> Any:
            value = getattr(cfg, name)
            return value if value is not None else self.default_params.get(name)

        params: Dict[str, Any] = {
            "model": self.wire_model,
            "messages": [self.convert_message(m) for m in llm_request.messages],
            "temperature": pick("temperature"),
            "top_p": pick("top_p"),
            "frequency_penalty": pick("frequency_penalty"),
            "presence_penalty": pick("presence_penalty"),
            "stream": stream,
        }
        max_tokens = pick("max_tokens")
        if max_tokens is not None:
            params.update(get_openai_token_param(self.wire_model, max_tokens))
        tools = self.convert_functions_to_tools(cfg.functions)
        if tools:
            params["tools"] = tools
        return {k: v for k, v in params.items() if v is not None}

    # -----------------------------
    # Response conversion
    # -----------------------------
    @staticmethod
    def convert_response(choice: Any, raw_response: Any = None) -> LLMResponse:
        message = getattr(choice, "message", None)
        result = LLMResponse(
            content=getattr(message, "content", None) or None,
            role=getattr(message, "role", None) or "assistant",
            raw_response=raw_response,
        )
        function_call = getattr(message, "function_call", None)
        if function_call:
            result.function_call = FunctionCall(name=function_call.name, arguments=function_call.arguments)
        tool_calls = getattr(message, "tool_calls", None)
        if tool_calls:
            result.tool_calls = [
                ToolCall(
                    id=tc.id,
                    type=getattr(tc, "type", None) or "function",
                    function=FunctionCall(name=tc.function.name, arguments=tc.function.arguments),
                )
                for tc in tool_calls
            ]
        return result

    @staticmethod
    def convert_chunk(choice: Any, raw_response: Any = None) -> Tuple[LLMResponse, List[Optional[int]]]:
        """Convert one streamed choice into a partial response plus tool-call stream indices"""
        delta = getattr(choice, "delta", None)
        result = LLMResponse(
            content=getattr(delta, "content", None) or None,
            role=getattr(delta, "role", None) or "assistant",
            is_partial=True,
            raw_response=raw_response,
        )
        indices: List[Optional[int]] = []
        function_call = getattr(delta, "function_call", None)
        if function_call:
            result.function_call = FunctionCall(
                name=getattr(function_call, "name", None) or "",
                arguments=getattr(function_call, "arguments", None) or "",
            )
        tool_calls = getattr(delta, "tool_calls", None)
        if tool_calls:
            result.tool_calls = []
            for tc in tool_calls:
                fn = getattr(tc, "function", None)
                result.tool_calls.append(
                    ToolCall(
                        id=getattr(tc, "id", None) or "",
                        type=getattr(tc, "type", None) or "function",
                        function=FunctionCall(
                            name=getattr(fn, "name", None) or "",
                            arguments=getattr(fn, "arguments", None) or "",
                        ),
                    )
                )
                indices.append(getattr(tc, "index", None))
        return result, indices

    # -----------------------------
    # Generation
    # -----------------------------
    async def generate_content_async(
        self,
        llm_request: LLMRequest,
        stream: bool = False,
    ) -> AsyncGenerator[LLMResponse, None]:
        params = self.build_params(llm_request, stream)
        client = self.client
        logger.debug(f"{self.provider_name}: calling {self.wire_model} with {len(params['messages'])} messages (stream={stream})")

        try:
            if stream:
                response_stream = await client.chat.completions.create(**params)
                accumulator = StreamAccumulator()
                role = "assistant"
                received = False
                async for chunk in response_stream:
                    choices = getattr(chunk, "choices", None)
                    if not choices:
                        continue
                    received = True
                    partial, indices = self.convert_chunk(choices[0], raw_response=chunk)
                    if getattr(choices[0].delta, "role", None):
                        role = partial.role
                    yield accumulator.apply(partial, indices)
                if not received:
                    raise ProviderError(f"Empty stream from {self.provider_name}", model=self.model)
                yield accumulator.final_response(role=role)
            else:
                response = await client.chat.completions.create(**params)
                if not getattr(response, "choices", None):
                    raise ProviderError(f"No response from {self.provider_name}", model=self.model)
                yield self.convert_response(response.choices[0], raw_response=response)
        except ProviderError:
            raise
        except Exception as e:
            logger.error(f"Error calling {self.provider_name} model {self.model}: {e}")
            raise

    def connect(self, llm_request: LLMRequest) -> BaseLLMConnection:
        return StreamingLLMConnection(self, llm_request)
