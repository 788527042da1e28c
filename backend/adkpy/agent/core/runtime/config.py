"""
Request and run configuration for the agent runtime

LLMRequestConfig carries per-call sampling parameters and the function
declarations offered to the model. RunConfig carries invocation-wide behaviour
(streaming mode, live/audio settings, call caps).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .models import FunctionDeclaration, Message


class StreamingMode(str, Enum):
    """Streaming mode options for agent execution"""
    NONE = "NONE"
    SSE = "SSE"
    BIDI = "BIDI"


class SpeechConfig(BaseModel):
    voice: Optional[str] = None
    language: Optional[str] = None


class AudioTranscriptionConfig(BaseModel):
    enabled: bool = False
    language: Optional[str] = None


class LLMRequestConfig(BaseModel):
    """Sampling parameters and function declarations for one model call"""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    temperature: Optional[float] = Field(default=None, ge=0.0, le=2.0, description="Sampling temperature")
    max_tokens: Optional[int] = Field(default=None, gt=0, description="Maximum tokens to generate")
    top_p: Optional[float] = Field(default=None, ge=0.0, le=1.0, description="Nucleus sampling")
    frequency_penalty: Optional[float] = Field(default=None, ge=-2.0, le=2.0)
    presence_penalty: Optional[float] = Field(default=None, ge=-2.0, le=2.0)
    functions: List[FunctionDeclaration] = Field(default_factory=list, description="Functions offered to the model")

    @field_validator("functions")
    @classmethod
    def validate_unique_function_names(cls, v):
        names = [f.name for f in v]
        duplicates = {n for n in names if names.count(n) > 1}
        if duplicates:
            raise ValueError(f"Duplicate function declarations: {sorted(duplicates)}")
        return v


class RunConfig(BaseModel):
    """Configs for runtime behavior of agents"""
    streaming_mode: StreamingMode = Field(default=StreamingMode.NONE)
    speech_config: Optional[SpeechConfig] = None
    response_modalities: Optional[List[str]] = None
    save_input_blobs_as_artifacts: bool = False
    # Compositional function calling; only meaningful with StreamingMode.SSE
    support_cfc: bool = False
    output_audio_transcription: Optional[AudioTranscriptionConfig] = None
    max_llm_calls: Optional[int] = Field(default=None, gt=0, description="Cap on model calls per invocation")

    @property
    def is_streaming(self) -> bool:
        return self.streaming_mode != StreamingMode.NONE


@dataclass
class LLMRequest:
    """Outbound request to a provider adapter. Built per call, never retained."""
    messages: List[Message]
    config: LLMRequestConfig = field(default_factory=LLMRequestConfig)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "messages": [m.to_dict() for m in self.messages],
            "config": self.config.model_dump(exclude_none=True, exclude={"functions"}),
            "functions": [f.to_dict() for f in self.config.functions],
        }
