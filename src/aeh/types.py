"""Shared types and lightweight data containers.

Plain dataclasses for what we build ourselves; the provider's response is
decoded through a pydantic schema so a malformed body fails in one place.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr

DEFAULT_MODEL = "gpt-3.5-turbo"
DEFAULT_TEMPERATURE = 0.7


@dataclass
class Config:
    model: Optional[str] = None
    temp: Optional[float] = None

    def fill_missing(self) -> "Config":
        if self.model is None:
            self.model = DEFAULT_MODEL
        if self.temp is None:
            self.temp = DEFAULT_TEMPERATURE
        return self

    def to_document(self) -> Dict[str, Any]:
        return {"defaults": {"model": self.model, "temp": self.temp}}


@dataclass
class Invocation:
    model: str
    temperature: float
    prompt: str


@dataclass
class Completion:
    text: str
    model: str
    total_tokens: int
    remaining_requests: Optional[str] = None
    remaining_tokens: Optional[str] = None


@dataclass
class HistoryEntry:
    prompt: str
    response: str

    def to_dict(self) -> Dict[str, str]:
        return {"Prompt": self.prompt, "Response": self.response}


def build_request_body(model: str, prompt: str, temperature: float) -> Dict[str, Any]:
    return {
        "model": model,
        "messages": [{"role": "user", "content": prompt}],
        "temperature": temperature,
    }


# ----------------------------------------------------------------------
# Response schema (only the fields we read)
# ----------------------------------------------------------------------
class _Lenient(BaseModel):
    model_config = ConfigDict(extra="ignore")


class ResponseMessage(_Lenient):
    content: StrictStr


class Choice(_Lenient):
    message: ResponseMessage


class Usage(_Lenient):
    model_config = ConfigDict(extra="ignore", allow_inf_nan=False)

    total_tokens: Union[StrictInt, StrictFloat]


class ChatResponse(_Lenient):
    choices: List[Choice] = Field(min_length=1)
    model: StrictStr
    usage: Usage

    @property
    def answer(self) -> str:
        return self.choices[0].message.content
