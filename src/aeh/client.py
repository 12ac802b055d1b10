"""OpenAI chat.completions exchange.

We make a POST request corresponding to:

  curl https://api.openai.com/v1/chat/completions \\
    -H "Authorization: Bearer ${OPENAI_API_KEY}" \\
    -H 'Content-Type: application/json' \\
    -d '{"model": "gpt-4", "messages": [{"role": "user", "content": "${PROMPT}"}], "temperature": 0.7}'

A successful response carries x-ratelimit-remaining-{requests,tokens}
headers and a body like:

  {"model": "gpt-4-0613",
   "choices": [{"index": 0, "message": {"role": "assistant", "content": "..."}, "finish_reason": "stop"}],
   "usage": {"prompt_tokens": 15, "completion_tokens": 23, "total_tokens": 38}}
"""
from __future__ import annotations

import math
import sys
from typing import IO, Optional

import requests
from pydantic import ValidationError

from .errors import ProtocolError, ShapeError, TransportError
from .logging_util import get_logger
from .spinner import Spinner
from .types import ChatResponse, Completion, build_request_body

logger = get_logger(__name__)

OPENAI_CHAT_ENDPOINT = "https://api.openai.com/v1/chat/completions"
DEFAULT_TIMEOUT = 300


def _round_half_away(x: float) -> int:
    return int(math.copysign(math.floor(abs(x) + 0.5), x))


def dump_response(r: requests.Response) -> str:
    """Render a response roughly the way it came over the wire."""
    lines = [f"HTTP {r.status_code} {r.reason or ''}".rstrip()]
    for k, v in r.headers.items():
        lines.append(f"{k}: {v}")
    lines.append("")
    lines.append(r.text or "")
    return "\n".join(lines)


class ChatClient:
    def __init__(
        self,
        spinner: Optional[Spinner] = None,
        endpoint: str = OPENAI_CHAT_ENDPOINT,
        timeout: int = DEFAULT_TIMEOUT,
        raw_stream: Optional[IO[str]] = None,
    ):
        self.spinner = spinner or Spinner(enabled=False)
        self.endpoint = endpoint
        self.timeout = timeout
        # raw dumps bypass logging so they show even with silent diagnostics
        self.raw_stream = raw_stream

    def _dump(self, r: requests.Response) -> None:
        out = self.raw_stream or sys.stderr
        out.write(dump_response(r) + "\n")
        out.flush()

    def complete(self, model: str, api_key: str, prompt: str, temperature: float) -> Completion:
        headers = {"Authorization": f"Bearer {api_key}", "Content-Type": "application/json"}
        payload = build_request_body(model, prompt, temperature)

        logger.debug("POST %s model=%s temperature=%s", self.endpoint, model, temperature)
        try:
            with self.spinner:
                r = requests.post(self.endpoint, headers=headers, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(f"error doing HTTP request ({e})")

        if r.status_code != 200:
            self._dump(r)
            raise ProtocolError(r.status_code)

        remaining_requests = r.headers.get("x-ratelimit-remaining-requests")
        remaining_tokens = r.headers.get("x-ratelimit-remaining-tokens")
        if remaining_requests is not None:
            logger.info("remaining requests: %s", remaining_requests)
        if remaining_tokens is not None:
            logger.info("remaining tokens: %s", remaining_tokens)

        try:
            data = r.json()
        except ValueError as e:
            self._dump(r)
            raise ShapeError(f"error unmarshaling response body ({e})")

        try:
            resp = ChatResponse.model_validate(data)
        except ValidationError as e:
            self._dump(r)
            raise ShapeError(f"response is not of expected shape ({e.error_count()} errors: {_first_error(e)})")

        try:
            total_tokens = _round_half_away(resp.usage.total_tokens)
        except (OverflowError, ValueError) as e:
            self._dump(r)
            raise ShapeError(f"response is not of expected shape (usage.total_tokens: {e})")

        logger.info("model: %s", resp.model)
        logger.info("total tokens used: %d", total_tokens)

        return Completion(
            text=resp.answer,
            model=resp.model,
            total_tokens=total_tokens,
            remaining_requests=remaining_requests,
            remaining_tokens=remaining_tokens,
        )


def _first_error(e: ValidationError) -> str:
    err = e.errors()[0]
    loc = ".".join(str(p) for p in err.get("loc", ()))
    return f"{loc}: {err.get('msg', '')}" if loc else err.get("msg", "")
