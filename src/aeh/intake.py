"""Argument / environment intake.

usage: aeh [-m MODEL] [-t TEMPERATURE] <prompt>

Piped stdin is appended to the prompt after a blank line, so
`git diff | aeh "write a commit message"` works.
"""
from __future__ import annotations

import argparse
from typing import IO, List, Mapping, Optional

from .errors import ConfigError, UsageError
from .types import Config, Invocation

API_KEY_ENV = "OPENAI_API_KEY"
PROG = "aeh"


class _Parser(argparse.ArgumentParser):
    # argparse would exit with 2; we want a UsageError (exit 1) instead
    def error(self, message):
        raise UsageError(message)


def build_parser(config: Config) -> argparse.ArgumentParser:
    ap = _Parser(prog=PROG, description="Send a prompt to the OpenAI chat completion API and print the answer.")
    ap.add_argument("-m", "--model", default=config.model, help="the model to use (default: %(default)s)")
    ap.add_argument(
        "-t",
        "--temperature",
        type=float,
        default=config.temp,
        help="the temperature to use (default: %(default)s), "
        "see <https://platform.openai.com/docs/api-reference/chat/create#chat/create-temperature>",
    )
    ap.add_argument("prompt", nargs="*", help="the prompt")
    return ap


def parse_args(argv: Optional[List[str]], config: Config) -> Invocation:
    args = build_parser(config).parse_args(argv)

    if not args.prompt or args.prompt[0] == "":
        raise UsageError("no prompt given")
    if len(args.prompt) > 1:
        raise UsageError("additional command line (non-flag) arguments specified, which is invalid")

    return Invocation(model=args.model, temperature=args.temperature, prompt=args.prompt[0])


def read_piped_input(stream: IO[str]) -> str:
    if stream is None or stream.isatty():
        return ""
    try:
        return stream.read()
    except (OSError, UnicodeDecodeError) as e:
        raise UsageError(f"could not read from STDIN ({e})")


def build_prompt(prompt: str, piped: str) -> str:
    if not piped:
        return prompt
    return prompt + "\n\n" + piped


def resolve_api_key(environ: Mapping[str, str]) -> str:
    key = (environ.get(API_KEY_ENV) or "").strip()
    if not key:
        raise ConfigError(f"{API_KEY_ENV} environment variable not set")
    return key
