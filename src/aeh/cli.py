"""aeh command line entry point.

Usage examples:
  aeh "what is the capital of France"
  aeh -m gpt-4 -t 0.2 "explain this error" < build.log
  git diff | aeh "write a commit message for this diff"

Only the answer goes to stdout. Everything else (rate limits, token usage,
errors, the spinner) goes to stderr.
"""
from __future__ import annotations

import os
import sys
from typing import List, Optional

from . import config, history, intake
from .client import ChatClient
from .errors import AehError, OutputError, UsageError
from .logging_util import configure, get_logger, resolve_mode
from .signals import interrupts_raise
from .spinner import Spinner

logger = get_logger(__name__)


def run(argv: Optional[List[str]] = None) -> None:
    environ = os.environ

    cfg_dir = config.config_dir(environ)
    cfg_file = cfg_dir / config.CONFIG_FILE_NAME
    history_file = cfg_dir / config.HISTORY_FILE_NAME

    config.ensure_config_dir(cfg_dir)
    config.ensure_exists(cfg_file)
    cfg = config.load(cfg_file)

    try:
        inv = intake.parse_args(argv, cfg)
    except UsageError:
        logger.error("%s", intake.build_parser(cfg).format_usage().rstrip())
        raise

    prompt = intake.build_prompt(inv.prompt, intake.read_piped_input(sys.stdin))
    api_key = intake.resolve_api_key(environ)

    client = ChatClient(spinner=Spinner.from_env(environ, sys.stderr))
    completion = client.complete(inv.model, api_key, prompt, inv.temperature)

    try:
        print(completion.text, flush=True)
    except BrokenPipeError:
        # keep the interpreter's final flush of stdout from failing again
        try:
            fd = sys.stdout.fileno()
            os.dup2(os.open(os.devnull, os.O_WRONLY), fd)
        except (OSError, ValueError):
            pass
        raise OutputError("stdout was closed before the answer was written")

    config.ensure_config_dir(cfg_dir)
    history.append(history_file, prompt, completion.text)


def main(argv: Optional[List[str]] = None) -> int:
    configure(resolve_mode(os.environ, sys.stderr.isatty()), sys.stderr)
    try:
        with interrupts_raise():
            run(argv)
    except AehError as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
