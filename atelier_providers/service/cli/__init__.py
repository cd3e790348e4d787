"""Command-line entry point: ``python -m atelier_providers.service.cli``."""
from __future__ import annotations

import asyncio
from typing import Optional, Sequence

from .cli_actions import handle_chat, handle_draw, handle_models
from .cli_parser import build_parser

_HANDLERS = {
    "chat": handle_chat,
    "models": handle_models,
    "draw": handle_draw,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    handler = _HANDLERS.get(args.cmd)
    if handler is None:
        parser.print_help()
        return 1
    try:
        return asyncio.run(handler(args))
    except KeyboardInterrupt:
        return 130


__all__ = ["main"]
