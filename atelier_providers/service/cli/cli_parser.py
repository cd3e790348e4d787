"""Argument parser construction for the providers CLI.

Kept separate from the action handlers so tests can build and inspect the
parser without importing any adapter.
"""
from __future__ import annotations

import argparse


def _str2bool(value: str) -> bool:
    """Parse common truthy/falsey strings for optional boolean flags."""
    v = str(value).strip().lower()
    if v in {"1", "true", "yes", "y", "on"}:
        return True
    if v in {"0", "false", "no", "n", "off"}:
        return False
    raise argparse.ArgumentTypeError(f"invalid boolean value: {value!r}")


def add_stream_flags(parser: argparse.ArgumentParser) -> None:
    """Attach the mutually exclusive ``--stream`` / ``--no-stream`` flags.

    ``args.stream`` is ``None`` when neither flag is given; callers treat that
    as streaming. A non-``None`` default would hide ``--stream`` from the
    exclusivity check.
    """
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--stream",
        nargs="?",
        const=True,
        default=None,
        type=_str2bool,
        help="stream the reply as it arrives (default: on)",
    )
    group.add_argument("--no-stream", dest="stream", action="store_false", help="wait for the full reply")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="atelier-providers",
        description="Talk to OpenAI-compatible and Gemini models through the unified provider layer.",
    )
    sub = p.add_subparsers(dest="cmd")

    chat = sub.add_parser("chat", help="send one prompt and print the reply")
    chat.add_argument("--provider", required=True, help="configured provider name (openai, openrouter, gemini)")
    chat.add_argument("--model", default=None, help="model id (defaults to the provider's configured model)")
    chat.add_argument("--prompt", required=True, help="user message text")
    chat.add_argument("--system", default="", help="optional system prompt")
    chat.add_argument("--temperature", type=float, default=None)
    chat.add_argument("--max-tokens", dest="max_tokens", type=int, default=None)
    add_stream_flags(chat)

    models = sub.add_parser("models", help="list the models a provider exposes")
    models.add_argument("--provider", required=True)
    models.add_argument("--image-only", dest="image_only", action="store_true", help="only image generation models")
    models.add_argument("--search", default="", help="case-insensitive substring filter")

    draw = sub.add_parser("draw", help="generate an image and write it to disk")
    draw.add_argument("--provider", required=True)
    draw.add_argument("--model", default=None)
    draw.add_argument("--prompt", required=True)
    draw.add_argument("--out", default=".", help="directory for generated images")
    return p


__all__ = ["add_stream_flags", "build_parser"]
