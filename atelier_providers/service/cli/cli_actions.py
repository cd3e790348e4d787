"""CLI subcommand handlers.

Purpose
-------
Thin presentation layer over the provider contract. Each ``handle_*``
coroutine takes the parsed ``argparse.Namespace`` and returns a process exit
code. This module has no top-level side effects and is safe to import in tests.

External Dependencies
---------------------
- Provider adapters perform HTTP through ``httpx``; configuration is read via
  :func:`load_provider_config` (defaults, YAML/JSON file, environment, .env).

Timeout Strategy
----------------
- No timeouts are set here; adapters derive per-request timeouts from
  ``get_timeout_config()`` and the model id.

Fallback & Error Semantics
--------------------------
- ``ProviderError`` is reported as a JSON object on stderr and exit code 2.
- Unknown provider/api types exit with code 1.
- Ctrl-C cancels the running handler task; the in-flight request is abandoned
  and :func:`main` exits with code 130.
"""

from __future__ import annotations

import argparse
import base64
import json
import sys
from pathlib import Path
from typing import Any, Dict

from ...base.cancellation import CancellationToken, CancelledError
from ...base.errors import ProviderError
from ...base.factory import ProviderFactory, UnknownProviderError, create_drawing_service
from ...base.logging import LogContext, get_logger, normalized_log_event
from ...base.model_listing import filter_models, list_models
from ...base.models import APICallParams, ChatMessage, DrawingMessage, ImageGenerationConfig
from ...config import load_provider_config

_logger = get_logger("cli")

_MIME_SUFFIX = {"image/png": ".png", "image/jpeg": ".jpg", "image/webp": ".webp", "image/gif": ".gif"}


def _emit_error(exc: ProviderError) -> int:
    payload: Dict[str, Any] = {
        "error": exc.message,
        "code": exc.code.value,
        "provider": exc.provider,
    }
    if exc.model:
        payload["model"] = exc.model
    print(json.dumps(payload), file=sys.stderr)
    return 2


def build_chat_messages(prompt: str, system: str = "") -> list:
    """Neutral message list for a one-shot prompt with an optional system prompt."""
    messages = []
    if system and system.strip():
        messages.append(ChatMessage(role="system", content=system))
    messages.append(ChatMessage(role="user", content=prompt))
    return messages


async def handle_chat(args: argparse.Namespace) -> int:
    """Send ``--prompt`` and write the reply to stdout.

    Streaming mode (the default) writes each delta as it arrives and ends with
    a newline.
    """
    stream = args.stream is not False
    config = load_provider_config(args.provider)
    try:
        provider = ProviderFactory.create(config, args.model)
    except UnknownProviderError as exc:
        print(json.dumps({"error": str(exc)}), file=sys.stderr)
        return 1
    params = APICallParams(temperature=args.temperature, max_tokens=args.max_tokens)
    messages = build_chat_messages(args.prompt, args.system)
    token = CancellationToken()
    ctx = LogContext(provider=provider.provider_name, model=provider.model_id)
    normalized_log_event(_logger, "cli.chat", ctx, phase="start", emitted=False, stream=stream)
    try:
        if stream:
            async for chunk in provider.stream_chat(messages, params, cancel_token=token):
                sys.stdout.write(chunk.content)
                sys.stdout.flush()
            sys.stdout.write("\n")
        else:
            result = await provider.call_api(messages, False, params, cancel_token=token)
            print(result.content)
    except CancelledError:
        return 130
    except ProviderError as exc:
        return _emit_error(exc)
    normalized_log_event(_logger, "cli.chat", ctx, phase="finalize", emitted=True)
    return 0


async def handle_models(args: argparse.Namespace) -> int:
    """Print one model id per line after optional image/keyword filtering."""
    config = load_provider_config(args.provider)
    try:
        ids = await list_models(config)
    except ProviderError as exc:
        return _emit_error(exc)
    for model_id in filter_models(ids, image_only=args.image_only, keyword=args.search):
        print(model_id)
    return 0


async def handle_draw(args: argparse.Namespace) -> int:
    """Generate images for ``--prompt`` and write them under ``--out``."""
    config = load_provider_config(args.provider)
    service = create_drawing_service(config, args.model)
    gen_config = ImageGenerationConfig()
    try:
        response = await service.generate_content(
            service.model_id, [DrawingMessage.user_text(args.prompt)], gen_config
        )
    except ProviderError as exc:
        return _emit_error(exc)
    if service.is_blocked(response):
        print(json.dumps({"error": service.get_block_reason(response)}), file=sys.stderr)
        return 2
    out_dir = Path(args.out)
    out_dir.mkdir(parents=True, exist_ok=True)
    images = service.extract_images(response, args.prompt, gen_config)
    for image in images:
        path = out_dir / f"{image.id}{_MIME_SUFFIX.get(image.mime_type, '.bin')}"
        path.write_bytes(base64.b64decode(image.image_data))
        print(path)
    text = service.extract_text(response)
    if text:
        print(text)
    return 0


__all__ = ["build_chat_messages", "handle_chat", "handle_draw", "handle_models"]
