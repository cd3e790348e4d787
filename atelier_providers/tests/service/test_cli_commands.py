from __future__ import annotations

import base64
import json

import httpx
import pytest
import respx

from atelier_providers.service import cli
from atelier_providers.service.cli import main
from atelier_providers.service.cli.cli_actions import build_chat_messages
from atelier_providers.service.cli.cli_parser import build_parser

CHAT_URL = "https://api.test/v1/chat/completions"


@pytest.fixture()
def openai_env(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-cli")
    monkeypatch.setenv("OPENAI_BASE_URL", "https://api.test/v1")


def test_parser_stream_flags():
    parser = build_parser()
    args = parser.parse_args(["chat", "--provider", "openai", "--prompt", "hi"])
    assert args.stream is None
    assert parser.parse_args(["chat", "--provider", "openai", "--prompt", "hi", "--stream"]).stream is True
    assert parser.parse_args(["chat", "--provider", "openai", "--prompt", "hi", "--no-stream"]).stream is False
    assert parser.parse_args(["chat", "--provider", "openai", "--prompt", "hi", "--stream", "off"]).stream is False
    with pytest.raises(SystemExit):
        parser.parse_args(["chat", "--provider", "openai", "--prompt", "hi", "--stream", "--no-stream"])
    with pytest.raises(SystemExit):
        parser.parse_args(["chat", "--provider", "openai", "--prompt", "hi", "--no-stream", "--stream", "on"])


def test_parser_models_and_draw():
    parser = build_parser()
    args = parser.parse_args(["models", "--provider", "gemini", "--image-only", "--search", "flash"])
    assert (args.cmd, args.image_only, args.search) == ("models", True, "flash")
    draw = parser.parse_args(["draw", "--provider", "gemini", "--prompt", "cat", "--out", "imgs"])
    assert draw.out == "imgs"


def test_build_chat_messages():
    messages = build_chat_messages("hi", "rules")
    assert [m.role for m in messages] == ["system", "user"]
    assert [m.role for m in build_chat_messages("hi")] == ["user"]


def test_no_command_prints_help(capsys):
    assert main([]) == 1
    assert "usage" in capsys.readouterr().out


@respx.mock
def test_chat_non_stream(openai_env, capsys):
    route = respx.post(CHAT_URL).mock(
        return_value=httpx.Response(200, json={"choices": [{"message": {"content": "pong"}}]})
    )
    code = main(["chat", "--provider", "openai", "--prompt", "ping", "--no-stream", "--max-tokens", "5"])
    assert code == 0
    assert capsys.readouterr().out == "pong\n"
    assert json.loads(route.calls.last.request.content)["max_tokens"] == 5
    assert route.calls.last.request.headers["Authorization"] == "Bearer sk-cli"


@respx.mock
def test_chat_stream(openai_env, capsys):
    frames = [json.dumps({"choices": [{"delta": {"content": t}}]}) for t in ("po", "ng")] + ["[DONE]"]
    respx.post(CHAT_URL).mock(
        return_value=httpx.Response(200, content="".join(f"data: {f}\n\n" for f in frames).encode())
    )
    assert main(["chat", "--provider", "openai", "--prompt", "ping"]) == 0
    assert capsys.readouterr().out == "pong\n"


def test_ctrl_c_exits_130(monkeypatch):
    async def interrupted(args):
        raise KeyboardInterrupt

    monkeypatch.setitem(cli._HANDLERS, "chat", interrupted)
    assert main(["chat", "--provider", "openai", "--prompt", "ping"]) == 130


@respx.mock
def test_chat_provider_error_exits_2(openai_env, capsys):
    respx.post(CHAT_URL).mock(return_value=httpx.Response(401, json={"error": {"message": "bad key"}}))
    assert main(["chat", "--provider", "openai", "--prompt", "ping", "--no-stream"]) == 2
    err = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
    assert err["code"] == "auth"
    assert err["provider"] == "openai"


def test_chat_missing_key_is_config_error(capsys):
    assert main(["chat", "--provider", "openai", "--prompt", "ping", "--no-stream"]) == 2
    assert json.loads(capsys.readouterr().err.strip().splitlines()[-1])["code"] == "config"


@respx.mock
def test_models_command_filters(openai_env, capsys):
    respx.get("https://api.test/v1/models").mock(
        return_value=httpx.Response(200, json={"data": [{"id": "gpt-4o"}, {"id": "gpt-image-1"}, {"id": "dall-e-3"}]})
    )
    assert main(["models", "--provider", "openai", "--image-only"]) == 0
    assert capsys.readouterr().out.split() == ["gpt-image-1"]


@respx.mock
def test_draw_writes_images(monkeypatch, tmp_path, capsys):
    monkeypatch.setenv("GEMINI_API_KEY", "g-key")
    monkeypatch.setenv("GEMINI_BASE_URL", "https://gemini.test")
    payload = base64.b64encode(b"PNGDATA").decode("ascii")
    respx.post("https://gemini.test/v1beta/models/gemini-2.5-flash-image-preview:generateContent").mock(
        return_value=httpx.Response(
            200,
            json={
                "candidates": [
                    {"content": {"parts": [{"text": "A cat."}, {"inlineData": {"mimeType": "image/png", "data": payload}}]}}
                ]
            },
        )
    )
    assert main(["draw", "--provider", "gemini", "--prompt", "cat", "--out", str(tmp_path)]) == 0
    written = list(tmp_path.glob("*.png"))
    assert len(written) == 1
    assert written[0].read_bytes() == b"PNGDATA"
    assert "A cat." in capsys.readouterr().out
