import pytest

from conftest import PNG_1X1, Reply
from drawthings import __version__
from drawthings.api.cli import main


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("DRAWTHINGS_BASE_URL", "DRAWTHINGS_TIMEOUT", "DRAWTHINGS_LOG_REQUEST_BODIES"):
        monkeypatch.delenv(name, raising=False)


def test_cli_generates_and_saves(server, png_b64, tmp_path, capsys):
    server.handler = lambda recorded: Reply.json({"images": [png_b64]})
    output = tmp_path / "cli" / "cat.png"

    code = main([
        "--prompt", "a cat",
        "--steps", "30",
        "--width", "768",
        "--height", "768",
        "--seed", "42",
        "--output", str(output),
        "--base-url", server.url,
    ])

    assert code == 0
    assert output.read_bytes() == PNG_1X1
    assert server.requests[0].json() == {
        "prompt": "a cat",
        "steps": 30,
        "guidance_scale": 4.0,
        "width": 768,
        "height": 768,
        "seed": 42,
    }
    out = capsys.readouterr().out
    assert "Generating image with prompt: 'a cat'" in out
    assert f"Image saved to: {output}" in out


def test_cli_uses_env_base_url(server, png_b64, tmp_path, monkeypatch):
    server.handler = lambda recorded: Reply.json({"images": [png_b64]})
    monkeypatch.setenv("DRAWTHINGS_BASE_URL", server.url)

    assert main(["--prompt", "env", "--output", str(tmp_path / "env.png")]) == 0
    assert len(server.requests) == 1


def test_cli_reports_api_error(server, tmp_path, capsys):
    server.handler = lambda recorded: Reply(status=500, body="boom")

    code = main(["--prompt", "x", "--output", str(tmp_path / "x.png"), "--base-url", server.url])

    assert code == 1
    assert "Error: failed to generate image: API error (status 500)" in capsys.readouterr().err
    assert not (tmp_path / "x.png").exists()


def test_cli_reports_validation_error(server, capsys):
    code = main(["--prompt", "x", "--steps", "500", "--base-url", server.url])

    assert code == 1
    assert "validation error for field 'steps'" in capsys.readouterr().err
    assert server.requests == []


def test_cli_requires_prompt(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main([])

    assert excinfo.value.code == 2
    assert "--prompt" in capsys.readouterr().err


def test_cli_rejects_empty_prompt():
    with pytest.raises(SystemExit) as excinfo:
        main(["--prompt", ""])

    assert excinfo.value.code == 2


def test_cli_rejects_bad_timeout(capsys):
    assert main(["--prompt", "x", "--timeout", "0"]) == 1
    assert "invalid configuration" in capsys.readouterr().err


def test_cli_version(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["--version"])

    assert excinfo.value.code == 0
    assert __version__ in capsys.readouterr().out
