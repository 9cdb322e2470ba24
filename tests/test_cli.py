"""CLI command tests."""

import json

import pytest
from click.testing import CliRunner
from rich.console import Console

from modelgate import __version__
from modelgate.cli import cli as cli_module

pytestmark = pytest.mark.usefixtures("isolated_environ")


@pytest.fixture(autouse=True)
def wide_console(monkeypatch):
    """Render tables without wrapping long endpoint URLs."""
    monkeypatch.setattr(cli_module, "console", Console(width=200))


def _invoke(args, **env):
    runner = CliRunner()
    return runner.invoke(cli_module.cli, args, env=env)


def test_resolve_json_output():
    result = _invoke(["resolve", "--json"], OPENAI_API_KEY="sk-server", AI_MODEL="o3-mini")
    assert result.exit_code == 0, result.output
    summary = json.loads(result.output)
    assert summary["provider"] == "openai"
    assert summary["model_id"] == "o3-mini"
    assert summary["api"] == "responses"
    assert summary["provider_options"] == {"openai": {"reasoning_summary": "detailed"}}
    assert "sk-server" not in result.output


def test_resolve_human_output_with_overrides():
    result = _invoke(
        [
            "resolve",
            "--provider",
            "anthropic",
            "--api-key",
            "sk-ant-client",
            "--model",
            "claude-sonnet-4-5",
        ]
    )
    assert result.exit_code == 0, result.output
    assert "Provider: anthropic" in result.output
    assert "claude-sonnet-4-5" in result.output
    assert "anthropic-beta" in result.output
    assert "sk-ant-client" not in result.output


def test_resolve_base_url_without_key_fails():
    result = _invoke(
        ["resolve", "--base-url", "https://attacker.example/v1", "--model", "gpt-4o"],
        OPENAI_API_KEY="sk-server",
    )
    assert result.exit_code == 1
    assert "API key is required" in result.output


def test_resolve_reports_ambiguous_configuration():
    result = _invoke(
        ["resolve"], OPENAI_API_KEY="sk", DEEPSEEK_API_KEY="ds", AI_MODEL="gpt-4o"
    )
    assert result.exit_code == 1
    assert "Multiple AI providers configured" in result.output


def test_resolve_reads_env_file(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("KIMI_API_KEY=kimi\nAI_MODEL=kimi-k2\n", encoding="utf-8")
    result = _invoke(["resolve", "--json", "--env-file", str(env_file)])
    assert result.exit_code == 0, result.output
    summary = json.loads(result.output)
    assert summary["provider"] == "kimi"
    assert summary["path"] == "openai_compatible"


def test_providers_lists_catalog_and_detection():
    result = _invoke(["providers"], DEEPSEEK_API_KEY="ds")
    assert result.exit_code == 0, result.output
    for name in ("bedrock", "openai", "anthropic", "deepseek", "kimi"):
        assert name in result.output
    assert "Auto-detected: deepseek" in result.output


def test_providers_reports_explicit_selection():
    result = _invoke(["providers"], AI_PROVIDER="ollama")
    assert result.exit_code == 0, result.output
    assert "AI_PROVIDER: ollama" in result.output


def test_providers_reports_detection_failure():
    result = _invoke(["providers"])
    assert result.exit_code == 0, result.output
    assert "No AI provider configured" in result.output


@pytest.mark.parametrize(
    "model_id,label",
    [("claude-sonnet-4-5", "supported"), ("gpt-4o", "not supported")],
)
def test_caching_command(model_id, label):
    result = _invoke(["caching", model_id])
    assert result.exit_code == 0
    assert f"Prompt caching for {model_id}: {label}" in result.output


def test_version_command():
    result = _invoke(["version"])
    assert result.exit_code == 0
    assert f"modelgate version {__version__}" in result.output
