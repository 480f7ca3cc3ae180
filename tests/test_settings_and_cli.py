import json

import pytest
from pydantic import ValidationError
from typer.testing import CliRunner

from fitapi.cli import app
from fitapi.settings import FitapiSettings

runner = CliRunner()


def test_settings_defaults():
    s = FitapiSettings.from_env({})
    assert s.api_version == "1"
    assert s.base_url == "https://api.fitbit.com"
    assert s.timeout == 30.0
    assert s.default_response_format == "xml"


def test_settings_from_env():
    s = FitapiSettings.from_env(
        {
            "FITAPI_API_VERSION": "2",
            "FITAPI_TIMEOUT": "2.5",
            "FITAPI_RESPONSE_FORMAT": "JSON",
            "FITAPI_BASE_URL": " ",
        }
    )
    assert s.api_version == "2"
    assert s.timeout == 2.5
    assert s.default_response_format == "json"
    assert s.base_url == "https://api.fitbit.com"


def test_settings_reject_bad_values():
    with pytest.raises(ValidationError):
        FitapiSettings.from_env({"FITAPI_TIMEOUT": "-1"})
    with pytest.raises(ValidationError):
        FitapiSettings.from_env({"FITAPI_RESPONSE_FORMAT": "yaml"})


def test_cli_ping():
    result = runner.invoke(app, ["ping"])
    assert result.exit_code == 0
    assert "pong" in result.output


def test_cli_compile_json(monkeypatch):
    monkeypatch.delenv("FITAPI_API_VERSION", raising=False)
    monkeypatch.delenv("FITAPI_RESPONSE_FORMAT", raising=False)
    result = runner.invoke(
        app, ["compile", "api-search-foods", "-p", "query=apple", "--format", "json"]
    )
    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["verb"] == "GET"
    assert payload["query"] == "query=apple"
    assert payload["path"] == "/1/foods/search.xml?query=apple"


def test_cli_compile_failure_exits_non_zero():
    result = runner.invoke(
        app,
        ["compile", "api-log-water", "-p", "date=2024-01-01", "--token", "t", "--secret", "s", "--format", "json"],
    )
    assert result.exit_code == 1
    payload = json.loads(result.output)
    assert payload["error"] == "missing_required_parameters"


def test_cli_compile_rejects_malformed_param():
    result = runner.invoke(app, ["compile", "api-search-foods", "-p", "query"])
    assert result.exit_code != 0


def test_cli_methods_list_filters():
    result = runner.invoke(app, ["methods", "list", "--verb", "delete", "--format", "json"])
    assert result.exit_code == 0
    rows = json.loads(result.output)
    assert rows
    assert {r["http_method"] for r in rows} == {"DELETE"}


def test_cli_methods_show():
    result = runner.invoke(app, ["methods", "show", "api-log-water"])
    assert result.exit_code == 0
    assert "Verb: POST" in result.output
    assert "Required(amount, date)" in result.output

    result = runner.invoke(app, ["methods", "show", "api-nope"])
    assert result.exit_code == 1
