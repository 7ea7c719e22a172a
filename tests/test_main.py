import json

import pytest

from wpconverge.wordpress import __main__ as cli_main
from wpconverge.wordpress.provider import Provider


@pytest.fixture
def run(monkeypatch, runner, sleeps):
    monkeypatch.setattr(cli_main, "init_logging", lambda run_id=None: "test")
    monkeypatch.setattr(
        cli_main,
        "Provider",
        lambda profile: Provider(profile, runner=runner, sleep=sleeps.append),
    )
    return cli_main.main


def test_read_plugin_prints_state(run, runner, capsys):
    runner.ok("plugin status akismet", "Status: Active\n")

    code = run(["read", "plugin", "akismet", "--ssh=user@host", "--path=/srv/wp"])

    out = capsys.readouterr().out.splitlines()
    assert code == 0
    assert json.loads(out[0]) == {"name": "akismet", "active": True}
    assert out[1].startswith("PASS: read plugin akismet")
    assert runner.calls[0][1][:2] == ["--ssh=user@host", "--path=/srv/wp"]


def test_apply_creates_missing_plugin(run, runner, capsys):
    runner.on("plugin is-installed hello", (False, ""), (True, ""))
    runner.ok("plugin status hello", "Status: Inactive\n")

    code = run(["apply", "plugin", "hello", "active=false"])

    assert code == 0
    assert "plugin install hello" in runner.commands


def test_apply_updates_existing_option(run, runner, capsys):
    runner.ok("option get blogname", "Old\n")

    code = run(["apply", "option", "blogname", "value=New"])

    assert code == 0
    assert runner.commands[-1] == "option update blogname New"


def test_error_exit_code(run, runner, capsys):
    runner.fail("plugin delete", "Error: nope")

    code = run(["delete", "plugin", "akismet"])

    assert code == 1
    assert "FAIL: delete plugin akismet" in capsys.readouterr().out


def test_user_password_is_masked_in_output(run, runner, capsys):
    runner.fail("user get", "")

    code = run(["apply", "user", "alice", "email=a@example.com", "password=pw", "role=editor"])

    out = capsys.readouterr().out.splitlines()
    assert code == 0
    assert json.loads(out[0])["password"] == "***"


@pytest.mark.parametrize(
    "argv",
    [
        [],
        ["read"],
        ["read", "widget", "x"],
        ["read", "plugin"],
        ["apply", "plugin", "akismet", "active"],
        ["apply", "plugin", "akismet", "colour=red"],
        ["--bogus", "read", "plugin", "akismet"],
    ],
)
def test_usage_errors(run, capsys, argv):
    assert run(argv) == 1
    assert "FAIL:" in capsys.readouterr().out
