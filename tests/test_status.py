import pytest

from wpconverge.wordpress.status import (
    BASIS_DEFAULT,
    BASIS_HEURISTIC,
    BASIS_STATUS_LINE,
    is_plugin_active,
    is_theme_active,
    read_plugin_status,
)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Status: active\n", True),
        ("Status: inactive\n", False),
        ("hello-dolly (active)\n", True),
        ("akismet [active]\n", True),
        ("hello-dolly (inactive)\n", False),
        ("akismet inactive\n", False),
        ("akismet active.\n", True),
        ("plugin foobar active,\n", True),
        ("nothing useful here\n", False),
        ("", False),
    ],
)
def test_plugin_status_table(text, expected):
    assert is_plugin_active(text) is expected


def test_status_line_short_circuits_heuristics():
    text = "Plugin akismet details:\n    Name: Akismet\n    Status: Inactive\n    akismet (active)\n"
    reading = read_plugin_status(text, "akismet")
    assert reading.active is False
    assert reading.basis == BASIS_STATUS_LINE


def test_status_value_must_match_exactly():
    assert is_plugin_active("Status: Active (network)\n") is False
    assert is_plugin_active("  STATUS:   Active  \n") is True


def test_wp_cli_plugin_status_details_output():
    text = (
        "Plugin akismet details:\n"
        "    Name: Akismet Anti-spam: Spam Protection\n"
        "    Status: Active\n"
        "    Version: 5.3\n"
        "    Author: Automattic\n"
    )
    assert is_plugin_active(text, "akismet") is True


def test_heuristic_only_considers_lines_mentioning_slug():
    reading = read_plugin_status("hello-dolly (active)\n", "akismet")
    assert reading.active is False
    assert reading.basis == BASIS_DEFAULT

    reading = read_plugin_status("other line\nakismet (active)\n", "akismet")
    assert reading.active is True
    assert reading.basis == BASIS_HEURISTIC


def test_heuristic_lines_mentioning_plugin_count_for_any_slug():
    assert is_plugin_active("The plugin is [active]\n", "akismet") is True
    assert is_plugin_active("plugin inactive\n", "akismet") is False


def test_inactive_is_not_mistaken_for_active():
    assert is_plugin_active("akismet: inactive, see docs.\n") is False


def test_ansi_codes_are_ignored():
    assert is_plugin_active("\x1b[32mStatus: Active\x1b[0m\n") is True
    assert is_theme_active("\x1b[1mStatus:\x1b[0m Active\n") is True


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Theme twentytwentyfour details:\n     Name: Twenty Twenty-Four\n     Status: Active\n", True),
        ("Theme twentytwentythree details:\n     Status: Inactive\n", False),
        ("Name: Active Theme\n", False),
        ("status: active\n", True),
        ("", False),
    ],
)
def test_theme_status(text, expected):
    assert is_theme_active(text) is expected


def test_theme_parser_ignores_plugin_style_markers():
    assert is_theme_active("twentytwentyfour (active)\n") is False
