"""Shared fixtures: a scripted wp-cli runner and a recording sleep."""

from __future__ import annotations

import pytest

from wpconverge.wordpress.cli import ConnectionProfile, WPCli


class FakeRunner:
    """Stands in for wp-cli.

    Responses are registered per command fragment; a call matches the first
    rule whose fragment appears in the space-joined argv. Each rule replays its
    responses in order and keeps repeating the last one. Unmatched calls
    succeed with empty output.
    """

    def __init__(self):
        self.calls: list[tuple[str, list[str]]] = []
        self._rules: list[tuple[str, list[tuple[bool, str]]]] = []

    def on(self, fragment: str, *responses: tuple[bool, str]) -> "FakeRunner":
        self._rules.append((fragment, list(responses)))
        return self

    def ok(self, fragment: str, output: str = "") -> "FakeRunner":
        return self.on(fragment, (True, output))

    def fail(self, fragment: str, output: str = "Error: failed") -> "FakeRunner":
        return self.on(fragment, (False, output))

    def execute(self, tool, argv):
        argv = list(argv)
        self.calls.append((tool, argv))
        joined = " ".join(argv)
        for fragment, responses in self._rules:
            if fragment not in joined:
                continue
            if len(responses) > 1:
                return responses.pop(0)
            return responses[0]
        return True, ""

    @property
    def commands(self) -> list[str]:
        return [" ".join(argv) for _, argv in self.calls]

    def count(self, fragment: str) -> int:
        return sum(1 for c in self.commands if fragment in c)


@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def cli(runner, sleeps):
    return WPCli(ConnectionProfile(), runner=runner, sleep=sleeps.append)
