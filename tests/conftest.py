"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Callable

import pytest


@pytest.fixture
def output_runner() -> Callable[[str], Callable[[str], str]]:
    """Build a command runner that returns canned stdout instead of running anything."""

    def make(stdout: str) -> Callable[[str], str]:
        return lambda command: stdout

    return make


@pytest.fixture
def recording_runner() -> Callable[[str], tuple[Callable[[str], str], list[str]]]:
    """Like output_runner, but also records the commands it was asked to run."""

    def make(stdout: str) -> tuple[Callable[[str], str], list[str]]:
        calls: list[str] = []

        def run(command: str) -> str:
            calls.append(command)
            return stdout

        return run, calls

    return make
