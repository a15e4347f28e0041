"""Shared fixtures."""
from typing import Any, Dict

import pytest

from code_reasoning.config import ReasoningConfig
from code_reasoning.core import ReasoningEngine
from code_reasoning.utils import ProtocolSafeStdout, setup_logging

setup_logging("debug")


def make_thought(**overrides: Any) -> Dict[str, Any]:
    """Build a valid inbound payload, overriding any field."""
    payload = {
        "thought": "Investigate the failing test.",
        "thought_number": 1,
        "total_thoughts": 3,
        "next_thought_needed": True,
    }
    payload.update(overrides)
    return {key: value for key, value in payload.items() if value is not ...}


@pytest.fixture
def config() -> ReasoningConfig:
    return ReasoningConfig(max_thought_length=200, max_thoughts=10, timeout_ms=30000)


@pytest.fixture
def engine(config: ReasoningConfig) -> ReasoningEngine:
    return ReasoningEngine(config)


@pytest.fixture(autouse=True)
def release_stdout_guard():
    """Never leak an installed guard into the next test."""
    yield
    guard = ProtocolSafeStdout.active()
    if guard is not None:
        guard.uninstall()
