from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, List

import pytest

import dombridge.middleware as middleware_module
from dombridge.logging import reset_handlers
from tests._fixtures.project_builder import ProjectBuilder


class SettleRecorder:
    """Instant settle strategy that remembers which entries it waited for."""

    def __init__(self) -> None:
        self.calls: List[Path] = []

    async def __call__(self, path: Path) -> None:
        self.calls.append(path)


@pytest.fixture
def project_builder(tmp_path: Path) -> ProjectBuilder:
    """Provide a reusable project builder rooted at the pytest tmp_path."""
    return ProjectBuilder(tmp_path)


@pytest.fixture
def settle() -> SettleRecorder:
    return SettleRecorder()


@pytest.fixture(autouse=True)
def _reset_unstable_warning(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(middleware_module, "_unstable_warned", False)


@pytest.fixture(autouse=True)
def _restore_package_logger() -> Iterator[None]:
    logger = logging.getLogger("dombridge")
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield
    reset_handlers(logger)
    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = propagate
