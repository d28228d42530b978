"""Shared test fixtures for UXRay."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

import pytest

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


def _component_source(markup: str) -> str:
    return (
        "import React from 'react';\n"
        "\n"
        "export function Component() {\n"
        "  return (\n"
        f"    {markup}\n"
        "  );\n"
        "}\n"
    )


@pytest.fixture()
def component() -> Callable[[str], str]:
    """Wrap a single JSX root in a minimal React component module."""
    return _component_source


@pytest.fixture()
def write_component(tmp_path: Path) -> Callable[..., Path]:
    """Write a component file with the given JSX root and return its path."""

    def _write(markup: str, name: str = "Component.tsx") -> Path:
        path = tmp_path / name
        path.write_text(_component_source(markup), encoding="utf-8")
        return path

    return _write


@pytest.fixture(autouse=True)
def _reset_uxray_logger() -> Iterator[None]:
    """Undo the handler the CLI installs so caplog sees library records again."""
    yield
    logger = logging.getLogger("uxray")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
