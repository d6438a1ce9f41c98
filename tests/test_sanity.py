"""Sanity tests ensuring the scaffolding imports correctly."""

from __future__ import annotations

import importlib

import pytest


@pytest.mark.parametrize(
    "module_name",
    [
        "chinchon",
        "chinchon.cards",
        "chinchon.encoding",
        "chinchon.state",
        "chinchon.melds",
        "chinchon.analysis",
        "chinchon.ai.policy",
        "chinchon.cli.main",
    ],
)
def test_modules_import(module_name: str) -> None:
    """Ensure all foundational modules can be imported."""

    assert importlib.import_module(module_name)
