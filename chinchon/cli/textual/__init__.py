"""Textual front-end for Chinchón."""

from .app import ChinchonTextualApp, run_textual_app

__all__ = ["ChinchonTextualApp", "run_textual_app"]
