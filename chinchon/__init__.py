"""Top-level package for the Chinchón hand-analysis and rules engine."""

from . import actions, analysis, cards, encoding, game, melds, rules, scoring, state

__all__ = [
    "actions",
    "analysis",
    "cards",
    "encoding",
    "game",
    "melds",
    "rules",
    "scoring",
    "state",
]
