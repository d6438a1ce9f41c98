"""Computer opponent for Chinchón."""

from . import policy
from .policy import Difficulty, OpponentPolicy

__all__ = [
    "Difficulty",
    "OpponentPolicy",
    "policy",
]
