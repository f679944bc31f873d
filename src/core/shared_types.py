"""
Type definitions used across layers
"""

from enum import StrEnum

# --- Color DOES NOT map one-to-one onto the domain Color in src/rules/pieces.py (which carries chess logic like the back rank).
# --- NOTE For now, just use the same name as that reads clearly and let the imports show which version is used in what part of the code


class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"


class Outcome(StrEnum):
    IN_PROGRESS = "in progress"
    CHECKMATE = "checkmate"
    RESIGNATION = "resignation"
    STALEMATE = "stalemate"
    DRAW_AGREEMENT = "draw by agreement"
    DRAW_FIFTY_MOVE_RULE = "draw by fifty-move rule"
