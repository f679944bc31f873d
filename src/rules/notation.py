"""
Algebraic notation of moves
---

Examples:
* "e4": pawn moves to e4
* "Nbd2": the knight on the b-file moves to d2
* "exd5": the pawn on the e-file takes on d5
* "e8=Q+": pawn promotes to a queen on e8, giving check
* "O-O" / "O-O-O": castling short / long
* "1-0", "0-1", "1/2-1/2": white wins / black wins / draw (resignation or agreement)

Notation values are closed sum types (frozen dataclasses joined in a union). Consumers use `match` on them.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from src.rules.castling import CastlingSide
from src.rules.pieces import SAN_TO_PIECE, Color, PieceType
from src.rules.square import Square, file_from_name, file_name


class Punctuation(Enum):
    CHECK = "+"
    CHECKMATE = "#"


@dataclass(frozen=True)
class Castle:
    side: CastlingSide


@dataclass(frozen=True)
class Translation:
    """
    A (non-castling) move of a single piece from an origin to a target square.

    Origin file/rank are only filled in as far as the notation supplied them (disambiguation).
    """

    origin_file: Optional[int]
    origin_rank: Optional[int]
    piece_type: PieceType
    is_capture: bool
    promote_to: Optional[PieceType]
    target: Square


Play = Castle | Translation


@dataclass(frozen=True)
class PlayNotation:
    play: Play
    punctuation: Optional[Punctuation] = None


@dataclass(frozen=True)
class End:
    """Resignation (victor is the remaining player) or draw by agreement (no victor)."""

    victor: Optional[Color]


Notation = End | PlayNotation


END_TOKENS: dict[str, Optional[Color]] = {
    "1-0": Color.WHITE,
    "0-1": Color.BLACK,
    "1/2-1/2": None,
}

CAPTURE = "x"
PROMOTION = "="

TRANSLATION_PATTERN = re.compile(
    r"(?P<figure>[KQRBN])?"
    r"(?P<file>[a-h])?"
    r"(?P<rank>[1-8])?"
    r"(?P<capture>x)?"
    r"(?P<target>[a-h][1-8])"
    r"(?:=(?P<promotion>[QRBN]))?"
)


# --- PARSING ---
def parse_notation(text: str) -> Optional[Notation]:
    """
    Parse a single move. Returns None if the string matches neither grammar.

    1. The whole-string end tokens (1-0, 0-1, 1/2-1/2)
    2. Strip a single trailing '+' or '#' (captured as punctuation)
    3. Castling tokens, or a translation: [figure][file][rank][x]<target>[=promotion]
    """
    if text in END_TOKENS:
        return End(END_TOKENS[text])

    punctuation: Optional[Punctuation] = None
    if text and text[-1] in {p.value for p in Punctuation}:
        punctuation = Punctuation(text[-1])
        text = text[:-1]

    play = parse_play(text)
    if play is None:
        return None
    return PlayNotation(play, punctuation)


def parse_play(text: str) -> Optional[Play]:
    for side in CastlingSide:
        if text == side.value:
            return Castle(side)

    match = TRANSLATION_PATTERN.fullmatch(text)
    if match is None:
        return None

    figure = match["figure"]
    piece_type = SAN_TO_PIECE[figure] if figure else PieceType.PAWN
    origin_file = file_from_name(match["file"]) if match["file"] else None
    origin_rank = int(match["rank"]) if match["rank"] else None
    promotion = match["promotion"]
    return Translation(
        origin_file=origin_file,
        origin_rank=origin_rank,
        piece_type=piece_type,
        is_capture=match["capture"] is not None,
        promote_to=SAN_TO_PIECE[promotion] if promotion else None,
        target=Square.from_algebraic(match["target"]),
    )


# --- FORMATTING ---
def format_notation(notation: Notation) -> str:
    """Exact inverse of `parse_notation`"""
    match notation:
        case End(victor=victor):
            return next(token for token, v in END_TOKENS.items() if v == victor)
        case PlayNotation(play=play, punctuation=punctuation):
            suffix = punctuation.value if punctuation else ""
            return f"{format_play(play)}{suffix}"


def format_play(play: Play) -> str:
    match play:
        case Castle(side=side):
            return side.value
        case Translation() as translation:
            disambiguation = (
                f"{file_name(translation.origin_file) if translation.origin_file else ''}"
                f"{translation.origin_rank or ''}"
            )
            capture = CAPTURE if translation.is_capture else ""
            promotion = (
                f"{PROMOTION}{translation.promote_to.san}"
                if translation.promote_to
                else ""
            )
            return f"{translation.piece_type.san}{disambiguation}{capture}{translation.target.to_algebraic()}{promotion}"


# --- MATCHING ---
def matches(parsed: Play, candidate: Play) -> bool:
    """
    Loose matching of what the player wrote (parsed) against a fully specified candidate move.

    Absent disambiguation (origin file/rank) in the parsed play matches any value. Everything else must be equal,
    including the promotion piece: promoting needs to be spelled out, and a promotion cannot be added to a regular move.
    """
    match parsed, candidate:
        case Castle(), Castle():
            return parsed == candidate
        case Translation(), Translation():
            if parsed.origin_file is not None and parsed.origin_file != candidate.origin_file:
                return False
            if parsed.origin_rank is not None and parsed.origin_rank != candidate.origin_rank:
                return False
            return (
                parsed.piece_type == candidate.piece_type
                and parsed.is_capture == candidate.is_capture
                and parsed.promote_to == candidate.promote_to
                and parsed.target == candidate.target
            )
        case _:
            return False


def is_pawn_move_or_capture(notation: Notation) -> bool:
    """Resets the count for the fifty-move rule"""
    match notation:
        case PlayNotation(play=Translation(piece_type=piece_type, is_capture=is_capture)):
            return piece_type == PieceType.PAWN or is_capture
        case _:
            return False
