"""
Geometry/Base movement and capturing rules

Key idea: Use strategy pattern to define the paths each piece type travels along.

A path is a list of squares radiating outward from the piece in a single direction, ordered by increasing distance.
Whether a square on a path is actually reachable (obstructions, captures, en passant, castling) is decided by the Board.
"""

from typing import Callable

from src.rules.pieces import Piece, PieceType
from src.rules.square import Square, Vector

Path = list[Square]
PathsFn = Callable[[Piece, Square], list[Path]]

STRAIGHTS: list[Vector] = [(-1, 0), (0, -1), (0, 1), (1, 0)]
DIAGONALS: list[Vector] = [(-1, -1), (-1, 1), (1, -1), (1, 1)]
KNIGHT_DELTAS: list[Vector] = [
    (-2, -1),
    (-2, 1),
    (-1, -2),
    (-1, 2),
    (1, -2),
    (1, 2),
    (2, -1),
    (2, 1),
]


# --- PATH BUILDING BLOCKS ---
def raycast(square: Square, direction: Vector) -> Path:
    """
    Raycasting algorithm
    -----

    Walk along the direction until we fall off the board. Obstructions are NOT considered here:
    the Board cuts the ray off at the first occupied square.
    """
    path: Path = []
    target_square = square.offset(direction)
    while target_square is not None:
        path.append(target_square)
        target_square = target_square.offset(direction)
    return path


def sliding_paths(square: Square, directions: list[Vector]) -> list[Path]:
    """One path per direction, each extending to the edge of the board. Directions pointing straight off the board are dropped."""
    return [path for path in (raycast(square, d) for d in directions) if path]


def single_step_paths(square: Square, deltas: list[Vector]) -> list[Path]:
    """Raycasting is for sliding pieces. This is the equivalent for kings and knights that just move a single step along a direction"""
    paths: list[Path] = []
    for delta in deltas:
        target_square = square.offset(delta)
        if target_square is not None:
            paths.append([target_square])
    return paths


# --- MOVEMENT RULES ---
def pawn_move_paths(piece: Piece, square: Square) -> list[Path]:
    """
    A pawn:
    - moves by a single square forward.
    - It can move by two in their first move (so when on their starting rank)
    """
    one_step = square.offset(piece.forward)
    if one_step is None:
        return []
    path: Path = [one_step]
    if square.rank == piece.start_rank:
        two_steps = one_step.offset(piece.forward)
        if two_steps is not None:
            path.append(two_steps)
    return [path]


def pawn_capture_paths(piece: Piece, square: Square) -> list[Path]:
    """Pawns take diagonally (forward). The only piece whose capture geometry differs from its movement"""
    _, forward_rank = piece.forward
    return single_step_paths(square, [(-1, forward_rank), (1, forward_rank)])


def knight_paths(piece: Piece, square: Square) -> list[Path]:
    """Knights always move such that |delta_rank| + |delta_file| = 3"""
    return single_step_paths(square, KNIGHT_DELTAS)


def bishop_paths(piece: Piece, square: Square) -> list[Path]:
    """Bishops move diagonally: |delta_rank| = |delta_file|"""
    return sliding_paths(square, DIAGONALS)


def rook_paths(piece: Piece, square: Square) -> list[Path]:
    """Rooks move either horizontally or vertically"""
    return sliding_paths(square, STRAIGHTS)


def queen_paths(piece: Piece, square: Square) -> list[Path]:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return sliding_paths(square, STRAIGHTS + DIAGONALS)


def king_paths(piece: Piece, square: Square) -> list[Path]:
    """
    The king can move by a single square at the time.

    Castling is modelled as a special king move (handled by the Board).
    """
    return single_step_paths(square, STRAIGHTS + DIAGONALS)


# -- STRATEGY PATTERN: MOVEMENT RULES ---
MOVEMENT_RULES: dict[PieceType, PathsFn] = {
    PieceType.PAWN: pawn_move_paths,
    PieceType.KNIGHT: knight_paths,
    PieceType.BISHOP: bishop_paths,
    PieceType.ROOK: rook_paths,
    PieceType.QUEEN: queen_paths,
    PieceType.KING: king_paths,
}

# --- STRATEGY PATTERN: CAPTURING RULES ---
CAPTURE_RULES: dict[PieceType, PathsFn] = MOVEMENT_RULES | {
    PieceType.PAWN: pawn_capture_paths,
}


def move_paths(piece: Piece, square: Square) -> list[Path]:
    return MOVEMENT_RULES[piece.type](piece, square)


def capture_paths(piece: Piece, square: Square) -> list[Path]:
    return CAPTURE_RULES[piece.type](piece, square)
