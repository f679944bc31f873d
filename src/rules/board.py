"""
The Game board implements all rules that effect the `position` (in chess: the configuration of pieces on the board)

A Board is an immutable snapshot. Every mutation returns a new Board, so candidate positions used to test
"does this leave me in check?" are simply thrown away when they turn out to be illegal.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Callable, Iterable, Mapping, Optional, Self

from src.rules.castling import (
    ALL_CASTLING_RIGHTS,
    CASTLING_RULES,
    CastlingRight,
    CastlingSide,
    castling_side_for,
    is_castling_move,
)
from src.rules.moves import Path, capture_paths, move_paths
from src.rules.notation import Notation
from src.rules.pieces import Color, Piece, PieceType
from src.rules.square import BOARD_DIMENSIONS, Square

Mutation = Callable[["Board"], "Board"]

STARTING_FILES: dict[PieceType, list[int]] = {
    PieceType.ROOK: [1, 8],
    PieceType.KNIGHT: [2, 7],
    PieceType.BISHOP: [3, 6],
    PieceType.QUEEN: [4],
    PieceType.KING: [5],
    PieceType.PAWN: list(range(1, BOARD_DIMENSIONS[0] + 1)),
}


@dataclass(frozen=True)
class Board:
    position: Mapping[Square, Piece] = field(default_factory=dict)
    en_passant: Optional[Square] = None
    history: tuple[Notation, ...] = ()
    castling_rights: frozenset[CastlingRight] = ALL_CASTLING_RIGHTS

    def __post_init__(self) -> None:
        # Read-only view on a private copy: no two boards share their position
        object.__setattr__(self, "position", MappingProxyType(dict(self.position)))

    # --- CONSTRUCTION ---
    @classmethod
    def starting_position(cls) -> Self:
        """The conventional setup: every piece on its starting rank, all castling rights available."""
        position: dict[Square, Piece] = {}
        for color in Color:
            for piece_type, files in STARTING_FILES.items():
                piece = Piece(piece_type, color)
                for file in files:
                    position[Square(file, piece.start_rank)] = piece
        return cls(position)

    @classmethod
    def from_position(cls, position: Mapping[Square, Piece]) -> Self:
        """
        Custom position (for tests or puzzles), with empty history and no en passant square.

        Castling is allowed wherever the king and the rook still stand on their home squares.
        """
        position = dict(position)
        rights = frozenset(
            right
            for right, squares in CASTLING_RULES.items()
            if position.get(squares.king_from) == Piece(PieceType.KING, right[0])
            and position.get(squares.rook_from) == Piece(PieceType.ROOK, right[0])
        )
        return cls(position, castling_rights=rights)

    # --- READING THE POSITION ---
    @property
    def color_to_move(self) -> Color:
        """White moves first, then the players alternate."""
        return Color.WHITE if len(self.history) % 2 == 0 else Color.BLACK

    def piece(self, square: Square) -> Optional[Piece]:
        return self.position.get(square)

    def is_occupied(self, square: Square) -> bool:
        return square in self.position

    def locate_color(self, color: Color) -> list[Square]:
        return [
            square for square, piece in self.position.items() if piece.color == color
        ]

    def locate_pieces(self, piece: Piece) -> list[Square]:
        return [square for square, found in self.position.items() if found == piece]

    # --- MOVE / ATTACK GENERATION ---
    def moves(self, piece: Piece, square: Square, is_capture: bool) -> list[Square]:
        """
        Destination squares for the piece standing on the square.
        ----

        ----
        1. castling destinations (non-capturing king moves only)
        2. per path: cut off at the first obstruction.
            * non-capture: every square before the obstruction
            * capture: the obstruction itself, if it is an opponent's piece (or the en passant capture for pawns)

        NOTE: Moves are not checked for leaving your own king in check here. See `mutated_board`.
        """
        castling_moves: list[Square] = []
        if piece.type == PieceType.KING and not is_capture:
            castling_moves = [
                CASTLING_RULES[(piece.color, side)].king_to
                for side in self.castling_sides(piece.color, square)
            ]

        paths = (
            capture_paths(piece, square) if is_capture else move_paths(piece, square)
        )
        traditional_moves: list[Square] = []
        for path in paths:
            traditional_moves.extend(self._reachable(piece, path, is_capture))

        return castling_moves + traditional_moves

    def _reachable(self, piece: Piece, path: Path, is_capture: bool) -> list[Square]:
        """Squares along a single path the piece can go to"""
        obstruction_idx = next(
            (idx for idx, square in enumerate(path) if self.is_occupied(square)), None
        )

        # Non-capture moves go up to the first obstruction (or the end of the path if it's unobstructed).
        if not is_capture:
            return path if obstruction_idx is None else path[:obstruction_idx]

        if obstruction_idx is not None:
            obstruction = path[obstruction_idx]
            found = self.position[obstruction]
            return [obstruction] if found.color != piece.color else []

        # En passant captures are the only captures where the captured piece is not on the target square.
        if self._is_en_passant_target(piece, path[0]):
            return [path[0]]
        return []

    def _is_en_passant_target(self, piece: Piece, target: Square) -> bool:
        """The square right behind the pawn that just made a double step (seen from the capturing pawn)."""
        if piece.type != PieceType.PAWN or self.en_passant is None:
            return False
        return target == self.en_passant.offset(piece.forward)

    def castling_sides(self, color: Color, king_square: Square) -> list[CastlingSide]:
        """
        Find the castling directions currently available to the king on the given square
        ---

        **you are allowed to castle if**

        * Castling rights are not yet revoked (king nor rook made a move from their home square).
        * King and rook are still standing on their home squares.
        * There is no piece in between the king and the rook.
        * You are not currently put in check (you cannot castle out of check).

        NOTE: Moving through or into check is caught by simulating the castling move in steps.
        """
        king = Piece(PieceType.KING, color)
        rook = Piece(PieceType.ROOK, color)
        sides: list[CastlingSide] = []
        for side in CastlingSide:
            if (color, side) not in self.castling_rights:
                continue

            squares = CASTLING_RULES[(color, side)]
            if king_square != squares.king_from or self.piece(squares.king_from) != king:
                continue
            if self.piece(squares.rook_from) != rook:
                continue
            if any(self.is_occupied(sq) for sq in squares.between):
                continue

            sides.append(side)

        # the most expensive check last
        if sides and self.is_check(color):
            return []
        return sides

    def destinations(self, square: Square) -> list[Square]:
        """All captures and moves of the piece on the square, if it belongs to the player whose turn it is."""
        piece = self.piece(square)
        if piece is None or piece.color != self.color_to_move:
            return []
        return self.moves(piece, square, is_capture=True) + self.moves(
            piece, square, is_capture=False
        )

    def attacked_squares(self, by_color: Color) -> set[Square]:
        """Every square a piece of the given color could capture on"""
        attacked: set[Square] = set()
        for square in self.locate_color(by_color):
            attacked.update(self.moves(self.position[square], square, is_capture=True))
        return attacked

    # --- CHECK / CHECKMATE / STALEMATE ---
    def is_check(self, color: Color) -> bool:
        """Is the king of the given color attacked by any of the opponent's pieces?"""
        king_squares = self.locate_pieces(Piece(PieceType.KING, color))
        if not king_squares:
            return False
        attacked = self.attacked_squares(color.opposite)
        return any(square in attacked for square in king_squares)

    def is_no_move_possible(self, color: Color) -> bool:
        """True if every move of every piece would leave (or put) your own king in check."""
        for origin in self.locate_color(color):
            piece = self.position[origin]
            for is_capture in (True, False):
                for target in self.moves(piece, origin, is_capture):
                    if self.mutated_board(self.mutations(piece, origin, target), color):
                        return False
        return True

    def is_checkmate(self, color: Color) -> bool:
        return self.is_check(color) and self.is_no_move_possible(color)

    def is_stalemate(self, color: Color) -> bool:
        return not self.is_check(color) and self.is_no_move_possible(color)

    # --- MUTATIONS ---
    def mutation(
        self,
        piece: Piece,
        from_square: Square,
        to_square: Square,
        promote_to: Optional[PieceType] = None,
    ) -> Mutation:
        """
        The move of a single piece, as a pure function from Board to Board
        ----

        1. Take the piece off its origin and place it (or the piece it promotes to) on the target square
        2. Remove the opponent's pawn when taking en passant
        3. Set the en passant square if this is a pawn's double step, otherwise clear it
        4. Revoke castling rights when a king/rook home square is left (or captured on)
        """

        def _apply(board: Board) -> Board:
            position = dict(board.position)
            del position[from_square]
            position[to_square] = Piece(promote_to or piece.type, piece.color)

            is_diagonal = from_square.file != to_square.file
            if is_diagonal and board._is_en_passant_target(piece, to_square):
                assert board.en_passant is not None
                position.pop(board.en_passant, None)

            is_double_step = (
                piece.type == PieceType.PAWN
                and abs(to_square.rank - from_square.rank) == 2
            )
            return replace(
                board,
                position=position,
                en_passant=to_square if is_double_step else None,
                castling_rights=_revoke_castling_rights(
                    board.castling_rights, [from_square, to_square]
                ),
            )

        return _apply

    def castling_mutations(self, color: Color, side: CastlingSide) -> list[Mutation]:
        """
        Castling in three steps:
        1. king moves onto the square the rook will end up on
        2. king moves on to its final square
        3. rook moves next to it

        Since every step must leave the king safe, moving through check is not allowed.
        """
        squares = CASTLING_RULES[(color, side)]
        king = Piece(PieceType.KING, color)
        rook = Piece(PieceType.ROOK, color)
        return [
            self.mutation(king, squares.king_from, squares.rook_to),
            self.mutation(king, squares.rook_to, squares.king_to),
            self.mutation(rook, squares.rook_from, squares.rook_to),
        ]

    def mutations(
        self,
        piece: Piece,
        from_square: Square,
        to_square: Square,
        promote_to: Optional[PieceType] = None,
    ) -> list[Mutation]:
        """The (list of) mutations belonging to a destination found by `moves()`"""
        if piece.type == PieceType.KING and is_castling_move(from_square, to_square):
            side = castling_side_for(from_square, to_square)
            return self.castling_mutations(piece.color, side)
        return [self.mutation(piece, from_square, to_square, promote_to)]

    def mutated_board(
        self, mutations: Iterable[Mutation], color: Color
    ) -> Optional[Board]:
        """
        Apply the mutations one after the other.

        Returns None if any of the steps leaves the king of the given color in check (to move into check is forbidden).
        """
        board: Board = self
        for mutation in mutations:
            board = mutation(board)
            if board.is_check(color):
                return None
        return board

    def record(self, notation: Notation) -> Board:
        """Append a notation to the history (flips the color to move)"""
        return replace(self, history=self.history + (notation,))


def _revoke_castling_rights(
    rights: frozenset[CastlingRight], squares: list[Square]
) -> frozenset[CastlingRight]:
    """Once a king or rook home square shows up in a move (as origin or target), the related castling rights are gone for good."""
    return frozenset(
        right
        for right in rights
        if not any(
            sq in (CASTLING_RULES[right].king_from, CASTLING_RULES[right].rook_from)
            for sq in squares
        )
    )
