"""
Solve detection for a board of placed pieces.

The board is solved when:
1. Every piece is on the board
2. No cell is covered by two pieces
3. The board letters satisfy the puzzle's solution predicate

What counts as the right letters depends on the puzzle content, so the
predicate is pluggable. Two common ones are provided: an exact target layout
and a target word list.
"""

from typing import Callable, Iterable, List, Sequence, Set, Tuple

from .models import Piece
from .overlap import compute_overlap_grid, has_conflicts
from .pieces import letter_cells


LetterGrid = List[List[str]]
SolutionPredicate = Callable[[LetterGrid], bool]

EMPTY_MARKS = {".", " ", "_"}


def all_pieces_are_used(pieces: Iterable[Piece]) -> bool:
    return all(piece.is_placed for piece in pieces)


def board_letters(pieces: Iterable[Piece], grid_size: int) -> LetterGrid:
    """Letters showing on the board, "" for empty cells."""
    grid = [[""] * grid_size for _ in range(grid_size)]
    for piece in pieces:
        if not piece.is_placed:
            continue
        for r, c in letter_cells(piece):
            grid[piece.board_top + r][piece.board_left + c] = piece.letters[r][c]
    return grid


def no_target(letters: LetterGrid) -> bool:
    """Predicate used when the puzzle has no solution rule: the board is never solved."""
    return False


def matches_layout(layout: Sequence[str]) -> SolutionPredicate:
    """
    Predicate comparing the board to a target layout.

    Args:
        layout: One string per board row, '.' for cells that must stay empty
    """
    target = [
        ["" if ch in EMPTY_MARKS else ch.upper() for ch in row]
        for row in layout
    ]

    def predicate(letters: LetterGrid) -> bool:
        return letters == target

    return predicate


def extract_words(letters: LetterGrid) -> Set[str]:
    """Extract all horizontal and vertical words (2+ letters) from the board."""
    words: Set[str] = set()
    size = len(letters)

    lines = [list(row) for row in letters]
    lines += [[letters[r][c] for r in range(size)] for c in range(size)]

    for line in lines:
        word = ""
        for letter in line + [""]:  # trailing "" flushes the last word
            if letter:
                word += letter
            else:
                if len(word) >= 2:
                    words.add(word)
                word = ""

    return words


def forms_words(words: Iterable[str]) -> SolutionPredicate:
    """Predicate requiring the board to spell exactly the target words."""
    target = {word.upper() for word in words}

    def predicate(letters: LetterGrid) -> bool:
        return extract_words(letters) == target

    return predicate


def evaluate(
    pieces: Sequence[Piece],
    grid_size: int,
    predicate: SolutionPredicate = no_target,
) -> Tuple[bool, bool]:
    """
    Re-evaluate the solve state from piece positions alone.

    Returns:
        (game_is_solved, all_pieces_are_used)
    """
    used = all_pieces_are_used(pieces)
    if not used:
        return False, False
    if has_conflicts(compute_overlap_grid(pieces, grid_size)):
        return False, True
    return bool(predicate(board_letters(pieces, grid_size))), True
