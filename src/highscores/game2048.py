"""2048 board logic.

Boards are square lists of rows; an empty cell is ``None``. Every function
returns a new board and leaves its input untouched. Each successful move
counts as one move of the player's game session.
"""

import random
from dataclasses import dataclass
from enum import Enum

TILE_COUNT_PER_ROW_OR_COLUMN = 4
ANIMATION_DURATION = 200  # ms
WINNING_TILE = 2048

Line = list[int | None]
Board = list[Line]


class Direction(str, Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True)
class MoveResult:
    board: Board
    score: int
    moved: bool


def empty_board(size: int = TILE_COUNT_PER_ROW_OR_COLUMN) -> Board:
    return [[None] * size for _ in range(size)]


def empty_positions(board: Board) -> list[tuple[int, int]]:
    return [
        (row, col)
        for row, line in enumerate(board)
        for col, value in enumerate(line)
        if value is None
    ]


def move_and_merge_line(line: Line) -> tuple[Line, int]:
    """Slide a line toward index 0 and merge equal neighbours.

    A tile takes part in at most one merge per move, so ``[2, 2, 2, 2]``
    becomes ``[4, 4, None, None]``. Returns the new line and the points
    scored, which is the sum of the merged tile values.
    """
    tiles = [value for value in line if value is not None]
    merged: list[int] = []
    score = 0

    i = 0
    while i < len(tiles):
        if i + 1 < len(tiles) and tiles[i] == tiles[i + 1]:
            value = tiles[i] * 2
            merged.append(value)
            score += value
            i += 2
        else:
            merged.append(tiles[i])
            i += 1

    return merged + [None] * (len(line) - len(merged)), score


def _transpose(board: Board) -> Board:
    return [list(column) for column in zip(*board)]


def move(board: Board, direction: Direction | str) -> MoveResult:
    """Apply one player move to the whole board."""
    direction = Direction(direction)

    # Rotate so the move always runs toward index 0 of each line.
    lines = _transpose(board) if direction in (Direction.UP, Direction.DOWN) else [
        list(row) for row in board
    ]
    reverse = direction in (Direction.RIGHT, Direction.DOWN)

    new_lines: Board = []
    score = 0
    for line in lines:
        source = line[::-1] if reverse else line
        merged, points = move_and_merge_line(source)
        new_lines.append(merged[::-1] if reverse else merged)
        score += points

    moved_board = _transpose(new_lines) if direction in (Direction.UP, Direction.DOWN) else new_lines
    return MoveResult(board=moved_board, score=score, moved=moved_board != board)


def add_random_tile(board: Board, rng: random.Random | None = None) -> Board:
    """Spawn a 2 (90%) or a 4 (10%) in a random empty cell.

    A full board is returned unchanged.
    """
    rng = rng or random.Random()
    positions = empty_positions(board)
    if not positions:
        return [list(row) for row in board]

    row, col = rng.choice(positions)
    spawned = [list(line) for line in board]
    spawned[row][col] = 2 if rng.random() < 0.9 else 4
    return spawned


def new_board(
    rng: random.Random | None = None, size: int = TILE_COUNT_PER_ROW_OR_COLUMN
) -> Board:
    """A fresh board with two starting tiles."""
    rng = rng or random.Random()
    return add_random_tile(add_random_tile(empty_board(size), rng), rng)


def play(
    board: Board, direction: Direction | str, rng: random.Random | None = None
) -> MoveResult:
    """Move, then spawn one tile if the move changed the board."""
    result = move(board, direction)
    if not result.moved:
        return result
    return MoveResult(
        board=add_random_tile(result.board, rng), score=result.score, moved=True
    )


def can_move(board: Board) -> bool:
    if empty_positions(board):
        return True
    for row, line in enumerate(board):
        for col, value in enumerate(line):
            if col + 1 < len(line) and line[col + 1] == value:
                return True
            if row + 1 < len(board) and board[row + 1][col] == value:
                return True
    return False


def has_won(board: Board) -> bool:
    return any(value is not None and value >= WINNING_TILE for line in board for value in line)
