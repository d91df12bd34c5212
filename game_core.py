from __future__ import annotations

import enum
import itertools
import logging
import random
from collections import deque
from dataclasses import dataclass
from typing import Deque, Optional, Tuple

import numpy as np


logger = logging.getLogger(__name__)

Cell = Tuple[int, int]

GRID_WIDTH = 20
GRID_HEIGHT = 20
SNAKE_ORIGIN: Cell = (2, 2)
INITIAL_FOOD: Cell = (6, 4)
SNAKE_INITIAL_LENGTH = 3
# Seconds between forced advances, and seconds spent on the game-over screen.
MOVE_PERIOD = 0.1
RESTART_DELAY = 1.0

# Channels of GameSnapshot.to_grid().
HEAD_CHANNEL = 0
BODY_CHANNEL = 1
FOOD_CHANNEL = 2
WALL_CHANNEL = 3


class Direction(enum.Enum):
    """Grid steps as (dx, dy); y grows downward."""

    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    def opposite(self) -> Direction:
        return _OPPOSITES[self]

    def step(self, cell: Cell) -> Cell:
        dx, dy = self.value
        return cell[0] + dx, cell[1] + dy


_OPPOSITES = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}


class Snake:
    """Ordered chain of cells, head first, plus the direction it faces.

    Every forward move drops the last cell and keeps it as the *pending tail*
    until the next move; ``restore_tail`` re-appends it to grow by one.
    """

    def __init__(self, origin_x: int, origin_y: int):
        self.direction = Direction.RIGHT
        self._body: Deque[Cell] = deque((origin_x + i, origin_y) for i in reversed(range(SNAKE_INITIAL_LENGTH)))
        self._pending_tail: Optional[Cell] = None

    def __len__(self) -> int:
        return len(self._body)

    def cells(self) -> tuple[Cell, ...]:
        return tuple(self._body)

    def head_position(self) -> Cell:
        if not self._body:
            raise RuntimeError("snake body is empty")
        return self._body[0]

    def head_direction(self) -> Direction:
        return self.direction

    def next_head(self, direction: Direction | None = None) -> Cell:
        """Cell the head would move to, without moving."""
        moving = direction if direction is not None else self.direction
        return moving.step(self.head_position())

    def move_forward(self, direction: Direction | None = None) -> Cell:
        """Advance one cell and return the cell vacated at the tail.

        Reversals are not rejected here; the game filters them.
        """
        if direction is not None:
            self.direction = direction
        self._body.appendleft(self.direction.step(self.head_position()))
        self._pending_tail = self._body.pop()
        return self._pending_tail

    def restore_tail(self) -> Cell:
        """Re-append the cell vacated by the latest move. It can be used once."""
        if self._pending_tail is None:
            raise RuntimeError("no pending tail to restore")
        tail, self._pending_tail = self._pending_tail, None
        self._body.append(tail)
        return tail

    def overlaps_tail(self, x: int, y: int) -> bool:
        """True if (x, y) hits any cell except the last one.

        The last cell moves away in the same step the head moves in, so
        running into the current tail is not a collision.
        """
        for cell in itertools.islice(self._body, len(self._body) - 1):
            if cell == (x, y):
                return True
        return False

    def overlaps(self, x: int, y: int) -> bool:
        return (x, y) in self._body


def in_interior(cell: Cell, width: int, height: int) -> bool:
    """The outer ring of the arena is wall."""
    x, y = cell
    return 0 < x < width - 1 and 0 < y < height - 1


@dataclass(frozen=True)
class GameConfig:
    width: int = GRID_WIDTH
    height: int = GRID_HEIGHT
    move_period: float = MOVE_PERIOD
    restart_delay: float = RESTART_DELAY
    snake_origin: Cell = SNAKE_ORIGIN
    initial_food: Cell = INITIAL_FOOD
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.width < 3 or self.height < 3:
            raise ValueError(f"arena must be at least 3x3 cells, got {self.width}x{self.height}")
        if self.move_period <= 0:
            raise ValueError("move_period must be positive")
        if self.restart_delay < 0:
            raise ValueError("restart_delay must not be negative")
        start = Snake(*self.snake_origin).cells()
        if not all(in_interior(cell, self.width, self.height) for cell in start):
            raise ValueError(f"snake at origin {self.snake_origin} does not fit inside the walls")
        if not in_interior(self.initial_food, self.width, self.height):
            raise ValueError(f"initial food {self.initial_food} is outside the walls")
        if self.initial_food in start:
            raise ValueError(f"initial food {self.initial_food} is under the snake")


@dataclass(frozen=True)
class GameSnapshot:
    """Read-only view of one frame, safe to keep across ticks."""

    body: tuple[Cell, ...]
    food: Cell | None
    width: int
    height: int
    game_over: bool

    def to_grid(self) -> np.ndarray:
        # One-hot channels: 0=head, 1=body (excluding head), 2=food, 3=wall
        grid = np.zeros((4, self.height, self.width), dtype=np.float32)
        grid[WALL_CHANNEL, 0, :] = 1.0
        grid[WALL_CHANNEL, -1, :] = 1.0
        grid[WALL_CHANNEL, :, 0] = 1.0
        grid[WALL_CHANNEL, :, -1] = 1.0

        if self.food is not None:
            food_x, food_y = self.food
            grid[FOOD_CHANNEL, food_y, food_x] = 1.0

        if self.body:
            head_x, head_y = self.body[0]
            grid[HEAD_CHANNEL, head_y, head_x] = 1.0
            for part_x, part_y in self.body[1:]:
                grid[BODY_CHANNEL, part_y, part_x] = 1.0
        return grid

    def render_text(self) -> str:
        grid = self.to_grid()
        board = np.full((self.height, self.width), ".", dtype="<U1")
        board[grid[WALL_CHANNEL] > 0] = "#"
        board[grid[FOOD_CHANNEL] > 0] = "*"
        board[grid[BODY_CHANNEL] > 0] = "o"
        board[grid[HEAD_CHANNEL] > 0] = "X" if self.game_over else "@"
        return "\n".join("".join(row) for row in board)


class SnakeGame:
    """Single-player game: one snake, one piece of food, walls on the outer ring."""

    def __init__(self, config: GameConfig | None = None):
        self.config = config or GameConfig()
        self.rng = random.Random(self.config.seed)
        self.snake = Snake(*self.config.snake_origin)
        self.food_cell: Cell = self.config.initial_food
        self.food_exists = True
        self.game_over = False
        self.waiting_time = 0.0

    @property
    def width(self) -> int:
        return self.config.width

    @property
    def height(self) -> int:
        return self.config.height

    @property
    def food(self) -> Cell | None:
        return self.food_cell if self.food_exists else None

    def handle_direction_input(self, direction: Direction) -> None:
        if self.game_over:
            return
        # Turning straight back would run the head into the neck.
        if direction == self.snake.head_direction().opposite():
            return
        self.forced_advance(direction)

    def tick(self, delta_time: float) -> None:
        self.waiting_time += delta_time

        if self.game_over:
            if self.waiting_time > self.config.restart_delay:
                self.restart()
            return

        # A snake covering the whole interior has nowhere left to put food.
        if not self.food_exists and not self.board_full():
            self.spawn_food()

        if self.waiting_time > self.config.move_period:
            self.forced_advance()

    def forced_advance(self, direction: Direction | None = None) -> bool:
        """Move the snake if the next cell is free; otherwise end the game.

        The phase timer restarts either way.
        """
        self.waiting_time = 0.0
        next_cell = self.snake.next_head(direction)
        if self.snake.overlaps_tail(*next_cell):
            self._end_game("self", next_cell)
            return False
        if not in_interior(next_cell, self.width, self.height):
            self._end_game("wall", next_cell)
            return False

        self.snake.move_forward(direction)
        if self.food_exists and self.snake.head_position() == self.food_cell:
            self.food_exists = False
            tail = self.snake.restore_tail()
            logger.debug("ate food at %s, regrew tail at %s (length %d)", self.food_cell, tail, len(self.snake))
        return True

    def board_full(self) -> bool:
        interior_cells = (self.width - 2) * (self.height - 2)
        return len(set(self.snake.cells())) >= interior_cells

    def spawn_food(self) -> Cell:
        if self.board_full():
            raise RuntimeError("no free interior cell left for food")

        while True:
            cell = (self.rng.randint(1, self.width - 2), self.rng.randint(1, self.height - 2))
            if not self.snake.overlaps(*cell):
                break
        self.food_cell = cell
        self.food_exists = True
        logger.debug("spawned food at %s", cell)
        return cell

    def restart(self) -> None:
        self.snake = Snake(*self.config.snake_origin)
        self.food_cell = self.config.initial_food
        self.food_exists = True
        self.game_over = False
        self.waiting_time = 0.0
        logger.info("game restarted")

    def snapshot(self) -> GameSnapshot:
        return GameSnapshot(
            body=self.snake.cells(),
            food=self.food,
            width=self.width,
            height=self.height,
            game_over=self.game_over,
        )

    # Internal helpers.
    def _end_game(self, cause: str, cell: Cell) -> None:
        self.game_over = True
        logger.info("game over: %s collision at %s (length %d)", cause, cell, len(self.snake))
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("final board:\n%s", self.snapshot().render_text())
