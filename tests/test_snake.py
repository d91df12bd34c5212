"""
Tests for snake.py - pygame drawing and command line handling.

Drawing goes to off-screen surfaces, so no window is opened.
"""

import pygame
import pytest

from game_core import Direction, GameConfig, SnakeGame
from snake import (
    BACKGROUND_COLOR,
    BORDER_COLOR,
    CELL_SIZE,
    DIRECTIONS,
    FOOD_COLOR,
    SNAKE_COLOR,
    draw_block,
    draw_game,
    parse_args,
    to_coord,
)


def pixel_at(surface, cell):
    """Colour at the centre of a grid cell."""
    return surface.get_at((to_coord(cell[0]) + CELL_SIZE // 2, to_coord(cell[1]) + CELL_SIZE // 2))


@pytest.fixture
def screen():
    return pygame.Surface((to_coord(20), to_coord(20)))


class TestDrawing:
    """Tests for the drawing helpers."""

    def test_to_coord_scales_by_cell_size(self):
        """Grid units become pixels."""
        assert to_coord(0) == 0
        assert to_coord(3) == 3 * CELL_SIZE

    def test_draw_block_fills_one_cell(self, screen):
        """A block covers its own cell and nothing next to it."""
        screen.fill(BACKGROUND_COLOR)
        draw_block(screen, FOOD_COLOR, (2, 3))
        assert pixel_at(screen, (2, 3)) == FOOD_COLOR
        assert pixel_at(screen, (3, 3)) == BACKGROUND_COLOR

    def test_draw_game(self, screen):
        """Walls, snake and food are drawn where the snapshot puts them."""
        draw_game(screen, SnakeGame().snapshot())
        assert pixel_at(screen, (0, 0)) == BORDER_COLOR
        assert pixel_at(screen, (19, 10)) == BORDER_COLOR
        for cell in [(4, 2), (3, 2), (2, 2)]:
            assert pixel_at(screen, cell) == SNAKE_COLOR
        assert pixel_at(screen, (6, 4)) == FOOD_COLOR
        assert pixel_at(screen, (10, 10)) == BACKGROUND_COLOR

    def test_game_over_overlay(self, screen):
        """A red overlay covers the arena once the game is over."""
        game = SnakeGame(GameConfig(snake_origin=(16, 2)))
        game.forced_advance()
        draw_game(screen, game.snapshot())
        tinted = pixel_at(screen, (10, 10))
        assert tinted != BACKGROUND_COLOR
        assert tinted.r > tinted.g
        assert tinted.r > tinted.b


class TestInput:
    """Tests for key mapping and the command line."""

    def test_arrow_keys(self):
        """Arrow keys map to directions."""
        assert DIRECTIONS[pygame.K_UP] is Direction.UP
        assert DIRECTIONS[pygame.K_DOWN] is Direction.DOWN
        assert DIRECTIONS[pygame.K_LEFT] is Direction.LEFT
        assert DIRECTIONS[pygame.K_RIGHT] is Direction.RIGHT
        assert pygame.K_SPACE not in DIRECTIONS

    def test_parse_args_defaults(self):
        """No arguments gives the default game."""
        args, config = parse_args([])
        assert config == GameConfig()
        assert args.fps == 60

    def test_parse_args_overrides(self):
        """Arena, timing and seed come from the command line."""
        _, config = parse_args(["--width", "30", "--height", "25", "--move-period", "0.2", "--seed", "7"])
        assert (config.width, config.height) == (30, 25)
        assert config.move_period == 0.2
        assert config.seed == 7

    def test_parse_args_rejects_invalid_arena(self):
        """An arena too small for the snake is a usage error."""
        with pytest.raises(SystemExit):
            parse_args(["--width", "5"])
