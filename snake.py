from __future__ import annotations

import argparse
import logging
import sys

import numpy as np
import pygame

from game_core import (
    BODY_CHANNEL,
    FOOD_CHANNEL,
    GRID_HEIGHT,
    GRID_WIDTH,
    HEAD_CHANNEL,
    MOVE_PERIOD,
    RESTART_DELAY,
    WALL_CHANNEL,
    Direction,
    GameConfig,
    GameSnapshot,
    SnakeGame,
)


CELL_SIZE = 25
FPS = 60
BACKGROUND_COLOR = pygame.Color(128, 128, 128)
SNAKE_COLOR = pygame.Color(0, 204, 0)
FOOD_COLOR = pygame.Color(204, 0, 0)
BORDER_COLOR = pygame.Color(0, 0, 0)
GAMEOVER_COLOR = pygame.Color(230, 0, 0, 128)

# Drawn in this order, so the snake ends up on top.
LAYERS = (
    (WALL_CHANNEL, BORDER_COLOR),
    (FOOD_CHANNEL, FOOD_COLOR),
    (BODY_CHANNEL, SNAKE_COLOR),
    (HEAD_CHANNEL, SNAKE_COLOR),
)

DIRECTIONS = {
    pygame.K_UP: Direction.UP,
    pygame.K_DOWN: Direction.DOWN,
    pygame.K_LEFT: Direction.LEFT,
    pygame.K_RIGHT: Direction.RIGHT,
}
QUIT_KEYS = (pygame.K_ESCAPE, pygame.K_q)


def to_coord(game_coord: int) -> int:
    return game_coord * CELL_SIZE


def draw_block(surface: pygame.Surface, color: pygame.Color, position: tuple[int, int]) -> None:
    draw_rectangle(surface, color, position, 1, 1)


def draw_rectangle(
    surface: pygame.Surface, color: pygame.Color, position: tuple[int, int], width: int, height: int
) -> None:
    rect = pygame.Rect(to_coord(position[0]), to_coord(position[1]), to_coord(width), to_coord(height))
    if color.a == 255:
        pygame.draw.rect(surface, color, rect)
        return
    # pygame.draw ignores alpha, so blend through a temporary surface.
    overlay = pygame.Surface(rect.size, pygame.SRCALPHA)
    overlay.fill(color)
    surface.blit(overlay, rect.topleft)


def draw_game(surface: pygame.Surface, snapshot: GameSnapshot) -> None:
    surface.fill(BACKGROUND_COLOR)
    grid = snapshot.to_grid()
    for channel, color in LAYERS:
        for y, x in np.argwhere(grid[channel] > 0):
            draw_block(surface, color, (int(x), int(y)))
    if snapshot.game_over:
        draw_rectangle(surface, GAMEOVER_COLOR, (0, 0), snapshot.width, snapshot.height)


def parse_args(argv: list[str] | None = None) -> tuple[argparse.Namespace, GameConfig]:
    parser = argparse.ArgumentParser(description="Play Snake.")
    parser.add_argument("--width", type=int, default=GRID_WIDTH, help="Arena width in cells, walls included.")
    parser.add_argument("--height", type=int, default=GRID_HEIGHT, help="Arena height in cells, walls included.")
    parser.add_argument("--move-period", type=float, default=MOVE_PERIOD, help="Seconds between moves.")
    parser.add_argument(
        "--restart-delay", type=float, default=RESTART_DELAY, help="Seconds before a new game starts after dying."
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for food placement.")
    parser.add_argument("--fps", type=int, default=FPS, help="Frame rate cap.")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (DEBUG, INFO, ...).")
    args = parser.parse_args(argv)
    try:
        config = GameConfig(
            width=args.width,
            height=args.height,
            move_period=args.move_period,
            restart_delay=args.restart_delay,
            seed=args.seed,
        )
    except ValueError as exc:
        parser.error(str(exc))
    return args, config


def main(argv: list[str] | None = None) -> None:
    args, config = parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    game = SnakeGame(config)
    pygame.init()
    screen = pygame.display.set_mode((to_coord(config.width), to_coord(config.height)))
    pygame.display.set_caption("Snake")
    clock = pygame.time.Clock()

    while True:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                pygame.quit()
                sys.exit()
            if event.type == pygame.KEYDOWN:
                if event.key in QUIT_KEYS:
                    pygame.quit()
                    sys.exit()
                if event.key in DIRECTIONS:
                    game.handle_direction_input(DIRECTIONS[event.key])

        draw_game(screen, game.snapshot())
        pygame.display.flip()

        game.tick(clock.tick(args.fps) / 1000.0)


if __name__ == "__main__":
    main()
