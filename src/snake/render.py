# render.py
from __future__ import annotations

from typing import Optional, Tuple

import pygame  # type: ignore

from .config import (
    CELL_SIZE, HUD_HEIGHT,
    BG, GRID_LINE, HEAD, BODY, FOOD, OBSTACLE, TEXT, GOLD,
)
from .engine import CellState, Phase, Snapshot

RENDER_STR = {
    CellState.EMPTY: ".",
    CellState.HEAD: "H",
    CellState.BODY: "o",
    CellState.FOOD: "*",
    CellState.OBSTACLE: "#",
}


# ---------- Text ----------
def render_text(snap: Snapshot) -> str:
    """ASCII board with a one-line header, for terminals and debug logs."""
    grid = snap.as_grid()
    lines = [f"score={snap.score} best={snap.best_score} phase={snap.phase.value}"]
    for row in grid:
        lines.append("".join(RENDER_STR[CellState(int(v))] for v in row))
    return "\n".join(lines)


# ---------- pygame ----------
def cell_rect(gx: int, gy: int) -> pygame.Rect:
    return pygame.Rect(gx * CELL_SIZE + 1, HUD_HEIGHT + gy * CELL_SIZE + 1, CELL_SIZE - 2, CELL_SIZE - 2)


def draw_cell(screen: pygame.Surface, gx: int, gy: int, color: Tuple[int, int, int]) -> None:
    pygame.draw.rect(screen, color, cell_rect(gx, gy))


def draw_grid(screen: pygame.Surface, grid_size: int) -> None:
    side = grid_size * CELL_SIZE
    for i in range(grid_size + 1):
        pygame.draw.line(screen, GRID_LINE, (i * CELL_SIZE, HUD_HEIGHT), (i * CELL_SIZE, HUD_HEIGHT + side))
        pygame.draw.line(screen, GRID_LINE, (0, HUD_HEIGHT + i * CELL_SIZE), (side, HUD_HEIGHT + i * CELL_SIZE))


def draw_hud(screen: pygame.Surface, font: pygame.font.Font, snap: Snapshot) -> None:
    left = font.render(f"Score: {snap.score}   Best: {snap.best_score}", True, TEXT)
    right = font.render(f"{snap.difficulty.value.title()}  L{snap.level}", True, TEXT)
    screen.blit(left, (8, (HUD_HEIGHT - left.get_height()) // 2))
    screen.blit(right, (screen.get_width() - right.get_width() - 8, (HUD_HEIGHT - right.get_height()) // 2))


def draw_overlay(screen: pygame.Surface, font: pygame.font.Font, lines, alpha: int = 150) -> None:
    w, h = screen.get_size()
    overlay = pygame.Surface((w, h), pygame.SRCALPHA)
    overlay.fill((0, 0, 0, alpha))
    screen.blit(overlay, (0, 0))

    y = h // 2 - 16 * (len(lines) - 1)
    for text, color in lines:
        surf = font.render(text, True, color)
        screen.blit(surf, surf.get_rect(center=(w // 2, y)))
        y += 32


def draw_snapshot(screen: pygame.Surface, snap: Snapshot, font: Optional[pygame.font.Font] = None) -> None:
    """Draw the board, and the HUD/overlays when a font is available."""
    screen.fill(BG)
    draw_grid(screen, snap.grid_size)

    for x, y in snap.obstacles:
        draw_cell(screen, x, y, OBSTACLE)
    if snap.food is not None:
        draw_cell(screen, snap.food[0], snap.food[1], FOOD)
    for x, y in snap.snake[1:]:
        draw_cell(screen, x, y, BODY)
    draw_cell(screen, snap.head[0], snap.head[1], HEAD)

    if font is None:
        return
    draw_hud(screen, font, snap)

    if snap.phase is Phase.READY:
        draw_overlay(screen, font, [
            ("SNAKE", HEAD),
            ("Arrows/WASD to steer, P to pause", TEXT),
            ("1/2/3 speed, +/- level, Tab demo", TEXT),
            ("Press Enter to start", TEXT),
        ])
    elif snap.phase is Phase.PAUSED:
        draw_overlay(screen, font, [("PAUSED", TEXT), ("Press P to resume", TEXT)], alpha=110)
    elif snap.phase is Phase.GAMEOVER:
        lines = [("GAME OVER", FOOD), (f"Final score: {snap.score}", TEXT)]
        if snap.score > 0 and snap.score == snap.best_score:
            lines.append(("New best!", GOLD))
        lines.append(("Press R to play again", TEXT))
        draw_overlay(screen, font, lines)
