"""
Presentation layer: draws a `Frame` with pygame, or rasterizes it to a numpy
RGB image for headless use.
"""
import numpy as np
import pygame

from pong_match import MatchState
from pong_physics import Owner

FONT_NAME = "arial"

WHITE = (240, 240, 240)
BG = (25, 25, 30)
NET = (70, 70, 80)
DIM = (120, 120, 140)
BALL = (240, 240, 240)
PLAYER = (255, 87, 34)
CPU = (33, 150, 243)


def _lighter(color, amount=70):
    return tuple(min(255, c + amount) for c in color)


def paddle_color(view, base):
    return _lighter(base) if view.glowing else base


def draw_center_dashed_line(surface, height):
    dash_h = 18
    gap = 12
    x = surface.get_width() // 2 - 2
    for y in range(0, int(height), dash_h + gap):
        pygame.draw.rect(surface, NET, (x, y, 4, dash_h), border_radius=2)


class Renderer:
    def __init__(self, surface):
        self.surface = surface
        self.font_small = pygame.font.SysFont(FONT_NAME, 20)
        self.font_big = pygame.font.SysFont(FONT_NAME, 54, bold=True)
        self.flash_until = {Owner.PLAYER: 0, Owner.AI: 0}

    def flash_score(self, owner, now_ms, duration_ms=500):
        # Cosmetic deadline checked at draw time, never touches the simulation
        self.flash_until[owner] = now_ms + duration_ms

    def _paddle(self, view, base):
        rect = pygame.Rect(round(view.x), round(view.y), round(view.width), round(view.height))
        if view.glowing:
            pygame.draw.rect(self.surface, _lighter(base, 40), rect.inflate(6, 6), border_radius=6)
        pygame.draw.rect(self.surface, paddle_color(view, base), rect, border_radius=4)

    def _centered(self, text, font, color, y):
        img = font.render(text, True, color)
        self.surface.blit(img, (self.surface.get_width() // 2 - img.get_width() // 2, y))

    def draw(self, frame, now_ms=0):
        s = self.surface
        s.fill(BG)
        draw_center_dashed_line(s, frame.height)
        self._paddle(frame.player, PLAYER)
        self._paddle(frame.ai, CPU)
        pygame.draw.circle(s, BALL, (round(frame.ball_x), round(frame.ball_y)), max(1, round(frame.ball_radius)))

        left = PLAYER if now_ms < self.flash_until[Owner.PLAYER] else WHITE
        right = CPU if now_ms < self.flash_until[Owner.AI] else WHITE
        l_img = self.font_big.render(str(frame.player_score), True, left)
        r_img = self.font_big.render(str(frame.ai_score), True, right)
        mid = s.get_width() // 2
        s.blit(l_img, (mid - 40 - l_img.get_width(), 20))
        s.blit(r_img, (mid + 40, 20))

        info = f"Level {frame.level} | first to {frame.win_score} | P: pause | Esc: menu"
        s.blit(self.font_small.render(info, True, DIM), (20, s.get_height() - 28))

        if frame.state == MatchState.MENU:
            self._centered("PONG", self.font_big, WHITE, s.get_height() // 3)
            self._centered("Enter to play, 1-9/0 to pick a level", self.font_small, DIM, s.get_height() // 2)
        elif frame.state == MatchState.PAUSED:
            self._centered("Paused", self.font_big, WHITE, s.get_height() // 3)
        elif frame.state == MatchState.ENDED:
            won = frame.winner == Owner.PLAYER
            self._centered("You win!" if won else "CPU wins!", self.font_big, PLAYER if won else CPU,
                           s.get_height() // 3)
            self._centered("Enter to play again", self.font_small, DIM, s.get_height() // 2)


def render_rgb(frame, scale=1):
    """Rasterize the court into an (H, W, 3) uint8 array."""
    W, H = int(frame.width), int(frame.height)
    img = np.zeros((H, W, 3), dtype=np.uint8)
    img[:] = BG
    for y in range(0, H, 24):
        img[y:y+12, W//2-1:W//2+1] = NET
    for view, base in ((frame.player, PLAYER), (frame.ai, CPU)):
        x0, y0 = max(0, int(view.x)), max(0, int(view.y))
        img[y0:int(view.y + view.height), x0:int(view.x + view.width)] = paddle_color(view, base)
    r = int(frame.ball_radius)
    bx, by = int(frame.ball_x), int(frame.ball_y)
    # The ball may be past an edge on the frame it scores
    img[max(0, by-r):max(0, min(H, by+r)), max(0, bx-r):max(0, min(W, bx+r))] = BALL
    if scale != 1:
        img = np.repeat(np.repeat(img, scale, axis=0), scale, axis=1)
    return img
