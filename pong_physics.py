"""
Ball and paddle physics for the player-vs-CPU Pong match.

Velocities and paddle speeds are expressed in field units per frame at a
nominal 60 Hz; `dt` arguments are real seconds and get scaled back to frames.
"""
import math
from enum import Enum

import numpy as np

# --- Field and entity tuning ---
FIELD_W, FIELD_H = 800, 500
PADDLE_W, PADDLE_H = 10, 100
PADDLE_MARGIN = 10
BALL_RADIUS = 10

NOMINAL_FPS = 60
FRAME_DT = 1.0 / NOMINAL_FPS

MAX_SPEED = 15.0
SERVE_SPEED = 5.0
SERVE_SLOWDOWN_ABOVE = 10.0
SERVE_VY_RANGE = 5.0
HIT_ANGLE = 6.0
RALLY_SPEEDUP = 1.05

PLAYER_SPEED = 8.0
SMOOTHING = 0.2


class Owner(str, Enum):
    PLAYER = "player"
    AI = "ai"


def clamp(v, lo, hi):
    return max(lo, min(v, hi))


def frames(dt):
    """Number of nominal frames covered by `dt` seconds."""
    return dt * NOMINAL_FPS


def boxes_overlap(ax, ay, aw, ah, bx, by, bw, bh):
    # Touching edges do not count as an overlap
    return ax < bx + bw and ax + aw > bx and ay < by + bh and ay + ah > by


def fold_bounce(y, height):
    """Fold a straight-line projection through the top/bottom walls.

    A ball that would travel to `y` unobstructed ends up mirrored once per
    wall it crosses: an odd number of crossings reflects, an even number
    only wraps.
    """
    bounces = math.floor(y / height)
    if bounces % 2 == 1:
        return height - (y % height)
    return y % height


class Ball:
    def __init__(self, field_w=FIELD_W, field_h=FIELD_H, radius=BALL_RADIUS, rng=None):
        self.field_w, self.field_h = field_w, field_h
        self.radius = radius
        self.rng = rng if rng is not None else np.random.default_rng()
        self.x = field_w / 2
        self.y = field_h / 2
        self.vx = SERVE_SPEED
        self.vy = SERVE_SPEED

    def advance(self, dt=FRAME_DT):
        k = frames(dt)
        self.x += self.vx * k
        self.y += self.vy * k

    def hits_wall(self):
        return self.y - self.radius < 0 or self.y + self.radius > self.field_h

    def reflect_vertical(self):
        self.vy = -self.vy
        # Sit exactly on the crossed boundary so the next tick can't re-trigger
        if self.y - self.radius < 0:
            self.y = self.radius
        elif self.y + self.radius > self.field_h:
            self.y = self.field_h - self.radius

    def serve(self, direction=None):
        """Re-center the ball and send it the other way with a fresh angle.

        `direction` (+1 right, -1 left) overrides the usual alternation.
        Rallies that ended above twice the serve speed restart at serve speed.
        """
        self.x = self.field_w / 2
        self.y = self.field_h / 2
        if direction is None:
            self.vx = -self.vx
        else:
            self.vx = math.copysign(abs(self.vx) or SERVE_SPEED, direction)
        self.vy = float(self.rng.uniform(-SERVE_VY_RANGE, SERVE_VY_RANGE))
        if abs(self.vx) > SERVE_SLOWDOWN_ABOVE:
            self.vx = math.copysign(SERVE_SPEED, self.vx)

    def clamp_speed(self):
        self.vx = clamp(self.vx, -MAX_SPEED, MAX_SPEED)
        self.vy = clamp(self.vy, -MAX_SPEED, MAX_SPEED)

    def rescale(self, sx, sy):
        self.x *= sx
        self.y *= sy
        self.field_w *= sx
        self.field_h *= sy
        self.radius *= sy


class Paddle:
    """Common paddle behaviour; subclasses decide how `update` moves it."""

    owner = None
    # +1 when the striking face points right (left-hand paddle), -1 otherwise
    facing = 1

    def __init__(self, x, y, field_h=FIELD_H, width=PADDLE_W, height=PADDLE_H, speed=PLAYER_SPEED):
        self.x, self.y = x, y
        self.width, self.height = width, height
        self.speed = speed
        self.field_h = field_h
        self.glowing = False

    @property
    def center_y(self):
        return self.y + self.height / 2

    @property
    def max_y(self):
        return self.field_h - self.height

    def clamp_to_field(self, field_h=None):
        if field_h is not None:
            self.field_h = field_h
        self.y = clamp(self.y, 0, self.max_y)

    def check_collision(self, ball):
        r = ball.radius
        return boxes_overlap(ball.x - r, ball.y - r, 2 * r, 2 * r,
                             self.x, self.y, self.width, self.height)

    def resolve_collision(self, ball):
        """Bounce `ball` off this paddle and return the normalized hit offset."""
        if self.facing > 0:
            ball.x = self.x + self.width + ball.radius
        else:
            ball.x = self.x - ball.radius
        ball.vx = -ball.vx

        hit = (ball.y - self.center_y) / (self.height / 2)
        ball.vy = hit * HIT_ANGLE

        ball.vx *= RALLY_SPEEDUP
        ball.clamp_speed()
        self.glowing = True
        return hit

    def update(self, ball, dt=FRAME_DT):
        raise NotImplementedError

    def rescale(self, sx, sy, field_h):
        self.x *= sx
        self.y *= sy
        self.width *= sx
        self.height *= sy
        self.clamp_to_field(field_h)


class PlayerPaddle(Paddle):
    owner = Owner.PLAYER
    facing = 1

    def __init__(self, x, y, field_h=FIELD_H, width=PADDLE_W, height=PADDLE_H,
                 speed=PLAYER_SPEED, smoothing=True):
        super().__init__(x, y, field_h, width, height, speed)
        self.target_y = y
        self.smoothing = smoothing
        self.moving_up = False
        self.moving_down = False

    def set_target_y(self, y):
        self.target_y = clamp(y, 0, self.max_y)

    def point_at(self, pointer_y):
        # Center the paddle on the pointer
        self.set_target_y(pointer_y - self.height / 2)

    def update(self, ball=None, dt=FRAME_DT):
        if self.moving_up or self.moving_down:
            step = self.speed * frames(dt)
            if self.moving_up:
                self.y -= step
            if self.moving_down:
                self.y += step
            self.clamp_to_field()
            # Keys win over the pointer; releasing them must not snap back
            self.target_y = self.y
            return

        if self.smoothing:
            self.y += (self.target_y - self.y) * SMOOTHING
        else:
            self.y = self.target_y
        self.clamp_to_field()

    def rescale(self, sx, sy, field_h):
        super().rescale(sx, sy, field_h)
        self.set_target_y(self.target_y * sy)


class AIPaddle(Paddle):
    owner = Owner.AI
    facing = -1

    def __init__(self, x, y, predictor, field_h=FIELD_H, width=PADDLE_W, height=PADDLE_H):
        super().__init__(x, y, field_h, width, height, predictor.difficulty.speed)
        self.predictor = predictor
        self.target_y = y
        self.last_ball_y = 0.0

    def update(self, ball, dt=FRAME_DT):
        difficulty = self.predictor.difficulty
        self.speed = difficulty.speed

        if self.predictor.should_react(ball, self.last_ball_y, self.facing):
            self.last_ball_y = ball.y
            self.target_y = self.predictor.choose_target(ball, self)

        # Constant-speed approach that stops on the target instead of jittering past it
        step = self.speed * frames(dt)
        gap = self.target_y - self.y
        if gap > 0:
            self.y += min(step, gap)
        elif gap < 0:
            self.y -= min(step, -gap)
        self.clamp_to_field()

    def rescale(self, sx, sy, field_h):
        super().rescale(sx, sy, field_h)
        self.target_y = clamp(self.target_y * sy, 0, self.max_y)
        self.last_ball_y *= sy
