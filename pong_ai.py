"""
CPU opponent: difficulty table and intercept prediction.
"""
import logging
from collections import namedtuple

import numpy as np

from pong_physics import clamp, fold_bounce

logger = logging.getLogger(__name__)

Difficulty = namedtuple("Difficulty", ["speed", "reaction_delay"])

# level -> paddle speed (units/frame) and reaction delay (ball-Y units)
DIFFICULTY = {
    1: Difficulty(3, 50),
    2: Difficulty(3.5, 45),
    3: Difficulty(4, 40),
    4: Difficulty(4.5, 35),
    5: Difficulty(5, 30),
    6: Difficulty(5.5, 25),
    7: Difficulty(6, 20),
    8: Difficulty(6.5, 15),
    9: Difficulty(7, 10),
    10: Difficulty(8, 5),
}
MIN_LEVEL, MAX_LEVEL = min(DIFFICULTY), max(DIFFICULTY)
DEFAULT_LEVEL = 1

AIM_NOISE = 50.0


def difficulty_for(level):
    if isinstance(level, bool) or not isinstance(level, (int, np.integer)) or level not in DIFFICULTY:
        raise ValueError(f"difficulty level must be an integer in {MIN_LEVEL}..{MAX_LEVEL}, got {level!r}")
    return DIFFICULTY[level]


class Predictor:
    """Picks where the CPU paddle should go.

    While the ball travels toward the paddle the target is the projected
    intercept, blurred by a level-dependent aiming error. Otherwise the paddle
    drifts back to the middle of the field.
    """

    def __init__(self, level=DEFAULT_LEVEL, rng=None):
        self.difficulty = difficulty_for(level)
        self.level = level
        self.rng = rng if rng is not None else np.random.default_rng()

    def set_level(self, level):
        self.difficulty = difficulty_for(level)
        self.level = level
        logger.debug("CPU level %d: speed=%s reaction_delay=%s", level, *self.difficulty)

    @property
    def imperfection(self):
        return (11 - self.level) / 10

    def approaching(self, ball, facing):
        # A paddle facing left (-1) sits on the right and waits for vx > 0
        return ball.vx * -facing > 0

    def should_react(self, ball, last_ball_y, facing):
        return (self.approaching(ball, facing)
                or abs(ball.y - last_ball_y) > self.difficulty.reaction_delay)

    def intercept_y(self, ball, paddle_x, field_h):
        """Ball Y when it reaches `paddle_x`, or None if it never will."""
        if ball.vx == 0:
            return None
        time_to_reach = (paddle_x - ball.x) / ball.vx
        future_y = ball.y + ball.vy * time_to_reach
        return fold_bounce(future_y, field_h)

    def choose_target(self, ball, paddle):
        field_h = paddle.field_h
        if self.approaching(ball, paddle.facing):
            future_y = self.intercept_y(ball, paddle.x, field_h)
            offset = self.rng.uniform(-AIM_NOISE, AIM_NOISE) * self.imperfection
            target = future_y + offset - paddle.height / 2
        else:
            center = field_h / 2 - paddle.height / 2
            target = center + self.rng.uniform(-AIM_NOISE, AIM_NOISE) * (1 - self.level / 10)
        return clamp(float(target), 0, field_h - paddle.height)
