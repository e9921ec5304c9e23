"""
Match state machine: owns the ball and both paddles, runs one simulation tick
at a time, keeps score and tells listeners what happened.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

import numpy as np

from pong_ai import DEFAULT_LEVEL, Predictor, difficulty_for
from pong_physics import (
    BALL_RADIUS, FIELD_H, FIELD_W, FRAME_DT, PADDLE_H, PADDLE_MARGIN, PADDLE_W,
    AIPaddle, Ball, Owner, PlayerPaddle,
)

logger = logging.getLogger(__name__)

WIN_SCORE = 10


class MatchState(str, Enum):
    MENU = "menu"
    PLAYING = "playing"
    PAUSED = "paused"
    ENDED = "ended"


class ControlMode(str, Enum):
    POINTER = "pointer"
    KEYBOARD = "keyboard"


class Event(str, Enum):
    WALL_BOUNCE = "wall_bounce"
    PADDLE_HIT = "paddle_hit"
    SCORE = "score"
    MATCH_WON = "match_won"


Listener = Callable[[Event, dict], None]


def _check_win_score(win_score):
    if isinstance(win_score, bool) or not isinstance(win_score, int) or win_score <= 0:
        raise ValueError(f"win score must be a positive integer, got {win_score!r}")


def _check_field(width, height):
    if width <= 0 or height <= 0:
        raise ValueError(f"field dimensions must be positive, got {width!r}x{height!r}")


@dataclass
class MatchConfig:
    win_score: int = WIN_SCORE
    level: int = DEFAULT_LEVEL
    paddle_smoothing: bool = True
    control_mode: ControlMode = ControlMode.KEYBOARD
    field_width: float = FIELD_W
    field_height: float = FIELD_H
    seed: Optional[int] = None

    def __post_init__(self):
        _check_win_score(self.win_score)
        difficulty_for(self.level)
        _check_field(self.field_width, self.field_height)
        self.control_mode = ControlMode(self.control_mode)


# -----------------------------
# Frame snapshot handed to the presentation layer
# -----------------------------
@dataclass(frozen=True)
class PaddleView:
    x: float
    y: float
    width: float
    height: float
    glowing: bool


@dataclass(frozen=True)
class Frame:
    width: float
    height: float
    ball_x: float
    ball_y: float
    ball_radius: float
    player: PaddleView
    ai: PaddleView
    player_score: int
    ai_score: int
    state: MatchState
    winner: Optional[Owner]
    level: int
    win_score: int


def _view(paddle):
    return PaddleView(paddle.x, paddle.y, paddle.width, paddle.height, paddle.glowing)


class MatchController:
    def __init__(self, config: Optional[MatchConfig] = None, rng=None):
        self.config = config or MatchConfig()
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)
        self.width = self.config.field_width
        self.height = self.config.field_height
        self.state = MatchState.MENU
        self.player_score = 0
        self.ai_score = 0
        self.winner: Optional[Owner] = None
        self._listeners: List[Listener] = []
        self._build_entities()

    def _build_entities(self):
        sx = self.width / FIELD_W
        sy = self.height / FIELD_H
        pw, ph = PADDLE_W * sx, PADDLE_H * sy
        mid = self.height / 2 - ph / 2
        self.ball = Ball(self.width, self.height, BALL_RADIUS * sy, rng=self.rng)
        self.player = PlayerPaddle(PADDLE_MARGIN * sx, mid, self.height, pw, ph,
                                   smoothing=self.config.paddle_smoothing)
        self.ai = AIPaddle(self.width - pw - PADDLE_MARGIN * sx, mid,
                           Predictor(self.config.level, rng=self.rng), self.height, pw, ph)

    # -----------------------------
    # Events
    # -----------------------------
    def subscribe(self, listener: Listener):
        self._listeners.append(listener)

    def _emit(self, event, **payload):
        for listener in self._listeners:
            try:
                listener(event, payload)
            except Exception:
                # Feedback is fire-and-forget; a broken listener must not stall the match
                logger.exception("listener %r failed on %s", listener, event.value)

    # -----------------------------
    # State transitions
    # -----------------------------
    def start(self):
        if self.state == MatchState.PLAYING:
            return
        if self.winner is not None:
            self.reset()
        self._enter(MatchState.PLAYING)

    def pause(self):
        if self.state != MatchState.PLAYING:
            logger.debug("pause ignored in state %s", self.state.value)
            return
        self._enter(MatchState.PAUSED)

    def toggle_pause(self):
        if self.state == MatchState.PLAYING:
            self.pause()
        elif self.state == MatchState.PAUSED:
            self.start()

    def stop(self):
        """Leave the match for the menu; scores are kept for the next start."""
        self.ball.serve()
        self.player.moving_up = self.player.moving_down = False
        self._enter(MatchState.MENU)

    def reset(self):
        self.player_score = 0
        self.ai_score = 0
        self.winner = None
        self.player.glowing = self.ai.glowing = False
        self.ball.serve()
        logger.info("match reset (level %d, first to %d)", self.level, self.win_score)

    def _enter(self, state):
        if state != self.state:
            logger.info("match %s -> %s", self.state.value, state.value)
        self.state = state

    # -----------------------------
    # Configuration
    # -----------------------------
    @property
    def level(self):
        return self.ai.predictor.level

    @property
    def win_score(self):
        return self.config.win_score

    def set_level(self, level):
        self.ai.predictor.set_level(level)
        self.config.level = level
        logger.info("difficulty level set to %d", level)

    def select_level(self, level):
        # Picking a level from the menu starts a fresh match at that level
        self.set_level(level)
        self.reset()

    def set_win_score(self, win_score):
        _check_win_score(win_score)
        self.config.win_score = win_score

    def set_paddle_smoothing(self, enabled):
        self.config.paddle_smoothing = bool(enabled)
        self.player.smoothing = bool(enabled)

    def set_control_mode(self, mode):
        self.config.control_mode = ControlMode(mode)

    def resize(self, width, height):
        """Rescale every entity to a new field size; score and state stay."""
        _check_field(width, height)
        sx, sy = width / self.width, height / self.height
        self.width, self.height = width, height
        self.config.field_width, self.config.field_height = width, height
        self.ball.rescale(sx, sy)
        self.player.rescale(sx, sy, height)
        self.ai.rescale(sx, sy, height)
        # Keep the CPU paddle pinned to the right edge
        self.ai.x = width - self.ai.width - PADDLE_MARGIN * (width / FIELD_W)

    # -----------------------------
    # Input
    # -----------------------------
    def set_move_intent(self, up=False, down=False):
        self.player.moving_up = bool(up)
        self.player.moving_down = bool(down)

    def pointer_moved(self, y):
        if self.config.control_mode != ControlMode.POINTER:
            return
        self.player.point_at(y)
        if self.state != MatchState.PLAYING:
            # Show the paddle following the pointer before play starts
            self.player.y = self.player.target_y

    # -----------------------------
    # Simulation
    # -----------------------------
    def tick(self, dt=FRAME_DT):
        """Advance the match by `dt` seconds. Returns False when nothing moved."""
        if self.state != MatchState.PLAYING:
            return False

        ball = self.ball
        self.player.glowing = self.ai.glowing = False

        self.player.update(ball, dt)
        ball.advance(dt)

        if ball.hits_wall():
            ball.reflect_vertical()
            self._emit(Event.WALL_BOUNCE, x=ball.x, y=ball.y)

        self.ai.update(ball, dt)

        paddle = self.player if ball.x < self.width / 2 else self.ai
        if paddle.check_collision(ball):
            hit = paddle.resolve_collision(ball)
            self._emit(Event.PADDLE_HIT, owner=paddle.owner, offset=hit)

        if ball.x < 0:
            self._point(Owner.AI)
        elif ball.x > self.width:
            self._point(Owner.PLAYER)
        return True

    def _point(self, scorer):
        if scorer == Owner.PLAYER:
            self.player_score += 1
            score = self.player_score
        else:
            self.ai_score += 1
            score = self.ai_score
        logger.debug("%s scores: %d-%d", scorer.value, self.player_score, self.ai_score)
        self._emit(Event.SCORE, owner=scorer, player_score=self.player_score, ai_score=self.ai_score)
        self.ball.serve()

        if score >= self.win_score:
            self.winner = scorer
            self._enter(MatchState.ENDED)
            logger.info("%s wins %d-%d", scorer.value, self.player_score, self.ai_score)
            self._emit(Event.MATCH_WON, owner=scorer)

    def snapshot(self):
        return Frame(
            width=self.width,
            height=self.height,
            ball_x=self.ball.x,
            ball_y=self.ball.y,
            ball_radius=self.ball.radius,
            player=_view(self.player),
            ai=_view(self.ai),
            player_score=self.player_score,
            ai_score=self.ai_score,
            state=self.state,
            winner=self.winner,
            level=self.level,
            win_score=self.win_score,
        )
