import pytest

from pong_ai import DIFFICULTY, Predictor, difficulty_for
from pong_physics import AIPaddle, Ball


def test_difficulty_curve_endpoints():
    assert difficulty_for(1) == (3, 50)
    assert difficulty_for(10) == (8, 5)
    assert difficulty_for(1).speed == 3
    assert difficulty_for(10).reaction_delay == 5


def test_difficulty_curve_is_monotonic():
    levels = sorted(DIFFICULTY)
    assert levels == list(range(1, 11))
    speeds = [DIFFICULTY[n].speed for n in levels]
    delays = [DIFFICULTY[n].reaction_delay for n in levels]
    assert speeds == sorted(speeds)
    assert delays == sorted(delays, reverse=True)


@pytest.mark.parametrize("level", [0, 11, -1, 2.5, True, "3", None])
def test_unknown_level_is_rejected(level):
    with pytest.raises(ValueError):
        difficulty_for(level)


def test_imperfection_shrinks_with_level(rng):
    assert Predictor(1, rng=rng).imperfection == pytest.approx(1.0)
    assert Predictor(10, rng=rng).imperfection == pytest.approx(0.1)


def test_react_when_ball_comes_toward_cpu(rng):
    predictor = Predictor(1, rng=rng)
    ball = Ball(rng=rng)
    ball.vx = 5.0
    assert predictor.should_react(ball, ball.y, facing=-1)


def test_reaction_delay_gates_tracking_when_ball_leaves(rng):
    predictor = Predictor(1, rng=rng)
    ball = Ball(rng=rng)
    ball.vx = -5.0
    assert not predictor.should_react(ball, ball.y - 50, facing=-1)
    assert predictor.should_react(ball, ball.y - 51, facing=-1)


def test_intercept_folds_wall_bounces(rng):
    predictor = Predictor(10, rng=rng)
    ball = Ball(rng=rng)
    ball.x, ball.y, ball.vx, ball.vy = 400.0, 250.0, 5.0, 5.0
    # 76 frames to reach x=780, straight line ends at 630, one bounce
    assert predictor.intercept_y(ball, 780, 500) == pytest.approx(370)


def test_stationary_ball_is_not_approaching(rng):
    predictor = Predictor(10, rng=rng)
    ball = Ball(rng=rng)
    ball.vx = 0.0
    assert predictor.intercept_y(ball, 780, 500) is None
    assert not predictor.approaching(ball, facing=-1)


def test_target_on_approach_is_close_at_top_level(rng):
    predictor = Predictor(10, rng=rng)
    paddle = AIPaddle(780, 200, predictor)
    ball = Ball(rng=rng)
    ball.x, ball.y, ball.vx, ball.vy = 400.0, 250.0, 5.0, 5.0
    for _ in range(50):
        target = predictor.choose_target(ball, paddle)
        # intercept 370, paddle centered on it, at most 5 units of aim error
        assert 315 <= target <= 325


def test_target_is_clamped_to_paddle_range(rng):
    predictor = Predictor(1, rng=rng)
    paddle = AIPaddle(780, 200, predictor)
    ball = Ball(rng=rng)
    ball.x, ball.y, ball.vx, ball.vy = 770.0, 495.0, 5.0, 0.0
    for _ in range(50):
        assert 0 <= predictor.choose_target(ball, paddle) <= 400


def test_ball_leaving_sends_cpu_to_center(rng):
    predictor = Predictor(10, rng=rng)
    paddle = AIPaddle(780, 0, predictor)
    ball = Ball(rng=rng)
    ball.vx = -5.0
    assert predictor.choose_target(ball, paddle) == pytest.approx(200)

    predictor.set_level(1)
    for _ in range(50):
        assert 155 <= predictor.choose_target(ball, paddle) <= 245


def test_set_level_updates_difficulty(rng):
    predictor = Predictor(1, rng=rng)
    predictor.set_level(7)
    assert predictor.level == 7
    assert predictor.difficulty == (6, 20)
    with pytest.raises(ValueError):
        predictor.set_level(12)
    assert predictor.level == 7
