import numpy as np
import pytest

from pong_match import MatchConfig, MatchController


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def match():
    return MatchController(MatchConfig(seed=7))


@pytest.fixture
def events(match):
    seen = []
    match.subscribe(lambda event, payload: seen.append((event, payload)))
    return seen
