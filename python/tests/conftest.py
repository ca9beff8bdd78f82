"""Shared fixtures: a hand-driven clock, an in-memory store and a seeded engine."""

from __future__ import annotations

import random

import pytest

from backend.engine.gameplay.game import GamePlay
from backend.engine.scheduler import Scheduler
from backend.models.highscore import ScoreStore
from backend.storage import MemoryStore
from helpers import ManualClock


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def scheduler(clock: ManualClock) -> Scheduler:
    return Scheduler(clock)


@pytest.fixture
def kv() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def store(kv: MemoryStore) -> ScoreStore:
    return ScoreStore(kv)


@pytest.fixture
def game(store: ScoreStore, scheduler: Scheduler) -> GamePlay:
    return GamePlay(store, scheduler=scheduler, rng=random.Random(1234))
