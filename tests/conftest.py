"""Shared fixtures for the wine options game tests."""

from __future__ import annotations

import random
from typing import Callable, List, Optional

import pytest

from wine_options.core import engine
from wine_options.core.errors import ExtractionError
from wine_options.core.models import GameState, ImageUpload, WineColor, WineInfo

BORDEAUX = WineInfo(
    vintage=2020,
    country="France",
    region="Bordeaux",
    variety="Cabernet Sauvignon",
    producer="Château Margaux",
    color=WineColor.RED,
)

MARLBOROUGH = WineInfo(
    vintage=2022,
    country="New Zealand",
    region="Marlborough",
    variety="Sauvignon Blanc",
    producer="Cloudy Bay",
    color=WineColor.WHITE,
)


class FakeRecognizer:
    """Returns a fixed wine and counts calls; optionally runs a hook mid-recognition."""

    def __init__(
        self,
        wine: WineInfo = BORDEAUX,
        error: Optional[str] = None,
        during: Optional[Callable[[], None]] = None,
    ) -> None:
        self.wine = wine
        self.error = error
        self.during = during
        self.calls: List[ImageUpload] = []

    def recognize(self, upload: ImageUpload) -> WineInfo:
        self.calls.append(upload)
        if self.during is not None:
            self.during()
        if self.error is not None:
            raise ExtractionError(self.error)
        return self.wine


def make_upload(size: int = 2048, mime_type: str = "image/jpeg", name: str = "label.jpg") -> ImageUpload:
    return ImageUpload(name=name, mime_type=mime_type, size=size)


def start_game(
    state: GameState,
    rounds: int = 2,
    black_glass: bool = True,
    recognizer: Optional[FakeRecognizer] = None,
    seed: int = 7,
) -> FakeRecognizer:
    recognizer = recognizer or FakeRecognizer()
    engine.select_rounds(state, rounds)
    engine.select_glass(state, black_glass)
    assert engine.select_image(state, make_upload())
    assert engine.submit_photo(state, recognizer, rng=random.Random(seed))
    return recognizer


def answer_current(state: GameState, correct: bool) -> bool:
    question = engine.current_question(state)
    assert question is not None
    if correct:
        choice = question.correct_answer
    else:
        choice = next(c for c in question.choices if c != question.correct_answer)
    return engine.submit_answer(state, choice)


@pytest.fixture
def state() -> GameState:
    return engine.create_game_state()


@pytest.fixture
def recognizer() -> FakeRecognizer:
    return FakeRecognizer()
