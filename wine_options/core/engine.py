from __future__ import annotations

import logging
import random
import string
import time
from typing import Optional

from .errors import ExtractionError, InputValidationError, InvalidStepError
from .images import validate_upload
from .models import Answer, GameState, GameStep, ImageUpload, Question, RoundScores
from .questions import build_questions
from .recognizer import LabelRecognizer

LOGGER = logging.getLogger(__name__)

DEFAULT_ROUNDS = 2
GUEST_ID_ALPHABET = string.ascii_lowercase + string.digits


def create_game_state(player_id: Optional[str] = None) -> GameState:
    state = GameState(player_id=player_id)
    if player_id is None:
        state.guest_id = generate_guest_id()
    return state


def reset_game_state(state: GameState) -> None:
    """Return to the rounds screen with everything from the last game cleared."""
    state.step = GameStep.ROUNDS
    state.wine_info = None
    state.questions = []
    state.current_question_index = 0
    state.current_round = 1
    state.rounds_selected = DEFAULT_ROUNDS
    state.is_black_glass = False
    state.answers = {}
    state.scores = RoundScores()
    state.error = None
    state.selected_image = None
    # Any recognition still in flight belongs to the previous game.
    state.generation += 1


def generate_guest_id(rng: Optional[random.Random] = None) -> str:
    rng = rng or random.Random()
    suffix = "".join(rng.choice(GUEST_ID_ALPHABET) for _ in range(9))
    return f"temp_{int(time.time() * 1000)}_{suffix}"


def _require_step(state: GameState, *steps: GameStep) -> None:
    if state.step not in steps:
        allowed = ", ".join(step.value for step in steps)
        raise InvalidStepError(f"Action requires step {allowed}; game is at {state.step.value}.")


def select_rounds(state: GameState, rounds: int) -> None:
    _require_step(state, GameStep.ROUNDS)
    if rounds not in (1, 2):
        raise ValueError("rounds must be 1 or 2.")
    state.rounds_selected = rounds
    state.step = GameStep.GLASS


def select_glass(state: GameState, is_black_glass: bool) -> None:
    _require_step(state, GameStep.GLASS)
    state.is_black_glass = is_black_glass
    state.step = GameStep.PHOTO


def select_image(state: GameState, upload: ImageUpload) -> bool:
    """Validate and remember the label photo. Returns False if it was rejected."""
    _require_step(state, GameStep.PHOTO)
    try:
        validate_upload(upload)
    except InputValidationError as exc:
        LOGGER.warning("Rejected label photo %s (%s, %s bytes): %s", upload.name, upload.mime_type, upload.size, exc)
        state.error = str(exc)
        state.selected_image = None
        return False

    state.error = None
    state.selected_image = upload
    return True


def clear_image(state: GameState) -> None:
    _require_step(state, GameStep.PHOTO)
    state.selected_image = None
    state.error = None


def submit_photo(
    state: GameState,
    recognizer: LabelRecognizer,
    rng: Optional[random.Random] = None,
) -> bool:
    """
    Recognise the selected photo and start the questions.

    Returns True when the game moved on to the questions. A recognition
    result that arrives after the game was reset or left the photo step is
    dropped.
    """
    _require_step(state, GameStep.PHOTO)
    if state.selected_image is None:
        raise InvalidStepError("No label photo has been selected.")

    generation = state.generation
    state.error = None

    try:
        wine = recognizer.recognize(state.selected_image)
    except ExtractionError as exc:
        if state.generation == generation and state.step == GameStep.PHOTO:
            LOGGER.warning("Label recognition failed: %s", exc)
            state.error = str(exc)
        return False

    if state.generation != generation or state.step != GameStep.PHOTO:
        LOGGER.warning("Discarding label recognition for a game that is no longer active.")
        return False

    state.wine_info = wine
    state.questions = build_questions(wine, state.is_black_glass, rng=rng)
    state.answers = {}
    state.scores = RoundScores()
    state.current_question_index = 0
    state.current_round = 1
    state.step = GameStep.QUESTIONS
    LOGGER.info(
        "Started %s-round game on %s %s with %s questions.",
        state.rounds_selected,
        wine.producer,
        wine.vintage,
        len(state.questions),
    )
    return True


def current_question(state: GameState) -> Optional[Question]:
    if state.step != GameStep.QUESTIONS:
        return None
    return state.questions[state.current_question_index]


def has_answered(state: GameState) -> bool:
    question = current_question(state)
    if question is None:
        return False
    answer = state.answers.get(question.id)
    return answer is not None and answer.get(state.current_round) is not None


def submit_answer(state: GameState, answer: str) -> bool:
    """Record an answer for the current question and move the game forward."""
    _require_step(state, GameStep.QUESTIONS)
    question = state.questions[state.current_question_index]
    if answer not in question.choices:
        raise ValueError("Selected answer is not one of the question's choices.")
    if has_answered(state):
        raise InvalidStepError("Question already answered in this round.")

    state.answers.setdefault(question.id, Answer()).record(state.current_round, answer)
    correct = question.is_correct(answer)
    if correct:
        state.scores.add_point(state.current_round)

    if state.current_question_index < len(state.questions) - 1:
        state.current_question_index += 1
    elif state.current_round == 1 and state.rounds_selected == 2:
        state.current_round = 2
        state.current_question_index = 0
    else:
        state.step = GameStep.RESULTS
        LOGGER.info("Game complete: round1=%s round2=%s", state.scores.round1, state.scores.round2)

    return correct


def open_group(state: GameState) -> None:
    _require_step(state, GameStep.RESULTS)
    state.step = GameStep.GROUP


def close_group(state: GameState) -> None:
    _require_step(state, GameStep.GROUP)
    state.step = GameStep.RESULTS


def needs_signup_prompt(state: GameState) -> bool:
    """Guests who finish a game are nudged to create an account."""
    return state.player_id is None and state.step in (GameStep.RESULTS, GameStep.GROUP)


def player_key(state: GameState) -> str:
    return state.player_id or state.guest_id or "guest"
