"""Tests for the game state machine."""

from __future__ import annotations

import re

import pytest

from wine_options.core import engine, scoring
from wine_options.core.errors import InvalidStepError
from wine_options.core.images import TOO_LARGE_MESSAGE
from wine_options.core.models import Answer, GameStep, RoundScores
from tests.conftest import FakeRecognizer, answer_current, make_upload, start_game


def _assert_initial_shape(state):
    assert state.step == GameStep.ROUNDS
    assert state.wine_info is None
    assert state.questions == []
    assert state.current_question_index == 0
    assert state.current_round == 1
    assert state.rounds_selected == 2
    assert state.is_black_glass is False
    assert state.answers == {}
    assert state.scores == RoundScores()
    assert state.error is None
    assert state.selected_image is None


class TestSetupSteps:
    def test_new_state_starts_at_rounds(self, state):
        _assert_initial_shape(state)
        assert state.player_id is None
        assert re.fullmatch(r"temp_\d+_[a-z0-9]{9}", state.guest_id)

    def test_signed_in_player_has_no_guest_id(self):
        state = engine.create_game_state(player_id="user-1")
        assert state.guest_id is None
        assert engine.player_key(state) == "user-1"

    def test_rounds_then_glass_then_photo(self, state):
        engine.select_rounds(state, 1)
        assert state.step == GameStep.GLASS
        assert state.rounds_selected == 1

        engine.select_glass(state, True)
        assert state.step == GameStep.PHOTO
        assert state.is_black_glass is True

    def test_invalid_round_count(self, state):
        with pytest.raises(ValueError):
            engine.select_rounds(state, 3)
        assert state.step == GameStep.ROUNDS

    def test_out_of_order_action_rejected(self, state):
        with pytest.raises(InvalidStepError):
            engine.select_glass(state, False)
        with pytest.raises(InvalidStepError):
            engine.submit_answer(state, "2020")


class TestPhotoStep:
    def _to_photo(self, state):
        engine.select_rounds(state, 2)
        engine.select_glass(state, False)

    def test_oversized_file_keeps_photo_step(self, state, recognizer):
        self._to_photo(state)

        accepted = engine.select_image(state, make_upload(size=int(10.5 * 1024 * 1024)))

        assert accepted is False
        assert state.step == GameStep.PHOTO
        assert state.error == TOO_LARGE_MESSAGE
        assert state.selected_image is None
        with pytest.raises(InvalidStepError):
            engine.submit_photo(state, recognizer)
        assert recognizer.calls == []
        assert state.questions == []

    def test_non_image_rejected(self, state):
        self._to_photo(state)
        assert engine.select_image(state, make_upload(mime_type="text/plain")) is False
        assert state.error == "Please select a valid image file"

    def test_valid_file_clears_previous_error(self, state):
        self._to_photo(state)
        engine.select_image(state, make_upload(mime_type="text/plain"))
        assert engine.select_image(state, make_upload()) is True
        assert state.error is None
        assert state.selected_image is not None

    def test_clear_image(self, state):
        self._to_photo(state)
        engine.select_image(state, make_upload())
        engine.clear_image(state)
        assert state.selected_image is None

    def test_submit_builds_questions(self, state, recognizer):
        self._to_photo(state)
        engine.select_image(state, make_upload())

        assert engine.submit_photo(state, recognizer) is True

        assert state.step == GameStep.QUESTIONS
        assert state.wine_info == recognizer.wine
        assert len(state.questions) == 5
        assert state.current_question_index == 0
        assert state.current_round == 1
        assert len(recognizer.calls) == 1

    def test_extraction_failure_stays_on_photo(self, state):
        self._to_photo(state)
        engine.select_image(state, make_upload())

        started = engine.submit_photo(state, FakeRecognizer(error="Failed to process wine image"))

        assert started is False
        assert state.step == GameStep.PHOTO
        assert state.error == "Failed to process wine image"
        assert state.questions == []

    def test_result_for_abandoned_game_is_dropped(self, state):
        self._to_photo(state)
        engine.select_image(state, make_upload())
        recognizer = FakeRecognizer(during=lambda: engine.reset_game_state(state))

        started = engine.submit_photo(state, recognizer)

        assert started is False
        _assert_initial_shape(state)


class TestQuestions:
    def test_single_round_four_of_six(self, state):
        start_game(state, rounds=1, black_glass=True)
        assert len(state.questions) == 6

        for index in range(6):
            answer_current(state, correct=index < 4)

        assert state.step == GameStep.RESULTS
        assert state.scores.round1 == 4
        assert state.scores.round2 == 0

        summary = scoring.summarize(state)
        assert (summary.total, summary.max_score, summary.percentage) == (4, 6, 67)

    def test_two_rounds_black_glass(self, state):
        start_game(state, rounds=2, black_glass=True)

        for index in range(6):
            answer_current(state, correct=index < 3)
        for index in range(6):
            answer_current(state, correct=index < 5)

        assert state.step == GameStep.RESULTS
        summary = scoring.summarize(state)
        assert (summary.total, summary.max_score, summary.percentage) == (8, 12, 67)
        assert summary.round_comparison == scoring.IMPROVED_MESSAGE

    def test_round_two_restarts_and_keeps_round_one_answers(self, state):
        start_game(state, rounds=2, black_glass=False)
        count = len(state.questions)

        for _ in range(count):
            answer_current(state, correct=True)

        assert state.step == GameStep.QUESTIONS
        assert state.current_round == 2
        assert state.current_question_index == 0
        assert all(state.answers[q.id].round1 == q.correct_answer for q in state.questions)
        assert all(state.answers[q.id].round2 is None for q in state.questions)

        answer_current(state, correct=False)
        first = state.questions[0]
        assert state.answers[first.id].round1 == first.correct_answer
        assert state.answers[first.id].round2 != first.correct_answer

    def test_answer_returns_correctness_and_advances(self, state):
        start_game(state, rounds=1, black_glass=False)

        assert answer_current(state, correct=True) is True
        assert state.current_question_index == 1
        assert answer_current(state, correct=False) is False
        assert state.current_question_index == 2
        assert state.scores.round1 == 1

    def test_unknown_choice_rejected(self, state):
        start_game(state)
        with pytest.raises(ValueError):
            engine.submit_answer(state, "Not a choice")
        assert state.answers == {}

    def test_repeat_answer_rejected(self, state):
        start_game(state, rounds=1)
        question = engine.current_question(state)
        state.answers[question.id] = Answer(round1=question.correct_answer)

        assert engine.has_answered(state) is True
        with pytest.raises(InvalidStepError):
            engine.submit_answer(state, question.correct_answer)

    def test_scores_never_exceed_question_count(self, state):
        start_game(state, rounds=2)
        while state.step == GameStep.QUESTIONS:
            answer_current(state, correct=True)

        assert state.scores.round1 == len(state.questions)
        assert state.scores.round2 == len(state.questions)
        assert scoring.summarize(state).percentage == 100

    def test_current_question_outside_questions_step(self, state):
        assert engine.current_question(state) is None
        assert engine.has_answered(state) is False


class TestResultsAndReset:
    def _finish(self, state):
        start_game(state, rounds=1)
        while state.step == GameStep.QUESTIONS:
            answer_current(state, correct=True)

    def test_group_side_branch(self, state):
        self._finish(state)

        engine.open_group(state)
        assert state.step == GameStep.GROUP
        engine.close_group(state)
        assert state.step == GameStep.RESULTS

    def test_group_only_from_results(self, state):
        with pytest.raises(InvalidStepError):
            engine.open_group(state)

    def test_guest_gets_signup_prompt(self, state):
        assert engine.needs_signup_prompt(state) is False
        self._finish(state)
        assert engine.needs_signup_prompt(state) is True

    def test_signed_in_player_gets_no_prompt(self):
        state = engine.create_game_state(player_id="user-1")
        self._finish(state)
        assert engine.needs_signup_prompt(state) is False

    @pytest.mark.parametrize("stop_at", list(GameStep))
    def test_reset_from_any_step(self, state, stop_at):
        self._drive_to(state, stop_at)
        assert state.step == stop_at
        generation = state.generation

        engine.reset_game_state(state)

        _assert_initial_shape(state)
        assert state.generation == generation + 1

    def test_reset_twice_same_shape(self, state):
        self._finish(state)
        engine.reset_game_state(state)
        engine.reset_game_state(state)
        _assert_initial_shape(state)

    def _drive_to(self, state, step):
        if step == GameStep.ROUNDS:
            return
        engine.select_rounds(state, 2)
        if step == GameStep.GLASS:
            return
        engine.select_glass(state, True)
        if step == GameStep.PHOTO:
            engine.select_image(state, make_upload())
            return
        engine.select_image(state, make_upload())
        engine.submit_photo(state, FakeRecognizer())
        if step == GameStep.QUESTIONS:
            answer_current(state, correct=True)
            return
        while state.step == GameStep.QUESTIONS:
            answer_current(state, correct=False)
        if step == GameStep.GROUP:
            engine.open_group(state)
