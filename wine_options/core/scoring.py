from __future__ import annotations

from typing import List, Optional, Tuple

from .models import GameState, ScoreSummary

SCORE_MESSAGES: List[Tuple[int, str]] = [
    (90, "🏆 Wine Master! Incredible palate!"),
    (75, "🍷 Excellent! You know your wines!"),
    (60, "👍 Good job! Keep tasting!"),
    (40, "🤔 Not bad! Practice makes perfect!"),
]
FALLBACK_MESSAGE = "😅 This wine had you fooled! Try another?"

IMPROVED_MESSAGE = "Great improvement when you could see the label!"
BLIND_MESSAGE = "Impressive blind tasting skills!"
CONSISTENT_MESSAGE = "Consistent performance in both rounds!"


def percentage_of(total: int, max_score: int) -> int:
    if max_score <= 0:
        return 0
    # Half-up rounding; round() would give banker's rounding.
    return int(total * 100 / max_score + 0.5)


def score_message(percentage: int) -> str:
    for threshold, message in SCORE_MESSAGES:
        if percentage >= threshold:
            return message
    return FALLBACK_MESSAGE


def round_comparison(round1: int, round2: int) -> str:
    if round2 > round1:
        return IMPROVED_MESSAGE
    if round1 > round2:
        return BLIND_MESSAGE
    return CONSISTENT_MESSAGE


def summarize(state: GameState) -> ScoreSummary:
    rounds = state.rounds_selected
    round1 = state.scores.round1
    round2 = state.scores.round2 if rounds == 2 else 0
    total = round1 + round2
    max_score = len(state.questions) * rounds
    percentage = percentage_of(total, max_score)

    comparison: Optional[str] = None
    if rounds == 2:
        comparison = round_comparison(round1, round2)

    return ScoreSummary(
        total=total,
        max_score=max_score,
        percentage=percentage,
        message=score_message(percentage),
        rounds_selected=rounds,
        round1=round1,
        round2=round2,
        round_comparison=comparison,
    )


def build_share_text(summary: ScoreSummary, base_url: str) -> str:
    return (
        f"🍷 I just scored {summary.total}/{summary.max_score} on the Wine Options Game! "
        f"Can you beat my score? Try it at {base_url.rstrip('/')}/wine-game"
    )
