from __future__ import annotations

import random
import time
from typing import Callable, List, Optional

from . import options
from .models import Question, QuestionType, WineInfo
from .options import OptionSet


def build_questions(
    wine: WineInfo,
    is_black_glass: bool,
    rng: Optional[random.Random] = None,
    clock: Optional[Callable[[], float]] = None,
) -> List[Question]:
    """
    Build the ordered question list for one play-through.

    Vintage comes first, the colour question follows only for a black glass,
    then variety, hemisphere, country and region. Identifiers combine the
    question type with a single clock reading taken for the whole session.
    """
    rng = rng or random.Random()
    stamp = int((clock or time.time)() * 1000)

    option_sets: List[tuple[QuestionType, OptionSet]] = [
        (QuestionType.VINTAGE, options.generate_vintage_choices(wine.vintage, rng=rng)),
    ]
    if is_black_glass:
        option_sets.append((QuestionType.COLOR, options.generate_color_choices(wine.color)))
    option_sets.extend(
        [
            (
                QuestionType.VARIETY,
                options.generate_variety_choices(wine.variety, wine.color, is_black_glass, rng=rng),
            ),
            (QuestionType.HEMISPHERE, options.generate_hemisphere_choices(wine.country)),
            (QuestionType.COUNTRY, options.generate_country_choices(wine.country, rng=rng)),
            (QuestionType.REGION, options.generate_region_choices(wine.region, wine.country, rng=rng)),
        ]
    )

    return [
        Question(
            id=f"{question_type.value}_{stamp}",
            type=question_type,
            text=question_type.prompt,
            choices=option_set.choices,
            correct_answer=option_set.correct_answer,
            sort_order=sort_order,
        )
        for sort_order, (question_type, option_set) in enumerate(option_sets)
    ]
