from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import List, Mapping, Optional, Sequence, Tuple

from . import catalog
from .models import WineColor

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class OptionSet:
    """Display-ordered choices for one question plus the correct one."""

    choices: Tuple[str, ...]
    correct_answer: str


def _sample(pool: Sequence[str], count: int, rng: random.Random) -> List[str]:
    """Draw up to ``count`` distinct entries; short pools yield fewer."""
    if len(pool) < count:
        LOGGER.debug("Pool of %s cannot supply %s decoys; using all of it.", len(pool), count)
    return rng.sample(list(pool), min(count, len(pool)))


def _without(pool: Sequence[str], taken: Sequence[str]) -> List[str]:
    return [item for item in pool if item not in taken]


def generate_vintage_choices(vintage: int, rng: random.Random | None = None) -> OptionSet:
    """Correct year, up to two close neighbours and one unusual year."""
    rng = rng or random.Random()
    years: List[int] = [vintage]

    neighbours = [
        vintage + offset
        for offset in (-2, -1, 1, 2)
        if catalog.VINTAGE_MIN <= vintage + offset <= catalog.VINTAGE_MAX
    ]
    years.extend(rng.sample(neighbours, min(2, len(neighbours))))

    older = [vintage - offset for offset in catalog.OLD_VINTAGE_OFFSETS]
    future = list(catalog.FUTURE_VINTAGES)
    branches = [older, future] if rng.random() < 0.5 else [future, older]
    for branch in branches:
        candidates = [year for year in branch if year not in years]
        if candidates:
            years.append(rng.choice(candidates))
            break

    return OptionSet(
        choices=tuple(str(year) for year in sorted(years)),
        correct_answer=str(vintage),
    )


def generate_color_choices(color: WineColor) -> OptionSet:
    """Fixed colour choices; only asked when the glass hides the wine."""
    answer = color.display_name
    if answer not in catalog.COLOR_CHOICES:
        answer = catalog.OTHER_COLOR
    return OptionSet(choices=tuple(sorted(catalog.COLOR_CHOICES)), correct_answer=answer)


def variety_family(variety: str, color: WineColor) -> List[str]:
    """Varieties of the same colour family as ``variety``."""
    if variety in catalog.RED_VARIETIES:
        return list(catalog.RED_VARIETIES)
    if variety in catalog.WHITE_VARIETIES:
        return list(catalog.WHITE_VARIETIES)
    if color == WineColor.RED:
        return list(catalog.RED_VARIETIES)
    return list(catalog.WHITE_VARIETIES)


def generate_variety_choices(
    variety: str,
    color: WineColor,
    is_black_glass: bool,
    rng: random.Random | None = None,
) -> OptionSet:
    """
    Grape variety choices.

    With a black glass the decoys cross colour families (one red, one white
    and one more of either) since the player cannot see the wine. With a
    clear glass all decoys share the true variety's colour.
    """
    rng = rng or random.Random()
    choices: List[str] = [variety]

    if is_black_glass:
        reds = _without(catalog.BLACK_GLASS_RED_VARIETIES, [variety])
        whites = _without(catalog.BLACK_GLASS_WHITE_VARIETIES, [variety])
        choices.extend(_sample(reds, 1, rng))
        choices.extend(_sample(whites, 1, rng))
        choices.extend(_sample(_without(reds + whites, choices), 1, rng))
    else:
        same_color = _without(variety_family(variety, color), [variety])
        choices.extend(_sample(same_color, 3, rng))

    return OptionSet(choices=tuple(sorted(choices)), correct_answer=variety)


def hemisphere_for_country(country: str) -> str:
    return "Southern" if country in catalog.SOUTHERN_COUNTRIES else "Northern"


def generate_hemisphere_choices(country: str) -> OptionSet:
    return OptionSet(
        choices=tuple(sorted(catalog.HEMISPHERE_CHOICES)),
        correct_answer=hemisphere_for_country(country),
    )


def generate_country_choices(country: str, rng: random.Random | None = None) -> OptionSet:
    rng = rng or random.Random()
    choices = [country]
    choices.extend(_sample(_without(catalog.COUNTRIES, [country]), 3, rng))
    return OptionSet(choices=tuple(sorted(choices)), correct_answer=country)


def generate_region_choices(
    region: str,
    country: str,
    rng: random.Random | None = None,
    regions_by_country: Optional[Mapping[str, Sequence[str]]] = None,
) -> OptionSet:
    """
    Correct region, up to two from the same country, and one outlier.

    Countries missing from the table use a placeholder pool instead of
    failing. The outlier comes from every known region and is skipped when
    nothing new is left to draw.
    """
    rng = rng or random.Random()
    table = catalog.REGIONS_BY_COUNTRY if regions_by_country is None else regions_by_country

    if country in table:
        country_regions = list(table[country])
    else:
        LOGGER.debug("No region table for %s; using placeholder pool.", country)
        country_regions = list(catalog.DEFAULT_REGION_POOL)

    choices = [region]
    choices.extend(_sample(_without(country_regions, choices), 2, rng))

    every_region = [name for regions in table.values() for name in regions]
    choices.extend(_sample(_without(every_region, choices), 1, rng))

    return OptionSet(choices=tuple(sorted(choices)), correct_answer=region)
