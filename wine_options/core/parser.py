from __future__ import annotations

import logging
import re
from typing import Iterable, List, Optional, Tuple

from . import catalog
from .models import WineColor, WineInfo

LOGGER = logging.getLogger(__name__)

VINTAGE_PATTERN = re.compile(r"\b(19\d{2}|20\d{2})\b")

KNOWN_COUNTRIES: List[str] = sorted(set(catalog.COUNTRIES) | set(catalog.SOUTHERN_COUNTRIES))
KNOWN_VARIETIES: List[str] = catalog.RED_VARIETIES + catalog.WHITE_VARIETIES

UNKNOWN_PRODUCER = "Unknown Producer"


def _find_longest(text: str, names: Iterable[str]) -> Optional[Tuple[str, int]]:
    """Return the longest name appearing as whole words in text, with its offset."""
    best: Optional[Tuple[str, int]] = None
    for name in names:
        match = re.search(rf"(?<!\w){re.escape(name)}(?!\w)", text, flags=re.IGNORECASE)
        if match is None:
            continue
        if best is None or len(name) > len(best[0]):
            best = (name, match.start())
    return best


def infer_color(variety: str, region: str) -> WineColor:
    if region == "Champagne":
        return WineColor.SPARKLING
    if variety in catalog.RED_VARIETIES:
        return WineColor.RED
    return WineColor.WHITE


def parse_label_text(text: str) -> Optional[WineInfo]:
    """
    Parse recognised label text into a WineInfo.

    Returns None if the text lacks a vintage, a known country or a known
    grape variety.
    """
    cleaned = " ".join(text.split())

    vintage_match = VINTAGE_PATTERN.search(cleaned)
    if vintage_match is None:
        LOGGER.debug("No vintage in label text %r", cleaned)
        return None

    country = _find_longest(cleaned, KNOWN_COUNTRIES)
    if country is None:
        LOGGER.debug("No known country in label text %r", cleaned)
        return None

    variety = _find_longest(cleaned, KNOWN_VARIETIES)
    if variety is None:
        LOGGER.debug("No known variety in label text %r", cleaned)
        return None

    region = _find_longest(cleaned, catalog.all_regions())
    region_name = region[0] if region else catalog.DEFAULT_REGION_POOL[0]

    producer_end = min(variety[1], vintage_match.start())
    producer = cleaned[:producer_end].strip() or UNKNOWN_PRODUCER

    return WineInfo(
        vintage=int(vintage_match.group(1)),
        country=country[0],
        region=region_name,
        variety=variety[0],
        producer=producer,
        color=infer_color(variety[0], region_name),
    )
