from __future__ import annotations

from typing import Dict, List

RED_VARIETIES: List[str] = [
    "Cabernet Sauvignon",
    "Merlot",
    "Pinot Noir",
    "Shiraz",
    "Sangiovese",
    "Tempranillo",
]

WHITE_VARIETIES: List[str] = [
    "Chardonnay",
    "Sauvignon Blanc",
    "Riesling",
    "Pinot Grigio",
    "Gewürztraminer",
    "Albariño",
]

# Black-glass decoys are drawn from the first five of each family only.
BLACK_GLASS_RED_VARIETIES: List[str] = RED_VARIETIES[:5]
BLACK_GLASS_WHITE_VARIETIES: List[str] = WHITE_VARIETIES[:5]

COUNTRIES: List[str] = [
    "France",
    "Italy",
    "Spain",
    "USA",
    "Australia",
    "New Zealand",
    "Chile",
    "Argentina",
    "Germany",
    "Portugal",
]

SOUTHERN_COUNTRIES = frozenset({"Australia", "New Zealand", "South Africa", "Chile", "Argentina"})

HEMISPHERE_CHOICES: List[str] = ["Northern", "Southern", "Equator"]

OTHER_COLOR = "Other"
COLOR_CHOICES: List[str] = ["White", "Red", "Rosé", OTHER_COLOR]

REGIONS_BY_COUNTRY: Dict[str, List[str]] = {
    "France": ["Bordeaux", "Burgundy", "Champagne", "Rhône Valley", "Loire Valley", "Alsace"],
    "Italy": ["Tuscany", "Piedmont", "Veneto", "Sicily", "Umbria"],
    "USA": ["Napa Valley", "Sonoma", "Oregon", "Washington", "Finger Lakes"],
    "Australia": ["Barossa Valley", "Hunter Valley", "Margaret River", "Yarra Valley"],
    "New Zealand": ["Marlborough", "Central Otago", "Hawke's Bay"],
    "Spain": ["Rioja", "Ribera del Duero", "Priorat", "Rías Baixas"],
    "Chile": ["Maipo Valley", "Casablanca Valley", "Colchagua Valley"],
    "Argentina": ["Mendoza", "Salta", "San Juan"],
}

DEFAULT_REGION_POOL: List[str] = ["Unknown Region"]

VINTAGE_MIN = 2010
VINTAGE_MAX = 2024
FUTURE_VINTAGES: List[int] = [2025, 2026, 2027]
OLD_VINTAGE_OFFSETS: List[int] = list(range(5, 15))

# Label texts the mocked recogniser picks from.
CANDIDATE_LABELS: List[str] = [
    "Château Margaux Cabernet Sauvignon 2020 Bordeaux France",
    "Cloudy Bay Sauvignon Blanc 2022 Marlborough New Zealand",
    "Penfolds Shiraz 2019 Barossa Valley Australia",
    "Opus One Chardonnay 2021 Napa Valley USA",
]


def all_regions() -> List[str]:
    """Every known region, across all countries, in table order."""
    return [region for regions in REGIONS_BY_COUNTRY.values() for region in regions]
