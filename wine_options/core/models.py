from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple


class WineColor(str, Enum):
    """Colour of the wine in the glass."""

    RED = "red"
    WHITE = "white"
    ROSE = "rose"
    SPARKLING = "sparkling"

    @property
    def display_name(self) -> str:
        mapping = {
            WineColor.RED: "Red",
            WineColor.WHITE: "White",
            WineColor.ROSE: "Rosé",
            WineColor.SPARKLING: "Sparkling",
        }
        return mapping[self]


class QuestionType(str, Enum):
    """Kinds of question asked about a wine, in no particular order."""

    VINTAGE = "vintage"
    COLOR = "color"
    VARIETY = "variety"
    HEMISPHERE = "hemisphere"
    COUNTRY = "country"
    REGION = "region"

    @property
    def prompt(self) -> str:
        mapping = {
            QuestionType.VINTAGE: "What vintage is this wine?",
            QuestionType.COLOR: "What color is this wine?",
            QuestionType.VARIETY: "What grape variety is this wine?",
            QuestionType.HEMISPHERE: "Which hemisphere is this wine from?",
            QuestionType.COUNTRY: "Which country is this wine from?",
            QuestionType.REGION: "Which region is this wine from?",
        }
        return mapping[self]


class GameStep(str, Enum):
    """Screens of a single play-through."""

    ROUNDS = "rounds"
    GLASS = "glass"
    PHOTO = "photo"
    QUESTIONS = "questions"
    RESULTS = "results"
    GROUP = "group"


@dataclass(frozen=True)
class WineInfo:
    """Ground truth for the wine being tasted."""

    vintage: int
    country: str
    region: str
    variety: str
    producer: str
    color: WineColor


@dataclass(frozen=True)
class Question:
    """A multiple-choice question about the wine."""

    id: str
    type: QuestionType
    text: str
    choices: Tuple[str, ...]
    correct_answer: str
    sort_order: int

    def is_correct(self, answer: str) -> bool:
        return answer == self.correct_answer


@dataclass
class Answer:
    """The player's responses to one question, one per round."""

    round1: Optional[str] = None
    round2: Optional[str] = None

    def get(self, round_number: int) -> Optional[str]:
        return self.round1 if round_number == 1 else self.round2

    def record(self, round_number: int, value: str) -> None:
        if round_number == 1:
            self.round1 = value
        else:
            self.round2 = value


@dataclass
class RoundScores:
    round1: int = 0
    round2: int = 0

    def add_point(self, round_number: int) -> None:
        if round_number == 1:
            self.round1 += 1
        else:
            self.round2 += 1


@dataclass(frozen=True)
class ImageUpload:
    """Metadata (and optionally the payload) of a label photo."""

    name: str
    mime_type: str
    size: int
    data: Optional[bytes] = field(default=None, repr=False)


@dataclass(frozen=True)
class ScoreSummary:
    """Final tally of a finished play-through."""

    total: int
    max_score: int
    percentage: int
    message: str
    rounds_selected: int
    round1: int
    round2: int
    round_comparison: Optional[str] = None


@dataclass
class GameState:
    """Mutable state of one play-through, owned by a single session."""

    step: GameStep = GameStep.ROUNDS
    wine_info: Optional[WineInfo] = None
    questions: List[Question] = field(default_factory=list)
    current_question_index: int = 0
    current_round: int = 1
    rounds_selected: int = 2
    is_black_glass: bool = False
    answers: Dict[str, Answer] = field(default_factory=dict)
    scores: RoundScores = field(default_factory=RoundScores)
    error: Optional[str] = None
    selected_image: Optional[ImageUpload] = field(default=None, repr=False)
    player_id: Optional[str] = None
    guest_id: Optional[str] = None
    generation: int = 0
