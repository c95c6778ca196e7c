from __future__ import annotations

import logging
import random
import time
from typing import Callable, Optional, Protocol, Sequence

from . import catalog
from .errors import ExtractionError
from .models import ImageUpload, WineInfo
from .parser import parse_label_text

LOGGER = logging.getLogger(__name__)

DEFAULT_PROCESSING_SECONDS = 2.0


class LabelRecognizer(Protocol):
    """Reads wine details off a label photo."""

    def recognize(self, upload: ImageUpload) -> WineInfo:
        """Return the wine on the label or raise ExtractionError."""
        ...


class MockLabelRecognizer:
    """Stands in for a real OCR service by picking one of a few known labels."""

    def __init__(
        self,
        labels: Optional[Sequence[str]] = None,
        delay_seconds: float = DEFAULT_PROCESSING_SECONDS,
        rng: Optional[random.Random] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.labels = list(catalog.CANDIDATE_LABELS if labels is None else labels)
        self.delay_seconds = delay_seconds
        self.rng = rng or random.Random()
        self._sleep = sleep

    def recognize(self, upload: ImageUpload) -> WineInfo:
        if self.delay_seconds > 0:
            self._sleep(self.delay_seconds)

        if not self.labels:
            raise ExtractionError("Failed to process wine image")

        text = self.rng.choice(self.labels)
        wine = parse_label_text(text)
        if wine is None:
            raise ExtractionError("Could not read the wine label. Please try another photo.")

        LOGGER.info("Recognised %s as %s %s (%s).", upload.name, wine.producer, wine.vintage, wine.variety)
        return wine
