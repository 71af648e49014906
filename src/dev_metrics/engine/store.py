# src/dev_metrics/engine/store.py

"""Explicit cache for the metrics document used by presentation commands."""

import logging
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from .models import MetricsDocument

logger = logging.getLogger(__name__)


class MetricsNotAvailableError(Exception):
    """Raised when no usable metrics document exists."""


class MetricsStore:
    """Loads the metrics document once and hands out the cached copy.

    Call invalidate() after a new build so the next load() reads the file again.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._document: Optional[MetricsDocument] = None

    def load(self) -> MetricsDocument:
        if self._document is not None:
            return self._document

        if not self.path.is_file():
            raise MetricsNotAvailableError(
                f"No metrics data at {self.path}. Run 'dev-metrics build' first."
            )
        try:
            self._document = MetricsDocument.load(self.path)
        except ValidationError as exc:
            raise MetricsNotAvailableError(
                f"Metrics data at {self.path} is unreadable: {exc.error_count()} validation errors"
            ) from exc

        logger.debug("Loaded metrics generated at %s", self._document.generated_at)
        return self._document

    def invalidate(self) -> None:
        self._document = None

    def refresh(self) -> MetricsDocument:
        self.invalidate()
        return self.load()

    @property
    def is_loaded(self) -> bool:
        return self._document is not None
