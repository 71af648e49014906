# src/dev_metrics/engine/languages.py

"""Language byte counts to display shares."""

import math
from typing import Dict, List, Mapping

from .models import LanguageShare

DEFAULT_TOP_LANGUAGES = 8
OTHER_LANGUAGE = "Other"
FALLBACK_COLOR = "#6B7280"

LANGUAGE_COLORS = {
    "TypeScript": "#3178C6",
    "JavaScript": "#F7DF1E",
    "Python": "#3572A5",
    "Go": "#00ADD8",
    "Rust": "#DEA584",
    "Java": "#B07219",
    "CSS": "#563D7C",
    "HTML": "#E34C26",
    "Shell": "#89E051",
    "Ruby": "#701516",
    "C": "#555555",
    "C++": "#F34B7D",
    "C#": "#178600",
    "PHP": "#4F5D95",
    "Swift": "#F05138",
    "Kotlin": "#A97BFF",
    "Dart": "#00B4AB",
    "HCL": "#844FBA",
}


def language_color(language: str) -> str:
    return LANGUAGE_COLORS.get(language, FALLBACK_COLOR)


def _percentage(size: int, total: int) -> float:
    return math.floor(size / total * 1000 + 0.5) / 10


def _ordered(byte_map: Mapping[str, int]) -> List[tuple[str, int]]:
    return sorted(byte_map.items(), key=lambda item: (-item[1], item[0]))


def language_percentages(byte_map: Mapping[str, int]) -> Dict[str, float]:
    """Percentage of total bytes per language, largest first."""
    total = sum(byte_map.values()) or 1
    return {name: _percentage(size, total) for name, size in _ordered(byte_map)}


def summarize_languages(
    byte_map: Mapping[str, int], top_n: int = DEFAULT_TOP_LANGUAGES
) -> List[LanguageShare]:
    """Top languages by bytes with one-decimal percentages.

    The denominator is the total of every language, so when the list has to
    be capped the tail is folded into a single "Other" entry, listed last,
    and the percentages still add up to roughly 100.
    """
    total = sum(byte_map.values()) or 1
    ordered = _ordered(byte_map)
    if len(ordered) > top_n:
        kept = ordered[: top_n - 1]
        rest = sum(size for _, size in ordered[top_n - 1 :])
        ordered = kept + [(OTHER_LANGUAGE, rest)]

    return [
        LanguageShare(
            language=name,
            percentage=_percentage(size, total),
            color=language_color(name),
            bytes=size,
        )
        for name, size in ordered
    ]
