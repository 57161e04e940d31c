"""Heuristic scoring of tag schemas for capture-friendliness."""

import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from loguru import logger

from .models import CapabilityScore, DataType, ResolvedSchema


@dataclass(frozen=True)
class FieldPatterns:
    """Name patterns for each field family. Matched at the start of the name."""
    url: re.Pattern = re.compile(r'^(url|link|source|href)', re.IGNORECASE)
    text: re.Pattern = re.compile(
        r'^(notes?|summary|highlights?|snapshot|content|excerpt|description|text)', re.IGNORECASE
    )
    author: re.Pattern = re.compile(r'^(author|creator|by|writer)', re.IGNORECASE)
    description: re.Pattern = re.compile(r'^(description|summary|about|overview)', re.IGNORECASE)


@dataclass(frozen=True)
class ScoreWeights:
    url_field: int = 10
    text_field: int = 5
    author_field: int = 2
    description_field: int = 3


# Priority for the field that receives selected text
TEXT_FIELD_PRIORITY = ["Notes", "Summary", "Highlight", "Snapshot"]


class CapabilityAnalyzer:
    """
    Scores and ranks schemas without knowing any tag by name.

    Scoring:
    - URL field (url data type, or url-like name): +10, first match only
    - Text field (notes/summary/highlight...): +5 for every match
    - Author field: +2, first match only
    - Description field: +3, first match only
    """

    def __init__(self, patterns: Optional[FieldPatterns] = None, weights: Optional[ScoreWeights] = None):
        self.patterns = patterns or FieldPatterns()
        self.weights = weights or ScoreWeights()

    def score(self, schema: ResolvedSchema) -> CapabilityScore:
        result = CapabilityScore(schema=schema)

        for f in schema.fields:
            name = f.name

            if not result.has_url_field and self._is_url_field(name, f.data_type):
                result.has_url_field = True
                result.url_field_name = name
                result.score += self.weights.url_field

            if self.patterns.text.match(name):
                result.text_fields.append(name)
                result.score += self.weights.text_field

            if not result.has_author_field and self.patterns.author.match(name):
                result.has_author_field = True
                result.author_field_name = name
                result.score += self.weights.author_field

            if result.description_field_name is None and self.patterns.description.match(name):
                result.description_field_name = name
                result.score += self.weights.description_field

        return result

    def rank(
        self,
        schemas: Iterable[ResolvedSchema],
        min_score: int = 0,
        limit: Optional[int] = None
    ) -> List[CapabilityScore]:
        """Score every schema, drop those below min_score, highest first."""
        scored = [self.score(s) for s in schemas]
        ranked = [s for s in scored if s.score >= min_score]
        ranked.sort(key=lambda s: s.score, reverse=True)

        if limit is not None:
            ranked = ranked[:limit]

        logger.debug(f"Ranked {len(scored)} schemas, {len(ranked)} kept (min_score={min_score})")
        return ranked

    def _is_url_field(self, name: str, data_type: Optional[str]) -> bool:
        return (
            data_type == DataType.URL.value
            or bool(self.patterns.url.match(name))
            or "url" in name.lower()
        )


def best_text_field(text_fields: List[str]) -> Optional[str]:
    """Notes > Summary > Highlight > Snapshot > first text field."""
    lowered: Dict[str, str] = {}
    for name in text_fields:
        lowered.setdefault(name.lower(), name)

    for preferred in TEXT_FIELD_PRIORITY:
        found = lowered.get(preferred.lower())
        if found:
            return found

    return text_fields[0] if text_fields else None
