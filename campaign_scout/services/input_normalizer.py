from __future__ import annotations

import logging
from collections.abc import Sequence

from campaign_scout.domain.models import InputType, NormalizedInput
from campaign_scout.domain.references import (
    ISRC_PATTERN,
    SPOTIFY_URL_PATTERN,
    TRACKLISTS_URL_PATTERN,
    YOUTUBE_URL_PATTERN,
)

logger = logging.getLogger(__name__)


def extract_identifier(value: str, input_index: int) -> NormalizedInput | None:
    """Classify one trimmed reference string; first matching pattern wins."""
    if ISRC_PATTERN.match(value):
        return NormalizedInput(id=value, type=InputType.ISRC, original_url=value, input_index=input_index)

    spotify_match = SPOTIFY_URL_PATTERN.search(value)
    if spotify_match:
        kind, spotify_id = spotify_match.groups()
        input_type = InputType.SPOTIFY_TRACK if kind == "track" else InputType.SPOTIFY_ARTIST
        return NormalizedInput(id=spotify_id, type=input_type, original_url=value, input_index=input_index)

    tracklists_match = TRACKLISTS_URL_PATTERN.search(value)
    if tracklists_match:
        return NormalizedInput(
            id=tracklists_match.group(1),
            type=InputType.TRACKLISTS_ID,
            original_url=value,
            input_index=input_index,
        )

    youtube_match = YOUTUBE_URL_PATTERN.search(value)
    if youtube_match:
        return NormalizedInput(
            id=youtube_match.group(1),
            type=InputType.YOUTUBE,
            original_url=value,
            input_index=input_index,
        )

    return None


def normalize_inputs(raw_inputs: Sequence[str]) -> list[NormalizedInput]:
    """
    Turn the ordered form fields into typed references.

    Blank and unrecognised entries are dropped; survivors keep their position
    in ``raw_inputs`` as ``input_index`` so results can point back at "#N".
    """
    normalized: list[NormalizedInput] = []
    for index, raw in enumerate(raw_inputs):
        value = (raw or "").strip()
        if not value:
            continue
        parsed = extract_identifier(value, index)
        if parsed is None:
            logger.debug("Reference input #%s did not match a known pattern", index + 1)
            continue
        normalized.append(parsed)
    return normalized
