"""URL and identifier patterns for music reference inputs."""
from __future__ import annotations

import re

# CC-XXX-YY-NNNNN without hyphens: country, registrant, year, designation.
ISRC_PATTERN = re.compile(r"^[A-Z]{2}[A-Z0-9]{3}[0-9]{7}$")

SPOTIFY_URL_PATTERN = re.compile(r"https://open\.spotify\.com/(track|artist|album)/([a-zA-Z0-9]{22})")
TRACKLISTS_URL_PATTERN = re.compile(r"https://www\.1001tracklists\.com/tracklist/([a-zA-Z0-9]+)")
YOUTUBE_URL_PATTERN = re.compile(r"https://www\.youtube\.com/watch\?v=([a-zA-Z0-9_-]+)")

# Stricter form-level check: the whole field must be the URL, share suffix optional.
STRICT_SPOTIFY_URL_PATTERN = re.compile(
    r"^https://open\.spotify\.com/(track|artist|album)/[a-zA-Z0-9]{22}(\?si=[a-zA-Z0-9]{16})?$"
)


def validate_reference_input(value: str) -> bool:
    """Return True when a form field is blank, a full Spotify URL, or an ISRC."""
    if not value:
        return True
    return bool(STRICT_SPOTIFY_URL_PATTERN.match(value) or ISRC_PATTERN.match(value))
