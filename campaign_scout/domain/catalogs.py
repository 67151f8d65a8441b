"""Seed catalogs for synthetic (demo) results."""
from __future__ import annotations

# (name, curator, followers, spotify playlist id)
PLAYLISTS: list[tuple[str, str, int, str]] = [
    ("Discover Weekly", "Spotify", 13_246_789, "37i9dQZEVXcDGlrEgKfUyi"),
    ("Fresh Finds", "Spotify", 942_876, "37i9dQZF1DX2pSTOxoPbx9"),
    ("Today's Top Hits", "Spotify", 31_245_789, "37i9dQZF1DXcBWIGoYBM5M"),
    ("Viral Hits", "Trending Now", 2_456_789, "37i9dQZF1DX2L6XfQRG0Z1"),
    ("Indie Chill", "Indie Sounds", 8_542, "37i9dQZF1DX2Nc3B70tvx0"),
    ("Club Essentials", "DJ TrendSetter", 75_487, "37i9dQZF1DX4JAvHpjipBk"),
]

# (station, show, dj, country)
RADIO_STATIONS: list[tuple[str, str, str, str]] = [
    ("KEXP", "The Morning Show", "John Richards", "US"),
    ("KIIS FM", "On Air with Ryan Seacrest", "Ryan Seacrest", "US"),
    ("NPR", "All Songs Considered", "Bob Boilen", "US"),
    ("BBC Radio 1", "Future Sounds", "Clara Amfo", "GB"),
    ("Triple J", "Good Nights", "Bryce Mills", "AU"),
]

DJS: list[str] = ["Carl Cox", "Amelie Lens", "Charlotte de Witte", "Jamie Jones", "Adam Beyer"]
EVENTS: list[str] = ["Tomorrowland", "Awakenings", "Warehouse Project", "Circoloco"]
VENUES: list[str] = ["Ibiza", "Amsterdam", "London", "Berlin", "New York"]
DJ_EVENTS_PER_INPUT = 4

# (outlet, writer)
PRESS_OUTLETS: list[tuple[str, str]] = [
    ("Mixmag", "Ben Murphy"),
    ("DJ Mag", "Carl Loben"),
    ("Resident Advisor", "Ryan Keeling"),
    ("Pitchfork", "Philip Sherburne"),
    ("Billboard", "Katie Bain"),
]

ARTICLE_TITLES: list[str] = [
    "Artist to Watch: {artist}",
    "New Release Spotlight: {artist}'s Latest EP",
    "The Rise of {artist} in Underground Electronic Music",
    "Inside the Studio with {artist}",
    "Interview: {artist} on Their Creative Process",
]

# Days back from now that synthetic dates may fall in.
DATE_WINDOW_DAYS = {
    "dsp": 45,
    "radio": 45,
    "dj": 60,
    "press": 180,
}

MOCK_MARKER = "mock"
