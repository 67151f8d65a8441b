from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from campaign_scout.core.config import MAX_REFERENCE_INPUTS
from campaign_scout.domain.references import validate_reference_input


class InputType(str, Enum):
    SPOTIFY_TRACK = "spotify_track"
    SPOTIFY_ARTIST = "spotify_artist"
    TRACKLISTS_ID = "tracklists_id"
    YOUTUBE = "youtube"
    ISRC = "isrc"


class Vertical(str, Enum):
    DSP = "dsp"
    RADIO = "radio"
    DJ = "dj"
    PRESS = "press"


# Concatenation order for "all results" views.
VERTICAL_ORDER: tuple[Vertical, ...] = (Vertical.DSP, Vertical.RADIO, Vertical.DJ, Vertical.PRESS)


class NormalizedInput(BaseModel):
    """A user-entered reference reduced to provider type, canonical id and position."""

    model_config = ConfigDict(frozen=True)

    id: str
    type: InputType
    original_url: str
    input_index: int = Field(ge=0)


class VerticalResult(BaseModel):
    """Fields shared by every vertical's result row."""

    id: str
    matched_inputs: list[int] = Field(default_factory=list)

    def add_match(self, input_index: int) -> None:
        """Widen ``matched_inputs`` without duplicating an index."""
        if input_index not in self.matched_inputs:
            self.matched_inputs.append(input_index)


class PlaylistResult(VerticalResult):
    playlist_name: str
    curator_name: str = "Unknown"
    follower_count: int = 0
    last_updated: str
    playlist_url: str
    vertical: Literal["dsp"] = "dsp"


class RadioResult(VerticalResult):
    station: str
    show: str = ""
    dj: str = ""
    country: str = "Unknown"
    plays_count: int = 1
    last_spin: str
    airplay_link: str = ""
    vertical: Literal["radio"] = "radio"


class DjResult(VerticalResult):
    dj: str
    event: str
    location: str = "Unknown Venue"
    date: str
    tracklist_url: str = ""
    vertical: Literal["dj"] = "dj"


class PressResult(VerticalResult):
    outlet: str
    writer: str = ""
    article_title: str
    date: str
    link: str = ""
    vertical: Literal["press"] = "press"


AnyResult = Annotated[
    Union[PlaylistResult, RadioResult, DjResult, PressResult],
    Field(discriminator="vertical"),
]


class ResearchResults(BaseModel):
    """One aggregated, deduplicated list per vertical."""

    dsp_results: list[PlaylistResult] = Field(default_factory=list)
    radio_results: list[RadioResult] = Field(default_factory=list)
    dj_results: list[DjResult] = Field(default_factory=list)
    press_results: list[PressResult] = Field(default_factory=list)

    def for_vertical(self, vertical: Vertical) -> list[AnyResult]:
        return {
            Vertical.DSP: self.dsp_results,
            Vertical.RADIO: self.radio_results,
            Vertical.DJ: self.dj_results,
            Vertical.PRESS: self.press_results,
        }[vertical]

    def total(self) -> int:
        return len(self.dsp_results) + len(self.radio_results) + len(self.dj_results) + len(self.press_results)

    def is_empty(self) -> bool:
        return self.total() == 0


class FilterOptions(BaseModel):
    recent_only: bool = False
    min_followers: int = Field(default=0, ge=0)
    verticals: set[Vertical] = Field(default_factory=set)


class ResearchRequest(BaseModel):
    """Campaign submission as entered on the research form."""

    campaign_name: str
    reference_inputs: list[str] = Field(max_length=MAX_REFERENCE_INPUTS)
    selected_verticals: list[Vertical]

    @field_validator("campaign_name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Campaign name is required")
        return v.strip()

    @field_validator("reference_inputs")
    @classmethod
    def inputs_valid(cls, v: list[str]) -> list[str]:
        if not any(item.strip() for item in v):
            raise ValueError("At least one reference input is required")
        invalid = [i for i, item in enumerate(v) if not validate_reference_input(item.strip())]
        if invalid:
            positions = ", ".join(f"#{i + 1}" for i in invalid)
            raise ValueError(f"Invalid Spotify URL or ISRC at {positions}")
        return v

    @field_validator("selected_verticals")
    @classmethod
    def verticals_not_empty(cls, v: list[Vertical]) -> list[Vertical]:
        if not v:
            raise ValueError("Select at least one vertical")
        return list(dict.fromkeys(v))


class FilterRequest(BaseModel):
    results: ResearchResults
    options: FilterOptions = Field(default_factory=FilterOptions)


class Campaign(BaseModel):
    id: str
    name: str
    created_at: datetime


class ReferenceInputRow(BaseModel):
    campaign_id: str
    input_url: str
    input_index: int
    input_type: InputType
    normalized_id: str


class CampaignDetail(BaseModel):
    campaign: Campaign
    reference_inputs: list[ReferenceInputRow] = Field(default_factory=list)
    results: ResearchResults = Field(default_factory=ResearchResults)


class ResearchResponse(BaseModel):
    campaign_id: str | None
    normalized_inputs: list[NormalizedInput]
    results: ResearchResults
    using_mock_data: bool = False
    warnings: list[str] = Field(default_factory=list)


class RelayRequest(BaseModel):
    path: str
    params: dict[str, str] = Field(default_factory=dict)
