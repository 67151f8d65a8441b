from campaign_scout.services.fallback_svc import FallbackGenerator
from campaign_scout.services.fetchers import DjFetcher, PlaylistFetcher, PressFetcher, RadioFetcher
from campaign_scout.services.provider_relay import ProviderRelay
from campaign_scout.services.research_logic import ResearchOrchestrator
from campaign_scout.services.songstats_svc import SongstatsService
from campaign_scout.services.tracklists_svc import TracklistsService

__all__ = [
    "DjFetcher",
    "FallbackGenerator",
    "PlaylistFetcher",
    "PressFetcher",
    "ProviderRelay",
    "RadioFetcher",
    "ResearchOrchestrator",
    "SongstatsService",
    "TracklistsService",
]
