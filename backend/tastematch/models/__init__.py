from .artist import Artist
from .comparison import ComparisonResult, GenreComparison, GenreCount
from .personality import ListeningStats
from .profile import RecentTrackSample, TasteProfile, TrackMetrics, collect_genres, count_genres
from .session import ComparisonSession
from .track import Album, Track, TrackArtist
from .user import SpotifyUser

__all__ = [
    "Album",
    "Artist",
    "ComparisonResult",
    "ComparisonSession",
    "GenreComparison",
    "GenreCount",
    "ListeningStats",
    "RecentTrackSample",
    "SpotifyUser",
    "TasteProfile",
    "Track",
    "TrackArtist",
    "TrackMetrics",
    "collect_genres",
    "count_genres",
]
