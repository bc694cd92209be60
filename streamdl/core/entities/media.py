"""
Media catalog entities.

Immutable value objects shared by every provider: catalog titles, playable
episodes and title details with their resolved episode list. They are built
fresh on every provider call and never persisted.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional, Union

# Identifiant opaque : ID numerique (API REST) ou chemin de page (site HTML)
TitleId = Union[int, str]


class MediaType(Enum):
    """Type of catalog entry.

    Values:
        MOVIE: Feature film
        SERIES: TV series (episodes with season/episode numbers)
    """

    MOVIE = "movie"
    SERIES = "series"


@dataclass(frozen=True)
class Title:
    """
    A catalog entry returned by a search or a detail page.

    Attributes:
        id: Provider-specific identifier, passed back untouched to the provider
        name: Display name
        media_type: MOVIE or SERIES
        year: Release year, when the catalog exposes it
        poster_url: Absolute poster URL
    """

    id: TitleId
    name: str
    media_type: MediaType = MediaType.MOVIE
    year: Optional[int] = None
    poster_url: Optional[str] = None


@dataclass(frozen=True)
class Episode:
    """
    One playable unit with a resolved embed URL.

    An episode without a URL is never modeled: providers drop it instead.

    Attributes:
        id: Identifier, unique within the episode list of a title
        name: Display name (often "S01 E01")
        url: Embed player URL handed to the downloader
        season: Season number, None when unknown
        episode: Episode number within the season, None when unknown
        language: Free-form language tag ("vf", "vostfr", ...)
    """

    id: str
    name: str
    url: str
    season: Optional[int] = None
    episode: Optional[int] = None
    language: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.url:
            raise ValueError(f"Episode {self.id!r} has no playable URL")

    @property
    def label(self) -> str:
        """SxxEyy when both numbers are known, the display name otherwise."""
        if self.season and self.episode:
            return f"S{self.season:02d}E{self.episode:02d}"
        return self.name


@dataclass(frozen=True)
class TitleDetails(Title):
    """
    A title with its resolved episodes.

    Attributes:
        episodes: Playable episodes (every one has a URL)
        season_count: Number of seasons, when known
        episode_count: Number of episodes, defaults to len(episodes)
    """

    episodes: tuple[Episode, ...] = ()
    season_count: Optional[int] = None
    episode_count: Optional[int] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "episodes", tuple(self.episodes))
        if self.episode_count is None:
            object.__setattr__(self, "episode_count", len(self.episodes))


def episode_sort_key(episode: Episode) -> tuple[int, int]:
    """Cle de tri (saison, episode), les numeros absents valent 0."""
    return (episode.season or 0, episode.episode or 0)


def sort_episodes(episodes: Iterable[Episode]) -> list[Episode]:
    """Retourne une nouvelle liste triee par (saison, episode)."""
    return sorted(episodes, key=episode_sort_key)
