"""
Entities representing the catalog domain.

Exports:
- MediaType: Movie or series
- Title: A search result or detail-page subject
- Episode: One playable unit with its embed URL
- TitleDetails: A title with its episode list
"""

from streamdl.core.entities.media import (
    Episode,
    MediaType,
    Title,
    TitleDetails,
    TitleId,
    episode_sort_key,
    sort_episodes,
)

__all__ = [
    "Episode",
    "MediaType",
    "Title",
    "TitleDetails",
    "TitleId",
    "episode_sort_key",
    "sort_episodes",
]
