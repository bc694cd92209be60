"""
Couche services (application).

Services metier orchestrant la logique de telechargement :
- renamer : chemins de sortie compatibles Jellyfin/Plex
- downloader : filtrage, saut des fichiers existants, relances avec backoff
"""

from streamdl.services.downloader import (
    DownloadFailureRecord,
    DownloadReport,
    DownloadService,
    DownloadStatus,
    EpisodeOutcome,
    filter_episodes,
    is_already_downloaded,
)
from streamdl.services.renamer import build_output_path, sanitize_for_filesystem

__all__ = [
    "DownloadFailureRecord",
    "DownloadReport",
    "DownloadService",
    "DownloadStatus",
    "EpisodeOutcome",
    "build_output_path",
    "filter_episodes",
    "is_already_downloaded",
    "sanitize_for_filesystem",
]
