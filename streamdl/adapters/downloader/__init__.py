"""Adaptateurs de telechargement (frontiere processus externe)."""

from streamdl.adapters.downloader.ytdlp import YTDLP_CANDIDATES, YtDlpDownloader

__all__ = [
    "YTDLP_CANDIDATES",
    "YtDlpDownloader",
]
