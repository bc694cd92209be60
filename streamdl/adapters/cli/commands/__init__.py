"""Sous-package CLI commands - re-exporte les commandes publiques."""

from streamdl.adapters.cli.commands.catalog_commands import (
    info,
    list_episodes,
    search,
)
from streamdl.adapters.cli.commands.download_command import (
    download,
)

__all__ = [
    # catalogue
    "search",
    "info",
    "list_episodes",
    # telechargement
    "download",
]
