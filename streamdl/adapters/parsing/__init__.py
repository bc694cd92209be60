"""Utilitaires d'extraction de texte (tokens SxxEyy, URLs de lecteurs, chemins)."""

from streamdl.adapters.parsing.text_extraction import (
    is_uqload_embed,
    normalize_player_url,
    normalize_uqload_url,
    parse_season_episode,
)

__all__ = [
    "is_uqload_embed",
    "normalize_player_url",
    "normalize_uqload_url",
    "parse_season_episode",
]
