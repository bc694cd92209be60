"""
Service de nommage des fichiers telecharges.

Ce module fournit la construction des chemins de sortie compatibles
Jellyfin/Plex pour les films et les episodes de series.

Format series : <base>/<Serie>/Season NN/<Serie> - SNNEMM.ext
Format films (ou numeros inconnus) : <base>/<Titre>/<Titre>.ext
"""

import unicodedata
from pathlib import Path
from typing import Optional, Union

from pathvalidate import sanitize_filename

# Caractères interdits sur les systèmes de fichiers courants -> tiret
SPECIAL_CHARS_TO_DASH = frozenset({"\\", "/", ":", "*", "?", '"', "<", ">", "|"})

# Nom utilisé quand le nettoyage ne laisse rien
FALLBACK_NAME = "Unknown"


def sanitize_for_filesystem(text: str) -> str:
    """
    Nettoie une chaîne pour l'utiliser comme nom de fichier ou de dossier.

    Transformations appliquées :
    - Normalisation Unicode NFKC
    - Caractères spéciaux (\\ / : * ? " < > |) -> tiret
    - Nettoyage pathvalidate (plateforme universelle)
    - Suppression des espaces en début et fin

    Args:
        text: Texte à nettoyer.

    Returns:
        Texte valide pour un nom de fichier (peut être vide).
    """
    if not text:
        return ""

    text = unicodedata.normalize("NFKC", text)

    for char in SPECIAL_CHARS_TO_DASH:
        text = text.replace(char, "-")

    # replacement_text="" car les remplacements explicites sont déjà faits
    text = sanitize_filename(text, platform="universal", replacement_text="")

    return text.strip()


def format_episode_code(season: int, episode: int) -> str:
    """Formate SNNEMM (deux chiffres minimum, sans troncature)."""
    return f"S{season:02d}E{episode:02d}"


def build_output_path(
    base_dir: Union[str, Path],
    show: str,
    season: Optional[int] = None,
    episode: Optional[int] = None,
    ext: str = "mp4",
) -> Path:
    """
    Construit le chemin de sortie d'un téléchargement.

    Args:
        base_dir: Répertoire racine des téléchargements
        show: Nom de la série ou du film
        season: Numéro de saison (None ou 0 si inconnu)
        episode: Numéro d'épisode (None ou 0 si inconnu)
        ext: Extension sans point

    Returns:
        Chemin complet du fichier à produire
    """
    safe_show = sanitize_for_filesystem(show) or FALLBACK_NAME
    show_dir = Path(base_dir) / safe_show

    if season and episode:
        season_dir = show_dir / f"Season {season:02d}"
        return season_dir / f"{safe_show} - {format_episode_code(season, episode)}.{ext}"

    return show_dir / f"{safe_show}.{ext}"
