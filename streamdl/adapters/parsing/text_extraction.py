"""
Extraction de tokens depuis du texte libre et normalisation d'URLs de lecteurs.

Fonctions pures partagees par les fournisseurs. Toutes les expressions
regulieres dependant du balisage amont sont regroupees ici pour qu'une
derive du site reste une panne localisee et testable.

Une absence de correspondance n'est jamais une erreur : les fonctions
retournent None (ou False) et l'appelant ignore l'element concerne.
"""

import re
from typing import Optional
from urllib.parse import urlparse

# "S01 E01", "s1e12", "S02E003"
SEASON_EPISODE_PATTERN = re.compile(r"S(\d{1,2})\s*E(\d{1,3})", re.IGNORECASE)

# Hebergeur unique accepte pour les lecteurs embarques
UQLOAD_DOMAIN_TOKEN = "uqload"
UQLOAD_CANONICAL_HOST = "uqload.cx"
EMBED_MARKER = "/embed-"

_BARE_ID_PATTERN = re.compile(r"^[A-Za-z0-9]+$")
_EMBED_FRAGMENT_PATTERN = re.compile(r"^/?embed-([A-Za-z0-9]+)(?:\.html)?$")

# "/15108580-game-of-thrones-saison-1.html" -> 15108580
_NEWS_ID_PATTERN = re.compile(r"(?:^|/)(\d+)-")
_SEASON_IN_PATH_PATTERN = re.compile(r"saison-(\d+)", re.IGNORECASE)
_SEASON_IN_NAME_PATTERN = re.compile(r"saison\s*(\d+)", re.IGNORECASE)
_TRAILING_YEAR_PATTERN = re.compile(r"\s*\((\d{4})\)\s*$")


def parse_season_episode(label: str) -> Optional[tuple[int, int]]:
    """
    Extrait le couple (saison, episode) d'un libelle.

    Args:
        label: Libelle libre (ex: "S01 E05 - Pilote")

    Returns:
        Tuple (saison, episode), ou None si aucun token SxxEyy n'est trouve
    """
    if not label:
        return None
    match = SEASON_EPISODE_PATTERN.search(label)
    if match is None:
        return None
    return int(match.group(1)), int(match.group(2))


def is_uqload_embed(url: str) -> bool:
    """
    Verifie qu'une URL pointe vers un lecteur uqload embarque.

    L'hote doit contenir "uqload." et le chemin commencer par "/embed-".
    """
    if not url:
        return False
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    host = (parsed.hostname or "").lower()
    return f"{UQLOAD_DOMAIN_TOKEN}." in host and parsed.path.startswith(EMBED_MARKER)


def normalize_uqload_url(value: str) -> Optional[str]:
    """
    Normalise une reference uqload vers une URL complete.

    Formes acceptees :
    - identifiant nu : "abc123"
    - fragment d'embed : "embed-abc123.html", "/embed-abc123"
    - URL complete ou relative au protocole : "//uqload.net/embed-abc123.html"

    Args:
        value: Reference brute fournie par le site

    Returns:
        URL https sous un domaine uqload, ou None si la reference est inexploitable
    """
    value = (value or "").strip()
    if not value:
        return None

    if _BARE_ID_PATTERN.match(value):
        return f"https://{UQLOAD_CANONICAL_HOST}/embed-{value}.html"

    fragment = _EMBED_FRAGMENT_PATTERN.match(value)
    if fragment:
        return f"https://{UQLOAD_CANONICAL_HOST}/embed-{fragment.group(1)}.html"

    if value.startswith("//"):
        value = f"https:{value}"
    try:
        parsed = urlparse(value)
    except ValueError:
        return None
    host = (parsed.hostname or "").lower()
    if parsed.scheme not in ("http", "https"):
        return None
    if UQLOAD_DOMAIN_TOKEN not in host or EMBED_MARKER not in parsed.path:
        return None
    return parsed._replace(scheme="https").geturl()


def normalize_player_url(value: str) -> Optional[str]:
    """
    Accepte une URL de lecteur generique (vidzy, voe, netu).

    Les URLs relatives au protocole recoivent le schema https.
    """
    value = (value or "").strip()
    if not value:
        return None
    if value.startswith("//"):
        return f"https:{value}"
    return value


def extract_news_id(path: str) -> Optional[str]:
    """Extrait l'identifiant numerique interne d'un chemin de page."""
    match = _NEWS_ID_PATTERN.search(urlparse(path).path if "://" in path else path)
    return match.group(1) if match else None


def extract_season_number(path: str, name: str = "") -> int:
    """
    Extrait le numero de saison depuis le chemin, puis depuis le nom.

    Returns:
        Numero de saison, 1 par defaut
    """
    match = _SEASON_IN_PATH_PATTERN.search(path) or _SEASON_IN_NAME_PATTERN.search(name)
    return int(match.group(1)) if match else 1


def strip_year(label: str) -> tuple[str, Optional[int]]:
    """
    Separe une annee finale entre parentheses du libelle.

    Returns:
        Tuple (libelle sans annee, annee ou None)
    """
    match = _TRAILING_YEAR_PATTERN.search(label)
    if match is None:
        return label.strip(), None
    return label[: match.start()].strip(), int(match.group(1))
