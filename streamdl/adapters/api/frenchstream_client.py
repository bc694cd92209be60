"""
Fournisseur French Stream (site HTML + endpoint AJAX d'episodes).

Implemente l'interface IProvider en analysant :
- les cartes de resultats renvoyees par /engine/ajax/search.php
- la page de detail d'un titre (nom, identifiant numerique, saison)
- le document JSON /ep-data.php qui liste, par piste de langue et par
  episode, les URLs des differents lecteurs

Politique de resolution :
- lecteur : premier disponible dans l'ordre PLAYER_ORDER
- langue : la piste VF remplace la piste VOSTFR pour un meme episode

Le parsing est volontairement tolerant : une page qui ne correspond pas au
balisage attendu donne un titre "Unknown" sans episodes plutot qu'une erreur,
car c'est le plus souvent le signe d'un titre inexistant.
"""

import re
from typing import Optional

from bs4 import BeautifulSoup
from loguru import logger
from pydantic import ValidationError

from streamdl.adapters.api.http import HttpClient
from streamdl.adapters.api.schemas import EpisodeDataResponse, EpisodePlayers
from streamdl.adapters.parsing.text_extraction import (
    extract_news_id,
    extract_season_number,
    normalize_player_url,
    normalize_uqload_url,
    strip_year,
)
from streamdl.core.entities import (
    Episode,
    MediaType,
    Title,
    TitleDetails,
    TitleId,
    sort_episodes,
)
from streamdl.core.exceptions import UpstreamError
from streamdl.core.ports import IProvider

# Ordre de preference des lecteurs (le premier disponible l'emporte)
PLAYER_ORDER = ("uqload", "vidzy", "voe", "netu")

# Pistes traitees dans l'ordre : la derniere ecrase les precedentes
LANGUAGE_ORDER = ("vostfr", "vf")

UNKNOWN_NAME = "Unknown"

_ONCLICK_TARGET_PATTERN = re.compile(r"location\.href\s*=\s*['\"]([^'\"]+)['\"]")
_SERIE_PREFIX_PATTERN = re.compile(r"série\s*", re.IGNORECASE)
_STREAMING_SUFFIX_PATTERN = re.compile(r"\s*en streaming complet.*$", re.IGNORECASE)
_SEASON_SUFFIX_PATTERN = re.compile(r"\s*-?\s*saison\s*\d+", re.IGNORECASE)


class FrenchStreamProvider(IProvider):
    """
    Fournisseur pour le site French Stream.

    Les identifiants de titre sont des chemins de page
    (ex: "/s-tv/15123579-loups-garous-saison-2-2024.html") ou des URLs absolues.

    Attributes:
        BASE_URL: Origine par defaut du site
    """

    BASE_URL = "https://fs02.lol"

    def __init__(self, http: HttpClient, base_url: Optional[str] = None) -> None:
        """
        Initialise le fournisseur.

        Args:
            http: Client HTTP partage
            base_url: Origine du site (defaut: BASE_URL)
        """
        self._http = http
        self._base_url = (base_url or self.BASE_URL).rstrip("/")

    @property
    def name(self) -> str:
        return "frenchstream"

    # ------------------------------------------------------------------
    # Recherche
    # ------------------------------------------------------------------

    async def search(self, query: str, limit: int = 20) -> list[Title]:
        """Recherche via le formulaire AJAX du site."""
        html = await self._http.post_form(
            f"{self._base_url}/engine/ajax/search.php",
            {"query": query, "page": "1"},
        )
        results = parse_search_results(html)
        logger.debug(f"frenchstream: {len(results)} resultat(s) pour {query!r}")
        return results[:limit]

    # ------------------------------------------------------------------
    # Details
    # ------------------------------------------------------------------

    async def get_details(
        self,
        title_id: TitleId,
        title_name: Optional[str] = None,
    ) -> TitleDetails:
        """
        Recupere la page d'un titre puis ses episodes.

        Args:
            title_id: Chemin de la page ou URL absolue
            title_name: Ignore (pas de slug pour ce site)
        """
        path = str(title_id)
        url = self._absolute_url(path)
        html = await self._http.fetch_html(url)

        raw_name = extract_page_name(html)
        news_id = extract_news_id(path)
        season = extract_season_number(path, raw_name or "")

        episodes: list[Episode] = []
        if news_id:
            episodes = await self._fetch_episodes(news_id, season, referer=url)
        else:
            logger.warning(f"frenchstream: identifiant numerique absent de {path!r}")

        return build_title_details(path, raw_name, episodes)

    def _absolute_url(self, path: str) -> str:
        """Construit l'URL de la page depuis un chemin ou une URL absolue."""
        if path.startswith("http"):
            return path
        return f"{self._base_url}{path if path.startswith('/') else '/' + path}"

    async def _fetch_episodes(
        self,
        news_id: str,
        season: int,
        referer: str,
    ) -> list[Episode]:
        """Interroge ep-data.php (le Referer de la page est exige)."""
        url = f"{self._base_url}/ep-data.php"
        payload = await self._http.get_json(
            url,
            params={"id": news_id},
            headers={"Referer": referer},
        )
        try:
            data = EpisodeDataResponse.model_validate(payload)
        except ValidationError as e:
            raise UpstreamError(
                f"Donnees d'episodes inattendues pour id={news_id}",
                url=url,
            ) from e
        return merge_language_tracks(data, season)

    async def close(self) -> None:
        await self._http.close()


# ----------------------------------------------------------------------
# Parsing HTML et JSON (fonctions pures, testables sans reseau)
# ----------------------------------------------------------------------


def parse_search_results(html: str) -> list[Title]:
    """
    Extrait les titres des cartes de resultats.

    Une carte est un div.search-item dont l'attribut onclick porte le chemin
    de la page et qui contient un div.search-title.
    """
    soup = BeautifulSoup(html, "html.parser")
    results = []
    for item in soup.select("div.search-item"):
        target = _ONCLICK_TARGET_PATTERN.search(item.get("onclick", ""))
        title_node = item.select_one("div.search-title")
        if target is None or title_node is None:
            continue

        path = target.group(1)
        raw_title = title_node.get_text(" ", strip=True)
        if not path or not raw_title:
            continue

        name, year = strip_year(raw_title)
        is_series = "saison" in raw_title.lower() or "-saison-" in path
        results.append(
            Title(
                id=path,
                name=name,
                media_type=MediaType.SERIES if is_series else MediaType.MOVIE,
                year=year,
            )
        )
    return results


def extract_page_name(html: str) -> Optional[str]:
    """Nom brut de la page : premier <h1>, sinon <title> avant le premier '|'."""
    soup = BeautifulSoup(html, "html.parser")
    heading = soup.find("h1")
    if heading is not None:
        name = heading.get_text(" ", strip=True)
        if name:
            return name
    if soup.title is not None and soup.title.string:
        name = soup.title.string.split("|")[0].strip()
        return name or None
    return None


def build_title_details(
    path: str,
    raw_name: Optional[str],
    episodes: list[Episode],
) -> TitleDetails:
    """Assemble le TitleDetails en nettoyant les mentions decoratives du nom."""
    name = raw_name or UNKNOWN_NAME
    name = _SERIE_PREFIX_PATTERN.sub("", name, count=1)
    name = _STREAMING_SUFFIX_PATTERN.sub("", name).strip() or UNKNOWN_NAME

    is_series = "-saison-" in path or "saison" in name.lower()
    name = _SEASON_SUFFIX_PATTERN.sub("", name).strip() or UNKNOWN_NAME

    return TitleDetails(
        id=path,
        name=name,
        media_type=MediaType.SERIES if is_series else MediaType.MOVIE,
        episodes=tuple(episodes),
        season_count=1 if is_series else None,
        episode_count=len(episodes),
    )


def pick_player_url(players: EpisodePlayers) -> Optional[str]:
    """Retourne l'URL du premier lecteur exploitable selon PLAYER_ORDER."""
    for key in PLAYER_ORDER:
        raw = getattr(players, key)
        if not raw:
            continue
        url = normalize_uqload_url(raw) if key == "uqload" else normalize_player_url(raw)
        if url:
            return url
    return None


def merge_language_tracks(data: EpisodeDataResponse, season: int) -> list[Episode]:
    """
    Fusionne les pistes de langue en un episode par (saison, episode).

    VOSTFR est traitee en premier puis VF, qui la remplace pour un meme
    episode. Les numeros d'episode non entiers ou <= 0 sont ignores.
    """
    merged: dict[tuple[int, int], Episode] = {}
    for language in LANGUAGE_ORDER:
        for number_text, players in data.track(language).items():
            try:
                number = int(str(number_text).strip())
            except ValueError:
                continue
            if number <= 0:
                continue

            url = pick_player_url(players)
            if url is None:
                continue

            merged[(season, number)] = Episode(
                id=f"{language}-s{season}e{number}",
                name=f"S{season:02d} E{number:02d}",
                url=url,
                season=season,
                episode=number,
                language=language,
            )
    return sort_episodes(merged.values())
