"""
Fournisseur Yopflix (API REST JSON).

Implemente l'interface IProvider pour le catalogue Yopflix :
- recherche via /secure/search/{query}
- details et videos via /secure/titles/{id}

Seules les videos hebergees sur uqload (embed) sont retenues comme episodes.

Usage:
    http = HttpClient()
    provider = YopflixProvider(http)
    results = await provider.search("psych", limit=5)
    details = await provider.get_details(results[0].id)
    await provider.close()
"""

from typing import Any, Optional
from urllib.parse import quote

from loguru import logger
from pydantic import ValidationError

from streamdl.adapters.api.http import HttpClient
from streamdl.adapters.api.schemas import (
    YopflixSearchResponse,
    YopflixTitleResponse,
    YopflixVideo,
)
from streamdl.adapters.parsing.text_extraction import (
    is_uqload_embed,
    parse_season_episode,
)
from streamdl.core.entities import Episode, MediaType, Title, TitleDetails, TitleId
from streamdl.core.exceptions import UpstreamError
from streamdl.core.ports import IProvider


class YopflixProvider(IProvider):
    """
    Fournisseur pour l'API JSON de Yopflix.

    Attributes:
        BASE_URL: Origine par defaut de l'API
        SUCCESS_STATUS: Valeur du champ status d'une reponse valide
    """

    BASE_URL = "https://yopflix.my"
    SUCCESS_STATUS = "success"

    def __init__(self, http: HttpClient, base_url: Optional[str] = None) -> None:
        """
        Initialise le fournisseur.

        Args:
            http: Client HTTP partage
            base_url: Origine de l'API (defaut: BASE_URL)
        """
        self._http = http
        self._base_url = (base_url or self.BASE_URL).rstrip("/")

    @property
    def name(self) -> str:
        return "yopflix"

    async def search(self, query: str, limit: int = 20) -> list[Title]:
        """
        Recherche des titres.

        Le status de l'enveloppe doit valoir "success", toute autre valeur
        est une erreur amont.
        """
        url = f"{self._base_url}/secure/search/{quote(query, safe='')}"
        payload = await self._http.get_json(url, params={"limit": str(limit)})
        response = self._validate(YopflixSearchResponse, payload, url)

        if response.status != self.SUCCESS_STATUS:
            raise UpstreamError(
                f"Recherche en echec pour query={query} (status={response.status!r})",
                url=url,
            )

        results = [
            Title(
                id=item.id,
                name=item.name,
                media_type=MediaType.SERIES if item.is_series else MediaType.MOVIE,
                year=item.year,
                poster_url=item.poster,
            )
            for item in response.results
        ]
        logger.debug(f"yopflix: {len(response.results)} resultat(s) pour {query!r}")
        return results[:limit]

    async def get_details(
        self,
        title_id: TitleId,
        title_name: Optional[str] = None,
    ) -> TitleDetails:
        """
        Recupere un titre et ses videos uqload.

        Args:
            title_id: ID numerique Yopflix
            title_name: Slug optionnel transmis en parametre titleName
        """
        url = f"{self._base_url}/secure/titles/{title_id}"
        params = {"titleId": str(title_id)}
        if title_name:
            params["titleName"] = title_name

        payload = await self._http.get_json(url, params=params)
        response = self._validate(YopflixTitleResponse, payload, url)
        title = response.title
        episodes = self._extract_episodes(response)

        return TitleDetails(
            id=title.id,
            name=title.name,
            media_type=MediaType.SERIES if title.is_series else MediaType.MOVIE,
            year=title.year,
            poster_url=title.poster,
            episodes=tuple(episodes),
            season_count=title.season_count,
            episode_count=title.episode_count,
        )

    def _extract_episodes(self, response: YopflixTitleResponse) -> list[Episode]:
        """
        Construit les episodes depuis les videos des deux niveaux du document.

        Les doublons sont retires sur l'id de video uniquement : les videos
        presentes aux deux niveaux ne sont gardees qu'une fois, mais plusieurs
        langues d'un meme (saison, episode) restent toutes listees.
        """
        seen: set[str] = set()
        videos: list[YopflixVideo] = []
        for video in [*response.videos, *response.title.videos]:
            key = str(video.id)
            if key in seen:
                continue
            seen.add(key)
            videos.append(video)

        episodes = []
        for video in videos:
            if not video.url or not is_uqload_embed(video.url):
                logger.debug(f"yopflix: video {video.id} ignoree (pas un embed uqload)")
                continue
            numbers = parse_season_episode(video.name)
            season, episode = numbers if numbers else (None, None)
            episodes.append(
                Episode(
                    id=str(video.id),
                    name=video.name,
                    url=video.url,
                    season=season,
                    episode=episode,
                    language=video.language,
                )
            )
        return episodes

    @staticmethod
    def _validate(model: Any, payload: Any, url: str) -> Any:
        """Valide un document amont, convertit les erreurs en UpstreamError."""
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            raise UpstreamError(
                f"Reponse inattendue pour {url}: {e.error_count()} erreur(s) de validation",
                url=url,
            ) from e

    async def close(self) -> None:
        await self._http.close()
