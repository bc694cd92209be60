"""
Couche d'acces HTTP partagee par les fournisseurs.

Encapsule un httpx.AsyncClient avec une identite de navigateur fixe et
convertit toutes les erreurs (statut non 2xx, hote injoignable, JSON invalide)
en UpstreamError. Aucune relance automatique n'est faite a ce niveau : une
erreur amont est fatale pour l'operation en cours.

Usage:
    http = HttpClient(user_agent="Mozilla/5.0 ...")
    data = await http.get_json("https://example.org/api", params={"q": "x"})
    html = await http.fetch_html("https://example.org/page")
    await http.close()
"""

from typing import Any, Optional

import httpx
from loguru import logger

from streamdl.core.exceptions import UpstreamError

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

JSON_ACCEPT = "application/json, text/plain, */*"
HTML_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"

# Longueur de corps conservee dans les messages d'erreur
_ERROR_BODY_PREVIEW = 200


class HttpClient:
    """
    Client HTTP asynchrone avec en-tetes de navigateur simules.

    Le client httpx sous-jacent est cree a la premiere requete (lazy init)
    et reutilise pour beneficier du connection pooling.
    """

    def __init__(
        self,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = 30.0,
    ) -> None:
        """
        Initialise le client.

        Args:
            user_agent: En-tete User-Agent envoye a chaque requete
            timeout: Delai maximum par requete en secondes
        """
        self._user_agent = user_agent
        self._timeout = timeout
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        """Retourne le client httpx, le cree si necessaire."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                headers={"User-Agent": self._user_agent},
                timeout=httpx.Timeout(self._timeout, connect=10.0),
                follow_redirects=True,
            )
        return self._client

    async def _request(
        self,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """
        Execute une requete et verifie le statut.

        Raises:
            UpstreamError: Statut non 2xx ou erreur de transport
        """
        client = self._get_client()
        logger.debug(f"{method} {url}")
        try:
            response = await client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise UpstreamError(f"{method} {url} injoignable: {e}", url=url) from e

        if not response.is_success:
            body = response.text[:_ERROR_BODY_PREVIEW]
            raise UpstreamError(
                f"HTTP {response.status_code} pour {method} {url}: {body}",
                url=url,
                status_code=response.status_code,
            )
        return response

    async def get_json(
        self,
        url: str,
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> Any:
        """
        GET d'un document JSON.

        Args:
            url: URL absolue
            params: Parametres de requete optionnels
            headers: En-tetes supplementaires (ex: Referer)

        Returns:
            Document JSON decode
        """
        response = await self._request(
            "GET",
            url,
            params=params,
            headers={"Accept": JSON_ACCEPT, **(headers or {})},
        )
        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(f"Reponse JSON invalide pour {url}", url=url) from e

    async def fetch_html(
        self,
        url: str,
        headers: Optional[dict[str, str]] = None,
    ) -> str:
        """GET d'une page HTML brute."""
        response = await self._request(
            "GET",
            url,
            headers={"Accept": HTML_ACCEPT, **(headers or {})},
        )
        return response.text

    async def post_form(self, url: str, data: dict[str, str]) -> str:
        """POST d'un formulaire encode (application/x-www-form-urlencoded)."""
        response = await self._request(
            "POST",
            url,
            data=data,
            headers={"Accept": HTML_ACCEPT},
        )
        return response.text

    async def close(self) -> None:
        """
        Ferme le client HTTP.

        Doit etre appele a la fin de la commande pour liberer
        les ressources reseau.
        """
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
