"""
Interface port pour les fournisseurs de catalogue.

Definit le contrat commun aux sites de streaming : recherche, details d'un
titre et liste des episodes. Les implementations (adaptateurs) normalisent
des sources heterogenes (API JSON, pages HTML) vers les memes entites.
"""

from abc import ABC, abstractmethod
from typing import Optional

from streamdl.core.entities import Episode, Title, TitleDetails, TitleId


class IProvider(ABC):
    """
    Interface de base des fournisseurs de catalogue.

    Les identifiants de titre sont opaques : un fournisseur recoit en
    get_details() exactement ce qu'il a produit en search().
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Retourne le nom du fournisseur (ex: 'yopflix')."""
        ...

    @abstractmethod
    async def search(self, query: str, limit: int = 20) -> list[Title]:
        """
        Recherche des titres par texte.

        Args:
            query: Texte recherche, transmis tel quel au site
            limit: Nombre maximum de resultats retournes

        Returns:
            Liste de Title (au plus `limit` elements)

        Raises:
            UpstreamError: Si le site ne repond pas avec un succes
        """
        ...

    @abstractmethod
    async def get_details(
        self,
        title_id: TitleId,
        title_name: Optional[str] = None,
    ) -> TitleDetails:
        """
        Recupere les metadonnees et les episodes d'un titre.

        Args:
            title_id: Identifiant retourne par search()
            title_name: Slug optionnel, utilise uniquement par les
                        fournisseurs qui l'exploitent

        Returns:
            TitleDetails avec les episodes resolus

        Raises:
            UpstreamError: Si un appel HTTP echoue
        """
        ...

    async def get_episodes(self, title_id: TitleId) -> list[Episode]:
        """Raccourci equivalent a get_details(title_id).episodes."""
        details = await self.get_details(title_id)
        return list(details.episodes)

    async def close(self) -> None:
        """Libere les ressources reseau (rien par defaut)."""
        return None
