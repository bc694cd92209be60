"""
Registre des fournisseurs de catalogue.

Associe un nom de fournisseur (ou un alias) a son instance unique.
Un nom inconnu renvoie le fournisseur par defaut plutot qu'une erreur.
"""

from typing import Optional

from loguru import logger

from streamdl.core.ports import IProvider


class ProviderRegistry:
    """
    Table statique nom -> fournisseur.

    Example:
        registry = ProviderRegistry(
            providers={"yopflix": yopflix, "frenchstream": frenchstream},
            aliases={"fs": "frenchstream"},
            default="yopflix",
        )
        registry.get("fs")       # -> frenchstream
        registry.get("inconnu")  # -> yopflix
    """

    def __init__(
        self,
        providers: dict[str, IProvider],
        aliases: Optional[dict[str, str]] = None,
        default: str = "yopflix",
    ) -> None:
        if default not in providers:
            raise ValueError(f"Fournisseur par defaut inconnu: {default}")
        self._providers = {name.lower(): provider for name, provider in providers.items()}
        self._aliases = {alias.lower(): target.lower() for alias, target in (aliases or {}).items()}
        self._default = default.lower()

    @property
    def default_name(self) -> str:
        return self._default

    def get(self, name: Optional[str]) -> IProvider:
        """
        Retourne le fournisseur correspondant au nom ou a l'alias.

        Args:
            name: Nom ou alias (insensible a la casse), None pour le defaut

        Returns:
            Instance du fournisseur, le fournisseur par defaut si le nom est inconnu
        """
        key = (name or "").strip().lower()
        key = self._aliases.get(key, key)
        provider = self._providers.get(key)
        if provider is None:
            if key:
                logger.warning(f"Fournisseur inconnu '{name}', utilisation de '{self._default}'")
            return self._providers[self._default]
        return provider

    def names(self) -> list[str]:
        """Noms des fournisseurs disponibles (alias exclus)."""
        return list(self._providers)

    def aliases(self) -> dict[str, str]:
        """Table alias -> nom de fournisseur."""
        return dict(self._aliases)

    async def aclose(self) -> None:
        """Ferme les ressources reseau de tous les fournisseurs."""
        for provider in self._providers.values():
            await provider.close()
