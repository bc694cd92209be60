"""
Clients des sites de streaming.

Ce module fournit les adaptateurs pour communiquer avec les catalogues:
- Yopflix: API REST JSON
- French Stream: pages HTML + endpoint JSON d'episodes

Infrastructure partagee:
- HttpClient: acces HTTP avec identite de navigateur et erreurs uniformes
- ProviderRegistry: resolution nom/alias -> fournisseur

Les fournisseurs implementent IProvider defini dans core/ports/providers.py.
"""

from streamdl.adapters.api.frenchstream_client import FrenchStreamProvider
from streamdl.adapters.api.http import HttpClient
from streamdl.adapters.api.registry import ProviderRegistry
from streamdl.adapters.api.yopflix_client import YopflixProvider

__all__ = [
    "FrenchStreamProvider",
    "HttpClient",
    "ProviderRegistry",
    "YopflixProvider",
]
