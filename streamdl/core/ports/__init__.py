"""
Ports (interfaces abstraites) definissant les contrats pour les adaptateurs.

Ports fournisseurs : contrats des sites de streaming
- IProvider : recherche, details et episodes d'un titre

Ports telechargement : contrats de la frontiere processus
- IDownloader : telechargement d'une URL de lecteur vers un fichier
"""

from streamdl.core.ports.downloader import IDownloader
from streamdl.core.ports.providers import IProvider

__all__ = [
    "IDownloader",
    "IProvider",
]
