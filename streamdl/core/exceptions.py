"""
Exceptions du domaine streamdl.

Taxonomie des erreurs :
- UpstreamError : appel HTTP en echec ou reponse mal formee (fatal pour la commande)
- DownloadFailure : yt-dlp a echoue (relance puis consignee dans le rapport)
- ConfigurationError : executable yt-dlp introuvable (fatal, avant le lot)

Les absences de correspondance lors du parsing ne sont PAS des exceptions :
les fonctions de parsing retournent None et l'appelant ignore l'element.
"""

from typing import Optional


class StreamdlError(Exception):
    """Classe de base des erreurs affichees par la CLI."""


class UpstreamError(StreamdlError):
    """
    Exception levee quand un site amont ne repond pas correctement.

    Attributes:
        url: URL appelee
        status_code: Code HTTP recu, ou None si l'hote est injoignable
                     ou si l'enveloppe JSON est invalide
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        self.url = url
        self.status_code = status_code
        super().__init__(message)


class DownloadFailure(StreamdlError):
    """Le telechargeur externe a termine en erreur ou n'a pas pu etre lance."""


class ConfigurationError(StreamdlError):
    """Configuration inutilisable (executable yt-dlp introuvable)."""
