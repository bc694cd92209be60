"""
Interface port pour le telechargeur externe.

Le telechargement est une frontiere systeme : l'implementation concrete
pilote un executable (yt-dlp) et signale les echecs par DownloadFailure.
"""

from abc import ABC, abstractmethod
from pathlib import Path


class IDownloader(ABC):
    """Contrat du telechargeur de medias a partir d'une URL de lecteur."""

    @abstractmethod
    def resolve_binary(self) -> str:
        """
        Determine l'executable a utiliser.

        Returns:
            Nom ou chemin de l'executable

        Raises:
            ConfigurationError: Si aucun executable n'est disponible
        """
        ...

    @abstractmethod
    async def download(
        self,
        url: str,
        output_path: Path,
        no_overwrite: bool = True,
        no_continue: bool = True,
    ) -> None:
        """
        Telecharge une URL vers un fichier de sortie.

        Args:
            url: URL du lecteur embarque
            output_path: Fichier de destination
            no_overwrite: Ne jamais ecraser un fichier existant
            no_continue: Ne jamais reprendre un fichier partiel

        Raises:
            DownloadFailure: Si le processus termine avec un code non nul
                             ou ne peut pas etre lance
        """
        ...
