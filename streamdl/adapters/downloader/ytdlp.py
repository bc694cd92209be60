"""
Adaptateur yt-dlp pour le telechargement des lecteurs embarques.

Le processus externe est la frontiere systeme : il recoit l'URL du lecteur,
le fichier de sortie et les options de fusion MP4. Un code de sortie non nul
est converti en DownloadFailure, que le service de telechargement relance.

Les repertoires de plugins et l'executable sont fournis par la configuration
(voir Settings) : cet adaptateur ne lit aucune variable d'environnement.
"""

import asyncio
import shutil
from pathlib import Path
from typing import Optional, Sequence

from loguru import logger

from streamdl.core.exceptions import ConfigurationError, DownloadFailure
from streamdl.core.ports import IDownloader

# Noms essayes, dans l'ordre, quand aucun executable n'est impose
YTDLP_CANDIDATES = ("yt-dlp", "yt-dlp_linux", "yt-dlp_linux_aarch64")


class YtDlpDownloader(IDownloader):
    """
    Telechargeur base sur l'executable yt-dlp.

    Attributes:
        MERGE_FORMAT: Conteneur de sortie demande a yt-dlp
    """

    MERGE_FORMAT = "mp4"

    def __init__(
        self,
        plugin_dirs: str,
        binary: Optional[str] = None,
        candidates: Sequence[str] = YTDLP_CANDIDATES,
    ) -> None:
        """
        Initialise le telechargeur.

        Args:
            plugin_dirs: Valeur de --plugin-dirs (chemins separes par ':')
            binary: Executable impose (prioritaire sur la detection)
            candidates: Noms d'executables essayes via le PATH
        """
        self._plugin_dirs = plugin_dirs
        self._binary_override = binary or None
        self._candidates = tuple(candidates)
        self._resolved: Optional[str] = None

    def resolve_binary(self) -> str:
        """
        Determine l'executable yt-dlp (resultat memorise).

        Raises:
            ConfigurationError: Si aucun candidat n'est trouve dans le PATH
        """
        if self._resolved is not None:
            return self._resolved

        if self._binary_override:
            self._resolved = self._binary_override
            return self._resolved

        for name in self._candidates:
            if shutil.which(name) is not None:
                logger.debug(f"Executable yt-dlp detecte: {name}")
                self._resolved = name
                return name

        raise ConfigurationError(
            f"Executable yt-dlp introuvable (essayes: {', '.join(self._candidates)}). "
            "Definir STREAMDL_YTDLP_BIN (ou YTDLP_BIN) pour l'imposer."
        )

    def build_command(
        self,
        url: str,
        output_path: Path,
        no_overwrite: bool = True,
        no_continue: bool = True,
    ) -> list[str]:
        """
        Construit la ligne de commande yt-dlp.

        Returns:
            Liste d'arguments prete pour create_subprocess_exec
        """
        cmd = [self.resolve_binary(), "--plugin-dirs", self._plugin_dirs]
        if no_overwrite:
            cmd.append("--no-overwrites")
        cmd += [
            "-o", str(output_path),
            "--merge-output-format", self.MERGE_FORMAT,
            url,
        ]
        if no_continue:
            cmd.append("--no-continue")
        cmd += ["--no-part", "--restrict-filenames"]
        return cmd

    async def download(
        self,
        url: str,
        output_path: Path,
        no_overwrite: bool = True,
        no_continue: bool = True,
    ) -> None:
        """
        Lance yt-dlp et attend la fin du processus.

        La sortie standard est heritee pour afficher la progression de yt-dlp.

        Raises:
            DownloadFailure: Répertoire de sortie impossible à créer, lancement
                impossible ou code de sortie non nul
        """
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DownloadFailure(f"Impossible de creer {output_path.parent}: {e}") from e

        cmd = self.build_command(url, output_path, no_overwrite, no_continue)
        logger.debug(f"Commande: {' '.join(cmd)}")

        try:
            process = await asyncio.create_subprocess_exec(*cmd)
        except OSError as e:
            raise DownloadFailure(f"Impossible de lancer {cmd[0]}: {e}") from e

        code = await process.wait()
        if code != 0:
            raise DownloadFailure(f"{cmd[0]} exited with code {code} for {url}")
