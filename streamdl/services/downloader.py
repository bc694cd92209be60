"""
Service d'orchestration des telechargements.

Ce module pilote un lot d'episodes de maniere strictement sequentielle :
- filtrage par saison / numeros d'episode / nombre maximum
- calcul du chemin de sortie de chaque episode
- saut des fichiers deja presents (fichier regulier non vide)
- relance avec backoff exponentiel en cas d'echec du telechargeur

L'echec d'un episode n'interrompt jamais le lot : il est consigne et
restitue dans le rapport final. Seule une ConfigurationError (telechargeur
introuvable) arrete le lot avant son demarrage.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, Optional, Sequence, Union

from loguru import logger
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from streamdl.core.entities import Episode
from streamdl.core.exceptions import DownloadFailure
from streamdl.core.ports import IDownloader
from streamdl.services.renamer import build_output_path

DEFAULT_ATTEMPTS = 3
DEFAULT_BASE_DELAY = 5.0


class DownloadStatus(Enum):
    """Resultat du traitement d'un episode."""

    DOWNLOADED = "downloaded"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class EpisodeOutcome:
    """Resultat du traitement d'un episode."""

    episode: Episode
    output_path: Path
    status: DownloadStatus
    reason: Optional[str] = None


@dataclass(frozen=True)
class DownloadFailureRecord:
    """Echec consigne pour le rapport de fin de lot."""

    name: str
    url: str
    reason: str


@dataclass
class DownloadReport:
    """
    Rapport d'un lot de telechargements.

    Attributes:
        downloaded: Fichiers produits pendant le lot
        skipped: Fichiers deja presents (telechargeur non invoque)
        failures: Episodes en echec apres epuisement des tentatives
    """

    downloaded: list[Path] = field(default_factory=list)
    skipped: list[Path] = field(default_factory=list)
    failures: list[DownloadFailureRecord] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """True si aucun episode n'a echoue."""
        return not self.failures

    @property
    def total(self) -> int:
        return len(self.downloaded) + len(self.skipped) + len(self.failures)

    def record(self, outcome: EpisodeOutcome) -> None:
        """Ajoute le resultat d'un episode au rapport."""
        if outcome.status is DownloadStatus.DOWNLOADED:
            self.downloaded.append(outcome.output_path)
        elif outcome.status is DownloadStatus.SKIPPED:
            self.skipped.append(outcome.output_path)
        else:
            self.failures.append(
                DownloadFailureRecord(
                    name=outcome.episode.name,
                    url=outcome.episode.url,
                    reason=outcome.reason or "download failed",
                )
            )


def filter_episodes(
    episodes: Sequence[Episode],
    season: Optional[int] = None,
    episode_numbers: Optional[Iterable[int]] = None,
    max_count: Optional[int] = None,
) -> list[Episode]:
    """
    Restreint la liste d'episodes a telecharger.

    Si les filtres saison/episode ne laissent rien, la liste complete est
    conservee (un filtre trop etroit ne doit pas vider le lot). La limite
    max_count s'applique ensuite, depuis le debut de la liste.

    Args:
        episodes: Episodes resolus par le fournisseur
        season: Saison exacte a conserver
        episode_numbers: Numeros d'episode a conserver
        max_count: Nombre maximum d'episodes

    Returns:
        Nouvelle liste (la sequence d'entree n'est jamais modifiee)
    """
    filtered = list(episodes)

    if season is not None:
        filtered = [ep for ep in filtered if ep.season == season]

    wanted = set(episode_numbers or ())
    if wanted:
        filtered = [ep for ep in filtered if ep.episode is not None and ep.episode in wanted]

    if not filtered:
        if season is not None or wanted:
            logger.warning("Aucun episode ne correspond aux filtres, lot complet conserve")
        filtered = list(episodes)

    if max_count is not None:
        filtered = filtered[: max(max_count, 0)]

    return filtered


def is_already_downloaded(path: Path) -> bool:
    """Verifie qu'un fichier regulier non vide existe deja au chemin donne."""
    try:
        return path.is_file() and path.stat().st_size > 0
    except OSError:
        return False


class DownloadService:
    """
    Orchestrateur sequentiel des telechargements d'episodes.

    Example:
        service = DownloadService(downloader=YtDlpDownloader(plugin_dirs="plugins"))
        report = await service.download_all("Psych", episodes, Path("downloads"))
        for failure in report.failures:
            print(failure.name, failure.reason)
    """

    def __init__(
        self,
        downloader: IDownloader,
        attempts: int = DEFAULT_ATTEMPTS,
        base_delay: float = DEFAULT_BASE_DELAY,
    ) -> None:
        """
        Initialise le service.

        Args:
            downloader: Telechargeur externe (port IDownloader)
            attempts: Nombre de tentatives par episode
            base_delay: Delai avant la 2e tentative, double ensuite (secondes)
        """
        self._downloader = downloader
        self._attempts = max(1, attempts)
        self._base_delay = max(0.0, base_delay)

    def _log_retry(self, retry_state: RetryCallState) -> None:
        """Journalise un echec avant la pause de backoff."""
        error = retry_state.outcome.exception() if retry_state.outcome else None
        delay = retry_state.next_action.sleep if retry_state.next_action else 0
        logger.warning(
            f"Echec du telechargement (tentative {retry_state.attempt_number}/{self._attempts}): "
            f"{error}. Nouvelle tentative dans {delay:.0f}s"
        )

    async def download_episode(self, episode: Episode, output_path: Path) -> EpisodeOutcome:
        """
        Telecharge un episode avec saut des fichiers existants et relances.

        Chaque tentative demande a ne jamais reprendre un fichier partiel ni
        ecraser un fichier existant.

        Returns:
            EpisodeOutcome (DOWNLOADED, SKIPPED ou FAILED)
        """
        if is_already_downloaded(output_path):
            logger.info(f"Fichier existant, ignore: {output_path}")
            return EpisodeOutcome(episode, output_path, DownloadStatus.SKIPPED)

        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._attempts),
            wait=wait_exponential(multiplier=self._base_delay, min=0),
            retry=retry_if_exception_type(DownloadFailure),
            before_sleep=self._log_retry,
            reraise=True,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    await self._downloader.download(
                        episode.url,
                        output_path,
                        no_overwrite=True,
                        no_continue=True,
                    )
        except DownloadFailure as e:
            logger.error(f"Abandon apres {self._attempts} tentatives pour {episode.url}: {e}")
            return EpisodeOutcome(
                episode,
                output_path,
                DownloadStatus.FAILED,
                reason=f"download failed after retries: {e}",
            )

        return EpisodeOutcome(episode, output_path, DownloadStatus.DOWNLOADED)

    async def download_all(
        self,
        show_name: str,
        episodes: Sequence[Episode],
        out_dir: Union[str, Path],
        ext: str = "mp4",
        on_start: Optional[Callable[[Episode, Path], None]] = None,
    ) -> DownloadReport:
        """
        Telecharge un lot d'episodes, un par un, dans l'ordre recu.

        Args:
            show_name: Nom du titre (dossier et prefixe des fichiers)
            episodes: Episodes deja filtres
            out_dir: Repertoire racine des telechargements
            ext: Extension des fichiers produits
            on_start: Rappel optionnel avant chaque episode (affichage CLI)

        Returns:
            DownloadReport avec succes, sauts et echecs

        Raises:
            ConfigurationError: Si le telechargeur est introuvable
        """
        # Echec immediat si yt-dlp est introuvable, avant tout episode
        self._downloader.resolve_binary()

        report = DownloadReport()
        for episode in episodes:
            output_path = build_output_path(out_dir, show_name, episode.season, episode.episode, ext)
            if on_start is not None:
                on_start(episode, output_path)
            outcome = await self.download_episode(episode, output_path)
            report.record(outcome)

        logger.info(
            f"Lot termine: {len(report.downloaded)} telecharge(s), "
            f"{len(report.skipped)} ignore(s), {len(report.failures)} echec(s)"
        )
        return report
