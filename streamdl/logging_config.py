"""
Configuration du logging de l'application via loguru.

Deux sorties :
- console (stderr) : colorée, niveau ajustable par -v / -q sans toucher au
  fichier ; stdout reste réservé aux résultats des commandes
- fichier : JSON avec rotation, toujours au niveau DEBUG
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)

# Identifiant loguru du handler console courant
_console_handler_id: Optional[int] = None


def set_console_level(level: str) -> None:
    """Remplace le handler console par un handler au niveau demandé.

    Le handler fichier n'est pas touché.
    """
    global _console_handler_id
    if _console_handler_id is not None:
        try:
            logger.remove(_console_handler_id)
        except ValueError:
            # Handler deja retire par un logger.remove() global
            pass
    _console_handler_id = logger.add(
        sys.stderr,
        level=level.upper(),
        format=CONSOLE_FORMAT,
        colorize=True,
    )


def verbosity_level(verbose: int, quiet: bool, default: str) -> str:
    """Niveau console résultant des options -v / -q (-q l'emporte)."""
    if quiet:
        return "ERROR"
    if verbose >= 1:
        return "DEBUG"
    return default


def configure_logging(
    log_level: str = "WARNING",
    log_file: Path = Path("logs/streamdl.log"),
    rotation_size: str = "10 MB",
    retention_count: int = 5,
) -> None:
    """Configure le logging de l'application.

    Args :
        log_level : Niveau minimum de la console (DEBUG, INFO, WARNING, ERROR)
        log_file : Chemin du fichier de log JSON
        rotation_size : Taille maximale avant rotation (ex: "10 MB")
        retention_count : Nombre de fichiers rotatifs conservés
    """
    global _console_handler_id
    logger.remove()
    _console_handler_id = None

    set_console_level(log_level)

    log_file.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_file,
        level="DEBUG",  # requêtes HTTP et commandes yt-dlp incluses
        format="{message}",
        serialize=True,
        rotation=rotation_size,
        retention=retention_count,
        compression="zip",
    )

    logger.debug("Logging configuré", log_file=str(log_file), rotation=rotation_size)
