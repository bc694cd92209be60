"""
Fixtures pytest partagees pour les tests streamdl.

Ce module contient les fixtures communes utilisees dans les tests:
- Mock du port IDownloader
- Episodes de serie types
- Settings de test avec chemins temporaires
"""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from streamdl.config import Settings
from streamdl.core.entities import Episode
from streamdl.core.ports import IDownloader


@pytest.fixture
def mock_downloader() -> MagicMock:
    """
    Mock de IDownloader pour les tests.

    download() reussit par defaut ; configurer side_effect dans chaque test
    pour simuler des echecs.
    """
    mock = MagicMock(spec=IDownloader)
    mock.resolve_binary.return_value = "yt-dlp"
    mock.download = AsyncMock(return_value=None)
    return mock


@pytest.fixture
def series_episodes() -> list[Episode]:
    """Trois episodes sur deux saisons, plus un bonus sans numeros."""
    return [
        Episode(id="1", name="S01 E01", url="https://uqload.cx/embed-a1.html", season=1, episode=1),
        Episode(id="2", name="S01 E02", url="https://uqload.cx/embed-a2.html", season=1, episode=2),
        Episode(id="3", name="S02 E01", url="https://uqload.cx/embed-b1.html", season=2, episode=1),
        Episode(id="4", name="Bonus", url="https://uqload.cx/embed-x0.html"),
    ]


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """
    Settings de test avec chemins temporaires.

    Utilise tmp_path de pytest pour isoler les telechargements et les logs.
    """
    downloads_dir = tmp_path / "downloads"
    downloads_dir.mkdir(parents=True)

    return Settings(
        downloads_dir=downloads_dir,
        plugin_dir=tmp_path / "plugins",
        download_base_delay=0,
        log_file=tmp_path / "test.log",
    )
