"""
Tests unitaires pour les commandes CLI.

Tests couvrant:
- search: lignes tabulees, JSON, absence de resultats
- info: resume JSON
- list: lignes triees SxxEyy [langue]
- download: resolution par --query, filtres transmis, bilan des echecs
- erreurs amont: code de sortie 1
"""

import json
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from typer.testing import CliRunner

from streamdl.adapters.cli.commands.download_command import pick_preferred_result
from streamdl.adapters.cli.helpers import parse_title_id, split_csv_numbers
from streamdl.core.entities import Episode, MediaType, Title, TitleDetails
from streamdl.core.exceptions import ConfigurationError, UpstreamError
from streamdl.main import app
from streamdl.services.downloader import DownloadFailureRecord, DownloadReport

runner = CliRunner()


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def mock_provider() -> MagicMock:
    """Fournisseur simule (methodes async)."""
    provider = MagicMock()
    provider.search = AsyncMock(return_value=[])
    provider.get_details = AsyncMock()
    provider.get_episodes = AsyncMock(return_value=[])
    return provider


@pytest.fixture
def mock_container(mock_provider, tmp_path):
    """Mock le Container pour les tests.

    Patche Container dans helpers.py car c'est la que le decorateur
    @with_container() l'importe et l'instancie.
    """
    with patch("streamdl.adapters.cli.helpers.Container") as mock_cls:
        container_instance = MagicMock()
        mock_cls.return_value = container_instance

        registry = MagicMock()
        registry.get.return_value = mock_provider
        registry.aclose = AsyncMock()
        container_instance.provider_registry.return_value = registry

        container_instance.config.return_value = MagicMock(downloads_dir=tmp_path / "downloads")

        service = MagicMock()
        service.download_all = AsyncMock(return_value=DownloadReport())
        container_instance.download_service.return_value = service
        yield container_instance


@pytest.fixture
def psych_details() -> TitleDetails:
    return TitleDetails(
        id=1234,
        name="Psych",
        media_type=MediaType.SERIES,
        season_count=8,
        episode_count=120,
        episodes=(
            Episode(id="2", name="S01 E02", url="https://uqload.cx/embed-b.html", season=1, episode=2, language="vf"),
            Episode(id="1", name="S01 E01", url="https://uqload.cx/embed-a.html", season=1, episode=1),
        ),
    )


# ============================================================================
# Helpers
# ============================================================================


class TestHelpers:
    """Tests des conversions d'arguments."""

    def test_parse_title_id(self):
        assert parse_title_id("1234") == 1234
        assert parse_title_id("/s-tv/1-x.html") == "/s-tv/1-x.html"

    def test_split_csv_numbers(self):
        assert split_csv_numbers("1, 2,,x,5") == [1, 2, 5]
        assert split_csv_numbers(None) == []

    def test_pick_preferred_result(self):
        movie = Title(id=1, name="Movie")
        series = Title(id=2, name="Series", media_type=MediaType.SERIES)
        assert pick_preferred_result([movie, series]) is series
        assert pick_preferred_result([movie]) is movie
        assert pick_preferred_result([]) is None


# ============================================================================
# search / info / list
# ============================================================================


class TestSearchCommand:
    """Tests pour la commande search."""

    def test_lines(self, mock_container, mock_provider):
        mock_provider.search.return_value = [
            Title(id=1234, name="Psych", media_type=MediaType.SERIES, year=2006),
            Title(id=5678, name="Psych: The Movie"),
        ]

        result = runner.invoke(app, ["search", "--query", "psych", "--limit", "5", "--provider", "fs"])

        assert result.exit_code == 0
        assert "1234\tPsych (2006) [series]" in result.output
        assert "5678\tPsych: The Movie\n" in result.output
        mock_provider.search.assert_awaited_once_with("psych", 5)
        mock_container.provider_registry.return_value.get.assert_called_once_with("fs")
        mock_container.provider_registry.return_value.aclose.assert_awaited_once()

    def test_no_results(self, mock_container):
        result = runner.invoke(app, ["search", "--query", "zzz"])

        assert result.exit_code == 0
        assert "No results." in result.output

    def test_json(self, mock_container, mock_provider):
        mock_provider.search.return_value = [Title(id=1, name="Psych", year=2006)]

        result = runner.invoke(app, ["search", "--query", "psych", "--json"])

        data = json.loads(result.output)
        assert data == [{"id": 1, "name": "Psych", "type": "movie", "year": 2006, "poster": None}]

    def test_query_is_required(self, mock_container):
        result = runner.invoke(app, ["search"])
        assert result.exit_code == 1

    def test_upstream_error_exits_with_code_1(self, mock_container, mock_provider):
        mock_provider.search.side_effect = UpstreamError("HTTP 503 pour GET https://x", status_code=503)

        result = runner.invoke(app, ["search", "--query", "psych"])

        assert result.exit_code == 1
        assert "HTTP 503" in result.output
        # Les ressources sont liberees malgre l'erreur
        mock_container.provider_registry.return_value.aclose.assert_awaited_once()


class TestInfoCommand:
    """Tests pour la commande info."""

    def test_json_summary(self, mock_container, mock_provider, psych_details):
        mock_provider.get_details.return_value = psych_details

        result = runner.invoke(app, ["info", "--titleId", "1234", "--titleName", "psych"])

        assert result.exit_code == 0
        assert json.loads(result.output) == {
            "id": 1234,
            "name": "Psych",
            "type": "series",
            "season_count": 8,
            "episode_count": 120,
            "video_count": 2,
        }
        mock_provider.get_details.assert_awaited_once_with(1234, "psych")

    def test_path_id_is_kept_as_string(self, mock_container, mock_provider, psych_details):
        mock_provider.get_details.return_value = psych_details

        runner.invoke(app, ["info", "--titleId", "/s-tv/1-x.html"])

        mock_provider.get_details.assert_awaited_once_with("/s-tv/1-x.html", None)


class TestListCommand:
    """Tests pour la commande list."""

    def test_sorted_lines(self, mock_container, mock_provider, psych_details):
        mock_provider.get_episodes.return_value = list(psych_details.episodes)

        result = runner.invoke(app, ["list", "--titleId", "1234"])

        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "S01E01\thttps://uqload.cx/embed-a.html",
            "S01E02 [vf]\thttps://uqload.cx/embed-b.html",
        ]

    def test_json(self, mock_container, mock_provider, psych_details):
        mock_provider.get_episodes.return_value = list(psych_details.episodes)

        result = runner.invoke(app, ["list", "--titleId", "1234", "--json"])

        data = json.loads(result.output)
        assert [item["episode"] for item in data] == [1, 2]


# ============================================================================
# download
# ============================================================================


class TestDownloadCommand:
    """Tests pour la commande download."""

    def test_query_prefers_series(self, mock_container, mock_provider, psych_details, tmp_path):
        mock_provider.search.return_value = [
            Title(id=5678, name="Psych: The Movie"),
            Title(id=1234, name="Psych", media_type=MediaType.SERIES),
        ]
        mock_provider.get_details.return_value = psych_details
        out_dir = tmp_path / "out"

        result = runner.invoke(
            app,
            ["download", "--query", "psych", "--season", "1", "--episode", "2", "--outDir", str(out_dir)],
        )

        assert result.exit_code == 0
        assert "Using result: Psych (id=1234)" in result.output
        assert "Queued 1 video(s) from Psych" in result.output
        assert "All downloads completed." in result.output

        mock_provider.get_details.assert_awaited_once_with(1234, None)
        service = mock_container.download_service.return_value
        show_name, queued, target = service.download_all.await_args.args[:3]
        assert show_name == "Psych"
        assert [ep.id for ep in queued] == ["2"]
        assert target == out_dir

    def test_default_output_directory(self, mock_container, mock_provider, psych_details, tmp_path):
        mock_provider.get_details.return_value = psych_details

        runner.invoke(app, ["download", "--titleId", "1234", "--max", "1"])

        service = mock_container.download_service.return_value
        _, queued, target = service.download_all.await_args.args[:3]
        assert len(queued) == 1
        assert target == tmp_path / "downloads"

    def test_failures_are_reported_with_exit_code_0(self, mock_container, mock_provider, psych_details):
        mock_provider.get_details.return_value = psych_details
        report = DownloadReport(
            failures=[
                DownloadFailureRecord(
                    name="S01 E01",
                    url="https://uqload.cx/embed-a.html",
                    reason="download failed after retries: yt-dlp exited with code 1",
                )
            ]
        )
        mock_container.download_service.return_value.download_all.return_value = report

        result = runner.invoke(app, ["download", "--titleId", "1234"])

        assert result.exit_code == 0
        assert "Completed with 1 failure(s):" in result.output
        assert "- S01 E01 :: https://uqload.cx/embed-a.html :: download failed after retries" in result.output

    def test_no_results_for_query(self, mock_container, mock_provider):
        result = runner.invoke(app, ["download", "--query", "zzz"])

        assert result.exit_code == 1
        mock_provider.get_details.assert_not_called()

    def test_title_without_episodes(self, mock_container, mock_provider):
        mock_provider.get_details.return_value = TitleDetails(id=1, name="Vide")

        result = runner.invoke(app, ["download", "--titleId", "1"])

        assert result.exit_code == 1
        mock_container.download_service.return_value.download_all.assert_not_called()

    def test_missing_title_and_query(self, mock_container):
        result = runner.invoke(app, ["download"])
        assert result.exit_code == 1

    def test_missing_ytdlp_exits_with_code_1(self, mock_container, mock_provider, psych_details):
        mock_provider.get_details.return_value = psych_details
        mock_container.download_service.return_value.download_all.side_effect = ConfigurationError(
            "Executable yt-dlp introuvable"
        )

        result = runner.invoke(app, ["download", "--titleId", "1234"])

        assert result.exit_code == 1
        assert "yt-dlp introuvable" in result.output
