"""
Tests TDD pour DownloadService - orchestration sequentielle des telechargements.

Tests couvrant:
- filter_episodes: saison, numeros, repli sur la liste complete, max
- is_already_downloaded
- download_episode: saut des fichiers existants, relances, epuisement
- download_all: ordre, rapport, poursuite apres echec, yt-dlp introuvable
"""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from streamdl.adapters.downloader import ytdlp
from streamdl.adapters.downloader.ytdlp import YtDlpDownloader
from streamdl.core.entities import Episode
from streamdl.core.exceptions import ConfigurationError, DownloadFailure
from streamdl.services.downloader import (
    DownloadReport,
    DownloadService,
    DownloadStatus,
    EpisodeOutcome,
    filter_episodes,
    is_already_downloaded,
)


@pytest.fixture
def service(mock_downloader: MagicMock) -> DownloadService:
    """DownloadService sans attente entre les tentatives."""
    return DownloadService(downloader=mock_downloader, attempts=3, base_delay=0)


# ============================================================================
# filter_episodes
# ============================================================================


class TestFilterEpisodes:
    """Tests pour filter_episodes."""

    def test_no_filter_returns_copy(self, series_episodes):
        result = filter_episodes(series_episodes)
        assert result == series_episodes
        assert result is not series_episodes

    def test_season_filter(self, series_episodes):
        result = filter_episodes(series_episodes, season=1)
        assert [ep.id for ep in result] == ["1", "2"]

    def test_episode_numbers_filter(self, series_episodes):
        result = filter_episodes(series_episodes, episode_numbers=[1])
        assert [ep.id for ep in result] == ["1", "3"]

    def test_season_and_episode_filters_combine(self, series_episodes):
        result = filter_episodes(series_episodes, season=1, episode_numbers=[2, 9])
        assert [ep.id for ep in result] == ["2"]

    def test_empty_result_falls_back_to_full_list(self, series_episodes):
        result = filter_episodes(series_episodes, season=9)
        assert result == series_episodes

    def test_max_applies_after_filtering(self, series_episodes):
        result = filter_episodes(series_episodes, season=1, max_count=1)
        assert [ep.id for ep in result] == ["1"]

    def test_max_applies_after_fallback(self, series_episodes):
        result = filter_episodes(series_episodes, episode_numbers=[42], max_count=2)
        assert [ep.id for ep in result] == ["1", "2"]

    def test_max_zero(self, series_episodes):
        assert filter_episodes(series_episodes, max_count=0) == []


class TestIsAlreadyDownloaded:
    """Tests pour is_already_downloaded."""

    def test_non_empty_file(self, tmp_path: Path):
        path = tmp_path / "a.mp4"
        path.write_bytes(b"data")
        assert is_already_downloaded(path)

    def test_empty_file(self, tmp_path: Path):
        path = tmp_path / "a.mp4"
        path.touch()
        assert not is_already_downloaded(path)

    def test_missing_file_or_directory(self, tmp_path: Path):
        assert not is_already_downloaded(tmp_path / "missing.mp4")
        assert not is_already_downloaded(tmp_path)


# ============================================================================
# DownloadReport
# ============================================================================


class TestDownloadReport:
    """Tests pour DownloadReport."""

    def test_record_dispatches_by_status(self, series_episodes):
        report = DownloadReport()
        ep = series_episodes[0]

        report.record(EpisodeOutcome(ep, Path("/a.mp4"), DownloadStatus.DOWNLOADED))
        report.record(EpisodeOutcome(ep, Path("/b.mp4"), DownloadStatus.SKIPPED))
        report.record(EpisodeOutcome(ep, Path("/c.mp4"), DownloadStatus.FAILED, reason="boom"))

        assert report.downloaded == [Path("/a.mp4")]
        assert report.skipped == [Path("/b.mp4")]
        assert report.failures[0].name == "S01 E01"
        assert report.failures[0].reason == "boom"
        assert report.total == 3
        assert not report.success

    def test_empty_report_is_success(self):
        assert DownloadReport().success


# ============================================================================
# download_episode
# ============================================================================


class TestDownloadEpisode:
    """Tests pour DownloadService.download_episode."""

    @pytest.mark.asyncio
    async def test_existing_file_is_skipped(self, service, mock_downloader, series_episodes, tmp_path):
        output = tmp_path / "Show - S01E01.mp4"
        output.write_bytes(b"video")

        outcome = await service.download_episode(series_episodes[0], output)

        assert outcome.status is DownloadStatus.SKIPPED
        mock_downloader.download.assert_not_called()

    @pytest.mark.asyncio
    async def test_success_requests_no_overwrite_no_continue(
        self, service, mock_downloader, series_episodes, tmp_path
    ):
        output = tmp_path / "Show - S01E01.mp4"

        outcome = await service.download_episode(series_episodes[0], output)

        assert outcome.status is DownloadStatus.DOWNLOADED
        mock_downloader.download.assert_awaited_once_with(
            series_episodes[0].url, output, no_overwrite=True, no_continue=True
        )

    @pytest.mark.asyncio
    async def test_transient_failure_is_retried(self, service, mock_downloader, series_episodes, tmp_path):
        mock_downloader.download.side_effect = [DownloadFailure("exit 1"), None]

        outcome = await service.download_episode(series_episodes[0], tmp_path / "x.mp4")

        assert outcome.status is DownloadStatus.DOWNLOADED
        assert mock_downloader.download.await_count == 2

    @pytest.mark.asyncio
    async def test_exhausted_attempts_return_failure(
        self, service, mock_downloader, series_episodes, tmp_path
    ):
        mock_downloader.download.side_effect = DownloadFailure("yt-dlp exited with code 1")

        outcome = await service.download_episode(series_episodes[0], tmp_path / "x.mp4")

        assert outcome.status is DownloadStatus.FAILED
        assert mock_downloader.download.await_count == 3
        assert outcome.reason.startswith("download failed after retries")
        assert "code 1" in outcome.reason

    @pytest.mark.asyncio
    async def test_single_attempt(self, mock_downloader, series_episodes, tmp_path):
        service = DownloadService(downloader=mock_downloader, attempts=1, base_delay=0)
        mock_downloader.download.side_effect = DownloadFailure("boom")

        outcome = await service.download_episode(series_episodes[0], tmp_path / "x.mp4")

        assert outcome.status is DownloadStatus.FAILED
        assert mock_downloader.download.await_count == 1


# ============================================================================
# download_all
# ============================================================================


class TestDownloadAll:
    """Tests pour DownloadService.download_all."""

    @pytest.mark.asyncio
    async def test_batch_continues_after_failure(self, service, mock_downloader, series_episodes, tmp_path):
        def fail_first_episode(url, output_path, **kwargs):
            if url == series_episodes[0].url:
                raise DownloadFailure("yt-dlp exited with code 1")

        mock_downloader.download.side_effect = fail_first_episode

        report = await service.download_all("Show", series_episodes[:3], tmp_path)

        assert len(report.failures) == 1
        assert report.failures[0].url == series_episodes[0].url
        assert "after retries" in report.failures[0].reason
        assert report.downloaded == [
            tmp_path / "Show" / "Season 01" / "Show - S01E02.mp4",
            tmp_path / "Show" / "Season 02" / "Show - S02E01.mp4",
        ]
        # 3 tentatives pour l'echec + 1 par succes
        assert mock_downloader.download.await_count == 5

    @pytest.mark.asyncio
    async def test_existing_files_are_skipped(self, service, mock_downloader, series_episodes, tmp_path):
        existing = tmp_path / "Show" / "Season 01" / "Show - S01E01.mp4"
        existing.parent.mkdir(parents=True)
        existing.write_bytes(b"video")

        report = await service.download_all("Show", series_episodes[:2], tmp_path)

        assert report.skipped == [existing]
        assert mock_downloader.download.await_count == 1
        assert report.success

    @pytest.mark.asyncio
    async def test_on_start_is_called_in_order(self, service, series_episodes, tmp_path):
        started = []

        await service.download_all(
            "Show", series_episodes, tmp_path, on_start=lambda ep, path: started.append(ep.id)
        )

        assert started == ["1", "2", "3", "4"]

    @pytest.mark.asyncio
    async def test_episode_without_numbers_uses_movie_layout(self, service, series_episodes, tmp_path):
        report = await service.download_all("Show", [series_episodes[3]], tmp_path)

        assert report.downloaded == [tmp_path / "Show" / "Show.mp4"]

    @pytest.mark.asyncio
    async def test_missing_downloader_aborts_before_batch(
        self, service, mock_downloader, series_episodes, tmp_path
    ):
        mock_downloader.resolve_binary.side_effect = ConfigurationError("yt-dlp introuvable")

        with pytest.raises(ConfigurationError):
            await service.download_all("Show", series_episodes, tmp_path)

        mock_downloader.download.assert_not_called()

    @pytest.mark.asyncio
    async def test_blocked_show_directory_is_reported_not_raised(
        self, monkeypatch, series_episodes, tmp_path
    ):
        """Un fichier a la place du dossier de la serie donne des echecs, pas une exception."""
        spawn = AsyncMock()
        monkeypatch.setattr(ytdlp.asyncio, "create_subprocess_exec", spawn)
        (tmp_path / "Show").write_bytes(b"x")
        service = DownloadService(
            downloader=YtDlpDownloader(plugin_dirs="p", binary="yt-dlp"),
            attempts=2,
            base_delay=0,
        )

        report = await service.download_all("Show", series_episodes[:2], tmp_path)

        assert len(report.failures) == 2
        assert all("after retries" in f.reason for f in report.failures)
        assert report.downloaded == []
        spawn.assert_not_called()
