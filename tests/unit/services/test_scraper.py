"""
Tests de l'orchestrateur ScraperService.

Le registre et le telechargeur sont mockes (MagicMock(spec=...)) ; le
scanner est reel et travaille sur un repertoire temporaire.
"""

from pathlib import Path
from typing import Callable
from unittest.mock import MagicMock

import pytest

from romart.adapters.api.screenscraper_client import ScreenScraperCredentials
from romart.config import Settings
from romart.core.entities import ScrapeStatus
from romart.core.exceptions import (
    AuthenticationError,
    CatalogUnavailableError,
    ConfigurationError,
)
from romart.core.ports.artwork_adapter import AdapterSourceConfig, LookupResult
from romart.core.value_objects import RomFile
from romart.services.adapter_registry import AdapterRegistry, FallbackResult
from romart.services.image_downloader import DownloadOutcome, ImageDownloader
from romart.services.scanner import RomScannerService
from romart.services.scraper import ScrapeOptions, ScraperService, build_source_configs

LIBRETRO = AdapterSourceConfig(id="libretro", priority=1)
BOX_URL = "https://thumbnails.libretro.com/x/Named_Boxarts/Game.png"


@pytest.fixture
def mock_registry() -> MagicMock:
    registry = MagicMock(spec=AdapterRegistry)
    registry.initialize_all.return_value = [LIBRETRO]
    registry.needs_hash.return_value = False
    registry.lookup_with_fallback.return_value = FallbackResult(
        result=LookupResult(
            found=True, matched_id="Game", display_name="Game (World)", media_url=BOX_URL
        ),
        adapter_id="libretro",
    )
    return registry


@pytest.fixture
def mock_downloader(rom_dir: Path) -> MagicMock:
    downloader = MagicMock(spec=ImageDownloader)

    async def fake_download(url: str, output_dir: Path, stem: str) -> DownloadOutcome:
        return DownloadOutcome(success=True, path=output_dir / f"{stem}.png", size=123)

    downloader.download.side_effect = fake_download
    return downloader


@pytest.fixture
def hasher() -> MagicMock:
    return MagicMock(return_value="CBF43926")


@pytest.fixture
def service(
    test_settings: Settings,
    mock_registry: MagicMock,
    mock_downloader: MagicMock,
    hasher: MagicMock,
) -> ScraperService:
    return ScraperService(
        settings=test_settings,
        registry=mock_registry,
        scanner=RomScannerService(),
        downloader=mock_downloader,
        hasher=hasher,
        clock=iter([10.0, 12.5]).__next__,
    )


class TestBuildSourceConfigs:
    """Tests de build_source_configs()."""

    def test_libretro_only_by_default(self, test_settings: Settings) -> None:
        configs = build_source_configs(test_settings)
        assert [c.id for c in configs] == ["libretro"]
        assert configs[0].options == {"user_agent": "Wget/1.21.2", "request_timeout_ms": 30000}

    def test_screenscraper_requires_credentials(self, test_settings: Settings) -> None:
        test_settings.screenscraper.enabled = True
        assert [c.id for c in build_source_configs(test_settings)] == ["libretro"]

    def test_screenscraper_enabled_and_sorted(
        self, test_settings: Settings, credentials: ScreenScraperCredentials
    ) -> None:
        test_settings.screenscraper.enabled = True
        test_settings.screenscraper.credentials = credentials
        test_settings.screenscraper.priority = 1
        test_settings.libretro.priority = 5

        configs = build_source_configs(test_settings)

        assert [c.id for c in configs] == ["screenscraper", "libretro"]
        assert configs[0].options["credentials"]["dev_id"] == "devid"
        assert configs[0].options["rate_limit_ms"] == 1000

    def test_source_override(self, test_settings: Settings) -> None:
        configs = build_source_configs(test_settings, "screenscraper")
        assert [(c.id, c.priority) for c in configs] == [("screenscraper", 1)]
        assert configs[0].options["credentials"] is None

    def test_nothing_enabled(self, test_settings: Settings) -> None:
        test_settings.libretro.enabled = False
        assert build_source_configs(test_settings) == []


class TestRunValidation:
    """Erreurs de configuration levees avant tout traitement."""

    @pytest.mark.asyncio
    async def test_missing_system_id(
        self, service: ScraperService, test_settings: Settings, mock_registry: MagicMock
    ) -> None:
        test_settings.system_id = None

        with pytest.raises(ConfigurationError, match="System ID not configured"):
            await service.run()
        mock_registry.initialize_all.assert_not_called()

    @pytest.mark.asyncio
    async def test_no_sources_enabled(self, service: ScraperService, test_settings: Settings) -> None:
        test_settings.libretro.enabled = False

        with pytest.raises(ConfigurationError, match="No artwork sources enabled"):
            await service.run()

    @pytest.mark.asyncio
    async def test_no_source_initialized(
        self, service: ScraperService, mock_registry: MagicMock, mock_downloader: MagicMock
    ) -> None:
        mock_registry.initialize_all.return_value = []

        with pytest.raises(ConfigurationError, match="could be initialized"):
            await service.run()
        mock_registry.dispose_all.assert_awaited_once()
        mock_downloader.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_prefetch_failure_aborts_run(
        self, service: ScraperService, mock_registry: MagicMock, make_rom: Callable[..., RomFile]
    ) -> None:
        make_rom("Game (USA).nes")
        mock_registry.prefetch_all.side_effect = CatalogUnavailableError("down")

        with pytest.raises(CatalogUnavailableError):
            await service.run()
        mock_registry.lookup_with_fallback.assert_not_called()
        mock_registry.dispose_all.assert_awaited_once()


class TestRun:
    """Tests du traitement des ROMs."""

    @pytest.mark.asyncio
    async def test_downloads_each_rom(
        self,
        service: ScraperService,
        mock_registry: MagicMock,
        mock_downloader: MagicMock,
        hasher: MagicMock,
        make_rom: Callable[..., RomFile],
        rom_dir: Path,
    ) -> None:
        make_rom("B Game (USA).nes")
        make_rom("A Game (USA).nes")
        progress = []

        run = await service.run(on_progress=lambda r, i, t: progress.append((r.rom.filename, i, t)))

        assert [r.status for r in run.results] == [ScrapeStatus.DOWNLOADED] * 2
        assert progress == [("A Game (USA).nes", 0, 2), ("B Game (USA).nes", 1, 2)]
        assert run.sources == ["libretro"]
        assert run.roms_found == 2
        assert run.imgs_dir == rom_dir.resolve() / "Imgs"
        assert run.summary.downloaded == 2
        assert run.summary.elapsed_seconds == 2.5
        first = run.results[0]
        assert first.image_path == rom_dir.resolve() / "Imgs" / "A Game (USA).png"
        assert first.game_name == "Game (World)"
        assert first.source == "libretro"
        assert first.content_hash is None
        hasher.assert_not_called()
        mock_registry.prefetch_all.assert_awaited_once_with([LIBRETRO], 3)
        mock_downloader.download.assert_any_await(BOX_URL, rom_dir.resolve() / "Imgs", "A Game (USA)")

    @pytest.mark.asyncio
    async def test_hash_computed_when_needed(
        self,
        service: ScraperService,
        mock_registry: MagicMock,
        hasher: MagicMock,
        make_rom: Callable[..., RomFile],
    ) -> None:
        rom = make_rom("Game (USA).nes")
        mock_registry.needs_hash.return_value = True

        run = await service.run()

        hasher.assert_called_once_with(rom.path)
        request = mock_registry.lookup_with_fallback.await_args.args[0]
        assert request.content_hash == "CBF43926"
        assert request.platform_id == 3
        assert request.media_type == "box-2D"
        assert request.region_priority == ("us", "wor", "eu", "jp")
        assert run.results[0].content_hash == "CBF43926"

    @pytest.mark.asyncio
    async def test_hash_failure_marks_rom_failed(
        self,
        service: ScraperService,
        mock_registry: MagicMock,
        hasher: MagicMock,
        make_rom: Callable[..., RomFile],
    ) -> None:
        make_rom("Game (USA).nes")
        mock_registry.needs_hash.return_value = True
        hasher.side_effect = OSError("I/O error")

        run = await service.run()

        assert run.results[0].status is ScrapeStatus.FAILED
        assert run.results[0].error == "I/O error"
        mock_registry.lookup_with_fallback.assert_not_called()

    @pytest.mark.asyncio
    async def test_skips_existing_images(
        self,
        service: ScraperService,
        mock_registry: MagicMock,
        make_rom: Callable[..., RomFile],
        rom_dir: Path,
    ) -> None:
        make_rom("Game (USA).nes")
        make_rom("Other (USA).nes")
        imgs = rom_dir / "Imgs"
        imgs.mkdir()
        (imgs / "Game (USA).jpg").write_bytes(b"img")

        run = await service.run()

        assert [r.status for r in run.results] == [ScrapeStatus.SKIPPED, ScrapeStatus.DOWNLOADED]
        assert run.results[0].image_path == imgs.resolve() / "Game (USA).jpg"
        assert mock_registry.lookup_with_fallback.await_count == 1

    @pytest.mark.asyncio
    async def test_force_redownloads(
        self, service: ScraperService, make_rom: Callable[..., RomFile], rom_dir: Path
    ) -> None:
        make_rom("Game (USA).nes")
        imgs = rom_dir / "Imgs"
        imgs.mkdir()
        (imgs / "Game (USA).png").write_bytes(b"img")

        run = await service.run(ScrapeOptions(force=True))

        assert run.results[0].status is ScrapeStatus.DOWNLOADED

    @pytest.mark.asyncio
    async def test_limit(self, service: ScraperService, make_rom: Callable[..., RomFile]) -> None:
        for name in ("A.nes", "B.nes", "C.nes"):
            make_rom(name)

        run = await service.run(ScrapeOptions(limit=2))

        assert [r.rom.filename for r in run.results] == ["A.nes", "B.nes"]
        assert run.roms_found == 3

    @pytest.mark.asyncio
    async def test_dry_run(
        self,
        service: ScraperService,
        mock_registry: MagicMock,
        mock_downloader: MagicMock,
        hasher: MagicMock,
        make_rom: Callable[..., RomFile],
    ) -> None:
        make_rom("Game (USA).nes")
        mock_registry.needs_hash.return_value = True

        run = await service.run(ScrapeOptions(dry_run=True))

        assert run.results[0].status is ScrapeStatus.PLANNED
        mock_registry.initialize_all.assert_awaited_once()
        mock_registry.prefetch_all.assert_awaited_once()
        mock_registry.lookup_with_fallback.assert_not_called()
        mock_downloader.download.assert_not_called()
        hasher.assert_not_called()

    @pytest.mark.asyncio
    async def test_not_found(
        self, service: ScraperService, mock_registry: MagicMock, make_rom: Callable[..., RomFile]
    ) -> None:
        make_rom("Unknown (USA).nes")
        mock_registry.lookup_with_fallback.return_value = None

        run = await service.run()

        assert run.results[0].status is ScrapeStatus.NOT_FOUND
        assert run.summary.not_found == 1

    @pytest.mark.asyncio
    async def test_found_without_media(
        self, service: ScraperService, mock_registry: MagicMock, make_rom: Callable[..., RomFile]
    ) -> None:
        make_rom("Game (USA).nes")
        mock_registry.lookup_with_fallback.return_value = FallbackResult(
            result=LookupResult(found=True, display_name="Game"), adapter_id="screenscraper"
        )

        run = await service.run(ScrapeOptions(media_type="wheel"))

        result = run.results[0]
        assert result.status is ScrapeStatus.NOT_FOUND
        assert result.error == "No wheel media available"
        assert result.source == "screenscraper"

    @pytest.mark.asyncio
    async def test_download_failure(
        self, service: ScraperService, mock_downloader: MagicMock, make_rom: Callable[..., RomFile]
    ) -> None:
        make_rom("Game (USA).nes")
        mock_downloader.download.side_effect = None
        mock_downloader.download.return_value = DownloadOutcome(success=False, error="HTTP 404: Not Found")

        run = await service.run()

        assert run.results[0].status is ScrapeStatus.FAILED
        assert run.results[0].error == "HTTP 404: Not Found"
        assert run.summary.failed == 1

    @pytest.mark.asyncio
    async def test_best_effort_counted(
        self, service: ScraperService, mock_registry: MagicMock, make_rom: Callable[..., RomFile]
    ) -> None:
        make_rom("Game (USA) (Proto).nes")
        mock_registry.lookup_with_fallback.return_value = FallbackResult(
            result=LookupResult(
                found=True, display_name="Game (USA)", media_url=BOX_URL, best_effort=True
            ),
            adapter_id="libretro",
        )

        run = await service.run()

        assert run.results[0].best_effort is True
        assert run.summary.best_effort == 1

    @pytest.mark.asyncio
    async def test_authentication_error_aborts_and_disposes(
        self,
        service: ScraperService,
        mock_registry: MagicMock,
        mock_downloader: MagicMock,
        make_rom: Callable[..., RomFile],
    ) -> None:
        make_rom("Game (USA).nes")
        mock_registry.lookup_with_fallback.side_effect = AuthenticationError(401)

        with pytest.raises(AuthenticationError):
            await service.run()
        mock_registry.dispose_all.assert_awaited_once()
        mock_downloader.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_options_override_settings(
        self, service: ScraperService, mock_registry: MagicMock, tmp_path: Path
    ) -> None:
        other_dir = tmp_path / "snes"
        other_dir.mkdir()
        (other_dir / "Game (USA).sfc").write_bytes(b"rom")

        run = await service.run(
            ScrapeOptions(system_id=4, download_dir=other_dir, region_priority=("jp",))
        )

        assert [r.rom.filename for r in run.results] == ["Game (USA).sfc"]
        mock_registry.prefetch_all.assert_awaited_once_with([LIBRETRO], 4)
        request = mock_registry.lookup_with_fallback.await_args.args[0]
        assert request.region_priority == ("jp",)
