"""
Fixtures pytest partagees pour les tests RomArt.

Ce module contient les fixtures communes utilisees dans les tests:
- Fabrique de fichiers ROM dans un repertoire temporaire
- Settings de test avec chemins temporaires
- Fonction d'attente factice pour les retries et le limiteur de debit
"""

from pathlib import Path
from typing import Callable
from unittest.mock import AsyncMock

import pytest

from romart.adapters.api.screenscraper_client import ScreenScraperCredentials
from romart.config import Settings
from romart.core.ports.artwork_adapter import LookupRequest
from romart.core.value_objects import RomFile


@pytest.fixture
def rom_dir(tmp_path: Path) -> Path:
    """Repertoire de ROMs vide."""
    directory = tmp_path / "roms"
    directory.mkdir()
    return directory


@pytest.fixture
def make_rom(rom_dir: Path) -> Callable[..., RomFile]:
    """
    Fabrique de RomFile reels sur disque.

    Usage:
        rom = make_rom("Super Mario Bros. (World).nes", b"NES\\x1a")
    """

    def _make(filename: str, content: bytes = b"\x00" * 16) -> RomFile:
        path = rom_dir / filename
        path.write_bytes(content)
        return RomFile.from_path(path)

    return _make


@pytest.fixture
def credentials() -> ScreenScraperCredentials:
    """Identifiants ScreenScraper de test."""
    return ScreenScraperCredentials(
        dev_id="devid",
        dev_password="devpassword",
        user_id="user",
        user_password="userpassword",
    )


@pytest.fixture
def test_settings(tmp_path: Path, rom_dir: Path) -> Settings:
    """
    Settings de test avec chemins temporaires.

    Libretro seul est actif ; ScreenScraper reste desactive.
    """
    return Settings(
        _env_file=None,
        download_dir=rom_dir,
        system_id=3,
        media_type="box-2D",
        log_file=tmp_path / "test.log",
    )


@pytest.fixture
def no_sleep() -> AsyncMock:
    """Remplace asyncio.sleep : enregistre les delais sans attendre."""
    return AsyncMock(return_value=None)


@pytest.fixture
def lookup_request(make_rom: Callable[..., RomFile]) -> LookupRequest:
    """Requete de recherche pour une ROM NES."""
    rom = make_rom("Super Mario Bros. (World).nes")
    return LookupRequest(
        rom=rom,
        platform_id=3,
        media_type="box-2D",
        region_priority=("us", "wor", "eu", "jp"),
        content_hash="D445F698",
    )
