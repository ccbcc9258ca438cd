"""
Tests des definitions de systemes ScreenScraper.
"""

from romart.adapters.libretro.systems import SUPPORTED_SYSTEM_IDS
from romart.adapters.screenscraper.systems import (
    SYSTEMS,
    get_extensions_for_system,
    get_system_by_id,
    get_system_by_name,
    is_valid_extension,
)


class TestSystems:
    """Tests de la table des systemes."""

    def test_lookup_by_id(self) -> None:
        system = get_system_by_id(3)
        assert system is not None
        assert system.name == "Nintendo Entertainment System"
        assert ".nes" in system.extensions

    def test_lookup_by_name_case_insensitive(self) -> None:
        system = get_system_by_name("SNES")
        assert system is not None
        assert system.id == 4

    def test_unknown_system(self) -> None:
        assert get_system_by_id(9999) is None
        assert get_system_by_name("amiga-cd64") is None

    def test_extensions_default_to_zip(self) -> None:
        assert get_extensions_for_system(9999) == (".zip",)

    def test_is_valid_extension(self) -> None:
        assert is_valid_extension(3, ".NES") is True
        assert is_valid_extension(3, ".gba") is False

    def test_ids_unique(self) -> None:
        ids = [s.id for s in SYSTEMS.values()]
        assert len(ids) == len(set(ids))

    def test_every_libretro_platform_is_known(self) -> None:
        """Chaque plateforme Libretro a des extensions connues pour le scan."""
        for system_id in SUPPORTED_SYSTEM_IDS:
            assert get_system_by_id(system_id) is not None
