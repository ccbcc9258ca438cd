"""
Tests de la normalisation des noms de fichiers libretro-thumbnails.
"""

import pytest

from romart.adapters.libretro.sanitizer import has_invalid_chars, sanitize_filename


class TestSanitizeFilename:
    """Tests de sanitize_filename."""

    @pytest.mark.parametrize(
        "stem,expected",
        [
            ("Q*Bert's Qubes (USA)", "Q_Bert's Qubes (USA)"),
            ("What's My Name?", "What's My Name_"),
            ("AC/DC: Live", "AC_DC_ Live"),
            ('Say "Hi" <now> | back\\slash & co', "Say _Hi_ _now_ _ back_slash _ co"),
            ("Super Mario Bros. (World)", "Super Mario Bros. (World)"),
        ],
    )
    def test_replaces_invalid_chars(self, stem: str, expected: str) -> None:
        assert sanitize_filename(stem) == expected

    def test_has_invalid_chars(self) -> None:
        assert has_invalid_chars("Q*Bert") is True
        assert has_invalid_chars("Qbert (USA)") is False
