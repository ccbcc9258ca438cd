"""
Tests du parseur de listings CDN (BeautifulSoup).
"""

from romart.adapters.libretro.cdn_parser import parse_cdn_directory
from tests.fixtures.libretro_responses import CDN_BOXARTS_HTML, CDN_EMPTY_HTML


class TestParseCdnDirectory:
    """Tests de parse_cdn_directory."""

    def test_extracts_png_names_in_order(self) -> None:
        assert parse_cdn_directory(CDN_BOXARTS_HTML) == [
            "Super Mario Bros. (World)",
            "Zelda (USA)",
            "Donkey Kong (Japan, USA)",
        ]

    def test_decodes_percent_encoding(self) -> None:
        html = '<pre><a href="Q%2ABert%27s%20Qubes%20(USA).png">Q*Bert</a></pre>'
        assert parse_cdn_directory(html) == ["Q*Bert's Qubes (USA)"]

    def test_skips_parent_and_non_png(self) -> None:
        assert parse_cdn_directory(CDN_EMPTY_HTML) == []

    def test_table_listing(self) -> None:
        """Listing en tableau (autoindex Apache)."""
        html = """<html><body><table>
        <tr><td><a href="../">Parent Directory</a></td></tr>
        <tr><td><a href="Metroid%20(USA).png">Metroid (USA).png</a></td></tr>
        <tr><td><a href="Kid%20Icarus%20(Europe).png">Kid Icarus (Europe).png</a></td></tr>
        </table></body></html>"""
        assert parse_cdn_directory(html) == ["Metroid (USA)", "Kid Icarus (Europe)"]

    def test_each_link_returned_once(self) -> None:
        """Un lien a la fois dans <pre> et <body> n'est pas duplique."""
        html = '<body><pre><a href="Game%20(USA).png">x</a></pre></body>'
        assert parse_cdn_directory(html) == ["Game (USA)"]

    def test_anchor_without_href(self) -> None:
        assert parse_cdn_directory("<body><a name='top'>top</a></body>") == []

    def test_bare_fragment_without_body(self) -> None:
        """Liens hors de tout <pre>, <table> ou <body>."""
        html = '<a href="../">../</a><a href="Game.png">Game.png</a>'
        assert parse_cdn_directory(html) == ["Game"]
