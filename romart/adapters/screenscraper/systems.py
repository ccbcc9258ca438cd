"""
Definitions des systemes ScreenScraper.

Les IDs de systeme ScreenScraper servent d'identifiant de plateforme pour
tout le moteur ; ce module fournit aussi les extensions de ROM attendues
par systeme, utilisees par le scanner.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SystemDefinition:
    """
    Systeme connu de ScreenScraper.

    Attributs:
        id: ID de systeme ScreenScraper (systemeid)
        name: Nom lisible
        extensions: Extensions de ROM reconnues (minuscules, point inclus)
    """

    id: int
    name: str
    extensions: tuple[str, ...]


SYSTEMS: dict[str, SystemDefinition] = {
    "genesis": SystemDefinition(1, "Sega Genesis / Mega Drive", (".gen", ".md", ".smd", ".bin", ".zip")),
    "mastersystem": SystemDefinition(2, "Sega Master System", (".sms", ".zip")),
    "nes": SystemDefinition(3, "Nintendo Entertainment System", (".nes", ".zip")),
    "snes": SystemDefinition(4, "Super Nintendo Entertainment System", (".sfc", ".smc", ".zip")),
    "gamegear": SystemDefinition(5, "Sega Game Gear", (".gg", ".zip")),
    "gameboy": SystemDefinition(9, "Nintendo Game Boy", (".gb", ".zip")),
    "gbc": SystemDefinition(10, "Nintendo Game Boy Color", (".gbc", ".gb", ".zip")),
    "virtualboy": SystemDefinition(11, "Nintendo Virtual Boy", (".vb", ".zip")),
    "gba": SystemDefinition(12, "Nintendo Game Boy Advance", (".gba", ".zip")),
    "n64": SystemDefinition(14, "Nintendo 64", (".n64", ".v64", ".z64", ".zip")),
    "sega32x": SystemDefinition(19, "Sega 32X", (".32x", ".bin", ".zip")),
    "segacd": SystemDefinition(20, "Sega CD / Mega CD", (".cue", ".chd", ".iso", ".bin")),
    "saturn": SystemDefinition(22, "Sega Saturn", (".bin", ".cue", ".iso", ".chd")),
    "dreamcast": SystemDefinition(23, "Sega Dreamcast", (".chd", ".cdi", ".gdi", ".cue")),
    "atari2600": SystemDefinition(26, "Atari 2600", (".a26", ".bin", ".zip")),
    "atari7800": SystemDefinition(27, "Atari 7800", (".a78", ".bin", ".zip")),
    "pcengine": SystemDefinition(31, "NEC PC Engine / TurboGrafx-16", (".pce", ".zip")),
    "lynx": SystemDefinition(43, "Atari Lynx", (".lnx", ".zip")),
    "wonderswan": SystemDefinition(45, "Bandai WonderSwan", (".ws", ".zip")),
    "wonderswancolor": SystemDefinition(46, "Bandai WonderSwan Color", (".wsc", ".zip")),
    "coleco": SystemDefinition(48, "ColecoVision", (".col", ".rom", ".zip")),
    "psx": SystemDefinition(57, "Sony PlayStation", (".bin", ".cue", ".pbp", ".chd", ".m3u", ".iso")),
    "psp": SystemDefinition(58, "Sony PlayStation Portable", (".iso", ".cso", ".pbp")),
    "c64": SystemDefinition(66, "Commodore 64", (".d64", ".g64", ".prg", ".crt", ".tap", ".t64", ".zip")),
    "mame": SystemDefinition(75, "MAME", (".zip",)),
    "ngpc": SystemDefinition(82, "SNK Neo Geo Pocket Color", (".ngc", ".ngp", ".zip")),
    "nds": SystemDefinition(106, "Nintendo DS", (".nds", ".zip")),
    "pcenginecd": SystemDefinition(114, "NEC PC Engine CD / TurboGrafx-CD", (".cue", ".chd", ".iso")),
    "intellivision": SystemDefinition(115, "Mattel Intellivision", (".int", ".bin", ".rom", ".zip")),
    "neogeo": SystemDefinition(142, "SNK Neo Geo", (".zip",)),
}

_SYSTEMS_BY_ID: dict[int, SystemDefinition] = {s.id: s for s in SYSTEMS.values()}

# Extensions par defaut pour un systeme inconnu
DEFAULT_EXTENSIONS: tuple[str, ...] = (".zip",)


def get_system_by_id(system_id: int) -> Optional[SystemDefinition]:
    """Retourne la definition d'un systeme par son ID ScreenScraper."""
    return _SYSTEMS_BY_ID.get(system_id)


def get_system_by_name(name: str) -> Optional[SystemDefinition]:
    """Retourne la definition d'un systeme par son nom court (ex: "snes")."""
    return SYSTEMS.get(name.lower())


def get_extensions_for_system(system_id: int) -> tuple[str, ...]:
    """Extensions de ROM valides pour un systeme (".zip" si inconnu)."""
    system = get_system_by_id(system_id)
    return system.extensions if system else DEFAULT_EXTENSIONS


def is_valid_extension(system_id: int, extension: str) -> bool:
    """Verifie si une extension est valide pour un systeme."""
    return extension.lower() in get_extensions_for_system(system_id)
