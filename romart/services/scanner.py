"""
Service de scan des repertoires de ROMs.

Liste les fichiers ROM d'un repertoire (sans recursion) pour une
plateforme donnee et localise les jaquettes deja presentes dans Imgs/.
"""

from pathlib import Path
from typing import Optional, Sequence

from loguru import logger

from romart.adapters.screenscraper.systems import get_extensions_for_system
from romart.core.exceptions import ScanError
from romart.core.value_objects import RomFile

IMGS_DIRNAME = "Imgs"
IMAGE_EXTENSIONS: tuple[str, ...] = (".png", ".jpg", ".jpeg")


class RomScannerService:
    """
    Scanner de ROMs.

    Ignore les entrees cachees (prefixe "." ou "-"), le dossier Imgs et les
    sous-repertoires ; les ROMs sont triees par nom de fichier.
    """

    def scan(self, directory: Path, extensions: Sequence[str]) -> list[RomFile]:
        """
        Liste les ROMs d'un repertoire.

        Args:
            directory: Repertoire a scanner
            extensions: Extensions retenues (avec ou sans point, casse indifferente)

        Returns:
            RomFile tries par nom de fichier

        Raises:
            ScanError: Repertoire introuvable ou illisible
        """
        normalized = {
            ext.lower() if ext.startswith(".") else f".{ext.lower()}"
            for ext in extensions
        }
        root = directory.expanduser().resolve()

        try:
            entries = list(root.iterdir())
        except FileNotFoundError as e:
            raise ScanError(f"Directory not found: {directory}") from e
        except PermissionError as e:
            raise ScanError(f"Permission denied: {directory}") from e
        except OSError as e:
            raise ScanError(f"Failed to scan directory: {e}") from e

        roms = []
        for entry in entries:
            name = entry.name
            if name.startswith((".", "-")) or name.lower() == IMGS_DIRNAME.lower():
                continue
            if not entry.is_file() or entry.suffix.lower() not in normalized:
                continue
            roms.append(RomFile.from_path(entry))

        roms.sort(key=lambda rom: rom.filename)
        logger.debug(f"{len(roms)} ROM(s) trouvee(s) dans {root}")
        return roms

    def scan_for_system(self, directory: Path, system_id: int) -> list[RomFile]:
        """Scan avec les extensions connues de la plateforme."""
        return self.scan(directory, get_extensions_for_system(system_id))

    @staticmethod
    def imgs_directory(rom_directory: Path) -> Path:
        """Repertoire des jaquettes d'un repertoire de ROMs."""
        return rom_directory.expanduser().resolve() / IMGS_DIRNAME

    @staticmethod
    def find_existing_image(rom_stem: str, imgs_dir: Path) -> Optional[Path]:
        """Jaquette deja presente pour une ROM (.png, .jpg puis .jpeg)."""
        for ext in IMAGE_EXTENSIONS:
            candidate = imgs_dir / f"{rom_stem}{ext}"
            if candidate.is_file():
                return candidate
        return None
