"""
Tests du calcul de CRC32 en streaming.

Verifie:
- Valeur de reference (CRC32 de "123456789" = CBF43926)
- Format : 8 caracteres hexadecimaux majuscules, zeros de tete conserves
- Independance vis-a-vis de la taille des blocs
- Comportement du lot sur fichier illisible
"""

import zlib
from pathlib import Path

import pytest

from romart.infrastructure.hash_service import (
    HashOutcome,
    compute_crc32,
    compute_crc32_batch,
)


class TestComputeCrc32:
    """Tests de compute_crc32."""

    def test_reference_value(self, tmp_path: Path) -> None:
        """Le CRC32 standard de '123456789' est CBF43926."""
        path = tmp_path / "check.bin"
        path.write_bytes(b"123456789")

        assert compute_crc32(path) == "CBF43926"

    def test_empty_file(self, tmp_path: Path) -> None:
        """Un fichier vide a un CRC32 nul, complete par des zeros."""
        path = tmp_path / "empty.bin"
        path.write_bytes(b"")

        assert compute_crc32(path) == "00000000"

    def test_uppercase_eight_chars(self, tmp_path: Path) -> None:
        path = tmp_path / "rom.nes"
        path.write_bytes(b"NES\x1a" + bytes(range(256)) * 10)

        digest = compute_crc32(path)

        assert len(digest) == 8
        assert digest == digest.upper()
        assert int(digest, 16) == zlib.crc32(path.read_bytes())

    @pytest.mark.parametrize("chunk_size", [1, 7, 1024, 64 * 1024])
    def test_chunk_size_does_not_change_result(
        self, tmp_path: Path, chunk_size: int
    ) -> None:
        """Le resultat ne depend pas du decoupage en blocs."""
        data = bytes(range(256)) * 300
        path = tmp_path / "big.bin"
        path.write_bytes(data)

        expected = f"{zlib.crc32(data) & 0xFFFFFFFF:08X}"
        assert compute_crc32(path, chunk_size=chunk_size) == expected

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(OSError):
            compute_crc32(tmp_path / "absent.nes")


class TestComputeCrc32Batch:
    """Tests de compute_crc32_batch."""

    def test_batch_keeps_order_and_reports_errors(self, tmp_path: Path) -> None:
        """Un fichier illisible porte l'erreur sans interrompre le lot."""
        ok = tmp_path / "a.nes"
        ok.write_bytes(b"123456789")
        missing = tmp_path / "b.nes"

        results = compute_crc32_batch([ok, missing])

        assert [path for path, _ in results] == [ok, missing]
        (_, good), (_, bad) = results
        assert good == HashOutcome(digest="CBF43926")
        assert good.ok is True
        assert bad.ok is False
        assert bad.digest is None
        assert bad.error

    def test_repeated_path_kept(self, tmp_path: Path) -> None:
        """Un chemin fourni deux fois donne deux resultats."""
        rom = tmp_path / "a.nes"
        rom.write_bytes(b"123456789")

        results = compute_crc32_batch([rom, rom])

        assert results == [
            (rom, HashOutcome(digest="CBF43926")),
            (rom, HashOutcome(digest="CBF43926")),
        ]

    def test_progress_callback(self, tmp_path: Path) -> None:
        """Le callback recoit chaque fichier puis un appel final avec None."""
        paths = []
        for name in ("a.nes", "b.nes"):
            path = tmp_path / name
            path.write_bytes(b"x")
            paths.append(path)
        calls = []

        compute_crc32_batch(paths, on_progress=lambda d, t, p: calls.append((d, t, p)))

        assert calls == [(0, 2, paths[0]), (1, 2, paths[1]), (2, 2, None)]

    def test_empty_batch(self) -> None:
        assert compute_crc32_batch([]) == []
