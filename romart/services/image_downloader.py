"""
Telechargement des jaquettes.

Ecriture atomique : l'image est ecrite dans un fichier temporaire du
repertoire cible puis renommee, aucun fichier partiel n'est laisse.
"""

import os
import secrets
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

import httpx
from loguru import logger

CONTENT_TYPE_EXTENSIONS: dict[str, str] = {
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/gif": ".gif",
    "image/webp": ".webp",
    "image/bmp": ".bmp",
}


@dataclass(frozen=True)
class DownloadOutcome:
    """Issue d'un telechargement."""

    success: bool
    path: Optional[Path] = None
    size: Optional[int] = None
    error: Optional[str] = None


def extension_for_content_type(content_type: str) -> Optional[str]:
    """Extension de fichier pour un Content-Type d'image, None si non supporte."""
    mime = content_type.split(";", 1)[0].strip().lower()
    return CONTENT_TYPE_EXTENSIONS.get(mime)


def is_valid_image_url(url: str) -> bool:
    parsed = urlparse(url)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


class ImageDownloader:
    """
    Telecharge une image et l'enregistre sous <output_dir>/<stem><ext>.

    L'extension est deduite du Content-Type de la reponse.
    """

    def __init__(self, user_agent: str, timeout: float = 30.0) -> None:
        self._user_agent = user_agent
        self._timeout = timeout
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                headers={"User-Agent": self._user_agent},
                timeout=self._timeout,
                follow_redirects=True,
            )
        return self._client

    async def download(self, url: str, output_dir: Path, stem: str) -> DownloadOutcome:
        """
        Telecharge l'image.

        Args:
            url: URL http(s) de l'image
            output_dir: Repertoire cible (cree si absent)
            stem: Nom du fichier sans extension

        Returns:
            DownloadOutcome ; les erreurs sont retournees, jamais levees
        """
        if not is_valid_image_url(url):
            return DownloadOutcome(success=False, error=f"Invalid image URL: {url}")

        try:
            response = await self._get_client().get(url)
        except httpx.TimeoutException:
            return DownloadOutcome(
                success=False,
                error=f"Request timed out after {int(self._timeout * 1000)}ms",
            )
        except httpx.HTTPError as e:
            logger.warning(f"Telechargement en echec ({url}): {e}")
            return DownloadOutcome(success=False, error=str(e))

        if not response.is_success:
            return DownloadOutcome(
                success=False,
                error=f"HTTP {response.status_code}: {response.reason_phrase}",
            )

        content_type = response.headers.get("content-type", "")
        extension = extension_for_content_type(content_type)
        if extension is None:
            return DownloadOutcome(
                success=False, error=f"Unsupported content type: {content_type}"
            )

        try:
            final_path = self._write_atomic(response.content, output_dir, stem, extension)
        except OSError as e:
            logger.warning(f"Ecriture de {stem}{extension} en echec: {e}")
            return DownloadOutcome(success=False, error=str(e))

        return DownloadOutcome(success=True, path=final_path, size=len(response.content))

    @staticmethod
    def _write_atomic(data: bytes, output_dir: Path, stem: str, extension: str) -> Path:
        output_dir.mkdir(parents=True, exist_ok=True)
        temp_path = output_dir / f".{stem}.{secrets.token_hex(4)}.tmp"
        final_path = output_dir / f"{stem}{extension}"
        try:
            temp_path.write_bytes(data)
            os.replace(temp_path, final_path)
        except OSError:
            temp_path.unlink(missing_ok=True)
            raise
        return final_path

    async def close(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
