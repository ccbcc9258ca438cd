"""
Parseur des listings de repertoires du CDN thumbnails.libretro.com.

Utilise quand l'API GitHub est limitee : les pages d'index (autoindex
Apache ou nginx) sont parsees avec BeautifulSoup pour extraire les noms
des fichiers PNG.
"""

from urllib.parse import unquote

from bs4 import BeautifulSoup

PARENT_DIRECTORY = "../"


def parse_cdn_directory(html: str) -> list[str]:
    """
    Extrait les noms de fichiers PNG (sans extension) d'un listing HTML.

    Chaque lien est decode (percent-encoding) ; le lien vers le repertoire
    parent et les fichiers non PNG sont ignores.

    Args:
        html: Contenu HTML de la page d'index

    Returns:
        Noms de fichiers dans l'ordre du document
    """
    soup = BeautifulSoup(html, "html.parser")
    filenames: list[str] = []

    # Tous les liens du document, y compris un fragment sans <body>
    for anchor in soup.find_all("a", href=True):
        href = anchor["href"]
        if href == PARENT_DIRECTORY or not href.endswith(".png"):
            continue

        filenames.append(unquote(href)[:-4])

    return filenames
