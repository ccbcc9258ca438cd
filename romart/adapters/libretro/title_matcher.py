"""
Correspondance floue entre un nom de ROM et le catalogue Libretro.

Trois phases evaluees dans l'ordre, la premiere qui aboutit l'emporte :

1. Correspondance exacte (insensible a la casse) : best_effort=False
2. Correspondance apres suppression des tags de variante (Proto, Beta,
   Rev, Virtual Console, Unl...) en conservant la region : best_effort=True
3. Correspondance sur le titre seul (avant la premiere parenthese ou
   crochet), departagee par la region : best_effort=True

Les resultats best_effort sont signales pour que le rapport distingue les
identifications sures des identifications approximatives.
"""

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Sequence

if TYPE_CHECKING:
    from romart.adapters.libretro.manifest import FolderManifest


# Tags de variante a supprimer (la region est conservee). L'ordre compte.
VARIANT_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\s*\(\d{4}-\d{2}-\d{2}\)"),  # date: (1992-10-06)
    re.compile(r"\s*\(Proto(?:\s+\d+)?\)", re.IGNORECASE),
    re.compile(r"\s*\(Beta(?:\s+\d+)?(?:\s+\d+)?\)", re.IGNORECASE),
    re.compile(r"\s*\(Demo(?:\s+\d+)?\)", re.IGNORECASE),
    re.compile(r"\s*\(Sample\)", re.IGNORECASE),
    re.compile(r"\s*\(Kiosk\)", re.IGNORECASE),
    re.compile(r"\s*\(e-Reader\)", re.IGNORECASE),
    re.compile(r"\s*\(Virtual Console\)", re.IGNORECASE),
    re.compile(r"\s*\(Switch Online\)", re.IGNORECASE),
    re.compile(r"\s*\(Wii\)", re.IGNORECASE),
    re.compile(r"\s*\(3DS Virtual Console\)", re.IGNORECASE),
    re.compile(r"\s*\(Rev\s+\w+\)", re.IGNORECASE),
    re.compile(r"\s*\(v[\d.]+\)", re.IGNORECASE),
    re.compile(r"\s*\(Unl\)", re.IGNORECASE),
    re.compile(r"\s*\(Pirate\)", re.IGNORECASE),
    re.compile(r"\s*\(Retro-Bit\)", re.IGNORECASE),
    re.compile(r"\s*\(Piko Interactive\)", re.IGNORECASE),
    re.compile(r"\s*\(Hudson\)", re.IGNORECASE),
    re.compile(r"\s*\(MB-\d+\)", re.IGNORECASE),
    re.compile(r"\s*\(NINA-\d+\)", re.IGNORECASE),
    re.compile(r"\s*\(Program\)", re.IGNORECASE),
    re.compile(r"\s*\(Test Program\)", re.IGNORECASE),
    re.compile(r"\s*\(Competition Cart\)", re.IGNORECASE),
    re.compile(r"\s*\[b\]", re.IGNORECASE),  # bad dump
    re.compile(r"^\[BIOS\]\s*", re.IGNORECASE),
)

BASE_TITLE_PATTERN = re.compile(r"^([^(\[]+)")

# Les regions multiples passent avant les regions simples
REGION_PATTERN = re.compile(
    r"\((Japan,\s*USA|USA,\s*Europe|USA|World|Europe|Japan)[^)]*\)",
    re.IGNORECASE,
)

REGION_PRIORITY: tuple[str, ...] = (
    "world",
    "usa",
    "japan, usa",
    "usa, europe",
    "europe",
    "japan",
)


@dataclass(frozen=True)
class MatchResult:
    """Nom canonique retenu dans le catalogue."""

    match: str
    best_effort: bool


def strip_variant_tags(filename: str) -> str:
    """Supprime les tags de variante en conservant les tags de region."""
    result = filename
    for pattern in VARIANT_PATTERNS:
        result = pattern.sub("", result)
    return result.strip()


def extract_base_title(filename: str) -> Optional[str]:
    """Titre avant la premiere parenthese ou le premier crochet, None si vide."""
    match = BASE_TITLE_PATTERN.match(filename)
    if match is None:
        return None
    title = match.group(1).strip()
    return title or None


def extract_region(filename: str) -> Optional[str]:
    """
    Extrait la region connue d'un nom de fichier, normalisee en minuscules.

    Example:
        extract_region("Donkey Kong (Japan, USA)")  # "japan, usa"
        extract_region("Game (Germany)")            # None
    """
    match = REGION_PATTERN.search(filename)
    if match is None:
        return None
    return re.sub(r",\s*", ", ", match.group(1).lower())


def select_best_candidate(
    candidates: Sequence[str], preferred_region: Optional[str]
) -> str:
    """
    Departage plusieurs candidats par la region.

    Ordre : region identique a celle de la ROM, puis REGION_PRIORITY,
    puis premier candidat dans l'ordre alphabetique.
    """
    regions = {candidate: extract_region(candidate) for candidate in candidates}

    if preferred_region is not None:
        for candidate in candidates:
            if regions[candidate] == preferred_region:
                return candidate

    for region in REGION_PRIORITY:
        for candidate in candidates:
            if regions[candidate] == region:
                return candidate

    return sorted(candidates)[0]


def exact_match(manifest: "FolderManifest", filename: str) -> Optional[str]:
    """Nom canonique si present tel quel, puis sans tenir compte de la casse."""
    if filename in manifest.filenames:
        return filename
    return manifest.lowercase_map.get(filename.lower())


def _find_by_title(
    manifest: "FolderManifest", base_title: str, original_filename: str
) -> Optional[str]:
    prefix = base_title.lower()
    candidates = [
        original
        for lower, original in manifest.lowercase_map.items()
        if lower.startswith(prefix)
    ]

    if not candidates:
        return None
    if len(candidates) == 1:
        return candidates[0]
    return select_best_candidate(candidates, extract_region(original_filename))


def find_match(manifest: "FolderManifest", filename: str) -> Optional[MatchResult]:
    """
    Cherche le nom de la ROM dans le catalogue (trois phases).

    Args:
        manifest: Catalogue d'un dossier (type de media) d'une plateforme
        filename: Nom de la ROM sans extension, deja normalise

    Returns:
        MatchResult, ou None si aucune phase n'aboutit
    """
    exact = exact_match(manifest, filename)
    if exact is not None:
        return MatchResult(match=exact, best_effort=False)

    stripped = strip_variant_tags(filename)
    if stripped != filename:
        variant = exact_match(manifest, stripped)
        if variant is not None:
            return MatchResult(match=variant, best_effort=True)

    base_title = extract_base_title(filename)
    if base_title is not None:
        by_title = _find_by_title(manifest, base_title, filename)
        if by_title is not None:
            return MatchResult(match=by_title, best_effort=True)

    return None
