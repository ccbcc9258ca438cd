"""
Rendu Rich des resultats de scraping.

Les jaquettes obtenues par correspondance approximative (best effort) sont
affichees en jaune avec le nom retenu, pour les distinguer des
correspondances exactes.
"""

from pathlib import Path
from typing import Optional

from rich.table import Table

from romart.core.entities import ScrapeResult, ScrapeStatus, ScrapeSummary


def _format_size(size: Optional[int]) -> str:
    if size is None:
        return ""
    if size < 1024:
        return f"{size} B"
    return f"{size / 1024:.1f} KB"


def render_result_line(result: ScrapeResult, index: int, total: int) -> str:
    """Ligne de progression pour une ROM."""
    width = len(str(total))
    prefix = f"[dim][{index + 1:>{width}}/{total}][/dim]"
    name = result.rom.filename

    if result.status is ScrapeStatus.DOWNLOADED:
        source = f" [dim]({result.source})[/dim]" if result.source else ""
        size = _format_size(result.image_size)
        if result.best_effort:
            return (
                f"{prefix} [yellow]~[/yellow] {name} [yellow]-> {result.game_name}[/yellow]"
                f" [dim]{size}[/dim]{source}"
            )
        return f"{prefix} [green]✔[/green] {name} [dim]{size}[/dim]{source}"
    if result.status is ScrapeStatus.SKIPPED:
        return f"{prefix} [dim]- {name} (image existante)[/dim]"
    if result.status is ScrapeStatus.PLANNED:
        return f"{prefix} [cyan]?[/cyan] {name}"
    if result.status is ScrapeStatus.NOT_FOUND:
        detail = f" [dim]({result.error})[/dim]" if result.error else ""
        return f"{prefix} [yellow]✗[/yellow] {name} non trouve{detail}"
    return f"{prefix} [red]✗[/red] {name} [red]{result.error or 'erreur'}[/red]"


def render_summary(summary: ScrapeSummary, imgs_dir: Optional[Path]) -> Table:
    """Tableau recapitulatif d'un run."""
    table = Table(title="Resume", show_header=False, box=None)
    table.add_column("Statut", style="bold")
    table.add_column("Nombre", justify="right")

    table.add_row("ROMs traitees", str(summary.total_roms))
    table.add_row("[green]Telechargees[/green]", str(summary.downloaded))
    if summary.best_effort:
        table.add_row("[yellow]  dont approximatives[/yellow]", str(summary.best_effort))
    table.add_row("Ignorees", str(summary.skipped))
    table.add_row("[yellow]Non trouvees[/yellow]", str(summary.not_found))
    table.add_row("[red]Echecs[/red]", str(summary.failed))
    table.add_row("Duree", f"{summary.elapsed_seconds:.1f}s")
    if imgs_dir is not None:
        table.add_row("Images", str(imgs_dir))
    return table
