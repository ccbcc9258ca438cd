"""
Commandes CLI du scraping (scrape, hash, systems).
"""

import asyncio
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.table import Table

from romart.adapters.cli.helpers import console, with_container
from romart.adapters.cli.reporting import render_result_line, render_summary
from romart.adapters.libretro.systems import is_system_supported
from romart.adapters.screenscraper.systems import SYSTEMS, get_system_by_name
from romart.core.entities import ScrapeResult
from romart.core.exceptions import RomArtError
from romart.infrastructure.hash_service import compute_crc32_batch
from romart.logging_config import quiet_console
from romart.services.scraper import ScrapeOptions


def _resolve_system(system: Optional[str]) -> Optional[int]:
    """Accepte un ID numerique ou un nom court (ex: "snes")."""
    if system is None:
        return None
    if system.isdigit():
        return int(system)
    definition = get_system_by_name(system)
    if definition is None:
        console.print(f"[red]Systeme inconnu: {system}[/red] (voir 'romart systems')")
        raise typer.Exit(1)
    return definition.id


def scrape(
    directory: Annotated[
        Optional[Path],
        typer.Argument(help="Repertoire des ROMs (defaut: download_dir de la config)"),
    ] = None,
    system: Annotated[
        Optional[str],
        typer.Option("--system", "-s", help="ID ou nom court du systeme (ex: 3, nes)"),
    ] = None,
    media_type: Annotated[
        Optional[str],
        typer.Option("--media", "-m", help="Type de media (box-2D, ss, sstitle...)"),
    ] = None,
    region: Annotated[
        Optional[list[str]],
        typer.Option("--region", "-r", help="Region preferee (repetable, par ordre)"),
    ] = None,
    source: Annotated[
        Optional[str],
        typer.Option("--source", help="Source unique (libretro, screenscraper)"),
    ] = None,
    limit: Annotated[
        Optional[int],
        typer.Option("--limit", "-n", help="Nombre maximal de ROMs"),
    ] = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Retelecharger les images existantes"),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Liste les ROMs a traiter sans rien telecharger"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Affiche les logs pendant le traitement"),
    ] = False,
) -> None:
    """Recherche et telecharge les jaquettes d'un repertoire de ROMs."""
    options = ScrapeOptions(
        system_id=_resolve_system(system),
        download_dir=directory,
        media_type=media_type,
        region_priority=tuple(region) if region else None,
        source=source,
        limit=limit,
        force=force,
        dry_run=dry_run,
    )
    asyncio.run(_scrape_async(options, verbose))


@with_container()
async def _scrape_async(container, options: ScrapeOptions, verbose: bool) -> None:
    """Implementation async de la commande scrape."""
    service = container.scraper_service()

    def on_progress(result: ScrapeResult, index: int, total: int) -> None:
        console.print(render_result_line(result, index, total))

    if options.dry_run:
        console.print("[bold cyan]Simulation[/bold cyan] : aucun telechargement\n")

    try:
        with quiet_console(verbose):
            run = await service.run(options, on_progress=on_progress)
    except RomArtError as e:
        console.print(f"[red]Erreur: {e}[/red]")
        raise typer.Exit(1)

    if run.roms_found == 0:
        console.print("[yellow]Aucune ROM trouvee.[/yellow]")
        return

    console.print()
    console.print(f"Sources: [cyan]{', '.join(run.sources)}[/cyan]")
    console.print(render_summary(run.summary, run.imgs_dir))


def hash_files(
    files: Annotated[
        list[Path],
        typer.Argument(help="Fichiers a hasher", exists=True, dir_okay=False),
    ],
) -> None:
    """Calcule le CRC32 de fichiers ROM."""
    outcomes = compute_crc32_batch(files)
    failed = 0
    for path, outcome in outcomes:
        if outcome.ok:
            console.print(f"[green]{outcome.digest}[/green]  {path}")
        else:
            failed += 1
            console.print(f"[red]ERREUR  [/red]  {path} [dim]({outcome.error})[/dim]")
    if failed:
        raise typer.Exit(1)


def systems() -> None:
    """Liste les systemes supportes."""
    table = Table(title="Systemes")
    table.add_column("ID", justify="right", style="cyan")
    table.add_column("Nom court")
    table.add_column("Nom")
    table.add_column("Libretro", justify="center")
    table.add_column("Extensions", style="dim")

    for short_name, definition in sorted(SYSTEMS.items(), key=lambda kv: kv[1].id):
        table.add_row(
            str(definition.id),
            short_name,
            definition.name,
            "✔" if is_system_supported(definition.id) else "",
            " ".join(definition.extensions),
        )
    console.print(table)
