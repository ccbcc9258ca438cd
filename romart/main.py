"""
Point d'entrée CLI de RomArt.

Initialise le container DI, configure le logging et fournit les commandes CLI.
"""

import typer
from loguru import logger

from . import __version__
from .adapters.cli.commands import hash_files, scrape, systems
from .config import Settings
from .container import Container
from .logging_config import configure_logging

app = typer.Typer(
    name="romart",
    help="Recherche de jaquettes pour collections de ROMs",
)
container = Container()

app.command()(scrape)
app.command(name="hash")(hash_files)
app.command()(systems)


def get_config() -> Settings:
    """Récupère les paramètres de l'application depuis le container DI."""
    return container.config()


@app.command()
def info() -> None:
    """Affiche la configuration actuelle."""
    config = get_config()
    logger.info("Configuration RomArt")
    typer.echo(f"Répertoire des ROMs : {config.download_dir}")
    typer.echo(f"Système : {config.system_id if config.system_id is not None else 'non défini'}")
    typer.echo(f"Type de média : {config.media_type}")
    typer.echo(f"Régions : {', '.join(config.region_priority)}")
    typer.echo(
        f"Libretro : {'activé' if config.libretro.enabled else 'désactivé'}"
        f" (priorité {config.libretro.priority})"
    )
    typer.echo(
        f"ScreenScraper : {'activé' if config.screenscraper_enabled else 'désactivé'}"
        f" (priorité {config.screenscraper.priority})"
    )
    typer.echo(f"Niveau de log : {config.log_level}")


@app.command()
def version() -> None:
    """Affiche les informations de version."""
    typer.echo(f"RomArt v{__version__}")


def main() -> None:
    """Point d'entrée de l'application."""
    settings = container.config()
    configure_logging(settings)

    logger.info("Démarrage de RomArt", version=__version__)

    app()


if __name__ == "__main__":
    main()
