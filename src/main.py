"""
Point d'entrée CLI du service de commandes.

Initialise le container DI, configure le logging et fournit les commandes CLI.
"""

from typing import Annotated

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from .config import Settings
from .container import Container
from .logging_config import configure_logging

app = typer.Typer(
    name="orders",
    help="Service de gestion du cycle de vie des commandes",
)
container = Container()
console = Console()

VERSION = "0.1.0"


def get_config() -> Settings:
    """Récupère les paramètres de l'application depuis le container DI."""
    return container.config()


@app.command()
def info() -> None:
    """Affiche la configuration actuelle."""
    config = get_config()
    logger.info("Configuration du service de commandes")

    table = Table(title="Configuration")
    table.add_column("Paramètre", style="cyan")
    table.add_column("Valeur")
    table.add_row("Base de données", config.database_url)
    table.add_row("Catalogue", config.catalog_base_url)
    table.add_row("Timeout catalogue", f"{config.catalog_timeout_seconds} s")
    table.add_row("Tentatives catalogue", str(config.catalog_max_attempts))
    table.add_row(
        "Disjoncteur",
        f"{config.catalog_breaker_failure_threshold} échecs / "
        f"{config.catalog_breaker_recovery_seconds} s",
    )
    table.add_row("Taille de page", f"{config.default_page_size} (max {config.max_page_size})")
    table.add_row("Niveau de log", config.log_level)
    console.print(table)


@app.command()
def version() -> None:
    """Affiche les informations de version."""
    typer.echo(f"OrderCore v{VERSION}")


@app.command(name="init-db")
def init_db() -> None:
    """Crée les tables de la base de données si nécessaire."""
    container.database.init()
    typer.echo(f"Base initialisée : {get_config().database_url}")


@app.command()
def serve(
    host: Annotated[str, typer.Option(help="Adresse d'écoute")] = "0.0.0.0",
    port: Annotated[int, typer.Option(help="Port d'écoute")] = 8081,
    reload: Annotated[bool, typer.Option(help="Rechargement automatique")] = False,
) -> None:
    """Lance le serveur HTTP du service de commandes."""
    import uvicorn

    typer.echo(f"Démarrage du serveur sur {host}:{port}")
    uvicorn.run("src.web.app:app", host=host, port=port, reload=reload)


def main() -> None:
    """Point d'entrée de l'application."""
    # Charge la configuration et configure le logging
    settings = container.config()
    configure_logging(
        log_level=settings.log_level,
        log_file=settings.log_file,
        rotation_size=settings.log_rotation_size,
        retention_count=settings.log_retention_count,
        json_console=settings.log_json_console,
    )

    # Initialise la base de données (crée les tables si nécessaire)
    container.database.init()

    logger.info("Démarrage du service de commandes", version=VERSION)

    # Lance la CLI
    app()


if __name__ == "__main__":
    main()
