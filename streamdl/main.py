"""
Point d'entrée CLI de streamdl.

Initialise le container DI, configure le logging et fournit les commandes CLI.
"""

import sys
from typing import Annotated, Optional, Sequence

import typer
from loguru import logger

from . import __version__
from .adapters.cli.commands import download, info, list_episodes, search
from .config import Settings
from .container import Container
from .logging_config import configure_logging, set_console_level, verbosity_level

app = typer.Typer(
    name="streamdl",
    help="Recherche et téléchargement de séries depuis des catalogues de streaming",
    add_completion=False,
)
container = Container()

# Etat global pour les options de verbosite
state = {"verbose": 0, "quiet": False}

# Options globales acceptees avant le nom de commande
_GLOBAL_FLAGS = frozenset({"-v", "-vv", "-vvv", "--verbose", "-q", "--quiet"})
_HELP_FLAGS = frozenset({"--help"})
DEFAULT_COMMAND = "download"

USAGE = """\
Usage:
  streamdl <command> [--provider <name>] [options]

Available providers: {providers}

Commands:
  search   --query <text> [--limit 20] [--json]
  info     --titleId <id> [--titleName <slug>]
  list     --titleId <id> [--json]
  download [--titleId <id> | --query <text>] [--season N] [--episode 1,2] [--max N] [--outDir DIR]
  help     Show this help message

Examples:
  streamdl search --query psych
  streamdl search --provider frenchstream --query "loups garous"
  streamdl list --provider fs --titleId "/s-tv/15123579-loups-garous-saison-2-2024.html"
  streamdl download --provider fs --query "loups garous" --season 2 --max 1

If no command is provided, 'download' is assumed."""


def get_config() -> Settings:
    """Récupère les paramètres de l'application depuis le container DI."""
    return container.config()


def _apply_verbosity(settings: Settings) -> None:
    """Ajuste le niveau console selon -v / -q (le fichier reste en DEBUG)."""
    level = verbosity_level(state["verbose"], state["quiet"], settings.log_level)
    if level != settings.log_level:
        set_console_level(level)


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Augmenter la verbosite (-v, -vv)"
        ),
    ] = 0,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Mode silencieux (erreurs uniquement)"),
    ] = False,
) -> None:
    """streamdl - Téléchargement de séries via yt-dlp."""
    state["quiet"] = quiet
    state["verbose"] = 0 if quiet else verbose
    _apply_verbosity(get_config())


app.command()(search)
app.command()(info)
app.command(name="list")(list_episodes)
app.command()(download)


@app.command(name="help")
def show_help() -> None:
    """Affiche l'aide et les fournisseurs disponibles."""
    registry = container.provider_registry()
    names = []
    aliases = registry.aliases()
    for name in registry.names():
        alias_list = [alias for alias, target in aliases.items() if target == name]
        suffix = f" (alias: {', '.join(alias_list)})" if alias_list else ""
        default = " [default]" if name == registry.default_name else ""
        names.append(f"{name}{default}{suffix}")
    typer.echo(USAGE.format(providers=", ".join(names)))


@app.command()
def version() -> None:
    """Affiche les informations de version."""
    typer.echo(f"streamdl v{__version__}")


def _with_default_command(argv: Sequence[str]) -> list[str]:
    """
    Insère la commande download quand aucune commande n'est fournie.

    Les options globales (-v, -q) en tête sont conservées à leur place.
    Exemple : ["-v", "--query", "psych"] -> ["-v", "download", "--query", "psych"]
    """
    args = list(argv)
    index = 0
    while index < len(args) and args[index] in _GLOBAL_FLAGS:
        index += 1

    if index < len(args):
        token = args[index]
        if not token.startswith("-") or token in _HELP_FLAGS:
            return args

    args.insert(index, DEFAULT_COMMAND)
    return args


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Point d'entrée de l'application."""
    # Charge la configuration et configure le logging
    settings = container.config()
    configure_logging(
        log_level=settings.log_level,
        log_file=settings.log_file,
        rotation_size=settings.log_rotation_size,
        retention_count=settings.log_retention_count,
    )

    logger.debug("Démarrage de streamdl", version=__version__)

    # Lance la CLI
    args = _with_default_command(sys.argv[1:] if argv is None else argv)
    app(args=args, prog_name="streamdl")


if __name__ == "__main__":
    main()
