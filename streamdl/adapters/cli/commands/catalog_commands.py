"""
Commandes CLI de consultation du catalogue : search, info, list.

Les resultats sont ecrits sur stdout (lignes tabulees ou JSON) pour rester
exploitables par un script ; les logs partent sur stderr.
"""

import json
from typing import Annotated, Optional

import typer

from streamdl.adapters.cli.helpers import (
    console,
    parse_title_id,
    run_async,
    with_container,
)
from streamdl.core.entities import Episode, MediaType, Title, TitleDetails, sort_episodes

ProviderOption = Annotated[
    Optional[str],
    typer.Option("--provider", "-p", help="Fournisseur (yopflix, frenchstream, fs)"),
]
JsonOption = Annotated[
    bool,
    typer.Option("--json", help="Sortie JSON"),
]
TitleIdOption = Annotated[
    str,
    typer.Option("--titleId", help="Identifiant numerique ou chemin de page"),
]


def format_title_line(title: Title) -> str:
    """Ligne `id<TAB>nom (annee) [series]` d'un resultat de recherche."""
    year = f" ({title.year})" if title.year else ""
    kind = " [series]" if title.media_type is MediaType.SERIES else ""
    return f"{title.id}\t{title.name}{year}{kind}"


def format_episode_line(episode: Episode) -> str:
    """Ligne `SxxEyy [langue]<TAB>url` d'un episode."""
    lang = f" [{episode.language}]" if episode.language else ""
    return f"{episode.label}{lang}\t{episode.url}"


def title_to_dict(title: Title) -> dict:
    return {
        "id": title.id,
        "name": title.name,
        "type": title.media_type.value,
        "year": title.year,
        "poster": title.poster_url,
    }


def details_to_dict(details: TitleDetails) -> dict:
    return {
        "id": details.id,
        "name": details.name,
        "type": details.media_type.value,
        "season_count": details.season_count,
        "episode_count": details.episode_count,
        "video_count": len(details.episodes),
    }


def episode_to_dict(episode: Episode) -> dict:
    return {
        "id": episode.id,
        "name": episode.name,
        "season": episode.season,
        "episode": episode.episode,
        "language": episode.language,
        "url": episode.url,
    }


# ----------------------------------------------------------------------
# search
# ----------------------------------------------------------------------


def search(
    query: Annotated[
        Optional[str],
        typer.Option("--query", help="Texte recherche"),
    ] = None,
    limit: Annotated[
        int,
        typer.Option("--limit", min=1, help="Nombre maximum de resultats"),
    ] = 20,
    provider: ProviderOption = None,
    as_json: JsonOption = False,
) -> None:
    """Recherche un titre dans le catalogue d'un fournisseur."""
    if not query:
        console.print("[red]search: --query est obligatoire[/red]")
        raise typer.Exit(code=1)
    run_async(_search_async(query, limit, provider, as_json))


@with_container()
async def _search_async(
    container, query: str, limit: int, provider_name: Optional[str], as_json: bool
) -> None:
    """Implementation async de la commande search."""
    provider = container.provider_registry().get(provider_name)
    results = await provider.search(query, limit)

    if as_json:
        typer.echo(json.dumps([title_to_dict(r) for r in results], indent=2, ensure_ascii=False))
        return

    if not results:
        typer.echo("No results.")
        return

    for result in results:
        typer.echo(format_title_line(result))


# ----------------------------------------------------------------------
# info
# ----------------------------------------------------------------------


def info(
    title_id: TitleIdOption,
    title_name: Annotated[
        Optional[str],
        typer.Option("--titleName", help="Slug du titre (aide certains catalogues)"),
    ] = None,
    provider: ProviderOption = None,
) -> None:
    """Affiche le resume d'un titre au format JSON."""
    run_async(_info_async(parse_title_id(title_id), title_name, provider))


@with_container()
async def _info_async(container, title_id, title_name: Optional[str], provider_name: Optional[str]) -> None:
    """Implementation async de la commande info."""
    provider = container.provider_registry().get(provider_name)
    details = await provider.get_details(title_id, title_name)
    typer.echo(json.dumps(details_to_dict(details), indent=2, ensure_ascii=False))


# ----------------------------------------------------------------------
# list
# ----------------------------------------------------------------------


def list_episodes(
    title_id: TitleIdOption,
    provider: ProviderOption = None,
    as_json: JsonOption = False,
) -> None:
    """Liste les episodes telechargeables d'un titre."""
    run_async(_list_async(parse_title_id(title_id), provider, as_json))


@with_container()
async def _list_async(container, title_id, provider_name: Optional[str], as_json: bool) -> None:
    """Implementation async de la commande list."""
    provider = container.provider_registry().get(provider_name)
    episodes = sort_episodes(await provider.get_episodes(title_id))

    if as_json:
        typer.echo(json.dumps([episode_to_dict(ep) for ep in episodes], indent=2, ensure_ascii=False))
        return

    for episode in episodes:
        typer.echo(format_episode_line(episode))
