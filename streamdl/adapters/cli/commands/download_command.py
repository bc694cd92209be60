"""
Commande CLI download : resolution du titre puis telechargement sequentiel.

Le titre est designe par --titleId, ou retrouve par --query (le premier
resultat de type serie est prefere). Les episodes sont filtres puis confies
au DownloadService, qui ne s'interrompt jamais sur l'echec d'un episode.
"""

from pathlib import Path
from typing import Annotated, Optional

import typer
from loguru import logger

from streamdl.adapters.cli.commands.catalog_commands import ProviderOption
from streamdl.adapters.cli.helpers import (
    console,
    parse_title_id,
    run_async,
    split_csv_numbers,
    with_container,
)
from streamdl.core.entities import Episode, MediaType, Title
from streamdl.services.downloader import DownloadReport, filter_episodes


def pick_preferred_result(results: list[Title]) -> Optional[Title]:
    """Premier resultat de type serie, sinon le premier resultat."""
    for result in results:
        if result.media_type is MediaType.SERIES:
            return result
    return results[0] if results else None


def download(
    title_id: Annotated[
        Optional[str],
        typer.Option("--titleId", help="Identifiant numerique ou chemin de page"),
    ] = None,
    query: Annotated[
        Optional[str],
        typer.Option("--query", help="Recherche du titre si --titleId est absent"),
    ] = None,
    title_name: Annotated[
        Optional[str],
        typer.Option("--titleName", help="Slug du titre (aide certains catalogues)"),
    ] = None,
    limit: Annotated[
        int,
        typer.Option("--limit", min=1, help="Nombre de resultats consultes pour --query"),
    ] = 20,
    season: Annotated[
        Optional[int],
        typer.Option("--season", help="Saison a telecharger"),
    ] = None,
    episode: Annotated[
        Optional[str],
        typer.Option("--episode", help="Numeros d'episodes, ex: 1,2,5"),
    ] = None,
    max_count: Annotated[
        Optional[int],
        typer.Option("--max", min=0, help="Nombre maximum de telechargements"),
    ] = None,
    out_dir: Annotated[
        Optional[Path],
        typer.Option("--outDir", help="Repertoire de destination"),
    ] = None,
    provider: ProviderOption = None,
) -> None:
    """Telecharge les episodes d'un titre via yt-dlp."""
    if not title_id and not query:
        console.print("[red]download: --query ou --titleId est obligatoire[/red]")
        raise typer.Exit(code=1)

    run_async(
        _download_async(
            title_id=parse_title_id(title_id) if title_id else None,
            query=query,
            title_name=title_name,
            limit=limit,
            season=season,
            episode_numbers=split_csv_numbers(episode),
            max_count=max_count,
            out_dir=out_dir,
            provider_name=provider,
        )
    )


@with_container()
async def _download_async(
    container,
    title_id,
    query: Optional[str],
    title_name: Optional[str],
    limit: int,
    season: Optional[int],
    episode_numbers: list[int],
    max_count: Optional[int],
    out_dir: Optional[Path],
    provider_name: Optional[str],
) -> None:
    """Implementation async de la commande download."""
    config = container.config()
    provider = container.provider_registry().get(provider_name)
    show_name: Optional[str] = None

    if title_id is None:
        results = await provider.search(query, limit)
        preferred = pick_preferred_result(results)
        if preferred is None:
            console.print(f"[red]Aucun resultat pour: {query}[/red]")
            raise typer.Exit(code=1)
        title_id = preferred.id
        show_name = preferred.name
        typer.echo(f"Using result: {preferred.name} (id={preferred.id})")

    details = await provider.get_details(title_id, title_name)
    show_name = show_name or details.name

    if not details.episodes:
        console.print("[red]Aucun episode telechargeable pour ce titre.[/red]")
        raise typer.Exit(code=1)

    queued = filter_episodes(
        details.episodes,
        season=season,
        episode_numbers=episode_numbers,
        max_count=max_count,
    )
    typer.echo(f"Queued {len(queued)} video(s) from {show_name}")

    def announce(ep: Episode, output_path: Path) -> None:
        typer.echo(f"Downloading: {ep.name} -> {output_path}")

    service = container.download_service()
    report = await service.download_all(
        show_name,
        queued,
        out_dir or config.downloads_dir,
        on_start=announce,
    )
    _print_report(report)


def _print_report(report: DownloadReport) -> None:
    """Affiche le bilan du lot (les echecs ne changent pas le code de sortie)."""
    if report.skipped:
        typer.echo(f"Skipped {len(report.skipped)} existing file(s).")

    if report.failures:
        logger.warning(f"{len(report.failures)} episode(s) en echec")
        typer.echo(f"Completed with {len(report.failures)} failure(s):", err=True)
        for failure in report.failures:
            typer.echo(f"- {failure.name} :: {failure.url} :: {failure.reason}", err=True)
    else:
        typer.echo("All downloads completed.")
