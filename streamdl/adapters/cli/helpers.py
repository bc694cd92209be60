"""
Utilitaires partages pour les commandes CLI de streamdl.

Ce module fournit :
- console : instance Rich Console partagee
- with_container : decorateur injectant un container et fermant ses ressources
- run_async : execute une coroutine de commande et convertit les erreurs en code 1
- parse_title_id : conversion de --titleId (entier ou chemin)
- split_csv_numbers : conversion de --episode "1,2,5"
"""

import asyncio
from functools import wraps
from typing import Any, Coroutine, Optional, Union

import typer
from loguru import logger
from rich.console import Console
from rich.markup import escape

from streamdl.container import Container
from streamdl.core.exceptions import StreamdlError

console = Console()


def with_container():
    """
    Decorateur qui injecte un container neuf en premier argument.

    Le registre des fournisseurs est ferme en fin de commande, y compris
    en cas d'erreur, pour liberer le client HTTP partage.

    Usage:
        @with_container()
        async def _my_command_async(container, ...):
            registry = container.provider_registry()
    """
    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            container = Container()
            try:
                return await func(container, *args, **kwargs)
            finally:
                await container.provider_registry().aclose()
        return wrapper
    return decorator


def run_async(coro: Coroutine[Any, Any, Any]) -> Any:
    """
    Execute la coroutine d'une commande via asyncio.run().

    Toute StreamdlError (amont injoignable, yt-dlp absent...) est affichee
    en rouge et termine la commande avec le code 1.
    """
    try:
        return asyncio.run(coro)
    except StreamdlError as e:
        logger.debug(f"Commande interrompue: {e!r}")
        console.print(f"[red]Erreur:[/red] {escape(str(e))}")
        raise typer.Exit(code=1) from e


def parse_title_id(value: str) -> Union[int, str]:
    """
    Convertit la valeur de --titleId.

    Les identifiants numeriques (catalogue REST) deviennent des entiers,
    les autres (chemins de pages HTML) restent des chaines.
    """
    value = value.strip()
    if value.isdigit():
        return int(value)
    return value


def split_csv_numbers(value: Optional[str]) -> list[int]:
    """
    Decoupe une liste "1,2,5" en entiers.

    Les elements vides ou non numeriques sont ignores.
    """
    if not value:
        return []
    numbers = []
    for part in value.split(","):
        part = part.strip()
        if part.isdigit():
            numbers.append(int(part))
    return numbers
