"""
Container d'injection de dependances via dependency-injector.

Fournit une gestion centralisee des dependances pour la CLI :
client HTTP partage, fournisseurs de catalogue, registre, telechargeur yt-dlp
et service de telechargement.
"""

from dependency_injector import containers, providers

from .adapters.api.frenchstream_client import FrenchStreamProvider
from .adapters.api.http import HttpClient
from .adapters.api.registry import ProviderRegistry
from .adapters.api.yopflix_client import YopflixProvider
from .adapters.downloader.ytdlp import YtDlpDownloader
from .config import Settings
from .services.downloader import DownloadService


class Container(containers.DeclarativeContainer):
    """Container DI de l'application.

    Utilisation :
        container = Container()
        registry = container.provider_registry()
        provider = registry.get("fs")
        service = container.download_service()
    """

    # Configuration - singleton charge une seule fois
    config = providers.Singleton(Settings)

    # Client HTTP partage par les fournisseurs (une seule pool de connexions)
    http_client = providers.Singleton(
        HttpClient,
        user_agent=config.provided.user_agent,
        timeout=config.provided.http_timeout,
    )

    # Fournisseurs de catalogue
    yopflix_provider = providers.Singleton(
        YopflixProvider,
        http=http_client,
        base_url=config.provided.yopflix_base_url,
    )
    frenchstream_provider = providers.Singleton(
        FrenchStreamProvider,
        http=http_client,
        base_url=config.provided.frenchstream_base_url,
    )

    provider_registry = providers.Singleton(
        ProviderRegistry,
        providers=providers.Dict(
            yopflix=yopflix_provider,
            frenchstream=frenchstream_provider,
        ),
        aliases=providers.Dict(fs="frenchstream"),
        default=config.provided.default_provider,
    )

    # Telechargeur externe - plugins et executable depuis la configuration
    downloader = providers.Singleton(
        YtDlpDownloader,
        plugin_dirs=config.provided.plugin_dirs_arg,
        binary=config.provided.ytdlp_bin,
    )

    # Service de telechargement - Factory car sans etat partage
    download_service = providers.Factory(
        DownloadService,
        downloader=downloader,
        attempts=config.provided.download_attempts,
        base_delay=config.provided.download_base_delay,
    )
