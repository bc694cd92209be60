"""
Configuration de l'application via pydantic-settings.

La configuration est chargée depuis les variables d'environnement avec le préfixe STREAMDL_,
et peut optionnellement être fournie via un fichier .env.

L'exécutable yt-dlp et ses répertoires de plugins acceptent aussi les variables
historiques YTDLP_BIN et YTDLP_PLUGIN_DIRS.
"""

from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from streamdl.adapters.api.http import DEFAULT_USER_AGENT

# Trouver le fichier .env à la racine du projet (parent de streamdl/)
_PROJECT_ROOT = Path(__file__).parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Paramètres de l'application avec support des variables d'environnement.

    Tous les paramètres peuvent être surchargés via des variables d'environnement
    avec le préfixe STREAMDL_.
    Exemple : STREAMDL_DEFAULT_PROVIDER=frenchstream

    Les chemins sont automatiquement étendus (~ -> répertoire home).
    """

    model_config = SettingsConfigDict(
        env_prefix="STREAMDL_",
        env_file=_ENV_FILE if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    # Téléchargements
    downloads_dir: Path = Field(default=Path("downloads"))

    # Fournisseurs
    default_provider: str = Field(default="yopflix")
    yopflix_base_url: str = Field(default="https://yopflix.my")
    frenchstream_base_url: str = Field(default="https://fs02.lol")
    user_agent: str = Field(default=DEFAULT_USER_AGENT)
    http_timeout: float = Field(default=30.0, gt=0)

    # yt-dlp (exécutable imposé, plugins séparés par ':')
    ytdlp_bin: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("STREAMDL_YTDLP_BIN", "YTDLP_BIN"),
    )
    ytdlp_plugin_dirs: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("STREAMDL_YTDLP_PLUGIN_DIRS", "YTDLP_PLUGIN_DIRS"),
    )
    plugin_dir: Path = Field(default=_PROJECT_ROOT / "plugins")

    # Relances (3 tentatives, 5s puis 10s d'attente)
    download_attempts: int = Field(default=3, ge=1)
    download_base_delay: float = Field(default=5.0, ge=0)

    # Logging (stderr + fichier JSON, rotation 10MB, 5 fichiers de rétention)
    log_level: str = Field(default="WARNING")
    log_file: Path = Field(default=Path("logs/streamdl.log"))
    log_rotation_size: str = Field(default="10 MB")
    log_retention_count: int = Field(default=5)

    @field_validator("downloads_dir", "plugin_dir", "log_file", mode="before")
    @classmethod
    def expand_path(cls, v: str | Path) -> Path:
        """Étend ~ vers le répertoire home dans les chemins."""
        return Path(v).expanduser()

    @property
    def plugin_dirs_arg(self) -> str:
        """Valeur transmise à --plugin-dirs (surcharge, sinon répertoire du dépôt)."""
        if self.ytdlp_plugin_dirs:
            return self.ytdlp_plugin_dirs
        return str(self.plugin_dir.resolve())
