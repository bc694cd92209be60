"""
Schemas pydantic des reponses JSON amont.

Les documents des sites sont laches (champs optionnels, valeurs nulles).
Ils sont valides a la frontiere : une forme inattendue est rejetee ici
plutot que de provoquer une erreur plus loin dans le code.
"""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class _UpstreamModel(BaseModel):
    """Base des schemas amont : champs inconnus ignores."""

    model_config = ConfigDict(extra="ignore")


# ---------------------------------------------------------------------------
# Yopflix (API REST JSON)
# ---------------------------------------------------------------------------


class YopflixSearchResult(_UpstreamModel):
    """Un resultat de GET /secure/search/{query}."""

    id: int
    name: str
    type: Optional[str] = None
    year: Optional[int] = None
    is_series: bool = False
    model_type: Optional[str] = None
    poster: Optional[str] = None

    @field_validator("is_series", mode="before")
    @classmethod
    def null_is_false(cls, v: object) -> object:
        return False if v is None else v


class YopflixSearchResponse(_UpstreamModel):
    """Enveloppe de recherche : status vaut "success" en cas de reussite."""

    status: str = ""
    query: Optional[str] = None
    results: list[YopflixSearchResult] = Field(default_factory=list)

    @field_validator("results", mode="before")
    @classmethod
    def null_is_empty(cls, v: object) -> object:
        return [] if v is None else v


class YopflixVideo(_UpstreamModel):
    """Video rattachee a un titre (souvent un embed uqload nomme "S01 E01")."""

    id: Union[int, str]
    name: str = ""
    url: Optional[str] = None
    type: Optional[str] = None
    language: Optional[str] = None
    category: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def null_name_is_empty(cls, v: object) -> object:
        return "" if v is None else v


class YopflixTitle(_UpstreamModel):
    """Objet "title" de GET /secure/titles/{id}."""

    id: int
    name: str
    is_series: bool = False
    season_count: Optional[int] = None
    episode_count: Optional[int] = None
    language: Optional[str] = None
    poster: Optional[str] = None
    year: Optional[int] = None
    videos: list[YopflixVideo] = Field(default_factory=list)

    @field_validator("videos", mode="before")
    @classmethod
    def null_videos_is_empty(cls, v: object) -> object:
        return [] if v is None else v

    @field_validator("is_series", mode="before")
    @classmethod
    def null_is_false(cls, v: object) -> object:
        return False if v is None else v


class YopflixTitleResponse(_UpstreamModel):
    """Document de details : les videos peuvent etre a deux niveaux."""

    status: str = ""
    title: YopflixTitle
    videos: list[YopflixVideo] = Field(default_factory=list)

    @field_validator("videos", mode="before")
    @classmethod
    def null_videos_is_empty(cls, v: object) -> object:
        return [] if v is None else v


# ---------------------------------------------------------------------------
# French Stream (endpoint ep-data.php)
# ---------------------------------------------------------------------------


class EpisodePlayers(_UpstreamModel):
    """URLs d'un episode par lecteur (cles absentes ou vides possibles)."""

    uqload: Optional[str] = None
    vidzy: Optional[str] = None
    voe: Optional[str] = None
    netu: Optional[str] = None


class EpisodeDataResponse(_UpstreamModel):
    """
    Reponse de GET /ep-data.php?id={news_id}.

    Chaque piste de langue associe un numero d'episode (texte) aux lecteurs.
    """

    vf: dict[str, EpisodePlayers] = Field(default_factory=dict)
    vostfr: dict[str, EpisodePlayers] = Field(default_factory=dict)
    vo: dict[str, EpisodePlayers] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def empty_document(cls, data: object) -> object:
        # Identifiant sans donnees : PHP renvoie [] (ou rien) au lieu d'un objet
        if not data or isinstance(data, list):
            return {}
        return data

    @field_validator("vf", "vostfr", "vo", mode="before")
    @classmethod
    def empty_track(cls, v: object) -> object:
        # PHP encode un tableau a cles continues en liste ([] si vide)
        if not v:
            return {}
        if isinstance(v, list):
            v = {str(index): players for index, players in enumerate(v)}
        if isinstance(v, dict):
            return {key: players for key, players in v.items() if players}
        return v

    def track(self, language: str) -> dict[str, EpisodePlayers]:
        """Retourne la piste demandee ("vf", "vostfr" ou "vo")."""
        return getattr(self, language)
