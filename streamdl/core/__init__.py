"""
Couche domaine (core).

Contient les entites metier, les ports (interfaces abstraites) et les
exceptions du domaine. Cette couche n'a AUCUNE dependance vers
l'infrastructure (httpx, yt-dlp, Typer).

Sous-packages :
- entities/ : Entites immutables (Title, Episode, TitleDetails)
- ports/ : Interfaces abstraites definissant les contrats pour les adaptateurs
- exceptions : Taxonomie des erreurs (UpstreamError, DownloadFailure, ...)
"""
