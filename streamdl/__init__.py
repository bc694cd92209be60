"""
streamdl - Telechargeur multi-fournisseurs pour catalogues de streaming.

Ce package recherche des titres sur des sites de streaming, resout les
episodes vers des URLs de lecteurs embarques et delegue le telechargement
a yt-dlp avec des noms de fichiers compatibles Jellyfin/Plex.

Architecture : Hexagonale (Ports et Adaptateurs)
- core/ : Couche domaine (entites, ports, exceptions)
- services/ : Couche application (filtrage, chemins, orchestration)
- adapters/ : Couche infrastructure (CLI, clients HTTP, yt-dlp)
"""

__version__ = "0.1.0"
