"""
Couche adaptateurs (infrastructure).

Les adaptateurs implementent les ports definis dans core/ports/ et fournissent
des implementations concretes pour les systemes externes.

Sous-packages :
- api/ : Clients des sites de streaming (httpx, BeautifulSoup)
- parsing/ : Extraction de tokens et normalisation d'URLs
- downloader/ : Pilotage de l'executable yt-dlp
- cli/ : Interface ligne de commande (Typer)

Chaque adaptateur depend de core/ mais core/ ne depend jamais des adaptateurs.
"""
