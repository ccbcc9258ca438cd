"""
Couche adaptateurs (infrastructure).

Les adaptateurs implémentent les ports définis dans core/ports/ et fournissent
des implémentations concrètes pour les systèmes externes.

Sous-packages :
- api/ : Infrastructure HTTP partagée (retry, rate limiting) et client ScreenScraper
- libretro/ : Catalogue Libretro Thumbnails (manifeste en cache + matching flou)
- screenscraper/ : Adaptateur d'identification par hash
- cli/ : Interface ligne de commande (Typer + Rich)

Chaque adaptateur dépend de core/ mais core/ ne dépend jamais des adaptateurs.
"""
