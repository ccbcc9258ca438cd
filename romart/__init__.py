"""
RomArt - Recherche de jaquettes pour collections de ROMs.

Ce package identifie chaque fichier ROM local aupres d'un ou plusieurs
catalogues d'illustrations distants, avec un matching de plus en plus
tolerant quand l'identification exacte echoue.

Architecture : Hexagonale (Ports et Adaptateurs)
- core/ : Couche domaine (entités, ports, objets valeur, exceptions)
- services/ : Couche application (registre d'adaptateurs, orchestration)
- adapters/ : Couche infrastructure (CLI, catalogue Libretro, API ScreenScraper)
- infrastructure/ : Services techniques (calcul de hash)
"""

__version__ = "0.1.0"
