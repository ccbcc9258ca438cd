"""
Entités du domaine.

Exports :
- ScrapeStatus : Statut du traitement d'une ROM
- ScrapeResult : Résultat du traitement d'une ROM
- ScrapeSummary : Statistiques d'un run
"""

from romart.core.entities.scrape import ScrapeResult, ScrapeStatus, ScrapeSummary

__all__ = [
    "ScrapeResult",
    "ScrapeStatus",
    "ScrapeSummary",
]
