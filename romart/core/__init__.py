"""
Couche domaine (core).

Contient les entités métier, ports (interfaces abstraites), objets valeur
et la taxonomie d'erreurs. Cette couche n'a AUCUNE dépendance vers
l'infrastructure (adapters, clients HTTP, frameworks).

Sous-packages :
- entities/ : Résultats de scraping (ScrapeResult, ScrapeSummary)
- ports/ : Contrat des adaptateurs de jaquettes
- value_objects/ : Objets valeur immutables (RomFile)
"""
