"""
Objets valeur immutables representant des concepts du domaine sans identite.

Exports :
- RomFile : Fichier ROM candidat a l'identification (chemin, nom, taille)
"""

from romart.core.value_objects.rom_file import RomFile

__all__ = [
    "RomFile",
]
