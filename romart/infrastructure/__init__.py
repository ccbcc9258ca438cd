"""
Couche infrastructure : services techniques sans logique metier.

- hash_service : Calcul CRC32 en streaming des fichiers ROM
"""
