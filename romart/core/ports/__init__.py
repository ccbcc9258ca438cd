"""
Ports (interfaces abstraites) du domaine.

Exports :
- IArtworkAdapter : Contrat commun des sources de jaquettes
- AdapterCapabilities, AdapterSourceConfig, LookupRequest, LookupResult
"""

from romart.core.ports.artwork_adapter import (
    AdapterCapabilities,
    AdapterFactory,
    AdapterSourceConfig,
    IArtworkAdapter,
    LookupRequest,
    LookupResult,
)

__all__ = [
    "AdapterCapabilities",
    "AdapterFactory",
    "AdapterSourceConfig",
    "IArtworkAdapter",
    "LookupRequest",
    "LookupResult",
]
