"""
Infrastructure HTTP partagee pour les API externes.

- RetryPolicy : Parametres de backoff exponentiel (retry transitoire et 429)
- transient_retrying / rate_limit_retrying : Iterateurs tenacity configures
- AsyncRateLimiter : Intervalle minimal entre deux requetes d'un meme client
- ScreenScraperClient : Client de l'API d'identification par CRC32
"""

from romart.adapters.api.rate_limiter import AsyncRateLimiter
from romart.adapters.api.retry import (
    DEFAULT_RETRY_POLICY,
    RetryPolicy,
    rate_limit_retrying,
    transient_retrying,
)
from romart.adapters.api.screenscraper_client import (
    GameLookupResult,
    ScreenScraperClient,
    ScreenScraperCredentials,
    SSMedia,
    available_media_types,
    select_media_url,
)

__all__ = [
    "AsyncRateLimiter",
    "DEFAULT_RETRY_POLICY",
    "GameLookupResult",
    "RetryPolicy",
    "SSMedia",
    "ScreenScraperClient",
    "ScreenScraperCredentials",
    "available_media_types",
    "rate_limit_retrying",
    "select_media_url",
    "transient_retrying",
]
