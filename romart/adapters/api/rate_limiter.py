"""
Limiteur de debit a intervalle fixe.

Garantit un intervalle minimal entre deux requetes d'une meme instance de
client. Ce n'est pas un token bucket : aucune rafale n'est permise, meme
apres une periode d'inactivite.
"""

import asyncio
import time
from typing import Awaitable, Callable, Optional


class AsyncRateLimiter:
    """
    Attend qu'au moins min_interval secondes se soient ecoulees depuis
    la requete precedente.

    Les appels concurrents sont serialises par un verrou : l'instant de la
    derniere requete n'est jamais lu et ecrit par deux taches a la fois.

    Example:
        limiter = AsyncRateLimiter(min_interval=1.0)
        await limiter.wait()
        response = await client.get(url)
    """

    def __init__(
        self,
        min_interval: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """
        Args:
            min_interval: Intervalle minimal entre deux requetes, en secondes
            clock: Horloge monotone (injectable pour les tests)
            sleep: Fonction d'attente async (injectable pour les tests)
        """
        self._min_interval = max(0.0, min_interval)
        self._clock = clock
        self._sleep = sleep
        self._last_request: Optional[float] = None
        self._lock: Optional[asyncio.Lock] = None

    @property
    def min_interval(self) -> float:
        """Intervalle minimal configure, en secondes."""
        return self._min_interval

    async def wait(self) -> None:
        """Bloque jusqu'a ce que la prochaine requete soit autorisee."""
        if self._lock is None:
            self._lock = asyncio.Lock()

        async with self._lock:
            if self._last_request is not None:
                elapsed = self._clock() - self._last_request
                remaining = self._min_interval - elapsed
                if remaining > 0:
                    await self._sleep(remaining)
            self._last_request = self._clock()
