"""
Mecanisme de retry avec backoff exponentiel pour les API externes.

Deux niveaux de relance, tous deux construits sur tenacity :
- transient_retrying : relance les erreurs transitoires (timeout, 5xx...)
  avec un backoff exponentiel plafonne, dans la limite de max_retries
  tentatives supplementaires.
- rate_limit_retrying : relance une meme tentative apres un 429, avec un
  delai plus long, SANS consommer le budget des erreurs transitoires.

Les erreurs d'authentification (401/403) ne sont jamais relancees.

Usage:
    async for attempt in transient_retrying(policy):
        with attempt:
            async for rl_attempt in rate_limit_retrying(policy, attempt_index):
                with rl_attempt:
                    response = await send()
"""

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable

from loguru import logger
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    wait_fixed,
)

from romart.core.exceptions import RateLimitError, TransientNetworkError

SleepFn = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class RetryPolicy:
    """
    Parametres de la politique de retry.

    Attributes:
        max_retries: Tentatives supplementaires apres la premiere (erreurs transitoires)
        base_delay: Delai de base en secondes
        backoff_multiplier: Multiplicateur du backoff exponentiel
        max_delay: Delai maximal entre deux tentatives en secondes
        max_rate_limit_attempts: Nombre maximal d'essais d'une meme tentative sur 429
    """

    max_retries: int = 3
    base_delay: float = 1.0
    backoff_multiplier: float = 2.0
    max_delay: float = 10.0
    max_rate_limit_attempts: int = 5

    def transient_delay(self, attempt_index: int) -> float:
        """Delai apres l'echec transitoire de la tentative attempt_index (0-based)."""
        return min(
            self.base_delay * self.backoff_multiplier**attempt_index, self.max_delay
        )

    def rate_limit_delay(self, attempt_index: int) -> float:
        """Delai apres un 429 : deux crans de backoff de plus que le delai transitoire."""
        return min(
            self.base_delay * self.backoff_multiplier ** (attempt_index + 2),
            self.max_delay,
        )


DEFAULT_RETRY_POLICY = RetryPolicy()


def _log_before_sleep(label: str) -> Callable[[RetryCallState], None]:
    def _log(retry_state: RetryCallState) -> None:
        outcome = retry_state.outcome
        error = outcome.exception() if outcome is not None else None
        delay = retry_state.next_action.sleep if retry_state.next_action else 0
        logger.warning(
            f"{label}: tentative {retry_state.attempt_number} en echec ({error}), "
            f"nouvel essai dans {delay:.1f}s"
        )

    return _log


def transient_retrying(
    policy: RetryPolicy = DEFAULT_RETRY_POLICY,
    sleep: SleepFn = asyncio.sleep,
) -> AsyncRetrying:
    """
    Construit l'iterateur de retry pour les erreurs transitoires.

    Le delai suit base_delay * multiplier^n, plafonne a max_delay. Apres
    max_retries + 1 tentatives, la derniere erreur est relevee telle quelle.

    Args:
        policy: Parametres de backoff
        sleep: Fonction d'attente async (injectable pour les tests)

    Returns:
        AsyncRetrying a iterer avec `async for attempt in ...`
    """
    return AsyncRetrying(
        retry=retry_if_exception_type(TransientNetworkError),
        wait=wait_exponential(
            multiplier=policy.base_delay,
            exp_base=policy.backoff_multiplier,
            max=policy.max_delay,
        ),
        stop=stop_after_attempt(policy.max_retries + 1),
        sleep=sleep,
        before_sleep=_log_before_sleep("Erreur transitoire"),
        reraise=True,
    )


def rate_limit_retrying(
    policy: RetryPolicy = DEFAULT_RETRY_POLICY,
    attempt_index: int = 0,
    sleep: SleepFn = asyncio.sleep,
) -> AsyncRetrying:
    """
    Construit l'iterateur de retry pour les 429 d'une tentative donnee.

    Le delai est fixe pour la tentative courante (policy.rate_limit_delay),
    et le nombre d'essais sur 429 est borne par max_rate_limit_attempts
    pour ne pas boucler indefiniment.

    Args:
        policy: Parametres de backoff
        attempt_index: Index (0-based) de la tentative transitoire en cours
        sleep: Fonction d'attente async (injectable pour les tests)
    """
    return AsyncRetrying(
        retry=retry_if_exception_type(RateLimitError),
        wait=wait_fixed(policy.rate_limit_delay(attempt_index)),
        stop=stop_after_attempt(policy.max_rate_limit_attempts),
        sleep=sleep,
        before_sleep=_log_before_sleep("Rate limit (429)"),
        reraise=True,
    )
