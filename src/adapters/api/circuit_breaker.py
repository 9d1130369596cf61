"""
Disjoncteur (circuit breaker) pour les appels au catalogue produit.

Apres un nombre configurable d'echecs consecutifs, le circuit s'ouvre et les
appels echouent immediatement sans solliciter le service degrade. Passe le
delai de recuperation, un appel de test est autorise (etat semi-ouvert) :
son succes referme le circuit, son echec le rouvre.

Etats:
    CLOSED: Fonctionnement normal, les appels passent
    OPEN: Trop d'echecs, les appels sont bloques
    HALF_OPEN: Un appel de test est autorise
"""

import asyncio
import time
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import TypeVar

from loguru import logger

T = TypeVar("T")


class CircuitState(Enum):
    """Etat du disjoncteur."""

    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitOpenError(Exception):
    """
    Levee quand le circuit est ouvert et bloque l'appel.

    Attributes:
        retry_in: Secondes restantes avant qu'un appel de test soit autorise
    """

    def __init__(self, retry_in: float) -> None:
        self.retry_in = retry_in
        super().__init__(f"Circuit breaker is open, retry in {retry_in:.1f}s")


class CircuitBreaker:
    """
    Disjoncteur asynchrone partage par toutes les requetes vers un service.

    Toute exception levee par la fonction protegee compte comme un echec :
    la fonction ne doit donc lever que pour des pannes du service, pas pour
    des reponses metier (404...).

    Example:
        breaker = CircuitBreaker(failure_threshold=5, recovery_timeout=30.0)
        payload = await breaker.call(fetch_payload, product_id)
    """

    def __init__(
        self,
        failure_threshold: int = 5,
        recovery_timeout: float = 30.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialise le disjoncteur.

        Args:
            failure_threshold: Echecs consecutifs avant ouverture du circuit
            recovery_timeout: Secondes avant d'autoriser un appel de test
            clock: Horloge monotone (injectable pour les tests)
        """
        if failure_threshold < 1:
            raise ValueError(f"failure_threshold must be >= 1, got {failure_threshold}")
        if recovery_timeout <= 0:
            raise ValueError(f"recovery_timeout must be positive, got {recovery_timeout}")
        self._failure_threshold = failure_threshold
        self._recovery_timeout = recovery_timeout
        self._clock = clock
        self._state = CircuitState.CLOSED
        self._failure_count = 0
        self._opened_at: float | None = None
        self._half_open_in_flight = False
        self._lock = asyncio.Lock()

    @property
    def state(self) -> CircuitState:
        """Etat courant du circuit."""
        return self._state

    @property
    def failure_count(self) -> int:
        """Nombre d'echecs consecutifs enregistres."""
        return self._failure_count

    async def call(self, func: Callable[..., Awaitable[T]], *args, **kwargs) -> T:
        """
        Execute une coroutine a travers le disjoncteur.

        Raises:
            CircuitOpenError: Si le circuit est ouvert
            Exception: Toute exception levee par func (comptee comme echec)
        """
        await self._before_call()
        try:
            result = await func(*args, **kwargs)
        except Exception:
            await self._record_failure()
            raise
        await self._record_success()
        return result

    async def _before_call(self) -> None:
        async with self._lock:
            if self._state == CircuitState.CLOSED:
                return

            if self._state == CircuitState.OPEN:
                elapsed = self._clock() - (self._opened_at or 0.0)
                if elapsed < self._recovery_timeout:
                    raise CircuitOpenError(self._recovery_timeout - elapsed)
                self._state = CircuitState.HALF_OPEN
                self._half_open_in_flight = False
                logger.info("Circuit breaker semi-ouvert", elapsed_seconds=elapsed)

            # HALF_OPEN : un seul appel de test a la fois
            if self._half_open_in_flight:
                raise CircuitOpenError(0.0)
            self._half_open_in_flight = True

    async def _record_success(self) -> None:
        async with self._lock:
            if self._state == CircuitState.HALF_OPEN:
                logger.info("Circuit breaker referme apres recuperation")
            self._state = CircuitState.CLOSED
            self._failure_count = 0
            self._opened_at = None
            self._half_open_in_flight = False

    async def _record_failure(self) -> None:
        async with self._lock:
            self._failure_count += 1
            if (
                self._state == CircuitState.HALF_OPEN
                or self._failure_count >= self._failure_threshold
            ):
                if self._state != CircuitState.OPEN:
                    logger.warning(
                        "Circuit breaker ouvert",
                        failure_count=self._failure_count,
                        recovery_timeout=self._recovery_timeout,
                    )
                self._state = CircuitState.OPEN
                self._opened_at = self._clock()
                self._half_open_in_flight = False
