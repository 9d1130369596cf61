"""
Mecanisme de retry avec backoff exponentiel pour le catalogue produit.

Seules les lectures (idempotentes) passent par ce mecanisme. Sont relancees :
- les erreurs de transport httpx (connexion refusee, timeout...)
- les reponses 429 (rate limiting)
- les reponses 5xx

Les autres erreurs HTTP (4xx) sont propagees immediatement sans retry.

Usage:
    # Avec le decorateur
    @with_retry(max_attempts=3, max_wait=2.0)
    async def my_api_call():
        ...

    # Avec la fonction helper
    response = await request_with_retry(client, "GET", url)
"""

from typing import Optional

import httpx
from loguru import logger
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_random_exponential,
)


class TransientHTTPError(Exception):
    """Reponse HTTP indiquant une panne passagere du service distant."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        super().__init__(message)


class RateLimitError(TransientHTTPError):
    """
    Exception levee quand l'API retourne 429 Too Many Requests.

    Attributes:
        retry_after: Nombre de secondes a attendre (depuis le header Retry-After),
                     ou None si non specifie.
    """

    def __init__(self, retry_after: Optional[int] = None) -> None:
        self.retry_after = retry_after
        super().__init__(429, f"Rate limited. Retry after: {retry_after}s")


class ServerError(TransientHTTPError):
    """Exception levee quand l'API retourne une erreur 5xx."""

    def __init__(self, status_code: int) -> None:
        super().__init__(status_code, f"Server error: HTTP {status_code}")


RETRYABLE_EXCEPTIONS = (httpx.TransportError, TransientHTTPError)


def _log_retry(retry_state: RetryCallState) -> None:
    """Trace chaque nouvelle tentative."""
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        "Nouvelle tentative apres erreur passagere",
        attempt=retry_state.attempt_number,
        error=repr(exc),
    )


def with_retry(max_attempts: int = 3, max_wait: float = 2.0):
    """
    Decorateur pour relancer sur erreur passagere avec backoff exponentiel.

    Utilise wait_random_exponential pour ajouter du jitter et eviter
    le "thundering herd" quand plusieurs clients relancent en meme temps.

    Args:
        max_attempts: Nombre maximum de tentatives (defaut: 3)
        max_wait: Delai maximum entre les tentatives en secondes (defaut: 2.0)

    Returns:
        Decorateur a appliquer sur une fonction async
    """
    return retry(
        retry=retry_if_exception_type(RETRYABLE_EXCEPTIONS),
        wait=wait_random_exponential(multiplier=0.1, max=max_wait),
        stop=stop_after_attempt(max_attempts),
        before_sleep=_log_retry,
        reraise=True,
    )


async def request_with_retry(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    max_attempts: int = 3,
    max_wait: float = 2.0,
    **kwargs,
) -> httpx.Response:
    """
    Execute une requete HTTP avec retry automatique sur erreur passagere.

    Convertit les reponses 429 en RateLimitError et les 5xx en ServerError,
    puis relance avec backoff exponentiel. Les autres erreurs HTTP
    sont propagees immediatement sous forme de httpx.HTTPStatusError.

    Args:
        client: Client httpx async a utiliser
        method: Methode HTTP (GET uniquement pour le catalogue)
        url: URL a appeler
        max_attempts: Nombre maximum de tentatives (defaut: 3)
        max_wait: Delai maximum entre deux tentatives (defaut: 2.0)
        **kwargs: Arguments supplementaires passes a client.request()

    Returns:
        httpx.Response en cas de succes

    Raises:
        RateLimitError: Si 429 apres epuisement des tentatives
        ServerError: Si 5xx apres epuisement des tentatives
        httpx.TransportError: Si le service reste injoignable
        httpx.HTTPStatusError: Pour les autres erreurs HTTP
    """

    @with_retry(max_attempts=max_attempts, max_wait=max_wait)
    async def _do_request() -> httpx.Response:
        response = await client.request(method, url, **kwargs)
        if response.status_code == 429:
            retry_after_header = response.headers.get("Retry-After")
            retry_after = (
                int(retry_after_header)
                if retry_after_header and retry_after_header.isdigit()
                else None
            )
            raise RateLimitError(retry_after)
        if response.status_code >= 500:
            raise ServerError(response.status_code)
        response.raise_for_status()
        return response

    return await _do_request()
