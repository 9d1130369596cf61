"""
Route de santé du service.
"""

from fastapi import APIRouter

router = APIRouter()


@router.get("/health")
async def health() -> dict[str, str]:
    """Indique que le service répond."""
    return {"status": "UP"}
