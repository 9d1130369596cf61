"""
Configuration de l'application via pydantic-settings.

La configuration est chargée depuis les variables d'environnement avec le préfixe ORDERS_,
et peut optionnellement être fournie via un fichier .env.

Le catalogue produit est appelé avec un timeout borné, un nombre de tentatives
borné et un disjoncteur (circuit breaker) configurables.
"""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Trouver le fichier .env à la racine du projet (parent de src/)
_PROJECT_ROOT = Path(__file__).parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Paramètres de l'application avec support des variables d'environnement.

    Tous les paramètres peuvent être surchargés via des variables d'environnement
    avec le préfixe ORDERS_.
    Exemple : ORDERS_CATALOG_BASE_URL=http://product-service:8082
    """

    model_config = SettingsConfigDict(
        env_prefix="ORDERS_",
        env_file=_ENV_FILE if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Base de données
    database_url: str = Field(default="sqlite:///data/orders.db")

    # Catalogue produit
    catalog_base_url: str = Field(default="http://localhost:8082")
    catalog_timeout_seconds: float = Field(default=5.0, gt=0)
    catalog_max_attempts: int = Field(default=3, ge=1)
    catalog_retry_max_wait_seconds: float = Field(default=2.0, gt=0)
    catalog_breaker_failure_threshold: int = Field(default=5, ge=1)
    catalog_breaker_recovery_seconds: float = Field(default=30.0, gt=0)

    # Pagination
    default_page_size: int = Field(default=10, ge=1)
    max_page_size: int = Field(default=100, ge=1)

    # Logging (fichier + stderr, rotation 10MB, 5 fichiers de rétention)
    log_level: str = Field(default="INFO")
    log_file: Path = Field(default=Path("logs/orders.log"))
    log_rotation_size: str = Field(default="10 MB")
    log_retention_count: int = Field(default=5)
    log_json_console: bool = Field(default=False)

    @field_validator("log_file", mode="before")
    @classmethod
    def expand_path(cls, v: str | Path) -> Path:
        """Étend ~ vers le répertoire home dans les chemins."""
        return Path(v).expanduser()

    @field_validator("catalog_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Retire le / final pour construire les URLs de manière uniforme."""
        return v.rstrip("/")
