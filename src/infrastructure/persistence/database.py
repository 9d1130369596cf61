"""
Configuration de la base de donnees pour le service de commandes.

Ce module fournit :
- Creation de l'engine (SQLite par defaut) avec configuration multi-thread
- Session factory avec context manager
- Fonction d'initialisation des tables

La base de donnees est configuree via ORDERS_DATABASE_URL (defaut: sqlite:///data/orders.db).
"""

from collections.abc import Generator
from pathlib import Path
from typing import Optional

from loguru import logger
from sqlalchemy import Engine
from sqlmodel import Session, SQLModel, create_engine

# Engine global - initialise lors du premier appel a get_engine()
_engine: Optional[Engine] = None


def create_db_engine(database_url: str) -> Engine:
    """
    Cree un engine SQLAlchemy pour l'URL donnee.

    Pour un fichier SQLite, le repertoire parent est cree si necessaire.
    """
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
        if database_url.startswith("sqlite:///") and ":memory:" not in database_url:
            db_path = Path(database_url.replace("sqlite:///", ""))
            db_path.parent.mkdir(exist_ok=True, parents=True)

    return create_engine(database_url, echo=False, connect_args=connect_args)


def get_engine() -> Engine:
    """
    Retourne l'engine global, en le creant si necessaire.

    Utilise la configuration de l'application pour l'URL de la BDD.
    """
    global _engine
    if _engine is None:
        from src.config import Settings

        _engine = create_db_engine(Settings().database_url)
    return _engine


def get_session(engine: Optional[Engine] = None) -> Generator[Session, None, None]:
    """
    Generateur de session SQLModel.

    Utilisation avec next() ou comme dependance FastAPI :
        session = next(get_session())
        try:
            # operations
        finally:
            session.close()

    Yields:
        Session SQLModel connectee a l'engine
    """
    with Session(engine or get_engine()) as session:
        yield session


def init_db(engine: Optional[Engine] = None) -> None:
    """
    Initialise la base de donnees en creant toutes les tables.

    Cette fonction importe les modeles pour enregistrer leurs metadonnees
    dans SQLModel.metadata, puis cree les tables correspondantes si elles
    n'existent pas deja.

    Doit etre appelee une fois au demarrage de l'application.
    """
    # Import des modeles pour enregistrer leurs metadonnees
    # L'import est fait ici pour eviter les imports circulaires
    from src.infrastructure.persistence import models  # noqa: F401

    target = engine or get_engine()
    SQLModel.metadata.create_all(target)
    logger.debug("Tables initialisees", url=str(target.url))
