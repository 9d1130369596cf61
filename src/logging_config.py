"""
Configuration du logging du service de commandes via loguru.

Deux sorties :
- console (stderr) : colorée pour un terminal, ou JSON une ligne par
  événement quand le service tourne en conteneur
- fichier : JSON avec rotation, à DEBUG (appels catalogue compris)

Les bibliothèques qui utilisent le module logging standard (uvicorn,
SQLAlchemy, httpx) sont redirigées vers loguru pour que tous les
événements partagent le même format et les mêmes handlers.
"""

import logging
import sys
from pathlib import Path

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level> {extra}"
)

# Loggers standard redirigés, avec leur niveau minimum
STDLIB_LOGGERS = {
    "uvicorn": logging.INFO,
    "uvicorn.error": logging.INFO,
    "uvicorn.access": logging.INFO,
    "sqlalchemy.engine": logging.WARNING,
    "httpx": logging.WARNING,
}


class InterceptHandler(logging.Handler):
    """Transmet les enregistrements du module logging à loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Remonte la pile jusqu'à l'appelant réel, hors module logging
        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def intercept_stdlib_logging() -> None:
    """Redirige les loggers standard connus vers loguru."""
    for name, level in STDLIB_LOGGERS.items():
        std_logger = logging.getLogger(name)
        std_logger.handlers = [InterceptHandler()]
        std_logger.setLevel(level)
        std_logger.propagate = False


def configure_logging(
    log_level: str = "INFO",
    log_file: Path = Path("logs/orders.log"),
    rotation_size: str = "10 MB",
    retention_count: int = 5,
    json_console: bool = False,
) -> None:
    """Configure le logging de l'application.

    Args :
        log_level : Niveau minimum de la sortie console (DEBUG, INFO, WARNING, ERROR)
        log_file : Chemin du fichier de log JSON
        rotation_size : Taille maximale du fichier avant rotation (ex: "10 MB")
        retention_count : Nombre de fichiers rotatifs conservés
        json_console : Sortie console en JSON plutôt qu'en texte coloré

    Les champs passés en mots-clés aux appels logger (order_id, status...)
    sont conservés dans la sortie JSON sous "extra".
    """
    logger.remove()

    if json_console:
        logger.add(sys.stderr, level=log_level, format="{message}", serialize=True)
    else:
        logger.add(sys.stderr, level=log_level, format=CONSOLE_FORMAT, colorize=True)

    log_file.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_file,
        level="DEBUG",
        format="{message}",
        serialize=True,
        rotation=rotation_size,
        retention=retention_count,
        compression="zip",
        enqueue=True,  # Thread-safe (routes synchrones dans le threadpool)
    )

    intercept_stdlib_logging()
    logger.debug("Logging configuré", log_file=str(log_file), rotation=rotation_size)
