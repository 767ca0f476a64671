"""
Configuración centralizada de logging para el motor de series.

Todos los módulos obtienen su logger con ``structlog.get_logger(__name__)``;
este módulo solo decide el formato y el nivel de salida.
"""

import logging
import sys

import structlog

from series_config import LOG_LEVEL


def configure_logging(level: str = LOG_LEVEL, format_json: bool = False) -> None:
    """Configura structlog sobre el logging estándar.

    Args:
        level: nivel mínimo (DEBUG, INFO, WARNING, ERROR).
        format_json: salida JSON en lugar de la consola legible.
    """
    log_level = getattr(logging, level.upper())

    logging.basicConfig(
        level=log_level,
        stream=sys.stderr,
        format="%(message)s",
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if format_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def apply_quiet_defaults() -> None:
    """Filtra por ``LOG_LEVEL`` mientras nadie configure structlog.

    Sin esto, structlog sin configurar imprime todos los niveles en stdout.
    Los avisos que pasan el filtro siguen por el logging estándar, que sin
    handlers los escribe en stderr.
    """
    if structlog.is_configured():
        return
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, LOG_LEVEL.upper())),
        logger_factory=structlog.stdlib.LoggerFactory(),
    )


def get_logger(name: str):
    return structlog.get_logger(name)


apply_quiet_defaults()
