# agenda/config/logger.py
import logging
import colorlog
import sys

from agenda.config.settings_loader import get_setting

def setup_logger(name: str) -> logging.Logger:
    """
    Configura e retorna um logger colorido, sem duplicar handlers
    e sem propagar para o logger raiz.
    """
    logger = logging.getLogger(name)
    logger.setLevel(str(get_setting("LOG_LEVEL")).upper())

    # Se o logger já tem handlers, apenas o retornamos.
    if logger.handlers:
        return logger

    handler = colorlog.StreamHandler(sys.stdout)
    formatter = colorlog.ColoredFormatter(
        "%(log_color)s%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        log_colors={
            'DEBUG': 'cyan',
            'INFO': 'green',
            'WARNING': 'yellow',
            'ERROR': 'red',
            'CRITICAL': 'bold_red,bg_white'
        },
        secondary_log_colors={},
        style='%'
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    # Impede que os logs sejam duplicados pelo handler do logger raiz
    logger.propagate = False

    return logger

def configure_external_loggers():
    """Reduz o ruído de bibliotecas externas."""
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("asyncpg").setLevel(logging.WARNING)

configure_external_loggers()
