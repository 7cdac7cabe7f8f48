from logging.config import dictConfig
from pydantic import BaseModel
from typing import Dict, Optional

from freshtrack.core.config import settings

LOG_FORMAT = "%(levelprefix)s | %(asctime)s | %(name)s | %(funcName)s | %(lineno)d | %(message)s"


def _logger(level: str, handlers=("console",)) -> Dict:
    return {"handlers": list(handlers), "level": level, "propagate": False}


class LogConfig(BaseModel):
    """
    Configuration de journalisation de FreshTrack

    - ``freshtrack`` : niveau LOG_LEVEL
    - ``freshtrack.core.live_query`` : ré-exécutions tracées seulement en DEBUG
    - ``sqlalchemy.engine`` : requêtes SQL visibles uniquement si DEBUG
    """

    level: str = settings.LOG_LEVEL
    debug: bool = settings.DEBUG

    def to_dict_config(self) -> Dict:
        sql_level = "INFO" if self.debug else "WARNING"
        live_query_level = "DEBUG" if self.debug else self.level

        return {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "console": {
                    "()": "uvicorn.logging.DefaultFormatter",
                    "fmt": LOG_FORMAT,
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                },
            },
            "handlers": {
                "console": {
                    "formatter": "console",
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stderr",
                },
            },
            "loggers": {
                "freshtrack": _logger(self.level),
                "freshtrack.core.live_query": _logger(live_query_level),
                "sqlalchemy.engine": _logger(sql_level),
                "apscheduler": _logger("WARNING"),
                "sse_starlette": _logger("WARNING"),
                "uvicorn": _logger("WARNING"),
                "uvicorn.error": {"level": "INFO", "propagate": False},
                "uvicorn.access": _logger("WARNING"),
            },
        }


def configure_logging(level: Optional[str] = None) -> Dict:
    """Applique la configuration de journalisation et la retourne"""
    config = LogConfig() if level is None else LogConfig(level=level)
    config_dict = config.to_dict_config()
    dictConfig(config_dict)
    return config_dict
