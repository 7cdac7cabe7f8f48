"""Tests de la configuration de journalisation"""

import logging

from freshtrack.middleware.logging import LogConfig, configure_logging


def test_default_levels():
    config = LogConfig(level="INFO", debug=False).to_dict_config()

    assert config["loggers"]["freshtrack"]["level"] == "INFO"
    assert config["loggers"]["freshtrack.core.live_query"]["level"] == "INFO"
    assert config["loggers"]["sqlalchemy.engine"]["level"] == "WARNING"


def test_debug_exposes_queries():
    config = LogConfig(level="INFO", debug=True).to_dict_config()

    assert config["loggers"]["freshtrack.core.live_query"]["level"] == "DEBUG"
    assert config["loggers"]["sqlalchemy.engine"]["level"] == "INFO"


def test_configure_logging_applies_level():
    try:
        configure_logging("WARNING")
        assert logging.getLogger("freshtrack").level == logging.WARNING
    finally:
        configure_logging()
