# app/core/logging.py
import logging

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """
    Configure root logging once for the whole process.

    uvicorn installs its own handlers on its loggers; everything else
    (app.*, sqlalchemy) goes through the root handler set up here.
    """
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    logging.getLogger("app").setLevel(level.upper())
