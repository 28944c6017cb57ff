import logging
import sys

from core.config import settings


def configure_logging(level: str | None = None) -> None:
    """
    Configure structured logging for the whole app.
    Call this once in FastAPI startup and at the top of the Streamlit entry page.
    """
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

