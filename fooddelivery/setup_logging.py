import logging, sys

from fooddelivery.settings import LOG_LEVEL

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s :: %(message)s"

def setup_logging(level: str = LOG_LEVEL, stream=None):
    """Install a single stdout handler on the root logger (no-op if one exists)."""
    root = logging.getLogger()
    if root.handlers:  # reload / repeated CLI invocations
        return
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    # engine echo is noisy at INFO; the repair job logs its own writes
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
