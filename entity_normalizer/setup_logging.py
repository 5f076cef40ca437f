import logging, sys

from entity_normalizer.settings import LOG_LEVEL

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s :: %(message)s"


def setup_logging(level: str | None = None) -> logging.Logger:
    """Attach a single stdout handler to the root logger (idempotent)."""
    root = logging.getLogger()
    if root.handlers:  # don’t double add during reload
        return root
    lvl = getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO)
    root.setLevel(lvl)
    h = logging.StreamHandler(sys.stdout)
    h.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(h)
    return root
