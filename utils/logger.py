import logging

from config import ENV

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(env: ENV | None = None) -> None:
    env = env or ENV()
    level = logging.DEBUG if env.DEBUG else getattr(logging, env.LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    # SQL echo only in debug
    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if env.DEBUG else logging.WARNING)
