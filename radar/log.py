import logging

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def configure_logging(level: int = logging.INFO) -> None:
    """Root logging setup for the CLI entry points. Safe to call twice."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
    # keep per-request chatter from the HTTP stack out of the run log
    for noisy in ("httpx", "urllib3", "openai"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
