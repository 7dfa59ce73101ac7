import logging


def configure_logging(level: str = "INFO") -> None:
    """Basic stream logging for the service; safe to call more than once."""
    lvl = getattr(logging, (level or "").upper(), logging.INFO)
    logging.basicConfig(
        level=lvl,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("caption_api").setLevel(lvl)
