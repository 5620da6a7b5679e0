import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """
    Configure le logging racine une seule fois (appelé par create_app).
    """
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    logging.getLogger("studysharper").setLevel(level.upper())
    # httpx logge chaque requête en INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
