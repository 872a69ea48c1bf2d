import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_configured = False

def configure_logging(level: str = "INFO") -> None:
    """Set up root logging once per process. Later calls are ignored."""
    global _configured
    if _configured:
        return
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
    _configured = True

def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
