import json
import logging


def configure_logging(level: str = "INFO") -> None:
    # records are already JSON lines, no extra formatting
    logging.basicConfig(level=level.upper(), format="%(message)s")


def log_event(logger: logging.Logger, event: str, level: int = logging.INFO, **fields) -> None:
    """
    Emit one JSON object per line: {"event": ..., **fields}.
    """
    if not logger.isEnabledFor(level):
        return
    logger.log(level, json.dumps({"event": event, **fields}, default=str))
