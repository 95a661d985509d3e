import logging
from pathlib import Path
from typing import Optional
from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'

def setup_logging(log_file: Optional[Path] = None, debug: bool = False) -> logging.Logger:
    """Configures the 'vsp' logger.

    With a log file, records go only to that file so the live dashboard is not
    interleaved with log lines. Otherwise they go to stderr through rich.
    """
    logger = logging.getLogger("vsp")
    logger.setLevel(logging.DEBUG if debug else logging.INFO)

    for handler in list(logger.handlers):
        if getattr(handler, "_vsp_handler", False):
            logger.removeHandler(handler)
            handler.close()

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_file)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
    else:
        handler = RichHandler(console=Console(stderr=True), show_path=False, markup=False)

    handler._vsp_handler = True
    logger.addHandler(handler)
    logger.propagate = False
    return logger
