"""
Console logging for the API process.
Nothing here runs unless FLASK_LOG_LEVEL is set; see create_app.
"""
import logging
import re
import sys

LOG_FORMAT = '%(asctime)s - %(name)s:%(lineno)d - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Request lines that scoreboards and tablets poll every few seconds
POLLING_PATTERNS = (
    re.compile(r'GET /flights/competition/\d+ '),
    re.compile(r'GET /results/rankings/competition/\d+ '),
    re.compile(r'/socket\.io/\?EIO=4&transport=polling'),
)


class LevelColourFormatter(logging.Formatter):
    """Wraps each line in an ANSI colour picked by level when stderr is a tty."""

    LEVEL_COLOURS = {
        logging.DEBUG: '\033[36m',
        logging.INFO: '\033[32m',
        logging.WARNING: '\033[33m',
        logging.ERROR: '\033[31m',
        logging.CRITICAL: '\033[35m',
    }
    RESET = '\033[0m'

    def __init__(self, use_colour=None):
        super().__init__(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
        self.use_colour = sys.stderr.isatty() if use_colour is None else use_colour

    def format(self, record):
        line = super().format(record)
        colour = self.LEVEL_COLOURS.get(record.levelno)
        if not self.use_colour or not colour:
            return line
        return f"{colour}{line}{self.RESET}"


class PollingRequestFilter(logging.Filter):
    """Drops successful request lines for endpoints screens poll."""

    def filter(self, record):
        message = record.getMessage()
        if '" 200 ' not in message:
            return True
        return not any(p.search(message) for p in POLLING_PATTERNS)


def setup_logging(log_level: str) -> int:
    """Route all loggers to stdout at the given level; returns the level used."""
    level_name = log_level.upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level_name, level = 'WARNING', logging.WARNING

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(LevelColourFormatter())

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    logging.getLogger('werkzeug').addFilter(PollingRequestFilter())
    logging.info(f"Logging configured at {level_name} level")
    return level
