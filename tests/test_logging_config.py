import logging

from liftmeet.logging_config import LevelColourFormatter, PollingRequestFilter


def _record(message, level=logging.INFO):
    return logging.LogRecord("werkzeug", level, __file__, 1, message, None, None)


def test_polling_requests_are_dropped():
    quiet = PollingRequestFilter()
    assert not quiet.filter(_record('127.0.0.1 - - "GET /flights/competition/3 HTTP/1.1" 200 -'))
    assert not quiet.filter(
        _record('127.0.0.1 - - "GET /socket.io/?EIO=4&transport=polling&t=x HTTP/1.1" 200 -')
    )


def test_failures_and_writes_are_kept():
    quiet = PollingRequestFilter()
    assert quiet.filter(_record('127.0.0.1 - - "GET /flights/competition/3 HTTP/1.1" 500 -'))
    assert quiet.filter(_record('127.0.0.1 - - "POST /results/attempt HTTP/1.1" 200 -'))


def test_colour_only_when_enabled():
    record = _record("weigh-in saved", logging.WARNING)
    assert LevelColourFormatter(use_colour=False).format(record).endswith("weigh-in saved")
    coloured = LevelColourFormatter(use_colour=True).format(record)
    assert coloured.startswith("\033[33m") and coloured.endswith("\033[0m")
