import logging
from collections.abc import Mapping

logger = logging.getLogger("objectpropvalidator")

# Channel name -> (logger method, AppDaemon level)
CHANNELS = {
    'error': ('error', 'ERROR'),
    'warn': ('warning', 'WARNING'),
    'warning': ('warning', 'WARNING'),
    'log': ('info', 'INFO'),
    'info': ('info', 'INFO'),
}

DEFAULT_CHANNEL = 'error'

# Accepted spellings of the channel option, first one wins
LEVEL_KEYS = ('logLevel', 'log_level')

def config_log_level(config):
    """
    Requested channel from a config mapping, None when there is none.
    """
    if not isinstance(config, Mapping):
        return None
    for key in LEVEL_KEYS:
        if key in config:
            return config[key]
    return None

def _noop(*args, **kwargs):
    pass

def resolve_sink(log_level=None, log=None):
    """
    Pick the diagnostic channel once, at build time.

    :param log_level: the requested channel ('error', 'warn', 'log')
    :param log: a Logger-like object, or an AppDaemon style
                ``log(msg, level=...)`` callable. Defaults to the module logger.
    :return: a callable taking a single message string
    """
    facility = logger if log is None else log

    for channel in (log_level, DEFAULT_CHANNEL):
        if not isinstance(channel, str) or channel not in CHANNELS:
            continue

        method, level = CHANNELS[channel]
        try:
            write = getattr(facility, method, None)
        except Exception:
            write = None

        if callable(write):
            return _guard(write)

        if callable(facility):
            return _guard(lambda msg, _level=level: facility(msg, level=_level))

    return _noop

def _guard(write):
    def sink(message):
        # A broken diagnostic channel must never fail a validation
        try:
            write(message)
        except Exception:
            pass
    return sink
