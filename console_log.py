"""Colored status messages on stderr, shared by the generator modules."""

import enum
import sys


@enum.unique
class SGR(enum.Enum):
    """Enumerate (some of the) available SGR (Select Graphic Rendition) control sequences."""
    # For details on SGR control sequences (and ANSI escape codes in general), see: https://en.wikipedia.org/wiki/ANSI_escape_code#SGR_(Select_Graphic_Rendition)_parameters
    RESET = '\033[0m'
    FG_RED = '\033[0;31m'
    FG_GREEN = '\033[0;32m'
    FG_YELLOW = '\033[0;33m'
    FG_BLUE = '\033[0;34m'


def _log_with_sgr(sgr, colored_message, uncolored_message=''):
    """Log a message to stderr wrapped in an SGR context."""
    print(sgr.value, colored_message, SGR.RESET.value, uncolored_message, sep='', file=sys.stderr, flush=True)


def log_error(colored_message, uncolored_message=''):
    """Log an error message (in red) to stderr."""
    _log_with_sgr(SGR.FG_RED, colored_message, uncolored_message)


def log_warning(colored_message, uncolored_message=''):
    """Log a warning message (in yellow) to stderr."""
    _log_with_sgr(SGR.FG_YELLOW, colored_message, uncolored_message)


def log_info(colored_message, uncolored_message=''):
    """Log an informative message (in blue) to stderr."""
    _log_with_sgr(SGR.FG_BLUE, colored_message, uncolored_message)


def log_success(colored_message, uncolored_message=''):
    """Log a success message (in green) to stderr."""
    _log_with_sgr(SGR.FG_GREEN, colored_message, uncolored_message)


def log_verbose(colored_message, uncolored_message=''):
    """Log a progress message (in blue), but only once verbose output has been switched on with set_verbose."""
    if not log_verbose.enabled: return
    _log_with_sgr(SGR.FG_BLUE, colored_message, uncolored_message)
log_verbose.enabled = False


def set_verbose(enabled: bool):
    log_verbose.enabled = enabled


def log_warning_once(logged_keys: set, key: str, colored_message, uncolored_message=''):
    """Log a warning only the first time key is raised against logged_keys.

    The caller owns logged_keys and decides how long "once" lasts, typically one generation run.
    For conditions that would otherwise repeat for every target or module without telling the user anything new.
    """
    if key in logged_keys: return
    logged_keys.add(key)
    log_warning(colored_message, uncolored_message)
