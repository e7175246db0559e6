"""Process-wide logging setup shared by the CLI and the dashboard."""

import logging
import sys

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_HANDLER_NAME = "rtlforge"


def setup_logging(level: int = logging.INFO) -> None:
    """Install a single stderr handler on the root logger.

    Safe to call more than once: Streamlit re-executes the dashboard script
    on every interaction.
    """
    root = logging.getLogger()
    root.setLevel(level)
    if any(h.get_name() == _HANDLER_NAME for h in root.handlers):
        return
    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(_FORMAT))
    root.addHandler(handler)
