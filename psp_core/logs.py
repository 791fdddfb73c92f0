"""Logger helpers for the psp_core package."""

from __future__ import annotations

import logging

ROOT_LOGGER_NAME = "psp_core"


def get_logger(*parts: str) -> logging.Logger:
    """Return ``psp_core.<parts...>``, skipping empty parts."""
    names = [ROOT_LOGGER_NAME, *(part for part in parts if part)]
    return logging.getLogger(".".join(names))


def set_debug_logging(enabled: bool) -> None:
    """Turn the package's debug trace on or off."""
    logging.getLogger(ROOT_LOGGER_NAME).setLevel(logging.DEBUG if enabled else logging.NOTSET)
