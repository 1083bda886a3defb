"""
Catalogue-initialization negotiator.

Shown once at startup when the catalogue file is missing or unreadable.
The user either creates a default catalogue on disk (y/Enter) or works with
an unsaved in-memory default (n/Esc). The in-memory choice starts clean:
nothing has been lost yet, and the first save writes to the buffer's name
(or the default name when the buffer is blank).
"""

import logging

import config
import keys
from catalogue import Catalogue
from fruitcat import CatalogueIOError
from modes import InitCatalogNegotiation

logger = logging.getLogger(__name__)


def start_negotiation(resource_name, reason=""):
    return InitCatalogNegotiation(buffer=resource_name, reason=reason)


def _accept(state, mode):
    name = mode.buffer.strip()
    if not name:
        mode.error = "Catalogue name cannot be empty"
        return

    catalogue = Catalogue.from_default(name)
    try:
        catalogue.save()
    except CatalogueIOError as e:
        logger.warning("Could not create catalogue %s: %s", name, e)
        mode.error = str(e)
        return

    logger.info("Created default catalogue at %s", name)
    state.adopt_catalogue(catalogue)
    state.set_message(f"Created {name}")


def _decline(state, mode):
    name = mode.buffer.strip() or config.DEFAULT_CATALOGUE_NAME
    logger.info("Using unsaved default catalogue (bound to %s)", name)
    state.adopt_catalogue(Catalogue.from_default(name))
    state.set_message("Using default catalogue (not saved)")


def handle_negotiator_key(state, key):
    mode = state.mode
    if key_is_accept(key):
        _accept(state, mode)
    elif key_is_decline(key):
        _decline(state, mode)
    elif keys.is_backspace(key):
        mode.buffer = mode.buffer[:-1]
        mode.error = None
    elif keys.is_printable(key):
        mode.buffer += chr(key)
        mode.error = None


def key_is_accept(key):
    return keys.key_in(key, "yY") or keys.is_enter(key)


def key_is_decline(key):
    return keys.key_in(key, "nN") or key == keys.KEY_ESC
