"""
FruitCat configuration - paths and application constants.
"""

import os

# ---------------------------------------------------------------------------
# Catalogue location
# ---------------------------------------------------------------------------

CANONICAL_CATALOGUE_NAME = "fruits.json"


def get_default_catalogue() -> str:
    """
    Return the catalogue path used when none is given on the command line.
    FRUITCAT_CATALOGUE overrides the canonical name in the working directory.
    """
    override = os.environ.get("FRUITCAT_CATALOGUE")
    if override:
        return override
    return CANONICAL_CATALOGUE_NAME


DEFAULT_CATALOGUE_NAME = get_default_catalogue()

# ---------------------------------------------------------------------------
# Application constants
# ---------------------------------------------------------------------------

# Terminal size below which the TUI only shows a resize hint
MIN_COLS = 60
MIN_ROWS = 18

# Fraction of the screen width given to the list pane
LIST_PANE_FRACTION = 0.6

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
