#!/usr/bin/env python3
"""
FruitCat - Fruit Dimension Catalogue

Reads and writes the JSON catalogue used by the FruitCat TUI:

  [
    {"name": "Apple", "length": 8.0, "width": 7.5, "height": 7.0},
    ...
  ]

Unknown keys are ignored on read; a missing key, a non-numeric or
non-positive dimension, or an empty name makes the file unreadable.

Usage:
  fruitcat [catalogue]                 # print a report
  fruitcat [catalogue] --init          # write the default catalogue
"""

import json
import logging
import math
import os
import sys
import tempfile
from dataclasses import dataclass
from typing import Any, Dict, List

import numpy as np

import config

logger = logging.getLogger(__name__)

DIMENSIONS = ('length', 'width', 'height')


# =============================================================================
# ERRORS
# =============================================================================

class CatalogueError(Exception):
    """Base class for catalogue persistence failures"""


class CatalogueNotFound(CatalogueError):
    """The catalogue file does not exist"""


class CatalogueParseError(CatalogueError):
    """The catalogue file exists but is not a valid catalogue"""


class CatalogueIOError(CatalogueError):
    """The catalogue file could not be read or written"""


# =============================================================================
# RECORD
# =============================================================================

@dataclass(frozen=True)
class Record:
    """
    A single catalogue entry.

    Attributes:
        name: display name, never empty
        length, width, height: positive dimensions
    """
    name: str
    length: float
    width: float
    height: float

    @property
    def volume(self) -> float:
        return self.length * self.width * self.height

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'length': self.length,
            'width': self.width,
            'height': self.height,
        }


def default_catalogue() -> List[Record]:
    """Return the built-in starter catalogue (no I/O)"""
    return [
        Record("Apple", 8.0, 7.5, 7.0),
        Record("Banana", 18.0, 3.5, 3.5),
        Record("Cherry", 2.2, 2.0, 2.0),
        Record("Grape", 2.3, 1.8, 1.8),
        Record("Kiwi", 6.0, 5.0, 5.0),
        Record("Lemon", 7.0, 5.5, 5.5),
        Record("Mango", 13.0, 9.0, 8.0),
        Record("Orange", 7.5, 7.5, 7.5),
        Record("Pineapple", 25.0, 14.0, 14.0),
        Record("Watermelon", 35.0, 25.0, 25.0),
    ]


# =============================================================================
# READER
# =============================================================================

def _parse_dimension(entry: Dict[str, Any], key: str, position: int) -> float:
    value = entry[key]
    # bool is an int subclass, reject it explicitly
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise CatalogueParseError(
            f"Entry {position}: '{key}' must be a number, got {value!r}")
    try:
        value = float(value)
    except OverflowError:
        raise CatalogueParseError(
            f"Entry {position}: '{key}' is too large")
    if not math.isfinite(value) or value <= 0:
        raise CatalogueParseError(
            f"Entry {position}: '{key}' must be positive, got {value!r}")
    return value


def parse_record(entry: Any, position: int = 0) -> Record:
    """Build a Record from one decoded JSON object"""
    if not isinstance(entry, dict):
        raise CatalogueParseError(f"Entry {position}: expected an object")

    missing = [k for k in ('name',) + DIMENSIONS if k not in entry]
    if missing:
        raise CatalogueParseError(
            f"Entry {position}: missing field(s) {', '.join(missing)}")

    name = entry['name']
    if not isinstance(name, str) or not name.strip():
        raise CatalogueParseError(f"Entry {position}: 'name' must be a non-empty string")

    length, width, height = (_parse_dimension(entry, k, position) for k in DIMENSIONS)
    return Record(name.strip(), length, width, height)


def load_catalogue(filename: str) -> List[Record]:
    """Read a catalogue file, raising a CatalogueError subclass on failure"""
    try:
        with open(filename, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError:
        raise CatalogueNotFound(f"No catalogue at {filename}")
    except (ValueError, RecursionError) as e:
        # JSONDecodeError and UnicodeDecodeError are ValueErrors; so is an
        # integer literal past the digit limit
        raise CatalogueParseError(f"{filename} is not valid JSON: {e}")
    except OSError as e:
        raise CatalogueIOError(f"Cannot read {filename}: {e.strerror or e}")

    if not isinstance(data, list):
        raise CatalogueParseError(f"{filename}: expected a list of fruits")

    records = [parse_record(entry, i) for i, entry in enumerate(data)]
    logger.info("Loaded %d records from %s", len(records), filename)
    return records


# =============================================================================
# WRITER
# =============================================================================

def save_catalogue(records: List[Record], filename: str):
    """
    Write the catalogue as JSON.

    The data goes to a temporary file beside the target which then replaces
    it, so a failed write leaves any existing catalogue intact.
    """
    directory = os.path.dirname(os.path.abspath(filename))
    payload = [r.to_dict() for r in records]
    tmp_path = None
    try:
        with tempfile.NamedTemporaryFile('w', encoding='utf-8', dir=directory,
                                         prefix='.fruitcat-', suffix='.tmp',
                                         delete=False) as f:
            tmp_path = f.name
            json.dump(payload, f, indent=2)
            f.write('\n')
        os.replace(tmp_path, filename)
    except OSError as e:
        if tmp_path is not None and os.path.exists(tmp_path):
            os.unlink(tmp_path)
        logger.error("Failed to save catalogue to %s: %s", filename, e)
        raise CatalogueIOError(f"Cannot write {filename}: {e.strerror or e}")

    logger.info("Saved %d records to %s", len(records), filename)


# =============================================================================
# STATISTICS
# =============================================================================

def catalogue_stats(records: List[Record]) -> Dict[str, Any]:
    """
    Summarise a catalogue.

    Returns a dict with:
        - count: number of records
        - total_volume, mean_volume: sum and mean of record volumes
        - min, max: per-dimension [length, width, height] extremes
        - largest: name of the record with the biggest volume (None if empty)
    """
    if not records:
        return {
            'count': 0,
            'total_volume': 0.0,
            'mean_volume': 0.0,
            'min': [0.0, 0.0, 0.0],
            'max': [0.0, 0.0, 0.0],
            'largest': None,
        }

    dims = np.array([[r.length, r.width, r.height] for r in records],
                    dtype=np.float64)
    volumes = dims.prod(axis=1)
    return {
        'count': len(records),
        'total_volume': float(volumes.sum()),
        'mean_volume': float(volumes.mean()),
        'min': dims.min(axis=0).tolist(),
        'max': dims.max(axis=0).tolist(),
        'largest': records[int(volumes.argmax())].name,
    }


def print_report(records: List[Record], filename: str):
    """Print a human-readable catalogue report"""
    print("=" * 60)
    print(f"FRUIT CATALOGUE: {filename}")
    print("=" * 60)

    print(f"\n  {'Name':<20} {'Length':>8} {'Width':>8} {'Height':>8} {'Volume':>10}")
    for r in records:
        print(f"  {r.name:<20} {r.length:>8.2f} {r.width:>8.2f} "
              f"{r.height:>8.2f} {r.volume:>10.2f}")

    stats = catalogue_stats(records)
    print(f"\nRecords: {stats['count']}")
    if stats['count']:
        print(f"  Total volume: {stats['total_volume']:.2f}")
        print(f"  Mean volume:  {stats['mean_volume']:.2f}")
        print(f"  Largest:      {stats['largest']}")
        for i, dim in enumerate(DIMENSIONS):
            print(f"  {dim.capitalize():<7} [{stats['min'][i]:.2f}, {stats['max'][i]:.2f}]")
    print("=" * 60)


# =============================================================================
# CLI
# =============================================================================

def print_usage():
    print("FruitCat - Fruit Dimension Catalogue")
    print("=" * 50)
    print("\nUsage:")
    print("  fruitcat [catalogue]")
    print("  fruitcat [catalogue] --init [--force]")
    print(f"\nThe catalogue defaults to {config.DEFAULT_CATALOGUE_NAME}"
          " (override with FRUITCAT_CATALOGUE).")
    print("\nOptions:")
    print("  --init    Write the default catalogue")
    print("  --force   Allow --init to overwrite an existing file")
    print("\nUse fruitcat-tui to browse and edit interactively.")


def main(argv=None):
    args = sys.argv[1:] if argv is None else argv
    filename = None
    init = False
    force = False

    for arg in args:
        if arg in ['-h', '--help']:
            print_usage()
            return 0
        elif arg == '--init':
            init = True
        elif arg == '--force':
            force = True
        elif arg.startswith('--'):
            print(f"Error: Unknown option {arg}")
            print_usage()
            return 1
        elif filename is None:
            filename = arg
        else:
            print("Error: Only one catalogue may be given")
            return 1

    if filename is None:
        filename = config.DEFAULT_CATALOGUE_NAME

    if init:
        if os.path.exists(filename) and not force:
            print(f"Error: {filename} already exists (use --force to overwrite)")
            return 1
        try:
            save_catalogue(default_catalogue(), filename)
        except CatalogueError as e:
            print(f"Error: {e}")
            return 1
        print(f"Wrote default catalogue to {filename}")
        return 0

    try:
        records = load_catalogue(filename)
    except CatalogueError as e:
        print(f"Error: {e}")
        return 1

    print_report(records, filename)
    return 0


if __name__ == "__main__":
    sys.exit(main())
