"""
In-memory catalogue store with a dirty flag.

The Catalogue owns the ordered list of records and remembers which file it is
bound to. Every mutation marks it dirty; only a successful save clears that.
"""

import logging
from typing import List, Optional

from fruitcat import Record, default_catalogue, load_catalogue, save_catalogue

logger = logging.getLogger(__name__)


class Catalogue:
    """Ordered list of Records bound to a catalogue file"""

    def __init__(self, records: Optional[List[Record]] = None,
                 resource_name: str = "", dirty: bool = False):
        self.records = list(records) if records else []
        self.resource_name = resource_name
        self.dirty = dirty

    @classmethod
    def load(cls, resource_name: str) -> "Catalogue":
        """Load from file; any CatalogueError propagates to the caller"""
        return cls(load_catalogue(resource_name), resource_name)

    @classmethod
    def from_default(cls, resource_name: str) -> "Catalogue":
        """Unsaved starter catalogue bound to *resource_name*"""
        return cls(default_catalogue(), resource_name)

    def __len__(self):
        return len(self.records)

    def __getitem__(self, index):
        return self.records[index]

    def names(self) -> List[str]:
        return [r.name for r in self.records]

    # -- mutation ------------------------------------------------------------

    def add(self, record: Record) -> int:
        """Append a record and return its index"""
        self.records.append(record)
        self.dirty = True
        return len(self.records) - 1

    def replace(self, index: int, record: Record):
        if not 0 <= index < len(self.records):
            raise IndexError(f"No record at index {index}")
        self.records[index] = record
        self.dirty = True

    def remove(self, index: int) -> Record:
        if not 0 <= index < len(self.records):
            raise IndexError(f"No record at index {index}")
        record = self.records.pop(index)
        self.dirty = True
        return record

    # -- persistence ---------------------------------------------------------

    def save(self, resource_name: Optional[str] = None):
        """
        Write to *resource_name* (default: the bound name) and rebind to it.

        On failure the CatalogueIOError propagates and the records, binding
        and dirty flag are left as they were.
        """
        target = resource_name or self.resource_name
        save_catalogue(self.records, target)
        self.resource_name = target
        self.dirty = False
        logger.debug("Catalogue clean after save to %s", target)
