"""
Application modes.

Exactly one mode is active at a time. Modes that own transient input (the
record form, the negotiator buffer) carry it, so leaving the mode drops it.
"""

from dataclasses import dataclass, field
from typing import Optional

from modal_form import ModalForm


@dataclass
class Normal:
    pass


@dataclass
class Filter:
    pass


@dataclass
class ConfirmDelete:
    pass


@dataclass
class Help:
    pass


@dataclass
class AddRecord:
    form: ModalForm = field(default_factory=ModalForm)


@dataclass
class EditRecord:
    index: int
    form: ModalForm


@dataclass
class InitCatalogNegotiation:
    """
    Startup prompt shown when no catalogue could be loaded.

    Attributes:
        buffer: catalogue file name to create
        reason: why the load failed, for display
        error: last failed attempt to create the catalogue
    """
    buffer: str
    reason: str = ""
    error: Optional[str] = None


FORM_MODES = (AddRecord, EditRecord)
