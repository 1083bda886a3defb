"""
Application state and the mode state machine.

AppState is owned by the run loop and handed to handle_key() for every key
event. handle_key() routes the key to the handler for the active mode and
returns False once the application should exit.
"""

import logging
from typing import Optional

import keys
from catalogue import Catalogue
from filter_engine import clamp_selection, filter_indices
from fruitcat import CatalogueError, CatalogueIOError, Record
from modal_form import ModalForm, ValidationError, validate_and_build
from modes import (AddRecord, ConfirmDelete, EditRecord, Filter, FORM_MODES,
                   Help, InitCatalogNegotiation, Normal)
from negotiator import handle_negotiator_key, start_negotiation

logger = logging.getLogger(__name__)

UNSAVED_WARNING = "Unsaved changes! Press Ctrl+S to save or q again to discard"


class AppState:
    """
    Everything the handlers and the renderer share.

    Attributes:
        catalogue: the live Catalogue
        mode: active mode (see modes.py)
        query: current filter text
        filtered: catalogue indices visible in the list, in order
        selected: position within ``filtered``
        message: status text, shown as an error popup if message_is_error
        quit_pending: a quit was refused because of unsaved changes
        running: cleared when the user quits
    """

    def __init__(self, catalogue: Catalogue, mode=None):
        self.catalogue = catalogue
        self.mode = mode if mode is not None else Normal()
        self.query = ""
        self.filtered = []
        self.selected = 0
        self.message: Optional[str] = None
        self.message_is_error = False
        self.quit_pending = False
        self.running = True
        self.refresh_view()

    # -- view ----------------------------------------------------------------

    def refresh_view(self, keep: Optional[int] = None):
        """
        Recompute the filtered view after a catalogue or query change.
        If *keep* (a catalogue index) is visible it becomes the selection.
        """
        self.filtered = filter_indices(self.catalogue.records, self.query)
        if keep is not None and keep in self.filtered:
            self.selected = self.filtered.index(keep)
        self.selected = clamp_selection(self.selected, len(self.filtered))

    def selected_index(self) -> Optional[int]:
        """Catalogue index of the selected record, or None"""
        if not self.filtered:
            return None
        return self.filtered[self.selected]

    def selected_record(self) -> Optional[Record]:
        index = self.selected_index()
        return None if index is None else self.catalogue[index]

    def is_filtering(self) -> bool:
        return bool(self.query)

    # -- messages ------------------------------------------------------------

    def set_message(self, text: str, error: bool = False):
        self.message = text
        self.message_is_error = error

    def clear_message(self):
        self.message = None
        self.message_is_error = False

    # -- catalogue -----------------------------------------------------------

    def adopt_catalogue(self, catalogue: Catalogue):
        """Make *catalogue* the live one and return to Normal mode"""
        self.catalogue = catalogue
        self.query = ""
        self.selected = 0
        self.mode = Normal()
        self.refresh_view()

    def save(self) -> bool:
        """Save the live catalogue; failures become an error message"""
        try:
            self.catalogue.save()
        except CatalogueIOError as e:
            self.set_message(f"Failed to save: {e}", error=True)
            return False
        self.set_message(f"Saved {len(self.catalogue)} records to "
                         f"{self.catalogue.resource_name}")
        return True


def startup(resource_name: str) -> AppState:
    """
    Load *resource_name* and build the initial state. If the catalogue
    cannot be loaded the negotiator is the initial mode.
    """
    try:
        catalogue = Catalogue.load(resource_name)
    except CatalogueError as e:
        logger.warning("Starting negotiator: %s", e)
        return AppState(Catalogue(resource_name=resource_name),
                        start_negotiation(resource_name, str(e)))
    return AppState(catalogue)


# =============================================================================
# HANDLERS
# =============================================================================

def _move_selection(state: AppState, delta: int):
    state.selected = clamp_selection(state.selected + delta, len(state.filtered))


def _handle_normal(state: AppState, key: int):
    quit_pending = state.quit_pending
    state.quit_pending = False
    state.clear_message()

    if key == keys.KEY_CTRL_S:
        state.save()
    elif keys.key_in(key, "q") or key == keys.KEY_ESC:
        if not state.catalogue.dirty or quit_pending:
            state.running = False
        else:
            state.quit_pending = True
            state.set_message(UNSAVED_WARNING, error=True)
    elif key == keys.KEY_UP or keys.key_in(key, "k"):
        _move_selection(state, -1)
    elif key == keys.KEY_DOWN or keys.key_in(key, "j"):
        _move_selection(state, 1)
    elif keys.key_in(key, "/"):
        state.query = ""
        state.refresh_view()
        state.mode = Filter()
    elif keys.key_in(key, "a"):
        state.mode = AddRecord(ModalForm())
    elif keys.key_in(key, "e"):
        index = state.selected_index()
        if index is not None:
            state.mode = EditRecord(index, ModalForm.from_record(state.catalogue[index]))
    elif keys.key_in(key, "d"):
        if state.selected_index() is not None:
            state.mode = ConfirmDelete()
    elif keys.key_in(key, "?"):
        state.mode = Help()


def _handle_filter(state: AppState, key: int):
    if key == keys.KEY_ESC:
        state.query = ""
        state.refresh_view()
        state.mode = Normal()
    elif keys.is_enter(key):
        state.mode = Normal()
    elif key == keys.KEY_CTRL_S:
        state.save()
    elif keys.is_backspace(key):
        state.query = state.query[:-1]
        state.refresh_view()
    elif keys.is_printable(key):
        state.query += chr(key)
        state.refresh_view()


def _handle_delete_confirm(state: AppState, key: int):
    if key == keys.KEY_CTRL_S:
        state.save()
    elif keys.key_in(key, "y"):
        index = state.selected_index()
        if index is not None:
            record = state.catalogue.remove(index)
            state.refresh_view()
            state.set_message(f"Deleted {record.name}")
        state.mode = Normal()
    elif keys.key_in(key, "n") or key == keys.KEY_ESC:
        state.mode = Normal()


def _submit_form(state: AppState, mode):
    form = mode.form
    try:
        record = validate_and_build(form)
    except ValidationError as e:
        form.error = e.message
        form.focused = e.field
        return

    if isinstance(mode, EditRecord):
        state.catalogue.replace(mode.index, record)
        state.refresh_view(keep=mode.index)
        state.set_message(f"Updated {record.name}")
    else:
        index = state.catalogue.add(record)
        state.refresh_view(keep=index)
        state.set_message(f"Added {record.name}")
    state.mode = Normal()


def _handle_form(state: AppState, key: int):
    form = state.mode.form
    if key == keys.KEY_ESC:
        state.mode = Normal()
    elif key == keys.KEY_CTRL_S:
        state.save()
    elif key == keys.KEY_TAB:
        form.next_field()
    elif key == keys.KEY_BTAB:
        form.prev_field()
    elif keys.is_enter(key):
        _submit_form(state, state.mode)
    elif keys.is_backspace(key):
        form.backspace()
    elif keys.is_printable(key):
        form.insert_char(chr(key))


def handle_key(state: AppState, key: int) -> bool:
    """Process one key event; returns False when the app should exit"""
    mode = state.mode
    if isinstance(mode, InitCatalogNegotiation):
        handle_negotiator_key(state, key)
    elif isinstance(mode, Help):
        state.mode = Normal()
    elif isinstance(mode, Filter):
        _handle_filter(state, key)
    elif isinstance(mode, ConfirmDelete):
        _handle_delete_confirm(state, key)
    elif isinstance(mode, FORM_MODES):
        _handle_form(state, key)
    else:
        _handle_normal(state, key)
    return state.running
