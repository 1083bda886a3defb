#!/usr/bin/env python3
"""
FruitCat TUI - Interactive Terminal Catalogue Browser

Browse, filter, add, edit and delete fruit records in a curses-based
two-pane view, and save the catalogue back to its JSON file.

Usage:
    python fruitcat_tui.py [catalogue] [--log FILE]
"""

import curses
import logging
import os
import sys

import config
from app_state import AppState, handle_key, startup
from fruitcat import DIMENSIONS, catalogue_stats
from modal_form import Field
from modes import (AddRecord, ConfirmDelete, EditRecord, Filter, Help,
                   InitCatalogNegotiation)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Color pairs (initialised in App.__init__)
# ---------------------------------------------------------------------------
CP_BORDER       = 1
CP_FOCUS_BORDER = 2
CP_CURSOR       = 3
CP_SUCCESS      = 4
CP_ERROR        = 5
CP_WARNING      = 6
CP_TITLE        = 7
CP_STATUS       = 8
CP_FIELD_FOCUS  = 9


def safe_addnstr(stdscr, row, col, text, maxlen, attr=0):
    """Write text clamped to the screen, ignoring curses boundary errors."""
    if row < 0 or col < 0 or maxlen <= 0:
        return
    try:
        stdscr.addnstr(row, col, text, maxlen, attr)
    except curses.error:
        pass


# ---------------------------------------------------------------------------
# Panel base class
# ---------------------------------------------------------------------------

class Panel:
    """Base class for a bordered box in the TUI."""

    def __init__(self, title=""):
        self.title = title
        self.y = self.x = self.h = self.w = 0
        self.focused = False

    def resize(self, y, x, h, w):
        self.y, self.x, self.h, self.w = y, x, h, w

    @property
    def inner_h(self):
        return max(self.h - 2, 0)

    @property
    def inner_w(self):
        return max(self.w - 2, 0)

    def draw_border(self, stdscr, title=None):
        if self.h < 2 or self.w < 2:
            return
        cp = CP_FOCUS_BORDER if self.focused else CP_BORDER
        attr = curses.color_pair(cp)
        try:
            stdscr.attron(attr)
            stdscr.addch(self.y, self.x, curses.ACS_ULCORNER)
            stdscr.hline(self.y, self.x + 1, curses.ACS_HLINE, self.w - 2)
            stdscr.addch(self.y, self.x + self.w - 1, curses.ACS_URCORNER)
            for row in range(1, self.h - 1):
                stdscr.addch(self.y + row, self.x, curses.ACS_VLINE)
                stdscr.addch(self.y + row, self.x + self.w - 1, curses.ACS_VLINE)
            stdscr.addch(self.y + self.h - 1, self.x, curses.ACS_LLCORNER)
            stdscr.hline(self.y + self.h - 1, self.x + 1, curses.ACS_HLINE, self.w - 2)
            # Writing the bottom-right cell of the screen raises in curses
            try:
                stdscr.addch(self.y + self.h - 1, self.x + self.w - 1, curses.ACS_LRCORNER)
            except curses.error:
                pass
            stdscr.attroff(attr)
        except curses.error:
            pass

        title = self.title if title is None else title
        if title:
            label = f" {title} "
            safe_addnstr(stdscr, self.y, self.x + 2, label,
                         min(len(label), self.w - 4), attr | curses.A_BOLD)

    def clear_inside(self, stdscr):
        for row in range(self.inner_h):
            safe_addnstr(stdscr, self.y + 1 + row, self.x + 1,
                         " " * self.inner_w, self.inner_w)

    def write(self, stdscr, row, text, attr=0, col=0):
        """Write one line inside the border at inner *row*."""
        if row >= self.inner_h:
            return
        safe_addnstr(stdscr, self.y + 1 + row, self.x + 1 + col, text,
                     self.inner_w - col, attr)

    def draw(self, stdscr, state):
        self.draw_border(stdscr)


# ---------------------------------------------------------------------------
# Catalogue list panel
# ---------------------------------------------------------------------------

class CatalogueListPanel(Panel):
    def __init__(self):
        super().__init__("FRUITS")
        self.focused = True

    def draw(self, stdscr, state):
        if state.is_filtering():
            title = (f"FRUITS (filtered: {len(state.filtered)}/"
                     f"{len(state.catalogue)})")
        else:
            title = f"FRUITS ({len(state.catalogue)})"
        self.draw_border(stdscr, title)

        ih, iw = self.inner_h, self.inner_w
        if ih <= 0 or iw <= 0:
            return

        # Scroll so the selection stays visible; computed per frame
        offset = max(state.selected - ih + 1, 0)
        for i in range(ih):
            pos = offset + i
            if pos >= len(state.filtered):
                break
            record = state.catalogue[state.filtered[pos]]
            if pos == state.selected:
                attr = curses.color_pair(CP_CURSOR)
                prefix = "> "
            else:
                attr = 0
                prefix = "  "
            self.write(stdscr, i, (prefix + record.name).ljust(iw), attr)

        if not state.filtered:
            msg = "(no matches)" if state.is_filtering() else "(catalogue is empty)"
            self.write(stdscr, 0, msg, curses.color_pair(CP_WARNING))

        if state.is_filtering():
            ftxt = f" /{state.query} "
            safe_addnstr(stdscr, self.y + self.h - 1, self.x + 2, ftxt,
                         min(len(ftxt), self.w - 4), curses.color_pair(CP_WARNING))


# ---------------------------------------------------------------------------
# Detail panel
# ---------------------------------------------------------------------------

class DetailPanel(Panel):
    def __init__(self):
        super().__init__("DETAILS")

    def draw(self, stdscr, state):
        record = state.selected_record()
        if record is None:
            self.draw_border(stdscr)
            msg = "No fruits available" if not len(state.catalogue) else "Select a fruit"
            self.write(stdscr, 0, msg)
            return

        self.draw_border(stdscr, f"DETAILS [{state.selected + 1}]")
        lines = [
            f"Name:   {record.name}",
            "",
            "Dimensions:",
            f"  Length: {record.length:.2f}",
            f"  Width:  {record.width:.2f}",
            f"  Height: {record.height:.2f}",
            "",
        ]
        for i, line in enumerate(lines):
            self.write(stdscr, i, line)
        self.write(stdscr, len(lines), f"Volume: {record.volume:.2f}",
                   curses.color_pair(CP_SUCCESS) | curses.A_BOLD)


# ---------------------------------------------------------------------------
# Stats panel
# ---------------------------------------------------------------------------

class StatsPanel(Panel):
    def __init__(self):
        super().__init__("CATALOGUE")

    def draw(self, stdscr, state):
        self.draw_border(stdscr)
        stats = catalogue_stats(state.catalogue.records)
        lines = [f"Records:      {stats['count']}"]
        if stats['count']:
            lines += [
                f"Total volume: {stats['total_volume']:.2f}",
                f"Largest:      {stats['largest']}",
            ]
            for i, dim in enumerate(DIMENSIONS):
                lines.append(f"  {dim.capitalize():<7} [{stats['min'][i]:.2f}, "
                             f"{stats['max'][i]:.2f}]")
        lines.append("")
        lines.append(f"File: {os.path.basename(state.catalogue.resource_name)}")
        for i, line in enumerate(lines):
            self.write(stdscr, i, line)
        if state.catalogue.dirty:
            self.write(stdscr, len(lines), "[modified]",
                       curses.color_pair(CP_WARNING) | curses.A_BOLD)


# ---------------------------------------------------------------------------
# Overlays
# ---------------------------------------------------------------------------

class Overlay(Panel):
    """A centered box drawn over the panels."""

    def __init__(self, title, h, w):
        super().__init__(title)
        self.want_h = h
        self.want_w = w
        self.focused = True

    def place(self, max_y, max_x):
        h = min(self.want_h, max_y - 1)
        w = min(self.want_w, max_x)
        self.resize(max((max_y - 1 - h) // 2, 0), max((max_x - w) // 2, 0), h, w)

    def draw(self, stdscr, state):
        self.clear_inside(stdscr)
        self.draw_border(stdscr)
        self.draw_body(stdscr, state)

    def draw_body(self, stdscr, state):
        pass


class FilterOverlay(Overlay):
    def __init__(self):
        super().__init__("SEARCH", 4, 50)

    def draw_body(self, stdscr, state):
        self.write(stdscr, 0, f"> {state.query}")
        self.write(stdscr, 1, "Enter: keep filter   Esc: clear", curses.A_DIM)


class ConfirmDeleteOverlay(Overlay):
    def __init__(self):
        super().__init__("CONFIRM DELETE", 5, 48)

    def draw_body(self, stdscr, state):
        record = state.selected_record()
        name = record.name if record is not None else "?"
        self.write(stdscr, 0, f"Delete '{name}'?")
        self.write(stdscr, 2, "[y]es  [n]o", curses.color_pair(CP_WARNING) | curses.A_BOLD)


class RecordFormOverlay(Overlay):
    def __init__(self):
        super().__init__("ADD FRUIT", 2 * len(Field) + 5, 50)

    def draw(self, stdscr, state):
        self.title = "ADD FRUIT" if isinstance(state.mode, AddRecord) else "EDIT FRUIT"
        super().draw(stdscr, state)

    def draw_body(self, stdscr, state):
        form = state.mode.form
        for field in Field:
            row = 2 * field
            focused = field == form.focused
            label_attr = curses.A_BOLD if focused else 0
            self.write(stdscr, row, f"{field.label}:", label_attr)
            value_attr = curses.color_pair(CP_FIELD_FOCUS) if focused else curses.A_UNDERLINE
            value = form.value(field) + ("_" if focused else "")
            self.write(stdscr, row, value.ljust(self.inner_w - 10), value_attr, col=9)

        row = 2 * len(Field)
        if form.error:
            self.write(stdscr, row, form.error, curses.color_pair(CP_ERROR) | curses.A_BOLD)
        self.write(stdscr, row + 2, "Tab/S-Tab: field  Enter: save  Esc: cancel",
                   curses.A_DIM)


class NegotiatorOverlay(Overlay):
    def __init__(self):
        super().__init__("NO CATALOGUE", 10, 64)

    def draw_body(self, stdscr, state):
        mode = state.mode
        self.write(stdscr, 0, mode.reason or "No catalogue found.",
                   curses.color_pair(CP_WARNING))
        self.write(stdscr, 2, "Create a default catalogue at:")
        self.write(stdscr, 3, (mode.buffer + "_").ljust(self.inner_w - 2),
                   curses.color_pair(CP_FIELD_FOCUS), col=1)
        if mode.error:
            self.write(stdscr, 5, mode.error, curses.color_pair(CP_ERROR) | curses.A_BOLD)
        self.write(stdscr, 7, "[y/Enter] create   [n/Esc] use unsaved default",
                   curses.A_DIM)


class HelpOverlay(Overlay):
    HELP_LINES = [
        "FruitCat TUI - Key Bindings",
        "",
        "  j / Down     Next fruit",
        "  k / Up       Previous fruit",
        "  /            Filter by name",
        "  a            Add a fruit",
        "  e            Edit selected fruit",
        "  d            Delete selected fruit",
        "  Ctrl+S       Save catalogue",
        "  / then Esc   Clear filter",
        "  q / Esc      Quit",
        "  ?            This help",
        "",
        "  Press any key to close",
    ]

    def __init__(self):
        super().__init__("HELP", len(self.HELP_LINES) + 2,
                         max(len(l) for l in self.HELP_LINES) + 6)

    def draw_body(self, stdscr, state):
        for i, line in enumerate(self.HELP_LINES):
            attr = curses.color_pair(CP_TITLE) | curses.A_BOLD if i == 0 else 0
            self.write(stdscr, i, line, attr, col=1)


class ErrorOverlay(Overlay):
    def __init__(self):
        super().__init__("ERROR", 5, 70)

    def draw_body(self, stdscr, state):
        self.write(stdscr, 1, state.message, curses.color_pair(CP_ERROR) | curses.A_BOLD, col=1)


# ---------------------------------------------------------------------------
# Main Application
# ---------------------------------------------------------------------------

class App:
    def __init__(self, stdscr, state: AppState):
        self.stdscr = stdscr
        self.state = state
        curses.curs_set(0)
        stdscr.timeout(-1)

        curses.start_color()
        curses.use_default_colors()
        curses.init_pair(CP_BORDER,       curses.COLOR_WHITE,  -1)
        curses.init_pair(CP_FOCUS_BORDER, curses.COLOR_CYAN,   -1)
        curses.init_pair(CP_CURSOR,       curses.COLOR_BLACK,  curses.COLOR_WHITE)
        curses.init_pair(CP_SUCCESS,      curses.COLOR_GREEN,  -1)
        curses.init_pair(CP_ERROR,        curses.COLOR_RED,    -1)
        curses.init_pair(CP_WARNING,      curses.COLOR_YELLOW, -1)
        curses.init_pair(CP_TITLE,        curses.COLOR_BLACK,  curses.COLOR_CYAN)
        curses.init_pair(CP_STATUS,       curses.COLOR_BLACK,  curses.COLOR_WHITE)
        curses.init_pair(CP_FIELD_FOCUS,  curses.COLOR_BLACK,  curses.COLOR_YELLOW)

        self.list_panel = CatalogueListPanel()
        self.detail_panel = DetailPanel()
        self.stats_panel = StatsPanel()
        self.panels = [self.list_panel, self.detail_panel, self.stats_panel]

        self.overlays = {
            Filter: FilterOverlay(),
            ConfirmDelete: ConfirmDeleteOverlay(),
            AddRecord: RecordFormOverlay(),
            InitCatalogNegotiation: NegotiatorOverlay(),
            Help: HelpOverlay(),
        }
        self.overlays[EditRecord] = self.overlays[AddRecord]
        self.error_overlay = ErrorOverlay()

    # -- layout --------------------------------------------------------------

    def _compute_layout(self):
        max_y, max_x = self.stdscr.getmaxyx()
        self._max_y = max_y
        self._max_x = max_x

        if max_y < config.MIN_ROWS or max_x < config.MIN_COLS:
            return False

        # Status bar takes the last row
        usable_h = max_y - 1
        left_w = int(max_x * config.LIST_PANE_FRACTION)
        right_w = max_x - left_w

        detail_h = min(usable_h // 2 + 2, usable_h)
        self.list_panel.resize(0, 0, usable_h, left_w)
        self.detail_panel.resize(0, left_w, detail_h, right_w)
        self.stats_panel.resize(detail_h, left_w, usable_h - detail_h, right_w)
        return True

    # -- drawing -------------------------------------------------------------

    def _status_line(self):
        state = self.state
        mode = state.mode
        if isinstance(mode, InitCatalogNegotiation):
            hints = " y/Enter:create  n/Esc:use default "
        elif isinstance(mode, Filter):
            hints = " type to filter  Enter:keep  Esc:clear  ^S:save "
        elif isinstance(mode, (AddRecord, EditRecord)):
            hints = " Tab:next field  Enter:apply  ^S:save file  Esc:cancel "
        else:
            hints = " j/k:nav  /:search  a:add  e:edit  d:delete  ^S:save  q:quit  ?:help "
        if state.message:
            hints = f" {state.message} |" + hints
        if state.catalogue.dirty:
            hints = " *" + hints
        return hints

    def _draw_status_bar(self):
        attr = curses.color_pair(CP_STATUS)
        safe_addnstr(self.stdscr, self._max_y - 1, 0,
                     self._status_line().ljust(self._max_x), self._max_x - 1, attr)

    def _draw_overlay(self):
        state = self.state
        overlay = self.overlays.get(type(state.mode))
        if overlay is None and state.message_is_error:
            overlay = self.error_overlay
        if overlay is not None:
            overlay.place(self._max_y, self._max_x)
            overlay.draw(self.stdscr, state)

    def _draw(self):
        self.stdscr.erase()

        if not self._compute_layout():
            msg = f"Please resize terminal (min {config.MIN_COLS}x{config.MIN_ROWS})"
            safe_addnstr(self.stdscr, self._max_y // 2,
                         max((self._max_x - len(msg)) // 2, 0), msg, self._max_x,
                         curses.color_pair(CP_WARNING) | curses.A_BOLD)
            self.stdscr.refresh()
            return

        for p in self.panels:
            p.draw(self.stdscr, self.state)
        self._draw_status_bar()
        self._draw_overlay()
        self.stdscr.refresh()

    # -- main loop -----------------------------------------------------------

    def run(self):
        while True:
            self._draw()
            try:
                key = self.stdscr.getch()
            except curses.error:
                continue
            if key in (-1, curses.KEY_RESIZE):
                continue
            if not handle_key(self.state, key):
                break


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def print_usage():
    print("FruitCat TUI - Interactive Terminal Catalogue Browser")
    print("\nUsage:")
    print("  fruitcat-tui [catalogue] [--log FILE]")
    print(f"\nThe catalogue defaults to {config.DEFAULT_CATALOGUE_NAME}.")


def setup_logging(log_file):
    """Log to *log_file*, or nowhere: stderr belongs to curses."""
    if log_file:
        logging.basicConfig(filename=log_file, level=logging.INFO,
                            format=config.LOG_FORMAT)
    else:
        logging.getLogger().addHandler(logging.NullHandler())


def main(argv=None):
    args = sys.argv[1:] if argv is None else argv
    filename = None
    log_file = None

    i = 0
    while i < len(args):
        arg = args[i]
        if arg in ['-h', '--help']:
            print_usage()
            return 0
        elif arg == '--log':
            i += 1
            if i >= len(args):
                print("Error: --log needs a file name")
                return 1
            log_file = args[i]
        elif filename is None:
            filename = arg
        else:
            print_usage()
            return 1
        i += 1

    setup_logging(log_file)
    state = startup(filename or config.DEFAULT_CATALOGUE_NAME)

    # Esc is reported after 25ms instead of curses' default 1s
    os.environ.setdefault("ESCDELAY", "25")
    try:
        curses.wrapper(lambda stdscr: App(stdscr, state).run())
    except Exception:
        logger.exception("Unhandled exception in FruitCat TUI")
        raise
    return 0


if __name__ == "__main__":
    sys.exit(main())
