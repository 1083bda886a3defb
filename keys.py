"""
Key codes shared by the mode handlers.

Handlers receive the raw integers returned by ``curses.getch()``; the
constants below name the ones the state machine cares about.
"""

import curses

KEY_TAB = 9
KEY_BTAB = curses.KEY_BTAB
KEY_ESC = 27
KEY_CTRL_S = 19

KEY_UP = curses.KEY_UP
KEY_DOWN = curses.KEY_DOWN
KEY_BACKSPACE = curses.KEY_BACKSPACE

ENTER_KEYS = (10, 13, curses.KEY_ENTER)
BACKSPACE_KEYS = (KEY_BACKSPACE, 127, 8)


def is_printable(key):
    """True for printable ASCII codes (space through tilde)."""
    return 32 <= key < 127


def is_enter(key):
    return key in ENTER_KEYS


def is_backspace(key):
    return key in BACKSPACE_KEYS


def key_in(key, chars):
    """True if *key* is the code of any character in *chars*."""
    return is_printable(key) and chr(key) in chars
