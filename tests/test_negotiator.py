import os
import tempfile
import unittest

import config
import keys
from app_state import handle_key, startup
from fruitcat import default_catalogue, load_catalogue
from modes import InitCatalogNegotiation, Normal


def press(state, *key_list):
    for key in key_list:
        handle_key(state, ord(key) if isinstance(key, str) else key)


class TestNegotiator(unittest.TestCase):

    def setUp(self):
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.tmpdir = tmp.name
        self.target = os.path.join(self.tmpdir, "fruits.json")
        self.state = startup(self.target)
        self.assertIsInstance(self.state.mode, InitCatalogNegotiation)

    def test_decline_uses_unsaved_default_and_stays_clean(self):
        press(self.state, "n")
        self.assertIsInstance(self.state.mode, Normal)
        self.assertTrue(len(self.state.catalogue) > 0)
        self.assertEqual(self.state.catalogue.records, default_catalogue())
        # Declining starts clean, so quitting right away needs no confirmation
        self.assertFalse(self.state.catalogue.dirty)
        self.assertFalse(os.path.exists(self.target))
        self.assertEqual(os.listdir(self.tmpdir), [])
        self.assertFalse(handle_key(self.state, ord("q")))

    def test_decline_keys(self):
        for key in ("N", keys.KEY_ESC):
            state = startup(self.target)
            press(state, key)
            self.assertIsInstance(state.mode, Normal)
            self.assertFalse(os.path.exists(self.target))

    def test_decline_then_save_writes_buffer_name(self):
        press(self.state, "n")
        self.assertEqual(self.state.catalogue.resource_name, self.target)
        press(self.state, "d", "y", keys.KEY_CTRL_S)
        self.assertEqual(len(load_catalogue(self.target)), len(default_catalogue()) - 1)

    def test_accept_creates_catalogue(self):
        for key in ("y", "Y", 10):
            target = os.path.join(self.tmpdir, f"cat{key}.dat")
            state = startup(target)
            press(state, key)
            self.assertIsInstance(state.mode, Normal)
            self.assertEqual(load_catalogue(target), default_catalogue())
            self.assertEqual(state.catalogue.resource_name, target)
            self.assertFalse(state.catalogue.dirty)

    def test_decline_with_blank_name_uses_default_name(self):
        press(self.state, *[keys.KEY_BACKSPACE] * len(self.target), " ", " ")
        self.assertEqual(self.state.mode.buffer, "  ")
        press(self.state, "n")
        self.assertIsInstance(self.state.mode, Normal)
        self.assertEqual(self.state.catalogue.resource_name,
                         config.DEFAULT_CATALOGUE_NAME)

    def test_buffer_is_editable(self):
        press(self.state, *[keys.KEY_BACKSPACE] * len("fruits.json"))
        self.assertEqual(self.state.mode.buffer, self.tmpdir + os.sep)
        press(self.state, *"data.dat")
        self.assertEqual(self.state.mode.buffer, os.path.join(self.tmpdir, "data.dat"))
        press(self.state, 10)
        self.assertIsInstance(self.state.mode, Normal)
        self.assertTrue(os.path.exists(os.path.join(self.tmpdir, "data.dat")))
        self.assertFalse(os.path.exists(self.target))

    def test_failed_create_keeps_negotiator_and_name(self):
        bad = os.path.join(self.tmpdir, "missing", "fruits.json")
        state = startup(bad)
        press(state, "y")
        self.assertIsInstance(state.mode, InitCatalogNegotiation)
        self.assertIn("Cannot write", state.mode.error)
        self.assertEqual(state.mode.buffer, bad)
        self.assertEqual(len(state.catalogue), 0)

        # Typing clears the error; the buffer can then be fixed
        press(state, keys.KEY_BACKSPACE)
        self.assertIsNone(state.mode.error)

    def test_empty_name_is_rejected(self):
        press(self.state, *[keys.KEY_BACKSPACE] * (len(self.target) + 3))
        self.assertEqual(self.state.mode.buffer, "")
        press(self.state, "y")
        self.assertIsInstance(self.state.mode, InitCatalogNegotiation)
        self.assertEqual(self.state.mode.error, "Catalogue name cannot be empty")
        self.assertEqual(os.listdir(self.tmpdir), [])

    def test_other_modes_keys_do_not_apply(self):
        press(self.state, "q")
        self.assertTrue(self.state.running)
        self.assertIsInstance(self.state.mode, InitCatalogNegotiation)
        self.assertTrue(self.state.mode.buffer.endswith("q"))


if __name__ == '__main__':
    unittest.main()
