import unittest

from filter_engine import clamp_selection, filter_indices
from fruitcat import Record, default_catalogue


def records(*names):
    return [Record(n, 1.0, 1.0, 1.0) for n in names]


class TestFilterIndices(unittest.TestCase):

    def test_empty_query_returns_everything_in_order(self):
        cat = default_catalogue()
        self.assertEqual(filter_indices(cat, ""), list(range(len(cat))))

    def test_matches_are_ordered_and_contain_query(self):
        cat = default_catalogue() + records("BANANA split", "Plantain", "kiwano")
        for query in ["an", "AN", "a", "e", "melon", "zzz", "n", " "]:
            result = filter_indices(cat, query)
            self.assertEqual(result, sorted(set(result)), query)
            for i in result:
                self.assertIn(query.lower(), cat[i].name.lower())
            missed = [i for i in range(len(cat)) if i not in result]
            for i in missed:
                self.assertNotIn(query.lower(), cat[i].name.lower())

    def test_case_insensitive(self):
        cat = records("Banana", "MANGO", "cherry")
        self.assertEqual(filter_indices(cat, "aN"), [0, 1])

    def test_empty_catalogue(self):
        self.assertEqual(filter_indices([], "an"), [])
        self.assertEqual(filter_indices([], ""), [])

    def test_returns_plain_ints(self):
        result = filter_indices(records("Fig", "Figs"), "fig")
        self.assertTrue(all(type(i) is int for i in result))


class TestClampSelection(unittest.TestCase):

    def test_clamp(self):
        self.assertEqual(clamp_selection(5, 3), 2)
        self.assertEqual(clamp_selection(-1, 3), 0)
        self.assertEqual(clamp_selection(1, 3), 1)
        self.assertEqual(clamp_selection(4, 0), 0)


if __name__ == '__main__':
    unittest.main()
