import math
import unittest

from huffcodec.models import Symbol, FrequencyTable
from huffcodec.stats import CompressionStats, compression_ratio
from huffcodec.tree import build_tree, generate_code_table


def stats_for(data):
    table = FrequencyTable.from_symbols([Symbol(bytes([b])) for b in data])
    return CompressionStats.from_table(table, generate_code_table(build_tree(table)))


class TestCompressionStats(unittest.TestCase):
    def test_example(self):
        stats = stats_for(b"aaabbc")
        expected_entropy = -sum(p * math.log2(p) for p in (3 / 6, 2 / 6, 1 / 6))
        self.assertEqual(stats.total_symbols, 6)
        self.assertEqual(stats.distinct_symbols, 3)
        self.assertEqual(stats.encoded_bits, 9)
        self.assertEqual(stats.payload_bytes, 2)
        self.assertAlmostEqual(stats.average_code_length, 1.5)
        self.assertAlmostEqual(stats.entropy, expected_entropy, places=6)
        self.assertAlmostEqual(stats.efficiency, expected_entropy / 1.5, places=6)

    def test_single_symbol(self):
        stats = stats_for(b"zzzz")
        self.assertEqual(stats.encoded_bits, 4)
        self.assertEqual(stats.entropy, 0.0)
        self.assertEqual(stats.efficiency, 0.0)

    def test_uniform_is_fully_efficient(self):
        stats = stats_for(bytes(range(8)))
        self.assertAlmostEqual(stats.entropy, 3.0)
        self.assertAlmostEqual(stats.average_code_length, 3.0)
        self.assertAlmostEqual(stats.efficiency, 1.0)

    def test_average_bounded_by_entropy(self):
        stats = stats_for(b"she sells sea shells by the sea shore")
        self.assertGreaterEqual(stats.average_code_length, stats.entropy)
        self.assertLess(stats.average_code_length, stats.entropy + 1)

    def test_invalid(self):
        with self.assertRaises(ValueError):
            CompressionStats.from_table(FrequencyTable(), {})
        table = FrequencyTable.from_symbols([Symbol(b'a')])
        with self.assertRaises(ValueError):
            CompressionStats.from_table(table, {})

    def test_str(self):
        self.assertIn("Encoded bits: 9", str(stats_for(b"aaabbc")))


class TestCompressionRatio(unittest.TestCase):
    def test_ratio(self):
        self.assertEqual(compression_ratio(100, 25), 4.0)
        with self.assertRaises(ValueError):
            compression_ratio(100, 0)
        with self.assertRaises(ValueError):
            compression_ratio(-1, 10)

if __name__ == '__main__':
    unittest.main()
