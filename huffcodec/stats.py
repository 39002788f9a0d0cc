"""
stats.py

Compression statistics of a code table against the frequencies it was built for.
"""


import numpy as np
from typing import Dict

from .models import Symbol, FrequencyTable


class CompressionStats:
    """
    Summary of how well a code table fits a frequency distribution.
    """

    def __init__(
        self,
        total_symbols: int,
        distinct_symbols: int,
        encoded_bits: int,
        average_code_length: float,
        entropy: float,
    ) -> None:
        self.total_symbols = total_symbols
        self.distinct_symbols = distinct_symbols
        self.encoded_bits = encoded_bits
        self.average_code_length = average_code_length
        self.entropy = entropy

    @property
    def efficiency(self) -> float:
        """Entropy over average code length; 1.0 means no redundancy."""
        if self.average_code_length == 0:
            return 0.0
        return self.entropy / self.average_code_length

    @property
    def payload_bytes(self) -> int:
        return (self.encoded_bits + 7) // 8

    @staticmethod
    def from_table(frequencies: FrequencyTable, code_table: Dict[Symbol, str]) -> 'CompressionStats':
        """
        Compute statistics for a frequency table and the codes assigned to it.

        Args:
            frequencies (FrequencyTable): Symbol counts.
            code_table (Dict[Symbol, str]): Code of every symbol in the table.

        Returns:
            CompressionStats: The computed statistics.
        """
        if frequencies.is_empty():
            raise ValueError("Frequency table must not be empty")
        symbols = frequencies.symbols()
        missing = [symbol for symbol in symbols if symbol not in code_table]
        if missing:
            raise ValueError(f"Code table has no code for symbols: {missing}")

        counts = np.array([frequencies.get_frequency(s) for s in symbols], dtype=np.int64)
        lengths = np.array([len(code_table[s]) for s in symbols], dtype=np.int64)
        total = int(np.sum(counts))
        probs = counts / total

        encoded_bits = int(np.dot(counts, lengths))
        average = float(np.dot(probs, lengths))
        entropy = float(-np.sum(probs * np.log2(probs)))
        # -0.0 for a single symbol
        entropy = abs(entropy)

        return CompressionStats(total, len(symbols), encoded_bits, average, entropy)

    def __str__(self) -> str:
        return (
            f"Symbols: {self.total_symbols}, Distinct: {self.distinct_symbols}, "
            f"Encoded bits: {self.encoded_bits}, Average code length: {self.average_code_length:.4f}, "
            f"Entropy: {self.entropy:.4f}, Efficiency: {self.efficiency:.4f}"
        )

    def __repr__(self) -> str:
        return self.__str__()


def compression_ratio(original_size: int, compressed_size: int) -> float:
    """
    Ratio of original size to compressed size.

    Args:
        original_size (int): Size of the uncompressed data in bytes.
        compressed_size (int): Size of the compressed data in bytes.

    Returns:
        float: original_size / compressed_size.
    """
    if compressed_size <= 0:
        raise ValueError("Compressed size must be greater than 0")
    if original_size < 0:
        raise ValueError("Original size must be non-negative")
    return original_size / compressed_size
