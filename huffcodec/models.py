"""
models.py

The shared objects used in huffcodec.

"""


from typing import Dict, Iterable, Iterator, List, Tuple

from .settings import MAX_SYMBOL_SIZE


class Symbol:
    """
    Represents a single symbol in the data.
    """
    def __init__(self, data: bytes) -> None:
        if not isinstance(data, bytes):
            raise ValueError("Data must be of type bytes")
        if len(data) == 0:
            raise ValueError("Symbol data must not be empty")
        if len(data) > MAX_SYMBOL_SIZE:
            raise ValueError(f"Symbol data must be at most {MAX_SYMBOL_SIZE} bytes")
        self.data: bytes = data

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Symbol):
            return self.data == other.data
        return False

    def __str__(self) -> str:
        return str(self.data)

    def __repr__(self) -> str:
        return str(self.data)

    def __hash__(self) -> int:
        return hash(self.data)


class SymbolFrequency:
    """
    Represents a symbol together with its frequency.
    """
    def __init__(self, symbol: Symbol, frequency: int) -> None:
        self.symbol: Symbol = symbol
        self.frequency: int = frequency

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SymbolFrequency):
            return self.symbol == other.symbol and self.frequency == other.frequency
        return False

    def __str__(self) -> str:
        return f"[{self.symbol}, {self.frequency}]"

    def __repr__(self) -> str:
        return f"[{self.symbol}, {self.frequency}]"


class FrequencyTable:
    """
    Occurrence counts of the symbols found in the data.

    Symbols are kept in the order they were first seen. The tree builder uses
    that order to break ties between equal frequencies, so two tables built
    from the same input always produce the same tree.
    """
    def __init__(self) -> None:
        self._counts: Dict[Symbol, int] = {}

    def add(self, symbol: Symbol, count: int = 1) -> None:
        """
        Add occurrences of a symbol.

        Args:
            symbol (Symbol): The symbol seen.
            count (int): How many occurrences to add.
        """
        if not isinstance(symbol, Symbol):
            raise ValueError("Symbol must be an instance of Symbol")
        if not isinstance(count, int) or count < 1:
            raise ValueError("Count must be a positive integer")
        self._counts[symbol] = self._counts.get(symbol, 0) + count

    def add_multiple(self, symbols: Iterable[Symbol]) -> None:
        """
        Add one occurrence for every symbol in the iterable.
        """
        for symbol in symbols:
            self.add(symbol)

    @classmethod
    def from_symbols(cls, symbols: Iterable[Symbol]) -> 'FrequencyTable':
        table = cls()
        table.add_multiple(symbols)
        return table

    def get_frequency(self, symbol: Symbol) -> int:
        """
        Get the count of a symbol, 0 when it never occurred.
        """
        return self._counts.get(symbol, 0)

    def contains(self, symbol: Symbol) -> bool:
        return symbol in self._counts

    def get_size(self) -> int:
        """
        Get the number of distinct symbols.
        """
        return len(self._counts)

    def total(self) -> int:
        """
        Get the sum of all counts, i.e. the length of the counted input.
        """
        return sum(self._counts.values())

    def is_empty(self) -> bool:
        return len(self._counts) == 0

    def symbols(self) -> List[Symbol]:
        return list(self._counts)

    def items(self) -> List[Tuple[Symbol, int]]:
        return list(self._counts.items())

    def to_symbol_frequencies(self) -> List[SymbolFrequency]:
        return [SymbolFrequency(symbol, count) for symbol, count in self._counts.items()]

    def __iter__(self) -> Iterator[Symbol]:
        return iter(self._counts)

    def __len__(self) -> int:
        return len(self._counts)

    def __eq__(self, other: object) -> bool:
        """
        Tables are equal when they hold the same counts in the same order.
        """
        if not isinstance(other, FrequencyTable):
            return False
        return list(self._counts.items()) == list(other._counts.items())

    def __repr__(self) -> str:
        return f"FrequencyTable({self.to_symbol_frequencies()})"
