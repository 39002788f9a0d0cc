import abc
from typing import List, Optional

from .models import Symbol
from .logger import Logger, PreprocessingProgressStep


class BasePreprocessor(abc.ABC):
    @property
    @abc.abstractmethod
    def code(self) -> int:
        """Return the unique identification code for the preprocessor."""
        pass

    @abc.abstractmethod
    def convert_to_symbols(self, data: bytes) -> List[Symbol]:
        """
        Convert raw data (bytes) to a list of symbols.

        Args:
            data (bytes): The input data as bytes.

        Returns:
            List[Symbol]: The symbols in data order.
        """
        pass

    def convert_from_symbols(self, symbols: List[Symbol]) -> bytes:
        """
        Convert a list of symbols back to data in bytes.

        Args:
            symbols (List[Symbol]): The list of symbols.

        Returns:
            bytes: The reconstructed data.
        """
        return b''.join(symbol.data for symbol in symbols)


class BytePreprocessor(BasePreprocessor):
    """
    Byte Preprocessor: Each byte of data is assigned to a symbol.
    """
    def __init__(self, logger: Optional[Logger] = None) -> None:
        self.logger: Optional[Logger] = logger

    @property
    def code(self) -> int:
        return 1

    def convert_to_symbols(self, data: bytes) -> List[Symbol]:
        if not isinstance(data, bytes):
            raise ValueError("Data should be in form of bytes")

        symbols: List[Symbol] = []
        cache = {}
        for b in data:
            if b not in cache:
                cache[b] = Symbol(bytes([b]))
            symbols.append(cache[b])
            if self.logger is not None:
                self.logger.log(PreprocessingProgressStep("Converting data to symbols", len(data)))

        return symbols


class Utf8CharPreprocessor(BasePreprocessor):
    """
    UTF-8 Character Preprocessor: Each character of the text is assigned to a
    symbol holding its UTF-8 encoding.
    """
    def __init__(self, logger: Optional[Logger] = None) -> None:
        self.logger: Optional[Logger] = logger

    @property
    def code(self) -> int:
        return 2

    def convert_to_symbols(self, data: bytes) -> List[Symbol]:
        if not isinstance(data, bytes):
            raise ValueError("Data should be in form of bytes")

        try:
            text = data.decode('utf-8')
        except UnicodeDecodeError:
            raise ValueError("Data should be valid UTF-8 text")

        symbols: List[Symbol] = []
        cache = {}
        for char in text:
            if char not in cache:
                cache[char] = Symbol(char.encode('utf-8'))
            symbols.append(cache[char])
            if self.logger is not None:
                self.logger.log(PreprocessingProgressStep("Converting text to symbols", len(text)))

        return symbols

    def convert_from_symbols(self, symbols: List[Symbol]) -> bytes:
        data = super().convert_from_symbols(symbols)
        try:
            data.decode('utf-8')
        except UnicodeDecodeError:
            raise ValueError("Symbols do not form valid UTF-8 text")
        return data


def get_preprocessor(code: int, logger: Optional[Logger] = None) -> BasePreprocessor:
    """
    Retrieve a preprocessor instance based on the given code.

    Args:
        code (int): The preprocessor code.
        logger (Optional[Logger]): Logger instance for logging.

    Returns:
        BasePreprocessor: An instance of a preprocessor.

    Raises:
        ValueError: If the preprocessor code is not supported.
    """
    if code == 1:
        return BytePreprocessor(logger)
    elif code == 2:
        return Utf8CharPreprocessor(logger)
    else:
        raise ValueError("Preprocessor code not supported")
