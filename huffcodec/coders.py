"""
coders.py

Bit streams and the Huffman coders built on top of them.

"""


import abc
from io import BytesIO
from typing import Dict, IO, List, Optional, Tuple

from .exceptions import EmptyInputError, InvalidBitError, MalformedArtifactError, TruncatedArtifactError
from .logger import Logger, CodingLog, CodingProgressStep, SymbolCodeLog, CompressionSummaryLog
from .models import Symbol, FrequencyTable
from .settings import DEFAULT_COUNT_BYTES, DEFAULT_LENGTH_BYTES
from .stats import CompressionStats
from .tree import HuffmanTree, build_tree, generate_code_table
from .validators import validate_type, validate_positive_int


class BitOutputStream:
    """
    A helper class to write bits to an underlying binary stream.
    """

    def __init__(self, out: IO[bytes]) -> None:
        """
        Initialize with an underlying output stream (e.g., a file opened in binary mode).

        Args:
            out (IO[bytes]): The output stream.
        """
        self.out: IO[bytes] = out
        self.current_byte: int = 0
        self.num_bits_filled: int = 0
        self.bits_written: int = 0

    def write(self, bit: int) -> None:
        """
        Write a single bit (0 or 1) to the stream.

        Args:
            bit (int): The bit to write.

        Raises:
            InvalidBitError: If the bit is not 0 or 1.
        """
        if not isinstance(bit, int) or isinstance(bit, bool) or bit not in (0, 1):
            raise InvalidBitError(f"Bit must be 0 or 1, got {bit!r}")
        self.current_byte = (self.current_byte << 1) | bit
        self.num_bits_filled += 1
        self.bits_written += 1
        if self.num_bits_filled == 8:
            self.flush_current_byte()

    def write_bits(self, value: int, width: int) -> None:
        """
        Write the lowest ``width`` bits of value, most significant first.
        """
        if value < 0 or value >= (1 << width):
            raise ValueError(f"Value {value} does not fit in {width} bits")
        for shift in range(width - 1, -1, -1):
            self.write((value >> shift) & 1)

    def flush_current_byte(self) -> None:
        """
        Write the current byte to the underlying stream and reset the buffer.
        """
        self.out.write(bytes((self.current_byte,)))
        self.current_byte = 0
        self.num_bits_filled = 0

    def finish(self) -> None:
        """
        Flush any remaining bits to the stream by padding with zeros.
        """
        if self.num_bits_filled > 0:
            self.current_byte = self.current_byte << (8 - self.num_bits_filled)
            self.flush_current_byte()
        self.out.flush()

    def close(self) -> None:
        """
        Finish writing and close the underlying stream.
        """
        try:
            self.finish()
        finally:
            self.out.close()

    def __enter__(self) -> 'BitOutputStream':
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()


class BitInputStream:
    """
    A helper class to read bits from an underlying binary stream.
    """

    def __init__(self, inp: IO[bytes]) -> None:
        """
        Initialize with an underlying input stream (e.g., a file opened in binary mode).

        Args:
            inp (IO[bytes]): The input stream.
        """
        self.inp: IO[bytes] = inp
        self.current_byte: int = 0
        self.num_bits_remaining: int = 0

    def read(self) -> int:
        """
        Read a single bit from the stream.

        Returns:
            int: 0 or 1 for a valid bit, or -1 if no more bits are available.
        """
        if self.num_bits_remaining == 0:
            byte = self.inp.read(1)
            if len(byte) == 0:
                return -1
            self.current_byte = byte[0]
            self.num_bits_remaining = 8
        self.num_bits_remaining -= 1
        return (self.current_byte >> self.num_bits_remaining) & 1

    def read_bits(self, width: int) -> int:
        """
        Read ``width`` bits as an unsigned integer, most significant first.

        Returns:
            int: The value read, or -1 if the stream ended first.
        """
        value = 0
        for _ in range(width):
            bit = self.read()
            if bit == -1:
                return -1
            value = (value << 1) | bit
        return value

    def close(self) -> None:
        """
        Close the underlying input stream.
        """
        self.inp.close()

    def __enter__(self) -> 'BitInputStream':
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()


class HuffmanCoderSettings:
    """
    Settings for the Huffman coders. The decoder must use the same settings
    as the encoder, they are not stored in the encoded data.
    """

    def __init__(self, count_bytes: int = DEFAULT_COUNT_BYTES, length_bytes: int = DEFAULT_LENGTH_BYTES) -> None:
        validate_positive_int(count_bytes, "count_bytes")
        validate_positive_int(length_bytes, "length_bytes")
        self.count_bytes: int = count_bytes
        self.length_bytes: int = length_bytes


class HuffmanCodec:
    """ Shared Huffman coding logic. """

    def __init__(self, settings: HuffmanCoderSettings, logger: Optional[Logger] = None) -> None:
        self.count_bytes: int = settings.count_bytes
        self.length_bytes: int = settings.length_bytes
        self.logger: Optional[Logger] = logger

    def count_frequencies(self, symbols: List[Symbol]) -> FrequencyTable:
        """
        Count the occurrences of every symbol.

        Args:
            symbols (List[Symbol]): The symbols to count.

        Returns:
            FrequencyTable: Counts in order of first occurrence, empty for empty input.
        """
        return FrequencyTable.from_symbols(symbols)

    def build_code_table(self, tree: HuffmanTree, frequencies: FrequencyTable) -> Dict[Symbol, str]:
        """
        Generate the code table of a tree and log the code given to each symbol.
        """
        codes = generate_code_table(tree)
        if self.logger is not None:
            for symbol, count in frequencies.items():
                self.logger.log(SymbolCodeLog(symbol, count, codes[symbol]))
            self.logger.log(CompressionSummaryLog(CompressionStats.from_table(frequencies, codes)))
        return codes

    def prepare(self, symbols: List[Symbol]) -> Tuple[FrequencyTable, HuffmanTree, Dict[Symbol, str]]:
        """
        Count, build the tree and generate the code table for the symbols.

        Raises:
            EmptyInputError: If there are no symbols.
        """
        if symbols is None or not isinstance(symbols, list):
            raise ValueError("Symbols must be a list of Symbol objects")
        if len(symbols) == 0:
            raise EmptyInputError("Nothing to compress: no symbols given")
        if len(symbols) >= 1 << (8 * self.count_bytes):
            raise ValueError(f"Symbol count {len(symbols)} does not fit in {self.count_bytes} bytes")
        frequencies = self.count_frequencies(symbols)
        tree = build_tree(frequencies, self.logger)
        codes = self.build_code_table(tree, frequencies)
        return frequencies, tree, codes

    def encode_symbols(self, symbols: List[Symbol], codes: Dict[Symbol, str]) -> bytes:
        """
        Pack the code of every symbol, in input order, into bytes.

        Args:
            symbols (List[Symbol]): The symbols to encode.
            codes (Dict[Symbol, str]): The code table.

        Returns:
            bytes: The payload, zero padded in the last byte.
        """
        out_buffer = BytesIO()
        bit_out = BitOutputStream(out_buffer)
        for symbol in symbols:
            code = codes.get(symbol)
            if code is None:
                raise ValueError(f"No code for symbol {symbol}")
            for bit in code:
                bit_out.write(1 if bit == "1" else 0)
            if self.logger is not None:
                self.logger.log(CodingLog(len(symbol.data) * 8, len(code)))
                self.logger.log(CodingProgressStep("Encoding symbols", len(symbols)))
        bit_out.finish()
        return out_buffer.getvalue()

    def decode_symbols(self, bit_in: BitInputStream, num_symbols: int, tree: HuffmanTree) -> List[Symbol]:
        """
        Walk the tree bit by bit until num_symbols symbols are decoded.

        Bits left in the stream afterwards (the padding of the last byte) are
        never read.

        Args:
            bit_in (BitInputStream): The payload bits.
            num_symbols (int): Number of symbols to decode.
            tree (HuffmanTree): The tree the payload was encoded with.

        Returns:
            List[Symbol]: The decoded symbols.

        Raises:
            TruncatedArtifactError: If the bits run out first.
            MalformedArtifactError: If a bit leads nowhere in the tree.
        """
        validate_type(tree, "tree", HuffmanTree)
        root = tree.get_root()
        decoded: List[Symbol] = []
        node = root
        while len(decoded) < num_symbols:
            bit = bit_in.read()
            if bit == -1:
                raise TruncatedArtifactError(
                    f"Data ended after {len(decoded)} of {num_symbols} symbols"
                )
            if root.is_leaf:
                # single symbol trees code every symbol as one 0 bit
                if bit != 0:
                    raise MalformedArtifactError("Unexpected 1 bit for a single symbol tree")
                decoded.append(root.symbol)
            else:
                node = tree.nodes[node.left if bit == 0 else node.right]
                if node.is_leaf:
                    decoded.append(node.symbol)
                    node = root
                else:
                    continue
            if self.logger is not None:
                self.logger.log(CodingProgressStep("Decoding symbols", num_symbols))
        return decoded

    def serialize_tree(self, tree: HuffmanTree) -> bytes:
        """
        Describe the tree shape in pre-order: a 0 bit for an internal node, a 1
        bit followed by the 8 bit symbol length and the symbol bytes for a leaf.
        The description is zero padded to a whole byte.
        """
        out_buffer = BytesIO()
        bit_out = BitOutputStream(out_buffer)
        for _, node in tree.preorder():
            if node.is_leaf:
                bit_out.write(1)
                bit_out.write_bits(len(node.symbol.data), 8)
                for byte in node.symbol.data:
                    bit_out.write_bits(byte, 8)
            else:
                bit_out.write(0)
        bit_out.finish()
        return out_buffer.getvalue()

    def deserialize_tree(self, data: bytes) -> HuffmanTree:
        """
        Rebuild a tree from the output of serialize_tree.

        Raises:
            MalformedArtifactError: If the description is empty, incomplete,
                followed by anything but padding, or repeats a symbol.
        """
        if len(data) == 0:
            raise MalformedArtifactError("Tree description is missing")
        bit_in = BitInputStream(BytesIO(data))
        tree = HuffmanTree()
        # children collected so far for every internal node still open
        pending: List[List[int]] = []
        seen = set()

        while tree.root is None:
            marker = bit_in.read()
            if marker == -1:
                raise MalformedArtifactError("Tree description ended before the tree was complete")
            if marker == 0:
                pending.append([])
                continue

            length = bit_in.read_bits(8)
            if length == -1:
                raise MalformedArtifactError("Tree description ended inside a leaf")
            if length == 0:
                raise MalformedArtifactError("Leaf symbol must not be empty")
            symbol_bytes = bytearray()
            for _ in range(length):
                byte = bit_in.read_bits(8)
                if byte == -1:
                    raise MalformedArtifactError("Tree description ended inside a leaf")
                symbol_bytes.append(byte)
            symbol = Symbol(bytes(symbol_bytes))
            if symbol in seen:
                raise MalformedArtifactError(f"Symbol {symbol} appears twice in the tree")
            seen.add(symbol)

            completed = tree.add_leaf(symbol)
            while True:
                if not pending:
                    tree.root = completed
                    break
                pending[-1].append(completed)
                if len(pending[-1]) < 2:
                    break
                left, right = pending.pop()
                completed = tree.add_internal(left, right)

        if bit_in.current_byte & ((1 << bit_in.num_bits_remaining) - 1) or bit_in.inp.read(1):
            raise MalformedArtifactError("Unexpected data after the tree description")
        tree.validate()
        return tree

    def serialize_frequencies(self, frequencies: FrequencyTable) -> bytes:
        """
        Write the table as an entry count followed by, for every symbol in
        table order, its length (1 byte), its bytes and its count.
        """
        out = bytearray(self.encode_int(frequencies.get_size(), self.length_bytes, "Entry count"))
        for symbol, count in frequencies.items():
            out.append(len(symbol.data))
            out += symbol.data
            out += self.encode_int(count, self.count_bytes, "Frequency")
        return bytes(out)

    def deserialize_frequencies(self, data: bytes, offset: int = 0) -> Tuple[FrequencyTable, int]:
        """
        Read a table written by serialize_frequencies.

        Returns:
            Tuple[FrequencyTable, int]: The table and the offset right after it.

        Raises:
            MalformedArtifactError: If the table is incomplete, empty or inconsistent.
        """
        entries, offset = self.decode_int(data, offset, self.length_bytes, "entry count")
        if entries == 0:
            raise MalformedArtifactError("Frequency table is empty")
        frequencies = FrequencyTable()
        for _ in range(entries):
            if len(data) < offset + 1:
                raise MalformedArtifactError("Frequency table is incomplete")
            length = data[offset]
            offset += 1
            if length == 0 or len(data) < offset + length:
                raise MalformedArtifactError("Frequency table has an invalid symbol entry")
            symbol = Symbol(data[offset:offset + length])
            offset += length
            count, offset = self.decode_int(data, offset, self.count_bytes, "frequency")
            if count == 0:
                raise MalformedArtifactError(f"Symbol {symbol} has a zero frequency")
            if frequencies.contains(symbol):
                raise MalformedArtifactError(f"Symbol {symbol} appears twice in the frequency table")
            frequencies.add(symbol, count)
        return frequencies, offset

    def encode_int(self, value: int, width: int, name: str) -> bytes:
        if value < 0 or value >= 1 << (8 * width):
            raise ValueError(f"{name} {value} does not fit in {width} bytes")
        return value.to_bytes(width, byteorder="big")

    def decode_int(self, data: bytes, offset: int, width: int, name: str) -> Tuple[int, int]:
        if len(data) < offset + width:
            raise MalformedArtifactError(f"Data is too short for the {name}")
        return int.from_bytes(data[offset:offset + width], byteorder="big"), offset + width


class CoderBase(abc.ABC):
    """
    Abstract base class for coders.
    """

    def __init__(self, settings: Optional[HuffmanCoderSettings] = None, logger: Optional[Logger] = None) -> None:
        if settings is None:
            settings = HuffmanCoderSettings()
        validate_type(settings, "settings", HuffmanCoderSettings)
        self.settings: HuffmanCoderSettings = settings
        self.codec: HuffmanCodec = HuffmanCodec(settings, logger)
        self.logger: Optional[Logger] = logger

    @abc.abstractmethod
    def encode(self, symbols: List[Symbol]) -> bytes:
        """
        Encode a sequence of symbols into a self describing byte string.

        Args:
            symbols (List[Symbol]): The list of symbols to be encoded.

        Returns:
            bytes: The encoded data.
        """
        pass

    @abc.abstractmethod
    def decode(self, data: bytes) -> List[Symbol]:
        """
        Decode a byte string produced by encode back into symbols.

        Args:
            data (bytes): The encoded data.

        Returns:
            List[Symbol]: The decoded list of symbols.
        """
        pass

    @abc.abstractmethod
    def get_coder_code(self) -> int:
        """
        Get the code for the coder.

        Returns:
            int: The coder code.
        """
        pass

    def encode_to_stream(self, symbols: List[Symbol], out: IO[bytes]) -> None:
        """
        Encode the symbols and write the result to a binary stream.
        Nothing is written if encoding fails.
        """
        encoded = self.encode(symbols)
        out.write(encoded)

    def decode_from_stream(self, inp: IO[bytes]) -> List[Symbol]:
        """
        Read a binary stream to its end and decode it.
        """
        return self.decode(inp.read())

    def _read_count(self, data: bytes) -> Tuple[int, int]:
        validate_type(data, "data", bytes)
        count, offset = self.codec.decode_int(data, 0, self.settings.count_bytes, "symbol count")
        if count == 0:
            raise MalformedArtifactError("Encoded data declares zero symbols")
        return count, offset

    def _decode_payload(self, payload: bytes, count: int, tree: HuffmanTree) -> List[Symbol]:
        with BitInputStream(BytesIO(payload)) as bit_in:
            return self.codec.decode_symbols(bit_in, count, tree)


class HuffmanTreeCoder(CoderBase):
    """
    Huffman coder storing the tree shape in front of the payload.

    Layout: symbol count | tree description length | tree description | payload
    """

    coder_code: int = 1

    def encode(self, symbols: List[Symbol]) -> bytes:
        _, tree, codes = self.codec.prepare(symbols)
        tree_bytes = self.codec.serialize_tree(tree)
        header = (
            self.codec.encode_int(len(symbols), self.settings.count_bytes, "Symbol count")
            + self.codec.encode_int(len(tree_bytes), self.settings.length_bytes, "Tree length")
            + tree_bytes
        )
        return header + self.codec.encode_symbols(symbols, codes)

    def decode(self, data: bytes) -> List[Symbol]:
        count, offset = self._read_count(data)
        tree_length, offset = self.codec.decode_int(data, offset, self.settings.length_bytes, "tree length")
        if len(data) < offset + tree_length:
            raise MalformedArtifactError("Tree description is incomplete")
        tree = self.codec.deserialize_tree(data[offset:offset + tree_length])
        return self._decode_payload(data[offset + tree_length:], count, tree)

    def get_coder_code(self) -> int:
        return self.coder_code


class HuffmanFrequencyCoder(CoderBase):
    """
    Huffman coder storing the frequency table in front of the payload. The
    decoder rebuilds the same tree since tree building is deterministic.

    Layout: symbol count | frequency table | payload
    """

    coder_code: int = 2

    def encode(self, symbols: List[Symbol]) -> bytes:
        frequencies, _, codes = self.codec.prepare(symbols)
        header = (
            self.codec.encode_int(len(symbols), self.settings.count_bytes, "Symbol count")
            + self.codec.serialize_frequencies(frequencies)
        )
        return header + self.codec.encode_symbols(symbols, codes)

    def decode(self, data: bytes) -> List[Symbol]:
        count, offset = self._read_count(data)
        frequencies, offset = self.codec.deserialize_frequencies(data, offset)
        if frequencies.total() != count:
            raise MalformedArtifactError(
                f"Frequencies add up to {frequencies.total()} but {count} symbols are declared"
            )
        tree = build_tree(frequencies)
        return self._decode_payload(data[offset:], count, tree)

    def get_coder_code(self) -> int:
        return self.coder_code


def get_coder(code: int, logger: Optional[Logger] = None) -> CoderBase:
    """
    Retrieve a coder instance based on the given code.

    Args:
        code (int): The coder code (1 for tree header, 2 for frequency header).
        logger (Optional[Logger]): Logger instance for logging.

    Returns:
        CoderBase: An instance of a coder with default settings.

    Raises:
        ValueError: If the coder code is unknown.
    """
    if code == HuffmanTreeCoder.coder_code:
        return HuffmanTreeCoder(logger=logger)
    elif code == HuffmanFrequencyCoder.coder_code:
        return HuffmanFrequencyCoder(logger=logger)
    else:
        raise ValueError("Unknown coder code: " + str(code))
