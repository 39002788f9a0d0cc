"""
huffcodec: A Python library for lossless Huffman coding compression and decompression.
"""

from .codecs import (
    CompressedArtifact,
    CompressedArtifactFile,
    Codec,
    CodecFile,
    ByteCodec,
    ByteCodecFile,
    TextCodec,
)

from .coders import (
    CoderBase,
    HuffmanCoderSettings,
    BitOutputStream,
    BitInputStream,
    HuffmanCodec,
    HuffmanTreeCoder,
    HuffmanFrequencyCoder,
    get_coder,
)

from .models import (
    Symbol,
    SymbolFrequency,
    FrequencyTable,
)

from .tree import (
    HuffmanNode,
    HuffmanTree,
    build_tree,
    generate_code_table,
)

from .preprocessors import (
    BasePreprocessor,
    BytePreprocessor,
    Utf8CharPreprocessor,
    get_preprocessor,
)

from .stats import CompressionStats, compression_ratio

from .exceptions import (
    HuffmanCodecError,
    EmptyInputError,
    InvalidBitError,
    MalformedArtifactError,
    TruncatedArtifactError,
)

from .logger import (
    Logger,
    Log,
    LogLevel,
    CodingLog,
    SymbolCodeLog,
    TreeBuildLog,
    CompressionSummaryLog,
    PreprocessingProgressStep,
    CodingProgressStep,
)

# Validators
from .validators import *

__all__ = [

    "CompressedArtifact",
    "CompressedArtifactFile",
    "Codec",
    "CodecFile",
    "ByteCodec",
    "ByteCodecFile",
    "TextCodec",

    "CoderBase",
    "HuffmanCoderSettings",
    "BitOutputStream",
    "BitInputStream",
    "HuffmanCodec",
    "HuffmanTreeCoder",
    "HuffmanFrequencyCoder",
    "get_coder",

    "Symbol",
    "SymbolFrequency",
    "FrequencyTable",

    "HuffmanNode",
    "HuffmanTree",
    "build_tree",
    "generate_code_table",

    "BasePreprocessor",
    "BytePreprocessor",
    "Utf8CharPreprocessor",
    "get_preprocessor",

    "CompressionStats",
    "compression_ratio",

    "HuffmanCodecError",
    "EmptyInputError",
    "InvalidBitError",
    "MalformedArtifactError",
    "TruncatedArtifactError",

    "Logger",
    "Log",
    "LogLevel",
    "CodingLog",
    "SymbolCodeLog",
    "TreeBuildLog",
    "CompressionSummaryLog",
    "PreprocessingProgressStep",
    "CodingProgressStep",
]
