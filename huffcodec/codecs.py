import os
import struct
from typing import Optional

from .exceptions import MalformedArtifactError, TruncatedArtifactError
from .validators import validate_type, validate_file_exists
from .preprocessors import BasePreprocessor, BytePreprocessor, Utf8CharPreprocessor, get_preprocessor
from .coders import CoderBase, get_coder
from .logger import Logger
from .settings import FILE_SIGNATURE, VERSION

# signature, version, preprocessor code, coder code, file name length
_FIXED_HEADER = struct.Struct(">3sHBBH")
_DATA_LENGTH = struct.Struct(">I")


class CompressedArtifact:
    """Represents a compressed file."""

    def __init__(
        self,
        preprocessor_code: int,
        version: int,
        coder_code: int,
        data: bytes,
        original_file_name: Optional[str] = None,
    ) -> None:
        validate_type(preprocessor_code, "Preprocessor code", int)
        validate_type(version, "Version", int)
        validate_type(coder_code, "Coder code", int)
        validate_type(data, "Data", bytes)
        if original_file_name is not None:
            validate_type(original_file_name, "Original file name", str)
            if len(original_file_name.encode("utf-8")) > 0xFFFF:
                raise ValueError("Original file name is too long")

        get_preprocessor(preprocessor_code)
        get_coder(coder_code)

        if version != VERSION:
            raise ValueError("Version not supported")
        if len(data) > 0xFFFFFFFF:
            raise ValueError("Data is too large")

        self.original_file_name = original_file_name
        self.preprocessor_code = preprocessor_code
        self.version = version
        self.coder_code = coder_code
        self.data = data

    @staticmethod
    def serialize(artifact: 'CompressedArtifact') -> bytes:
        """
        Serialize a CompressedArtifact instance into bytes.

        The format (integers big-endian):
          - signature (3 bytes, b"HUF")
          - version (2 bytes, unsigned int)
          - preprocessor_code (1 byte, unsigned int)
          - coder_code (1 byte, unsigned int)
          - original_file_name length (2 bytes, unsigned int; 0 if None)
          - original_file_name (UTF-8 encoded, if present)
          - data length (4 bytes, unsigned int)
          - data (variable length)
        """
        file_name_bytes = (
            artifact.original_file_name.encode("utf-8") if artifact.original_file_name is not None else b""
        )

        serialized = _FIXED_HEADER.pack(
            FILE_SIGNATURE,
            artifact.version,
            artifact.preprocessor_code,
            artifact.coder_code,
            len(file_name_bytes),
        )
        serialized += file_name_bytes
        serialized += _DATA_LENGTH.pack(len(artifact.data))
        serialized += artifact.data

        return serialized

    @staticmethod
    def deserialize(serialized: bytes) -> 'CompressedArtifact':
        """
        Deserialize bytes into a CompressedArtifact instance.
        The byte structure is expected to be the same as produced by serialize().

        Raises:
            MalformedArtifactError: If the header is missing, invalid or unsupported.
            TruncatedArtifactError: If the data is shorter than its declared length.
        """
        validate_type(serialized, "Serialized data", bytes)
        if len(serialized) < _FIXED_HEADER.size:
            raise MalformedArtifactError("Serialized data is too short")
        signature, version, preprocessor_code, coder_code, file_name_length = _FIXED_HEADER.unpack(
            serialized[:_FIXED_HEADER.size]
        )
        offset = _FIXED_HEADER.size

        if signature != FILE_SIGNATURE:
            raise MalformedArtifactError("Invalid file signature")
        if version != VERSION:
            raise MalformedArtifactError(f"Incompatible version: {version}")

        if len(serialized) < offset + file_name_length:
            raise MalformedArtifactError("Serialized data is incomplete for file name")
        original_file_name = None
        if file_name_length > 0:
            try:
                original_file_name = serialized[offset:offset + file_name_length].decode("utf-8")
            except UnicodeDecodeError as e:
                raise MalformedArtifactError("Original file name is not valid UTF-8") from e
        offset += file_name_length

        if len(serialized) < offset + _DATA_LENGTH.size:
            raise MalformedArtifactError("Serialized data is incomplete for data length")
        data_length, = _DATA_LENGTH.unpack(serialized[offset:offset + _DATA_LENGTH.size])
        offset += _DATA_LENGTH.size

        data = serialized[offset:offset + data_length]
        if len(data) < data_length:
            raise TruncatedArtifactError(f"Expected {data_length} bytes of data, found {len(data)}")
        if len(serialized) > offset + data_length:
            raise MalformedArtifactError("Unexpected bytes after the data")

        try:
            return CompressedArtifact(preprocessor_code, version, coder_code, data, original_file_name)
        except ValueError as e:
            raise MalformedArtifactError(str(e)) from e


class CompressedArtifactFile:
    """Provides methods to write and read a CompressedArtifact instance to/from a file."""

    @staticmethod
    def write_to_file(artifact: CompressedArtifact, file_path: str) -> None:
        """
        Serialize the artifact and write it as binary data to the given file.

        Args:
            artifact (CompressedArtifact): The compressed artifact to write.
            file_path (str): The path to the output file.
        """
        serialized_data = CompressedArtifact.serialize(artifact)
        with open(file_path, "wb") as file:
            file.write(serialized_data)

    @staticmethod
    def read_from_file(file_path: str) -> CompressedArtifact:
        """
        Read binary data from the given file and deserialize it into a CompressedArtifact instance.

        Args:
            file_path (str): The path to the compressed file.

        Returns:
            CompressedArtifact: The deserialized compressed artifact.
        """
        with open(file_path, "rb") as file:
            serialized_data = file.read()
        return CompressedArtifact.deserialize(serialized_data)


class Codec:
    def compress(
        self,
        data: bytes,
        preprocessor: BasePreprocessor,
        coder: CoderBase,
        logger: Optional[Logger] = None,
        original_file_name: Optional[str] = None,
    ) -> CompressedArtifact:
        """
        Compress the input data.

        Args:
            data (bytes): The data to compress.
            preprocessor: An instance of BasePreprocessor.
            coder: An instance of CoderBase.
            logger: Logger instance the preprocessor and coder report to. Its
                progress counters restart for this call.
            original_file_name (Optional[str]): Name to record in the artifact.

        Returns:
            CompressedArtifact: The resulting compressed artifact.

        Raises:
            EmptyInputError: If data is empty.
        """
        validate_type(data, "Data", bytes)
        if not isinstance(preprocessor, BasePreprocessor):
            raise ValueError("Preprocessor must be an instance of BasePreprocessor")
        if not isinstance(coder, CoderBase):
            raise ValueError("Coder must be an instance of CoderBase")
        if logger is not None:
            logger.reset_progress()

        symbols = preprocessor.convert_to_symbols(data)
        encoded_data = coder.encode(symbols)
        return CompressedArtifact(
            preprocessor.code,
            VERSION,
            coder.get_coder_code(),
            encoded_data,
            original_file_name,
        )

    def decompress(
        self,
        artifact: CompressedArtifact,
        logger: Optional[Logger] = None,
    ) -> bytes:
        """
        Decompress the encoded data.

        Args:
            artifact (CompressedArtifact): The compressed artifact.
            logger: Logger instance for logging.

        Returns:
            bytes: The decompressed data.
        """
        if not isinstance(artifact, CompressedArtifact):
            raise ValueError("Input must be a CompressedArtifact instance")
        if artifact.version != VERSION:
            raise MalformedArtifactError("Version not supported")
        if logger is not None:
            logger.reset_progress()

        preprocessor = get_preprocessor(artifact.preprocessor_code, logger=logger)
        coder = get_coder(artifact.coder_code, logger=logger)

        symbols = coder.decode(artifact.data)
        return preprocessor.convert_from_symbols(symbols)


class CodecFile(Codec):
    def compress(
        self,
        input_path: str,
        output_path: str,
        preprocessor: BasePreprocessor,
        coder: CoderBase,
        logger: Optional[Logger] = None,
    ) -> None:
        """
        Compress the input file and write the compressed artifact to an output file.
        The output file is only created once compression succeeded.

        Args:
            input_path (str): Path to the input file.
            output_path (str): Path to the output file.
            preprocessor: An instance of BasePreprocessor.
            coder: An instance of CoderBase.
            logger: Logger instance the preprocessor and coder report to.
        """
        validate_type(input_path, "Input path", str)
        validate_type(output_path, "Output path", str)
        validate_file_exists(input_path)

        with open(input_path, "rb") as file:
            data = file.read()

        artifact = super().compress(data, preprocessor, coder, logger, os.path.basename(input_path))
        CompressedArtifactFile.write_to_file(artifact, output_path)

    def decompress(
        self,
        compressed_file_path: str,
        output_file_path: str,
        logger: Optional[Logger] = None,
    ) -> None:
        """
        Decompress the input file and write the decompressed data to an output file.
        The output file is only created once decompression succeeded.

        Args:
            compressed_file_path (str): Path to the compressed file.
            output_file_path (str): Path to the output file.
            logger: Logger instance for logging.
        """
        validate_type(compressed_file_path, "Compressed file path", str)
        validate_type(output_file_path, "Output file path", str)
        validate_file_exists(compressed_file_path)

        artifact = CompressedArtifactFile.read_from_file(compressed_file_path)
        data = super().decompress(artifact, logger)
        with open(output_file_path, "wb") as file:
            file.write(data)


class ByteCodec(Codec):
    def compress(
        self,
        data: bytes,
        coder_code: int = 1,
        logger: Optional[Logger] = None,
    ) -> CompressedArtifact:
        """
        Compress the input data using a byte preprocessor.

        Args:
            data (bytes): The data to compress.
            coder_code (int): Code identifying the coder.
            logger: Logger instance for logging.

        Returns:
            CompressedArtifact: The resulting compressed artifact.
        """
        validate_type(data, "Data", bytes)
        validate_type(coder_code, "Coder code", int)

        coder = get_coder(coder_code, logger=logger)
        return super().compress(data, BytePreprocessor(logger), coder, logger)


class ByteCodecFile(CodecFile):
    def compress(
        self,
        input_path: str,
        output_path: str,
        coder_code: int = 1,
        logger: Optional[Logger] = None,
    ) -> None:
        """
        Compress the input file using a byte preprocessor and write the result to an output file.

        Args:
            input_path (str): Path to the input file.
            output_path (str): Path to the output file.
            coder_code (int): Code identifying the coder.
            logger: Logger instance for logging.
        """
        validate_type(coder_code, "Coder code", int)

        coder = get_coder(coder_code, logger=logger)
        super().compress(input_path, output_path, BytePreprocessor(logger), coder, logger)


class TextCodec(Codec):
    def compress(
        self,
        text: str,
        coder_code: int = 1,
        logger: Optional[Logger] = None,
    ) -> CompressedArtifact:
        """
        Compress text, one symbol per character.

        Args:
            text (str): The text to compress.
            coder_code (int): Code identifying the coder.
            logger: Logger instance for logging.

        Returns:
            CompressedArtifact: The resulting compressed artifact.
        """
        validate_type(text, "Text", str)
        validate_type(coder_code, "Coder code", int)

        coder = get_coder(coder_code, logger=logger)
        return super().compress(text.encode("utf-8"), Utf8CharPreprocessor(logger), coder, logger)

    def decompress(
        self,
        artifact: CompressedArtifact,
        logger: Optional[Logger] = None,
    ) -> str:
        """
        Decompress an artifact produced by compress back to text.
        """
        return super().decompress(artifact, logger).decode("utf-8")
