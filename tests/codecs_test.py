import os
import shutil
import tempfile
import unittest

from huffcodec.codecs import (
    CompressedArtifact,
    CompressedArtifactFile,
    Codec,
    CodecFile,
    ByteCodec,
    ByteCodecFile,
    TextCodec,
)
from huffcodec.coders import HuffmanTreeCoder, HuffmanFrequencyCoder
from huffcodec.exceptions import EmptyInputError, MalformedArtifactError, TruncatedArtifactError
from huffcodec.logger import Logger, SymbolCodeLog, CodingProgressStep, PreprocessingProgressStep
from huffcodec.preprocessors import BytePreprocessor, Utf8CharPreprocessor

class TestCompressedArtifact(unittest.TestCase):
    def setUp(self):
        self.artifact = CompressedArtifact(
            preprocessor_code=1,
            version=1,
            coder_code=2,
            data=b'some_binary_data',
            original_file_name='test_file.txt'
        )

    def test_serialization_deserialization(self):
        """Test that an artifact can be serialized and then correctly deserialized."""
        serialized = CompressedArtifact.serialize(self.artifact)
        deserialized = CompressedArtifact.deserialize(serialized)

        self.assertEqual(serialized[:3], b'HUF')
        self.assertEqual(self.artifact.preprocessor_code, deserialized.preprocessor_code)
        self.assertEqual(self.artifact.version, deserialized.version)
        self.assertEqual(self.artifact.coder_code, deserialized.coder_code)
        self.assertEqual(self.artifact.data, deserialized.data)
        self.assertEqual(self.artifact.original_file_name, deserialized.original_file_name)

    def test_without_file_name(self):
        artifact = CompressedArtifact(1, 1, 1, b'\x01\x02')
        deserialized = CompressedArtifact.deserialize(CompressedArtifact.serialize(artifact))
        self.assertIsNone(deserialized.original_file_name)
        self.assertEqual(deserialized.data, b'\x01\x02')

    def test_file_write_read(self):
        """Test that writing to and reading from a file preserves the artifact."""
        with tempfile.NamedTemporaryFile(delete=False) as temp_file:
            temp_file_name = temp_file.name

        try:
            CompressedArtifactFile.write_to_file(self.artifact, temp_file_name)
            read_artifact = CompressedArtifactFile.read_from_file(temp_file_name)

            self.assertEqual(self.artifact.preprocessor_code, read_artifact.preprocessor_code)
            self.assertEqual(self.artifact.coder_code, read_artifact.coder_code)
            self.assertEqual(self.artifact.data, read_artifact.data)
            self.assertEqual(self.artifact.original_file_name, read_artifact.original_file_name)
        finally:
            os.remove(temp_file_name)

    def test_invalid_arguments(self):
        with self.assertRaises(ValueError):
            CompressedArtifact(1, 2, 1, b'')
        with self.assertRaises(ValueError):
            CompressedArtifact(9, 1, 1, b'')
        with self.assertRaises(ValueError):
            CompressedArtifact(1, 1, 9, b'')
        with self.assertRaises(ValueError):
            CompressedArtifact(1, 1, 1, 'data')

    def test_bad_signature(self):
        serialized = b'XYZ' + CompressedArtifact.serialize(self.artifact)[3:]
        with self.assertRaises(MalformedArtifactError):
            CompressedArtifact.deserialize(serialized)

    def test_too_short(self):
        with self.assertRaises(MalformedArtifactError):
            CompressedArtifact.deserialize(b'HUF')

    def test_unsupported_version(self):
        serialized = bytearray(CompressedArtifact.serialize(self.artifact))
        serialized[4] = 7
        with self.assertRaises(MalformedArtifactError):
            CompressedArtifact.deserialize(bytes(serialized))

    def test_unknown_coder(self):
        serialized = bytearray(CompressedArtifact.serialize(self.artifact))
        serialized[6] = 42
        with self.assertRaises(MalformedArtifactError):
            CompressedArtifact.deserialize(bytes(serialized))

    def test_truncated_data(self):
        serialized = CompressedArtifact.serialize(self.artifact)
        with self.assertRaises(TruncatedArtifactError):
            CompressedArtifact.deserialize(serialized[:-1])

    def test_trailing_bytes(self):
        serialized = CompressedArtifact.serialize(self.artifact)
        with self.assertRaises(MalformedArtifactError):
            CompressedArtifact.deserialize(serialized + b'\x00')


class TestCodec(unittest.TestCase):
    def test_compress_decompress(self):
        """Test that compressing and decompressing data preserves the original data."""
        codec = Codec()
        data = b'Testing Data'
        for coder in (HuffmanTreeCoder(), HuffmanFrequencyCoder()):
            artifact = codec.compress(data, BytePreprocessor(), coder)
            self.assertEqual(codec.decompress(artifact), data)

    def test_decompress_after_serialization(self):
        data = b'abracadabra' * 20
        serialized = CompressedArtifact.serialize(Codec().compress(data, BytePreprocessor(), HuffmanTreeCoder()))
        self.assertLess(len(serialized), len(data))
        self.assertEqual(Codec().decompress(CompressedArtifact.deserialize(serialized)), data)

    def test_empty_data(self):
        with self.assertRaises(EmptyInputError):
            Codec().compress(b'', BytePreprocessor(), HuffmanTreeCoder())

    def test_invalid_arguments(self):
        codec = Codec()
        with self.assertRaises(ValueError):
            codec.compress('text', BytePreprocessor(), HuffmanTreeCoder())
        with self.assertRaises(ValueError):
            codec.compress(b'data', None, HuffmanTreeCoder())
        with self.assertRaises(ValueError):
            codec.compress(b'data', BytePreprocessor(), None)
        with self.assertRaises(ValueError):
            codec.decompress(b'data')

    def test_utf8_preprocessor(self):
        data = 'ünïcödé ☃☃☃'.encode('utf-8')
        artifact = Codec().compress(data, Utf8CharPreprocessor(), HuffmanFrequencyCoder())
        self.assertEqual(artifact.preprocessor_code, 2)
        self.assertEqual(Codec().decompress(artifact), data)

    def test_deterministic(self):
        data = b'deterministic output please'
        first = CompressedArtifact.serialize(Codec().compress(data, BytePreprocessor(), HuffmanTreeCoder()))
        second = CompressedArtifact.serialize(Codec().compress(data, BytePreprocessor(), HuffmanTreeCoder()))
        self.assertEqual(first, second)

    def test_logger(self):
        logger = Logger()
        logger.record_progress = True
        logger.display_progress = False
        data = b'abcabc'
        artifact = Codec().compress(data, BytePreprocessor(logger), HuffmanTreeCoder(logger=logger), logger=logger)
        self.assertEqual(Codec().decompress(artifact), data)
        self.assertEqual(len(logger.get_logs(SymbolCodeLog)), 3)
        steps = logger.get_logs(PreprocessingProgressStep)
        self.assertEqual(steps[-1].message, 'Converting data to symbols (6/6)')

    def test_progress_restarts_for_each_call(self):
        logger = Logger()
        logger.record_progress = True
        logger.display_progress = False
        data = b'abcabc'
        artifact = ByteCodec().compress(data, 1, logger=logger)
        encoding = logger.get_logs(CodingProgressStep)
        self.assertEqual(encoding[-1].message, 'Encoding symbols (6/6)')

        logger.clear_logs()
        self.assertEqual(Codec().decompress(artifact, logger), data)
        decoding = logger.get_logs(CodingProgressStep)
        self.assertEqual(decoding[-1].message, 'Decoding symbols (6/6)')

        logger.clear_logs()
        ByteCodec().compress(data, 1, logger=logger)
        encoding = logger.get_logs(CodingProgressStep)
        self.assertEqual(encoding[0].message, 'Encoding symbols (1/6)')


class TestCodecFile(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def _path(self, name):
        return os.path.join(self.temp_dir, name)

    def test_compress_decompress(self):
        """Test that compressing and decompressing a file preserves the original data."""
        data = b'Testing Data'
        with open(self._path('input.txt'), 'wb') as file:
            file.write(data)

        codec = CodecFile()
        codec.compress(self._path('input.txt'), self._path('input.huf'), BytePreprocessor(), HuffmanTreeCoder())
        codec.decompress(self._path('input.huf'), self._path('output.txt'))

        with open(self._path('output.txt'), 'rb') as file:
            self.assertEqual(file.read(), data)
        self.assertEqual(CompressedArtifactFile.read_from_file(self._path('input.huf')).original_file_name, 'input.txt')

    def test_logger(self):
        logger = Logger()
        logger.record_progress = True
        logger.display_progress = False
        with open(self._path('input.txt'), 'wb') as file:
            file.write(b'abcabc')

        codec = CodecFile()
        codec.compress(self._path('input.txt'), self._path('input.huf'),
                       BytePreprocessor(logger), HuffmanTreeCoder(logger=logger), logger=logger)
        self.assertEqual(logger.get_logs(CodingProgressStep)[-1].message, 'Encoding symbols (6/6)')

        logger.clear_logs()
        codec.decompress(self._path('input.huf'), self._path('output.txt'), logger)
        self.assertEqual(logger.get_logs(CodingProgressStep)[-1].message, 'Decoding symbols (6/6)')

    def test_empty_file_writes_nothing(self):
        open(self._path('empty'), 'wb').close()
        with self.assertRaises(EmptyInputError):
            CodecFile().compress(self._path('empty'), self._path('empty.huf'), BytePreprocessor(), HuffmanTreeCoder())
        self.assertFalse(os.path.exists(self._path('empty.huf')))

    def test_truncated_file_writes_nothing(self):
        with open(self._path('input.txt'), 'wb') as file:
            file.write(b'aaabbc')
        codec = CodecFile()
        codec.compress(self._path('input.txt'), self._path('input.huf'), BytePreprocessor(), HuffmanTreeCoder())
        with open(self._path('input.huf'), 'rb') as file:
            serialized = file.read()
        artifact = CompressedArtifact.deserialize(serialized)
        artifact.data = artifact.data[:-1]
        CompressedArtifactFile.write_to_file(artifact, self._path('broken.huf'))

        with self.assertRaises(TruncatedArtifactError):
            codec.decompress(self._path('broken.huf'), self._path('output.txt'))
        self.assertFalse(os.path.exists(self._path('output.txt')))

    def test_missing_input(self):
        with self.assertRaises(ValueError):
            CodecFile().compress(self._path('nope'), self._path('out'), BytePreprocessor(), HuffmanTreeCoder())
        with self.assertRaises(ValueError):
            CodecFile().decompress(self._path('nope'), self._path('out'))


class TestByteCodec(unittest.TestCase):
    def test_compress_decompress(self):
        codec = ByteCodec()
        data = bytes(range(256)) * 3
        for coder_code in (1, 2):
            artifact = codec.compress(data, coder_code)
            self.assertEqual(artifact.coder_code, coder_code)
            self.assertEqual(codec.decompress(artifact), data)

    def test_single_byte(self):
        codec = ByteCodec()
        self.assertEqual(codec.decompress(codec.compress(b'x')), b'x')

    def test_logger(self):
        logger = Logger()
        ByteCodec().compress(b'aab', 1, logger=logger)
        self.assertEqual(len(logger.get_logs(SymbolCodeLog)), 2)

    def test_unknown_coder(self):
        with self.assertRaises(ValueError):
            ByteCodec().compress(b'data', 5)


class TestByteCodecFile(unittest.TestCase):
    def test_compress_decompress(self):
        temp_dir = tempfile.mkdtemp()
        try:
            input_path = os.path.join(temp_dir, 'data.bin')
            compressed_path = input_path + '.huf'
            output_path = input_path + '.out'
            data = b'\x00\x01\x02' * 100 + b'\xff'
            with open(input_path, 'wb') as file:
                file.write(data)

            codec = ByteCodecFile()
            codec.compress(input_path, compressed_path, 2)
            codec.decompress(compressed_path, output_path)

            with open(output_path, 'rb') as file:
                self.assertEqual(file.read(), data)
        finally:
            shutil.rmtree(temp_dir)


class TestTextCodec(unittest.TestCase):
    def test_compress_decompress(self):
        codec = TextCodec()
        text = "Ein Fährmann über'm Fluß, 川の流れ ☃"
        for coder_code in (1, 2):
            artifact = codec.compress(text, coder_code)
            self.assertEqual(codec.decompress(artifact), text)

    def test_one_symbol_per_character(self):
        logger = Logger()
        TextCodec().compress("ééé", logger=logger)
        logs = logger.get_logs(SymbolCodeLog)
        self.assertEqual(len(logs), 1)
        self.assertEqual(logs[0].code, "0")
        self.assertEqual(logs[0].frequency, 3)

    def test_empty_text(self):
        with self.assertRaises(EmptyInputError):
            TextCodec().compress("")

if __name__ == '__main__':
    unittest.main()
