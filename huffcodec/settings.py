"""
settings.py

Format constants shared by the container and the coders.
"""

FILE_SIGNATURE = b'HUF'
VERSION = 1

# Width in bytes of the symbol count and of every per-symbol frequency.
DEFAULT_COUNT_BYTES = 4

# Width in bytes of the tree description length / frequency entry count.
DEFAULT_LENGTH_BYTES = 4

# A leaf stores its symbol length in a single byte.
MAX_SYMBOL_SIZE = 255
