# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
AQUOS TV protocol implementation.

Provides stream-level implementation code common to clients and the emulator.
"""
from .line_reader import AsyncLineReader, READ_CHUNK_SIZE
