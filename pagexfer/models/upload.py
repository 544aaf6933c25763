# Copyright (c) Microsoft Corporation
#
# All rights reserved.
#
# MIT License
#
# Permission is hereby granted, free of charge, to any person obtaining a
# copy of this software and associated documentation files (the "Software"),
# to deal in the Software without restriction, including without limitation
# the rights to use, copy, modify, merge, publish, distribute, sublicense,
# and/or sell copies of the Software, and to permit persons to whom the
# Software is furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in
# all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED *AS IS*, WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING
# FROM, OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER
# DEALINGS IN THE SOFTWARE.

# stdlib imports
import collections
import pathlib
import threading
# non-stdlib imports
# local imports
import pagexfer.util

# global defines
DEFAULT_CHUNK_SIZE_BYTES = 2097152
PAGE_SIZE_BYTES = 512
MAX_PAGE_RANGE_BYTES = 4194304


class Chunk(object):
    """Byte range of a local file to be written as pages"""
    def __init__(self, sequence_id, offset, length):
        # type: (Chunk, int, int, int) -> None
        """Ctor for Chunk
        :param Chunk self: this
        :param int sequence_id: 1-based sequence id
        :param int offset: byte offset into the file
        :param int length: number of bytes
        """
        if sequence_id < 1:
            raise ValueError(
                'invalid chunk sequence id: {}'.format(sequence_id))
        if offset < 0:
            raise ValueError('invalid chunk offset: {}'.format(offset))
        if length <= 0:
            raise ValueError('invalid chunk length: {}'.format(length))
        self._sequence_id = sequence_id
        self._offset = offset
        self._length = length

    @property
    def sequence_id(self):
        # type: (Chunk) -> int
        """Sequence id
        :param Chunk self: this
        :rtype: int
        :return: 1-based sequence id
        """
        return self._sequence_id

    @property
    def offset(self):
        # type: (Chunk) -> int
        """Offset into the file
        :param Chunk self: this
        :rtype: int
        :return: byte offset
        """
        return self._offset

    @property
    def length(self):
        # type: (Chunk) -> int
        """Number of bytes
        :param Chunk self: this
        :rtype: int
        :return: chunk length
        """
        return self._length

    @property
    def start_range(self):
        # type: (Chunk) -> int
        """Inclusive start of the remote byte range
        :param Chunk self: this
        :rtype: int
        :return: start range
        """
        return self._offset

    @property
    def end_range(self):
        # type: (Chunk) -> int
        """Inclusive end of the remote byte range
        :param Chunk self: this
        :rtype: int
        :return: end range
        """
        return self._offset + self._length - 1

    def read(self, fd):
        # type: (Chunk, io.BufferedReader) -> bytes
        """Read the bytes of this chunk from an open file
        :param Chunk self: this
        :param io.BufferedReader fd: file opened for binary read
        :rtype: bytes
        :return: chunk data
        """
        fd.seek(self._offset)
        data = fd.read(self._length)
        if len(data) != self._length:
            raise IOError(
                'short read for chunk {}: got {} bytes'.format(
                    self, len(data)))
        return data

    def __eq__(self, other):
        if not isinstance(other, Chunk):
            return NotImplemented
        return (self._sequence_id == other._sequence_id and
                self._offset == other._offset and
                self._length == other._length)

    def __hash__(self):
        return hash((self._sequence_id, self._offset, self._length))

    def __repr__(self):
        return 'Chunk(id={}, offset={}, length={})'.format(
            self._sequence_id, self._offset, self._length)

    def __str__(self):
        return 'id: {}, offset: {}, size: {}'.format(
            self._sequence_id, self._offset, self._length)


class ChunkQueue(object):
    """Thread-safe FIFO of pending chunks"""
    def __init__(self, chunks=None):
        # type: (ChunkQueue, list) -> None
        """Ctor for ChunkQueue
        :param ChunkQueue self: this
        :param list chunks: initial chunks
        """
        self._lock = threading.Lock()
        self._chunks = collections.deque(chunks or [])

    def push(self, chunk):
        # type: (ChunkQueue, Chunk) -> None
        """Append a chunk
        :param ChunkQueue self: this
        :param Chunk chunk: chunk
        """
        with self._lock:
            self._chunks.append(chunk)

    def pop(self):
        # type: (ChunkQueue) -> Chunk
        """Remove and return the earliest pushed chunk
        :param ChunkQueue self: this
        :rtype: Chunk
        :return: chunk or None if the queue is empty
        """
        with self._lock:
            if len(self._chunks) == 0:
                return None
            return self._chunks.popleft()

    def clear(self):
        # type: (ChunkQueue) -> int
        """Drop all pending chunks
        :param ChunkQueue self: this
        :rtype: int
        :return: number of chunks dropped
        """
        with self._lock:
            dropped = len(self._chunks)
            self._chunks.clear()
            return dropped

    def size(self):
        # type: (ChunkQueue) -> int
        """Number of pending chunks
        :param ChunkQueue self: this
        :rtype: int
        :return: pending chunk count
        """
        with self._lock:
            return len(self._chunks)


def is_page_aligned(length):
    # type: (int) -> bool
    """Check if a length is a multiple of the page size
    :param int length: length in bytes
    :rtype: bool
    :return: if length is page aligned
    """
    return length % PAGE_SIZE_BYTES == 0


def compute_chunks(file_size, max_chunk_size):
    # type: (int, int) -> List[Chunk]
    """Partition a file into contiguous chunks
    :param int file_size: file size in bytes
    :param int max_chunk_size: maximum chunk size in bytes
    :rtype: list
    :return: chunks ordered by offset
    """
    if file_size < 0:
        raise ValueError('invalid file size: {}'.format(file_size))
    if max_chunk_size <= 0:
        raise ValueError('invalid max chunk size: {}'.format(max_chunk_size))
    chunks = []
    offset = 0
    while offset < file_size:
        length = min(max_chunk_size, file_size - offset)
        chunks.append(Chunk(len(chunks) + 1, offset, length))
        offset += length
    return chunks


class Specification(object):
    """Upload Specification"""
    def __init__(
            self, upload_options, local_path, storage_account, remote_path):
        # type: (Specification, pagexfer.models.options.Upload, str,
        #        str, str) -> None
        """Ctor for Specification
        :param Specification self: this
        :param pagexfer.models.options.Upload upload_options: upload options
        :param str local_path: local disk image
        :param str storage_account: storage account name
        :param str remote_path: container/blob path
        """
        self.options = upload_options
        self.local_path = pathlib.Path(local_path)
        self.storage_account = storage_account
        self.container, self.name = pagexfer.util.explode_azure_path(
            remote_path)
        self._sanity_check()

    def _sanity_check(self):
        # type: (Specification) -> None
        """Sanity check specification
        :param Specification self: this
        """
        if pagexfer.util.is_none_or_empty(self.storage_account):
            raise ValueError('storage account not specified')
        if pagexfer.util.is_none_or_empty(self.name):
            raise ValueError(
                'remote path must include a container and a blob name')
        chunk_size = self.options.chunk_size_bytes
        if (chunk_size is None or chunk_size <= 0 or
                chunk_size > MAX_PAGE_RANGE_BYTES):
            raise ValueError(
                'chunk size bytes must be in range (0, {}]: {}'.format(
                    MAX_PAGE_RANGE_BYTES, chunk_size))
        if not is_page_aligned(chunk_size):
            raise ValueError(
                'chunk size bytes must be a multiple of {}: {}'.format(
                    PAGE_SIZE_BYTES, chunk_size))
