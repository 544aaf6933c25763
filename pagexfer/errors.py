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
# non-stdlib imports
# local imports


class PageXferError(RuntimeError):
    """Base class for page blob transfer failures"""
    pass


class AllocationError(PageXferError):
    """Remote page blob could not be created"""
    def __init__(self, path, size):
        # type: (AllocationError, str, int) -> None
        """Ctor for AllocationError
        :param AllocationError self: this
        :param str path: remote path of the blob
        :param int size: requested blob size
        """
        super(AllocationError, self).__init__(
            'failed to create page blob {} of size {}'.format(path, size))
        self.path = path
        self.size = size


class TransientWriteError(PageXferError):
    """A single failed page write that may still be retried"""
    def __init__(self, chunk, attempt, cause):
        # type: (TransientWriteError, pagexfer.models.upload.Chunk, int,
        #        Exception) -> None
        """Ctor for TransientWriteError
        :param TransientWriteError self: this
        :param pagexfer.models.upload.Chunk chunk: chunk being written
        :param int attempt: attempt number, starting at 1
        :param Exception cause: underlying error
        """
        super(TransientWriteError, self).__init__(
            'write attempt {} failed for chunk {}: {!r}'.format(
                attempt, chunk, cause))
        self.chunk = chunk
        self.attempt = attempt
        self.cause = cause


class ChunkWriteError(PageXferError):
    """Chunk write failed after exhausting all retries"""
    def __init__(self, chunk, attempts, cause):
        # type: (ChunkWriteError, pagexfer.models.upload.Chunk, int,
        #        Exception) -> None
        """Ctor for ChunkWriteError
        :param ChunkWriteError self: this
        :param pagexfer.models.upload.Chunk chunk: chunk that failed
        :param int attempts: total write attempts made
        :param Exception cause: last underlying error
        """
        super(ChunkWriteError, self).__init__(
            'failed to write chunk {} after {} attempts: {!r}'.format(
                chunk, attempts, cause))
        self.chunk = chunk
        self.attempts = attempts
        self.cause = cause


class CopyError(PageXferError):
    """Server-side blob copy did not succeed"""
    pass
