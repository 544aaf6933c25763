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
import base64
import hashlib
import logging
import threading
# non-stdlib imports
# local imports

# create logger
logger = logging.getLogger(__name__)
# global defines
_EMPTY_PAGE_MD5 = {
    2097152: 'stEjbChqPAcEIk/kEF7KSQ==',
    4194304: 'tc+p1sj+vWGPkawoQ9UKHA==',
}
_EMPTY_PAGE_MD5_LOCK = threading.Lock()


def compute_md5_for_data_asbase64(data):
    # type: (bytes) -> str
    """Compute MD5 hash for bits and encode as Base64
    :param bytes data: data to compute MD5 for
    :rtype: str
    :return: MD5 for data
    """
    hasher = hashlib.md5()
    hasher.update(data)
    return base64.b64encode(hasher.digest()).decode('ascii')


def get_empty_md5_asbase64(size):
    # type: (int) -> str
    """Get the MD5 of size zero bytes, computing it once per size
    :param int size: number of zero bytes
    :rtype: str
    :return: MD5 for empty data encoded as Base64
    """
    with _EMPTY_PAGE_MD5_LOCK:
        md5 = _EMPTY_PAGE_MD5.get(size)
        if md5 is None:
            md5 = compute_md5_for_data_asbase64(b'\0' * size)
            _EMPTY_PAGE_MD5[size] = md5
            logger.debug('computed empty page md5 for size {}: {}'.format(
                size, md5))
        return md5


def check_chunk_is_empty(data, max_chunk_size):
    # type: (bytes, int) -> bool
    """Check if a full-size chunk holds only zero bytes via MD5. Chunks
    shorter than the max chunk size are never considered empty.
    :param bytes data: chunk data
    :param int max_chunk_size: max chunk size
    :rtype: bool
    :return: if data is a full-size empty chunk
    """
    if len(data) != max_chunk_size:
        return False
    return (compute_md5_for_data_asbase64(data) ==
            get_empty_md5_asbase64(max_chunk_size))
