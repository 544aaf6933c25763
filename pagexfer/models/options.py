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
# non-stdlib imports
# local imports

# global defines
_DEFAULT_REQUESTS_TIMEOUT = (3.1, 12.1)
_DEFAULT_OPERATION_TIMEOUT = 120
_DEFAULT_WORKER_THREADS = 16
_DEFAULT_CHUNK_MAX_RETRIES = 3
_DEFAULT_CHUNK_RETRY_DELAY = 10

# named tuples
HttpProxy = collections.namedtuple(
    'HttpProxy', [
        'host',
        'port',
        'username',
        'password',
    ]
)
Upload = collections.namedtuple(
    'Upload', [
        'chunk_size_bytes',
        'create_container',
    ]
)


class Timeout(object):
    """Timeout Options"""
    def __init__(self, connect, read, max_retries, operation=None):
        """Ctor for Timeout options
        :param Timeout self: this
        :param float connect: connect timeout
        :param float read: read timeout
        :param int max_retries: max retries of the storage client
        :param int operation: server-side timeout for each remote call
        """
        if connect is None or connect <= 0:
            self._connect = _DEFAULT_REQUESTS_TIMEOUT[0]
        else:
            self._connect = connect
        if read is None or read <= 0:
            self._read = _DEFAULT_REQUESTS_TIMEOUT[1]
        else:
            self._read = read
        if max_retries is None or max_retries < 0:
            self._max_retries = None
        else:
            self._max_retries = max_retries
        if operation is None or operation <= 0:
            self._operation = _DEFAULT_OPERATION_TIMEOUT
        else:
            self._operation = int(operation)

    @property
    def connect(self):
        """Connect timeout
        :rtype: float
        :return: connect timeout
        """
        return self._connect

    @property
    def read(self):
        """Read timeout
        :rtype: float
        :return: read timeout
        """
        return self._read

    @property
    def timeout(self):
        """Timeout property in requests format
        :rtype: tuple
        :return: (connect, read) timeout tuple
        """
        return (self._connect, self._read)

    @property
    def max_retries(self):
        """Max retries
        :rtype: int
        :return maximum number of retries
        """
        return self._max_retries

    @property
    def operation(self):
        """Server-side timeout in seconds for each storage call
        :rtype: int
        :return: operation timeout
        """
        return self._operation


class Retry(object):
    """Chunk Retry Options"""
    def __init__(self, max_retries=None, delay=None):
        """Ctor for chunk Retry options
        :param Retry self: this
        :param int max_retries: retries allowed after the first failure
        :param float delay: fixed delay in seconds between attempts
        """
        if max_retries is None:
            self.max_retries = _DEFAULT_CHUNK_MAX_RETRIES
        elif max_retries < 0:
            raise ValueError(
                'chunk max retries is invalid: {}'.format(max_retries))
        else:
            self.max_retries = max_retries
        if delay is None:
            self.delay = _DEFAULT_CHUNK_RETRY_DELAY
        elif delay < 0:
            raise ValueError('chunk retry delay is invalid: {}'.format(delay))
        else:
            self.delay = delay


class Concurrency(object):
    """Concurrency Options"""
    def __init__(self, worker_threads):
        """Ctor for Concurrency Options
        :param Concurrency self: this
        :param int worker_threads: number of upload worker threads
        """
        self.worker_threads = worker_threads
        if self.worker_threads is None or self.worker_threads < 1:
            self.worker_threads = _DEFAULT_WORKER_THREADS


class General(object):
    """General Options"""
    def __init__(
            self, concurrency, log_file=None, progress_bar=True,
            timeout=None, retry=None, verbose=False, quiet=False,
            proxy=None):
        """Ctor for General Options
        :param General self: this
        :param Concurrency concurrency: concurrency options
        :param str log_file: log file
        :param bool progress_bar: progress bar
        :param Timeout timeout: timeout options
        :param Retry retry: chunk retry options
        :param bool verbose: verbose output
        :param bool quiet: quiet
        :param HttpProxy proxy: proxy
        """
        if concurrency is None:
            raise ValueError('concurrency option is unspecified')
        self.concurrency = concurrency
        self.log_file = log_file
        self.progress_bar = progress_bar
        if timeout is None:
            timeout = Timeout(connect=None, read=None, max_retries=None)
        self.timeout = timeout
        if retry is None:
            retry = Retry()
        self.retry = retry
        self.verbose = verbose
        self.quiet = quiet
        self.proxy = proxy
