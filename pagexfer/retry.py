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
import errno
# non-stdlib imports
import azure.storage.common.models
import azure.storage.common.retry
import requests
import urllib3
# local imports


# global defines
_RETRYABLE_ERRNOS = (
    errno.ECONNRESET,
    errno.ECONNREFUSED,
    errno.ECONNABORTED,
    errno.ENETRESET,
    errno.ETIMEDOUT,
)
_RETRYABLE_ERRNO_MAXRETRY = frozenset(
    '[Errno {}]'.format(x) for x in _RETRYABLE_ERRNOS)
_RETRYABLE_ERRNO_PROTOCOL = frozenset(
    '({},'.format(x) for x in _RETRYABLE_ERRNOS)
_NON_RETRYABLE_SERVER_STATUS = frozenset((501, 505))


def _should_retry_exception(exc):
    # type: (Exception) -> bool
    """Determine if a request exception without a response is retryable
    :param Exception exc: exception raised by the transport
    :rtype: bool
    :return: if the request should be retried
    """
    if isinstance(exc, (requests.Timeout,
                        requests.exceptions.ContentDecodingError)):
        return True
    if not isinstance(exc, (requests.exceptions.ConnectionError,
                            requests.exceptions.ChunkedEncodingError)):
        return False
    if len(exc.args) == 0:
        return False
    # errno is not exposed on the reason object, parse the message
    inner = exc.args[0]
    try:
        if isinstance(inner, urllib3.exceptions.MaxRetryError):
            msg = inner.reason.args[0]
            markers = _RETRYABLE_ERRNO_MAXRETRY
        elif isinstance(inner, urllib3.exceptions.ProtocolError):
            msg = inner.args[0]
            markers = _RETRYABLE_ERRNO_PROTOCOL
        else:
            return False
    except (AttributeError, IndexError):
        return False
    return any(x in str(msg) for x in markers)


def _should_retry_status(status, location_mode):
    # type: (int, azure.storage.common.models.LocationMode) -> bool
    """Determine if a response status is retryable
    :param int status: http status code
    :param azure.storage.common.models.LocationMode location_mode: location
    :rtype: bool
    :return: if the request should be retried
    """
    if 200 <= status < 300:
        # failure while reading or parsing a successful response
        return True
    if 300 <= status < 500:
        if status == 408:
            return True
        return (status == 404 and
                location_mode ==
                azure.storage.common.models.LocationMode.SECONDARY)
    return status not in _NON_RETRYABLE_SERVER_STATUS


class ExponentialRetryWithMaxWait(azure.storage.common.retry._Retry):
    """Exponential Retry with Max Wait Reset"""
    def __init__(
            self, initial_backoff=0.1, max_backoff=1, max_retries=None,
            reset_at_max=True):
        # type: (ExponentialRetryWithMaxWait, float, float, int,
        #        bool) -> None
        """Ctor for ExponentialRetryWithMaxWait
        :param ExponentialRetryWithMaxWait self: this
        :param float initial_backoff: initial backoff
        :param float max_backoff: max backoff
        :param int max_retries: max retries
        :param bool reset_at_max: reset after reaching max wait
        """
        if max_backoff <= 0:
            raise ValueError(
                'max backoff is non-positive: {}'.format(max_backoff))
        if max_retries is not None and max_retries < 0:
            raise ValueError(
                'max retries is invalid: {}'.format(max_retries))
        if max_backoff < initial_backoff:
            raise ValueError(
                'max backoff {} less than initial backoff {}'.format(
                    max_backoff, initial_backoff))
        self._backoff_count = 0
        self._last_backoff = initial_backoff
        self.initial_backoff = initial_backoff
        self.max_backoff = max_backoff
        self.reset_at_max = reset_at_max
        super(ExponentialRetryWithMaxWait, self).__init__(
            max_retries if max_retries is not None else 2147483647, False)

    def _should_retry(self, context):
        # type: (ExponentialRetryWithMaxWait,
        #        azure.storage.common.models.RetryContext) -> bool
        """Determine if retry should happen or not
        :param ExponentialRetryWithMaxWait self: this
        :param azure.storage.common.models.RetryContext context: retry context
        :rtype: bool
        :return: True if retry should happen, False otherwise
        """
        if context.count >= self.max_attempts:
            return False
        status = None
        if context.response and context.response.status:
            status = context.response.status
        if status is None:
            return _should_retry_exception(context.exception)
        return _should_retry_status(status, context.location_mode)

    def retry(self, context):
        # type: (ExponentialRetryWithMaxWait,
        #        azure.storage.common.models.RetryContext) -> int
        """Retry handler
        :param ExponentialRetryWithMaxWait self: this
        :param azure.storage.common.models.RetryContext context: retry context
        :rtype: int or None
        :return: int
        """
        return self._retry(context, self._backoff)

    def _backoff(self, context):
        # type: (ExponentialRetryWithMaxWait,
        #        azure.storage.common.models.RetryContext) -> float
        """Backoff calculator
        :param ExponentialRetryWithMaxWait self: this
        :param azure.storage.common.models.RetryContext context: retry context
        :rtype: float
        :return: backoff amount
        """
        self._backoff_count += 1
        if self._backoff_count == 1:
            self._last_backoff = self.initial_backoff
        else:
            self._last_backoff *= 2
        if self._last_backoff > self.max_backoff and self.reset_at_max:
            self._backoff_count = 1
            self._last_backoff = self.initial_backoff
        return self._last_backoff
