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
import copy
import datetime
import logging
import re
# non-stdlib imports
import dateutil.parser
import dateutil.tz
# local imports

# global defines
MEGABYTE = 1048576
_SNAPSHOT_QUERY = '?snapshot='
_LOG_FORMAT = '%(asctime)s %(levelname)s - %(message)s'
_VERBOSE_LOG_FORMAT = (
    '%(asctime)s %(levelname)s %(name)s:%(funcName)s:%(lineno)d '
    '%(threadName)s %(message)s'
)
_REGISTERED_LOGGER_HANDLERS = []


def _new_log_formatter(fmt):
    # type: (str) -> logging.Formatter
    """Create a log formatter with millisecond timestamps
    :param str fmt: format string
    :rtype: logging.Formatter
    :return: formatter
    """
    formatter = logging.Formatter(fmt)
    formatter.default_msec_format = '%s.%03d'
    return formatter


def setup_logger(logger, logfile):
    # type: (logging.Logger, str) -> None
    """Attach a stream handler, or a file handler if a log file is given,
    to the logger and to the root logger
    :param logging.Logger logger: logger to set up
    :param str logfile: optional log file
    """
    if is_none_or_empty(logfile):
        handler = logging.StreamHandler()
    else:
        handler = logging.FileHandler(logfile, encoding='utf-8')
    handler.setFormatter(_new_log_formatter(_LOG_FORMAT))
    logging.getLogger().addHandler(handler)
    logger.setLevel(logging.DEBUG)
    logger.addHandler(handler)
    logger.propagate = False
    _REGISTERED_LOGGER_HANDLERS.append(handler)


def set_verbose_logger_handlers():
    # type: (None) -> None
    """Log source location and worker thread name on every handler set up
    by setup_logger"""
    for handler in _REGISTERED_LOGGER_HANDLERS:
        handler.setFormatter(_new_log_formatter(_VERBOSE_LOG_FORMAT))


def is_none_or_empty(obj):
    # type: (any) -> bool
    """Check for None or a zero length object
    :param any obj: object
    :rtype: bool
    :return: if obj is None or has zero length
    """
    return obj is None or len(obj) == 0


def is_not_empty(obj):
    # type: (any) -> bool
    """Check for an object that is not None and has a length
    :param any obj: object
    :rtype: bool
    :return: if obj is set and not empty
    """
    return not is_none_or_empty(obj)


def merge_dict(dict1, dict2):
    # type: (dict, dict) -> dict
    """Return a copy of dict1 with dict2 laid over it. Nested dicts are
    merged key by key, any other value in dict2 replaces the one in dict1.
    :param dict dict1: base dictionary
    :param dict dict2: overriding dictionary
    :rtype: dict
    :return: merged copy
    """
    if not isinstance(dict1, dict) or not isinstance(dict2, dict):
        raise ValueError('merge_dict requires two dictionaries')
    merged = copy.deepcopy(dict1)
    for key in dict2:
        if isinstance(merged.get(key), dict):
            merged[key] = merge_dict(merged[key], dict2[key])
        else:
            merged[key] = copy.deepcopy(dict2[key])
    return merged


def datetime_now():
    # type: (None) -> datetime.datetime
    """Current time in the local timezone"""
    return datetime.datetime.now(tz=dateutil.tz.tzlocal())


def explode_azure_path(path):
    # type: (str) -> Tuple[str, str]
    """Split a remote path into its container and the blob path within it.
    Leading and trailing slashes are ignored and backslashes are treated as
    forward slashes.
    :param str path: remote path
    :rtype: tuple
    :return: (container, blob path)
    """
    if is_none_or_empty(path):
        raise ValueError('remote path is empty')
    parts = [x for x in re.split(r'[/\\]', path) if len(x) > 0]
    if len(parts) == 0:
        raise ValueError('remote path has no container: {}'.format(path))
    return parts[0], '/'.join(parts[1:])


def split_snapshot_path(path):
    # type: (str) -> Tuple[str, str]
    """Split a trailing ?snapshot=<time> qualifier off a remote path
    :param str path: remote path
    :rtype: tuple
    :return: (path, snapshot time or None)
    """
    base, sep, snapshot = path.rpartition(_SNAPSHOT_QUERY)
    if len(sep) == 0 or _SNAPSHOT_QUERY in base:
        return path, None
    try:
        dateutil.parser.parse(snapshot)
    except (ValueError, OverflowError):
        return path, None
    return base, snapshot
