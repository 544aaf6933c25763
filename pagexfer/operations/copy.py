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
import logging
import time
# non-stdlib imports
# local imports
import pagexfer.errors
import pagexfer.operations.azure.blob
import pagexfer.util

# create logger
logger = logging.getLogger(__name__)
# global defines
_MIN_POLL_INTERVAL = 1
_MAX_POLL_INTERVAL = 30
_INITIAL_POLL_INTERVAL = 5


def compute_poll_interval(progress, elapsed):
    # type: (str, float) -> float
    """Estimate how long to wait before polling copy status again
    :param str progress: copy progress in the form copied/total
    :param float elapsed: seconds since the copy started
    :rtype: float
    :return: seconds to wait
    """
    copied, total = (int(x) for x in progress.split('/'))
    if copied == 0:
        interval = _INITIAL_POLL_INTERVAL
    else:
        interval = float(total - copied) / copied * elapsed
    return min(max(interval, _MIN_POLL_INTERVAL), _MAX_POLL_INTERVAL)


def _wait_for_copy(ase, source_uri, copy_id, status, timeout):
    # type: (pagexfer.models.azure.StorageEntity, str, str, str, int) -> None
    """Poll a pending copy until it leaves the pending state
    :param pagexfer.models.azure.StorageEntity ase: destination entity
    :param str source_uri: source blob uri
    :param str copy_id: copy id
    :param str status: initial copy status
    :param int timeout: timeout
    """
    start = time.time()
    description = None
    while status == 'pending':
        blob = pagexfer.operations.azure.blob.get_blob_properties(
            ase.client, ase.container, ase.name, timeout=timeout)
        if blob is None:
            raise pagexfer.errors.CopyError(
                'copy destination {} no longer exists'.format(ase.path))
        props = blob.properties.copy
        if copy_id is not None and props.id != copy_id:
            raise pagexfer.errors.CopyError(
                ('copy of {} to {} was interrupted by another copy '
                 'operation').format(source_uri, ase.path))
        status = props.status
        description = props.status_description
        if status != 'pending':
            break
        logger.debug('copy progress for {}: {}'.format(
            ase.path, props.progress))
        time.sleep(compute_poll_interval(props.progress, time.time() - start))
    if status != 'success':
        raise pagexfer.errors.CopyError(
            'failed to copy {} to {}: status={} description={}'.format(
                source_uri, ase.path, status, description))


def copy_blob(ase, source_uri, timeout=None):
    # type: (pagexfer.models.azure.StorageEntity, str, int) -> None
    """Server-side copy a blob into the entity and wait for completion. The
    destination is deleted if the copy does not succeed.
    :param pagexfer.models.azure.StorageEntity ase: destination entity
    :param str source_uri: source blob uri, including any sas
    :param int timeout: timeout
    """
    if pagexfer.util.is_none_or_empty(source_uri):
        raise ValueError('copy source uri is invalid')
    start = pagexfer.util.datetime_now()
    try:
        props = ase.client.copy_blob(
            container_name=ase.container, blob_name=ase.name,
            copy_source=source_uri, timeout=timeout)
        logger.info('copy id: {}, copy status: {}'.format(
            props.id, props.status))
        _wait_for_copy(ase, source_uri, props.id, props.status, timeout)
    except Exception:
        try:
            pagexfer.operations.azure.blob.delete_blob(
                ase.client, ase.container, ase.name, timeout=timeout)
            logger.info('deleted blob {}'.format(ase.path))
        except Exception as e:
            logger.warning('failed to delete blob {}: {}'.format(
                ase.path, e))
        raise
    logger.info('copied {} to {} in {:.3f} sec'.format(
        source_uri, ase.path,
        (pagexfer.util.datetime_now() - start).total_seconds()))
