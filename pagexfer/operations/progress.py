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
import os
import platform
import sys
# non-stdlib imports
import azure.storage.blob
import requests
# local imports
import pagexfer.util
import pagexfer.version

# create logger
logger = logging.getLogger(__name__)


def update_progress_bar(
        go, start, total_chunks, chunks_sofar, total_bytes, bytes_sofar):
    # type: (pagexfer.models.options.General, datetime.datetime, int,
    #        int, int, int) -> None
    """Update the progress bar
    :param pagexfer.models.options.General go: general options
    :param datetime.datetime start: start time
    :param int total_chunks: total number of chunks
    :param int chunks_sofar: chunks processed so far
    :param int total_bytes: total number of bytes
    :param int bytes_sofar: bytes processed so far
    """
    if (go.quiet or not go.progress_bar or
            pagexfer.util.is_none_or_empty(go.log_file) or
            start is None):
        return
    diff = (pagexfer.util.datetime_now() - start).total_seconds()
    if diff <= 0:
        # arbitrarily give a small delta
        diff = 1e-9
    if total_bytes is None or total_bytes == 0 or bytes_sofar > total_bytes:
        done = 0
    else:
        done = float(bytes_sofar) / total_bytes
    rate = bytes_sofar / pagexfer.util.MEGABYTE / diff
    sys.stdout.write(
        ('\rupload progress: [{0:30s}] {1:.2f}% {2:12.3f} MiB/sec, '
         '{3}/{4} chunks').format(
             '>' * int(done * 30), done * 100, rate, chunks_sofar,
             total_chunks)
    )
    if chunks_sofar == total_chunks:
        sys.stdout.write(os.linesep)
    sys.stdout.flush()


def output_parameters(general_options, spec):
    # type: (pagexfer.models.options.General,
    #        pagexfer.models.upload.Specification) -> None
    """Output parameters
    :param pagexfer.models.options.General general_options: general options
    :param pagexfer.models.upload.Specification spec: upload spec
    """
    if general_options.quiet:
        return
    sep = '============================================'
    log = []
    log.append(sep)
    log.append('         Azure pagexfer parameters')
    log.append(sep)
    log.append('         pagexfer version: {}'.format(
        pagexfer.version.__version__))
    log.append('                 platform: {}'.format(platform.platform()))
    log.append(
        '               components: {}={}-{} azstor.blob={} req={}'.format(
            platform.python_implementation(),
            platform.python_version(),
            '64bit' if sys.maxsize > 2**32 else '32bit',
            azure.storage.blob._constants.__version__,
            requests.__version__,))
    log.append('       transfer direction: {}'.format('local -> Azure'))
    log.append('                  workers: {}'.format(
        general_options.concurrency.worker_threads))
    log.append('                 log file: {}'.format(
        general_options.log_file))
    log.append(
        '                  timeout: connect={} read={} operation={}'.format(
            general_options.timeout.connect, general_options.timeout.read,
            general_options.timeout.operation))
    log.append('              chunk retry: max={} delay={}s'.format(
        general_options.retry.max_retries, general_options.retry.delay))
    log.append('         chunk size bytes: {}'.format(
        spec.options.chunk_size_bytes))
    log.append('         create container: {}'.format(
        spec.options.create_container))
    log.append('        local source path: {}'.format(spec.local_path))
    log.append('       remote destination: {}/{}/{}'.format(
        spec.storage_account, spec.container, spec.name))
    log.append(sep)
    log = os.linesep.join(log)
    if pagexfer.util.is_not_empty(general_options.log_file):
        print(log)
    logger.info('{}{}'.format(os.linesep, log))
