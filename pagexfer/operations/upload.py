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
import enum
import logging
import threading
import time
# non-stdlib imports
# local imports
import pagexfer.errors
import pagexfer.models.upload
import pagexfer.operations.azure.blob
import pagexfer.operations.azure.blob.page
import pagexfer.operations.md5
import pagexfer.operations.progress
import pagexfer.util

# create logger
logger = logging.getLogger(__name__)


class UploadState(enum.Enum):
    NotStarted = 1
    BlobAllocated = 2
    Uploading = 3
    Completed = 4
    Aborting = 5
    Aborted = 6


class Uploader(object):
    """Uploader of a local disk image to a page blob"""
    def __init__(self, general_options, creds, spec):
        # type: (Uploader, pagexfer.models.options.General,
        #        pagexfer.operations.azure.StorageCredentials,
        #        pagexfer.models.upload.Specification) -> None
        """Ctor for Uploader
        :param Uploader self: this
        :param pagexfer.models.options.General general_options: general opts
        :param pagexfer.operations.azure.StorageCredentials creds: creds
        :param pagexfer.models.upload.Specification spec: upload spec
        """
        self._general_options = general_options
        self._creds = creds
        self._spec = spec
        self._chunk_queue = pagexfer.models.upload.ChunkQueue()
        self._upload_lock = threading.Lock()
        self._upload_threads = []
        self._upload_start_time = None
        self._upload_total = 0
        self._upload_sofar = 0
        self._upload_bytes_total = 0
        self._upload_bytes_sofar = 0
        self._chunks_skipped = 0
        self._state = UploadState.NotStarted
        self._blob_created = False
        self._first_error = None
        self._containers_created = set()

    @property
    def state(self):
        # type: (Uploader) -> UploadState
        """Current state of the upload operation
        :param Uploader self: this
        :rtype: UploadState
        :return: upload state
        """
        with self._upload_lock:
            return self._state

    @property
    def aborted(self):
        # type: (Uploader) -> bool
        """Check if the upload was aborted
        :param Uploader self: this
        :rtype: bool
        :return: if aborted
        """
        with self._upload_lock:
            return self._state in (UploadState.Aborting, UploadState.Aborted)

    @property
    def blob_created(self):
        # type: (Uploader) -> bool
        """Check if the remote page blob was created
        :param Uploader self: this
        :rtype: bool
        :return: if the page blob was created
        """
        return self._blob_created

    @property
    def first_error(self):
        # type: (Uploader) -> Exception
        """First terminal error raised by a worker
        :param Uploader self: this
        :rtype: Exception
        :return: first error or None
        """
        with self._upload_lock:
            return self._first_error

    def _set_state(self, state):
        # type: (Uploader, UploadState) -> None
        """Transition the upload state
        :param Uploader self: this
        :param UploadState state: new state
        """
        with self._upload_lock:
            logger.debug('upload state {} -> {}'.format(
                self._state.name, state.name))
            self._state = state

    def _abort(self, ex):
        # type: (Uploader, Exception) -> None
        """Stop all workers from starting new chunks and record the error
        :param Uploader self: this
        :param Exception ex: error that caused the abort
        """
        dropped = self._chunk_queue.clear()
        with self._upload_lock:
            if self._first_error is not None:
                return
            self._first_error = ex
            self._state = UploadState.Aborting
        logger.error(
            'aborting upload, {} pending chunks dropped: {}'.format(
                dropped, ex))

    def _update_progress(self, chunk, written):
        # type: (Uploader, pagexfer.models.upload.Chunk, bool) -> None
        """Account for a processed chunk
        :param Uploader self: this
        :param pagexfer.models.upload.Chunk chunk: chunk
        :param bool written: if the chunk was written or skipped
        """
        with self._upload_lock:
            self._upload_sofar += 1
            self._upload_bytes_sofar += chunk.length
            if not written:
                self._chunks_skipped += 1
            sofar = self._upload_sofar
            bytes_sofar = self._upload_bytes_sofar
        pagexfer.operations.progress.update_progress_bar(
            self._general_options,
            self._upload_start_time,
            self._upload_total,
            sofar,
            self._upload_bytes_total,
            bytes_sofar,
        )

    def _put_chunk(self, ase, chunk, data, attempt):
        # type: (Uploader, pagexfer.models.azure.StorageEntity,
        #        pagexfer.models.upload.Chunk, bytes, int) -> None
        """Write a chunk as pages, once
        :param Uploader self: this
        :param pagexfer.models.azure.StorageEntity ase: Storage entity
        :param pagexfer.models.upload.Chunk chunk: chunk
        :param bytes data: chunk data
        :param int attempt: attempt number
        """
        end_range = chunk.end_range
        # page writes must end on a page boundary
        aligned = \
            pagexfer.operations.azure.blob.page.page_align_content_length(
                chunk.length)
        if aligned != chunk.length:
            data = data.ljust(aligned, b'\0')
            end_range = chunk.start_range + aligned - 1
        try:
            pagexfer.operations.azure.blob.page.put_page(
                ase, chunk.start_range, end_range, data,
                timeout=self._general_options.timeout.operation)
        except Exception as e:
            raise pagexfer.errors.TransientWriteError(
                chunk, attempt, e) from e

    def _put_chunk_with_retry(self, ase, chunk, data):
        # type: (Uploader, pagexfer.models.azure.StorageEntity,
        #        pagexfer.models.upload.Chunk, bytes) -> None
        """Write a chunk, retrying with a fixed delay. Retries stop once the
        upload is aborted.
        :param Uploader self: this
        :param pagexfer.models.azure.StorageEntity ase: Storage entity
        :param pagexfer.models.upload.Chunk chunk: chunk
        :param bytes data: chunk data
        """
        retry = self._general_options.retry
        retry_count = 0
        while True:
            logger.debug('uploading chunk {} retry {}'.format(
                chunk, retry_count))
            try:
                self._put_chunk(ase, chunk, data, retry_count + 1)
                return
            except pagexfer.errors.TransientWriteError as e:
                logger.warning(str(e))
                retry_count += 1
                if retry_count > retry.max_retries or self.aborted:
                    # keep other workers from uploading other chunks
                    self._chunk_queue.clear()
                    raise pagexfer.errors.ChunkWriteError(
                        chunk, retry_count, e.cause) from e.cause
                time.sleep(retry.delay)
                # another worker may have aborted during the delay
                if self.aborted:
                    raise pagexfer.errors.ChunkWriteError(
                        chunk, retry_count, e.cause) from e.cause

    def _worker_thread_upload(self, local_path, ase):
        # type: (Uploader, pathlib.Path,
        #        pagexfer.models.azure.StorageEntity) -> None
        """Worker thread upload
        :param Uploader self: this
        :param pathlib.Path local_path: local disk image
        :param pagexfer.models.azure.StorageEntity ase: Storage entity
        """
        max_chunk_size = self._spec.options.chunk_size_bytes
        try:
            with local_path.open('rb') as fd:
                while True:
                    chunk = self._chunk_queue.pop()
                    if chunk is None:
                        break
                    data = chunk.read(fd)
                    if pagexfer.operations.md5.check_chunk_is_empty(
                            data, max_chunk_size):
                        logger.debug('skipping empty chunk {}'.format(chunk))
                        self._update_progress(chunk, False)
                        continue
                    self._put_chunk_with_retry(ase, chunk, data)
                    self._update_progress(chunk, True)
        except Exception as e:
            self._abort(e)

    def _initialize_upload_threads(self, local_path, ase, num_workers):
        # type: (Uploader, pathlib.Path,
        #        pagexfer.models.azure.StorageEntity, int) -> None
        """Initialize upload threads
        :param Uploader self: this
        :param pathlib.Path local_path: local disk image
        :param pagexfer.models.azure.StorageEntity ase: Storage entity
        :param int num_workers: number of worker threads
        """
        logger.debug('spawning {} upload threads'.format(num_workers))
        for i in range(num_workers):
            thr = threading.Thread(
                target=self._worker_thread_upload, args=(local_path, ase),
                name='pagexfer-upload-{}'.format(i))
            thr.start()
            self._upload_threads.append(thr)

    def _wait_for_upload_threads(self):
        # type: (Uploader) -> None
        """Wait for upload threads
        :param Uploader self: this
        """
        for thr in self._upload_threads:
            thr.join()

    def _cleanup_blob(self, ase):
        # type: (Uploader, pagexfer.models.azure.StorageEntity) -> None
        """Delete a partially written page blob, best effort
        :param Uploader self: this
        :param pagexfer.models.azure.StorageEntity ase: Storage entity
        """
        logger.info('deleting partially uploaded page blob {}'.format(
            ase.path))
        try:
            pagexfer.operations.azure.blob.delete_blob(
                ase.client, ase.container, ase.name,
                timeout=self._general_options.timeout.operation)
        except Exception as e:
            logger.error('failed to delete page blob {}: {}'.format(
                ase.path, e))

    def upload(self, local_path, ase, num_workers):
        # type: (Uploader, pathlib.Path,
        #        pagexfer.models.azure.StorageEntity, int) -> None
        """Upload a local file to a page blob with a pool of workers. On
        failure the page blob is deleted and the first error is raised. An
        Uploader performs a single upload.
        :param Uploader self: this
        :param pathlib.Path local_path: local disk image
        :param pagexfer.models.azure.StorageEntity ase: Storage entity
        :param int num_workers: number of worker threads
        """
        if num_workers < 1:
            raise ValueError(
                'invalid number of workers: {}'.format(num_workers))
        if self.state != UploadState.NotStarted:
            raise RuntimeError(
                'upload already performed, state: {}'.format(
                    self.state.name))
        ase.size = local_path.stat().st_size
        logger.debug('creating page blob {} of size {}'.format(
            ase.path, ase.size))
        try:
            pagexfer.operations.azure.blob.page.create_blob(
                ase, timeout=self._general_options.timeout.operation)
        except Exception as e:
            raise pagexfer.errors.AllocationError(ase.path, ase.size) from e
        self._blob_created = True
        self._set_state(UploadState.BlobAllocated)
        chunks = pagexfer.models.upload.compute_chunks(
            ase.size, self._spec.options.chunk_size_bytes)
        for chunk in chunks:
            self._chunk_queue.push(chunk)
        with self._upload_lock:
            self._upload_total = len(chunks)
            self._upload_bytes_total = ase.size
        logger.info('uploading {} chunks of {} to {}'.format(
            len(chunks), local_path, ase.path))
        self._upload_start_time = pagexfer.util.datetime_now()
        self._set_state(UploadState.Uploading)
        try:
            self._initialize_upload_threads(local_path, ase, num_workers)
            self._wait_for_upload_threads()
        except KeyboardInterrupt as e:
            logger.info(
                'KeyboardInterrupt detected, waiting for in-flight chunks '
                'to complete...')
            self._abort(e)
            self._wait_for_upload_threads()
        except Exception as e:
            logger.error('failed to run upload threads: {}'.format(e))
            self._abort(e)
            self._wait_for_upload_threads()
        if self.first_error is not None:
            self._set_state(UploadState.Aborted)
            self._cleanup_blob(ase)
            raise self.first_error
        self._set_state(UploadState.Completed)
        logger.debug('{} of {} chunks skipped as empty'.format(
            self._chunks_skipped, self._upload_total))

    def _run(self):
        # type: (Uploader) -> None
        """Execute Uploader
        :param Uploader self: this
        """
        start_time = pagexfer.util.datetime_now()
        logger.info('pagexfer start time: {0}'.format(start_time))
        if not self._spec.local_path.is_file():
            raise ValueError('local path is not a file: {}'.format(
                self._spec.local_path))
        sa = self._creds.get_storage_account(self._spec.storage_account)
        ase = sa.create_entity(self._spec.container, self._spec.name)
        if self._spec.options.create_container:
            pagexfer.operations.azure.blob.create_container(
                ase, self._containers_created,
                timeout=self._general_options.timeout.operation)
        self.upload(
            self._spec.local_path, ase,
            self._general_options.concurrency.worker_threads)
        end_time = pagexfer.util.datetime_now()
        # output throughput
        ultime = (end_time - self._upload_start_time).total_seconds()
        if ultime > 0:
            mibup = self._upload_bytes_total / pagexfer.util.MEGABYTE
            mibps = mibup / ultime
            logger.info(
                ('elapsed upload time and throughput of {0:.4f} GiB: '
                 '{1:.3f} sec, {2:.4f} Mbps ({3:.3f} MiB/s)').format(
                     mibup / 1024, ultime, mibps * 8, mibps))
        logger.info('pagexfer end time: {0} (elapsed: {1:.3f} sec)'.format(
            end_time, (end_time - start_time).total_seconds()))

    def start(self):
        # type: (Uploader) -> None
        """Start the Uploader
        :param Uploader self: this
        """
        try:
            pagexfer.operations.progress.output_parameters(
                self._general_options, self._spec)
            self._run()
        except (KeyboardInterrupt, Exception) as ex:
            if isinstance(ex, KeyboardInterrupt):
                logger.info('upload interrupted')
            else:
                logger.exception(ex)
            raise
