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
import mimetypes
# non-stdlib imports
import azure.storage.blob
import azure.storage.blob.models
# local imports
import pagexfer.models.upload
import pagexfer.retry

# create logger
logger = logging.getLogger(__name__)


def page_align_content_length(length):
    # type: (int) -> int
    """Round a length up to the next page boundary
    :param int length: content length
    :rtype: int
    :return: page aligned content length
    """
    mod = length % pagexfer.models.upload.PAGE_SIZE_BYTES
    if mod != 0:
        return length + pagexfer.models.upload.PAGE_SIZE_BYTES - mod
    return length


def get_mime_type(filename):
    # type: (str) -> str
    """Guess the content type of a blob from its name
    :param str filename: blob name
    :rtype: str
    :return: mime type
    """
    return (mimetypes.guess_type(filename)[0] or
            'application/octet-stream')


def create_client(storage_account, timeout, proxy):
    # type: (pagexfer.operations.azure.StorageAccount,
    #        pagexfer.models.options.Timeout,
    #        pagexfer.models.options.HttpProxy) -> PageBlobService
    """Create page blob client
    :param pagexfer.operations.azure.StorageAccount storage_account:
        storage account
    :param pagexfer.models.options.Timeout timeout: timeout
    :param pagexfer.models.options.HttpProxy proxy: proxy
    :rtype: PageBlobService
    :return: page blob service client
    """
    if storage_account.is_sas:
        client = azure.storage.blob.PageBlobService(
            account_name=storage_account.name,
            sas_token=storage_account.key,
            endpoint_suffix=storage_account.endpoint,
            request_session=storage_account.session,
            socket_timeout=timeout.timeout)
    else:
        client = azure.storage.blob.PageBlobService(
            account_name=storage_account.name,
            account_key=storage_account.key,
            endpoint_suffix=storage_account.endpoint,
            request_session=storage_account.session,
            socket_timeout=timeout.timeout)
    # set proxy
    if proxy is not None:
        client.set_proxy(
            proxy.host, proxy.port, proxy.username, proxy.password)
    # set retry policy
    client.retry = pagexfer.retry.ExponentialRetryWithMaxWait(
        max_retries=timeout.max_retries).retry
    return client


def create_blob(ase, timeout=None):
    # type: (pagexfer.models.azure.StorageEntity, int) -> None
    """Create page blob sized to hold the entity
    :param pagexfer.models.azure.StorageEntity ase: Azure StorageEntity
    :param int timeout: timeout
    """
    ase.client.create_blob(
        container_name=ase.container,
        blob_name=ase.name,
        content_length=page_align_content_length(ase.size),
        content_settings=azure.storage.blob.models.ContentSettings(
            content_type=get_mime_type(ase.name)
        ),
        timeout=timeout)  # noqa


def put_page(ase, page_start, page_end, data, timeout=None):
    # type: (pagexfer.models.azure.StorageEntity,
    #        int, int, bytes, int) -> None
    """Puts a page into remote blob
    :param pagexfer.models.azure.StorageEntity ase: Azure StorageEntity
    :param int page_start: page range start
    :param int page_end: page range end
    :param bytes data: data
    :param int timeout: timeout
    """
    ase.client.update_page(
        container_name=ase.container,
        blob_name=ase.name,
        page=data,
        start_range=page_start,
        end_range=page_end,
        validate_content=False,  # integrity is enforced with HTTPS
        timeout=timeout)  # noqa
