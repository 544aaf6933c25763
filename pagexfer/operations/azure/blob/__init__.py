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
# non-stdlib imports
import azure.common
import azure.storage.blob.models
# local imports
import pagexfer.util

# create logger
logger = logging.getLogger(__name__)


def get_blob_properties(client, container, name, snapshot=None, timeout=None):
    # type: (azure.storage.blob.BaseBlobService, str, str, str, int) ->
    #        azure.storage.blob.models.Blob
    """Get blob properties
    :param azure.storage.blob.BaseBlobService client: blob client
    :param str container: container
    :param str name: blob name
    :param str snapshot: snapshot time
    :param int timeout: timeout
    :rtype: azure.storage.blob.models.Blob
    :return: blob or None if it does not exist
    """
    try:
        return client.get_blob_properties(
            container_name=container, blob_name=name, snapshot=snapshot,
            timeout=timeout)
    except azure.common.AzureMissingResourceHttpError:
        return None


def list_blobs(client, container, prefix=None, timeout=None):
    # type: (azure.storage.blob.BaseBlobService, str, str, int) ->
    #        azure.storage.blob.models.Blob
    """List page blobs in a container
    :param azure.storage.blob.BaseBlobService client: blob client
    :param str container: container
    :param str prefix: name prefix
    :param int timeout: timeout
    :rtype: azure.storage.blob.models.Blob
    :return: generator of blobs
    """
    blobs = client.list_blobs(
        container_name=container,
        prefix=prefix if pagexfer.util.is_not_empty(prefix) else None,
        include=azure.storage.blob.models.Include.METADATA,
        timeout=timeout,
    )
    for blob in blobs:
        if (blob.properties.blob_type !=
                azure.storage.blob.models._BlobTypes.PageBlob):
            continue
        yield blob


def delete_blob(client, container, name, snapshot=None, timeout=None):
    # type: (azure.storage.blob.BaseBlobService, str, str, str, int) -> None
    """Delete blob, including all associated snapshots, or a single snapshot
    :param azure.storage.blob.BaseBlobService client: blob client
    :param str container: container
    :param str name: blob name
    :param str snapshot: snapshot time to delete instead of the base blob
    :param int timeout: timeout
    """
    if snapshot is None:
        client.delete_blob(
            container_name=container,
            blob_name=name,
            delete_snapshots=azure.storage.blob.models.DeleteSnapshot.Include,
            timeout=timeout,
        )
    else:
        client.delete_blob(
            container_name=container,
            blob_name=name,
            snapshot=snapshot,
            timeout=timeout,
        )


def get_blob_uri(client, container, name, snapshot=None):
    # type: (azure.storage.blob.BaseBlobService, str, str, str) -> str
    """Get the URI of a blob, without any credential
    :param azure.storage.blob.BaseBlobService client: blob client
    :param str container: container
    :param str name: blob name
    :param str snapshot: snapshot time
    :rtype: str
    :return: blob uri
    """
    return client.make_blob_url(
        container_name=container, blob_name=name, snapshot=snapshot)


def snapshot_blob(client, container, name, metadata=None, timeout=None):
    # type: (azure.storage.blob.BaseBlobService, str, str, dict, int) -> str
    """Snapshot a blob
    :param azure.storage.blob.BaseBlobService client: blob client
    :param str container: container
    :param str name: blob name
    :param dict metadata: metadata to set on the snapshot
    :param int timeout: timeout
    :rtype: str
    :return: snapshot time
    """
    snapshot = client.snapshot_blob(
        container_name=container,
        blob_name=name,
        metadata=metadata,
        timeout=timeout,
    ).snapshot
    logger.debug('snapshot of {}/{} created at {}'.format(
        container, name, snapshot))
    return snapshot


def create_container(ase, containers_created, timeout=None):
    # type: (pagexfer.models.azure.StorageEntity, set, int) -> None
    """Create blob container
    :param pagexfer.models.azure.StorageEntity ase: Azure StorageEntity
    :param set containers_created: containers already created map
    :param int timeout: timeout
    """
    # check if auth allows create container
    if not ase.create_containers:
        return
    key = ase.client.account_name + ':blob=' + ase.container
    if key in containers_created:
        return
    if ase.client.create_container(
            container_name=ase.container,
            fail_on_exist=False,
            timeout=timeout):
        logger.info(
            'created blob container {} on storage account {}'.format(
                ase.container, ase.client.account_name))
    # always add to set (as it could be pre-existing)
    containers_created.add(key)


def container_exists(client, container, timeout=None):
    # type: (azure.storage.blob.BaseBlobService, str, int) -> bool
    """Check if a container exists
    :param azure.storage.blob.BaseBlobService client: blob client
    :param str container: container
    :param int timeout: timeout
    :rtype: bool
    :return: if container exists
    """
    try:
        client.get_container_properties(
            container_name=container, timeout=timeout)
    except azure.common.AzureMissingResourceHttpError:
        return False
    return True
