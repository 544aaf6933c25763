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


class StorageEntity(object):
    """Azure Page Blob Entity"""
    def __init__(self, container, name, client=None, snapshot=None):
        # type: (StorageEntity, str, str,
        #        azure.storage.blob.PageBlobService, str) -> None
        """Ctor for StorageEntity
        :param StorageEntity self: this
        :param str container: container name
        :param str name: blob name
        :param azure.storage.blob.PageBlobService client: page blob client
        :param str snapshot: snapshot time
        """
        self._client = client
        self._container = container
        self._name = name
        self._snapshot = snapshot
        self._size = None
        self._create_containers = None

    @property
    def client(self):
        # type: (StorageEntity) -> azure.storage.blob.PageBlobService
        """Associated storage client
        :param StorageEntity self: this
        :rtype: azure.storage.blob.PageBlobService
        :return: associated storage client
        """
        return self._client

    @property
    def container(self):
        # type: (StorageEntity) -> str
        """Container name
        :param StorageEntity self: this
        :rtype: str
        :return: name of container
        """
        return self._container

    @property
    def name(self):
        # type: (StorageEntity) -> str
        """Entity name
        :param StorageEntity self: this
        :rtype: str
        :return: name of entity
        """
        return self._name

    @property
    def path(self):
        # type: (StorageEntity) -> str
        """Entity path
        :param StorageEntity self: this
        :rtype: str
        :return: remote path of entity
        """
        return '{}/{}'.format(self._container, self._name)

    @property
    def snapshot(self):
        # type: (StorageEntity) -> str
        """Entity snapshot
        :param StorageEntity self: this
        :rtype: str
        :return: snapshot time or None
        """
        return self._snapshot

    @property
    def size(self):
        # type: (StorageEntity) -> int
        """Entity size
        :param StorageEntity self: this
        :rtype: int
        :return: size of entity
        """
        return self._size

    @size.setter
    def size(self, value):
        # type: (StorageEntity, int) -> None
        """Set entity size
        :param StorageEntity self: this
        :param int value: value
        """
        self._size = value

    @property
    def create_containers(self):
        # type: (StorageEntity) -> bool
        """Create containers
        :param StorageEntity self: this
        :rtype: bool
        :return: create containers
        """
        return self._create_containers

    @create_containers.setter
    def create_containers(self, value):
        # type: (StorageEntity, bool) -> None
        """Set create containers
        :param StorageEntity self: this
        :param bool value: value
        """
        self._create_containers = value

    def populate_from_blob(self, blob):
        # type: (StorageEntity, azure.storage.blob.models.Blob) -> None
        """Populate properties from a remote blob
        :param StorageEntity self: this
        :param azure.storage.blob.models.Blob blob: blob to populate from
        """
        self._name = blob.name
        self._snapshot = blob.snapshot
        self._size = blob.properties.content_length
