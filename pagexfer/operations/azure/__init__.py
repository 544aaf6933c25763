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
import re
# non-stdlib imports
import requests
# local imports
import pagexfer.models.azure
import pagexfer.operations.azure.blob.page
import pagexfer.util


class StorageCredentials(object):
    """Azure Storage Credentials"""
    def __init__(self, general_options):
        # type: (StorageCredentials, pagexfer.models.options.General) -> None
        """Ctor for StorageCredentials
        :param StorageCredentials self: this
        :param pagexfer.models.options.General: general options
        """
        self._storage_accounts = {}
        self._general_options = general_options

    def add_storage_account(self, name, key, endpoint):
        # type: (StorageCredentials, str, str, str) -> None
        """Add a storage account
        :param StorageCredentials self: this
        :param str name: name of storage account to store
        :param str key: storage key or sas
        :param str endpoint: endpoint
        """
        if name in self._storage_accounts:
            raise ValueError(
                '{} already exists in storage accounts'.format(name))
        self._storage_accounts[name] = StorageAccount(
            name, key, endpoint,
            self._general_options.concurrency.worker_threads,
            self._general_options.timeout,
            self._general_options.proxy,
        )

    def get_storage_account(self, name):
        # type: (StorageCredentials, str) -> StorageAccount
        """Get storage account details
        :param StorageCredentials self: this
        :param str name: name of storage account to retrieve
        :rtype: StorageAccount
        :return: storage account details
        """
        try:
            return self._storage_accounts[name]
        except KeyError:
            raise ValueError(
                'no credentials configured for storage account: {}'.format(
                    name))


class StorageAccount(object):
    """Azure Storage Account"""
    _VALID_BASE64_RE = re.compile(
        '^([A-Za-z0-9+/]{4})*([A-Za-z0-9+/]{4}|[A-Za-z0-9+/]{3}=|'
        '[A-Za-z0-9+/]{2}==)$')

    def __init__(self, name, key, endpoint, worker_threads, timeout, proxy):
        # type: (StorageAccount, str, str, str, int,
        #        pagexfer.models.options.Timeout,
        #        pagexfer.models.options.HttpProxy) -> None
        """Ctor for StorageAccount
        :param str name: name of storage account
        :param str key: storage key or sas
        :param str endpoint: endpoint
        :param int worker_threads: number of upload worker threads
        :param pagexfer.models.options.Timeout timeout: timeout
        :param pagexfer.models.options.HttpProxy proxy: proxy
        """
        if pagexfer.util.is_none_or_empty(key):
            raise ValueError(
                ('no authentication credential given for storage '
                 'account: {}').format(name))
        self._endpoint = None
        self.name = name
        self.key = key
        self.endpoint = endpoint
        self.is_sas = StorageAccount._key_is_sas(self.key)
        self.create_containers = self._container_creation_allowed()
        if self.is_sas:
            # normalize sas keys
            if self.key.startswith('?'):
                self.key = self.key[1:]
        else:
            if StorageAccount._VALID_BASE64_RE.match(self.key) is None:
                raise ValueError(
                    ('specified storage account key is invalid for storage '
                     'account: {}').format(self.name))
        # each worker holds one connection at a time
        self.session = requests.Session()
        self.session.mount(
            'https://',
            requests.adapters.HTTPAdapter(
                pool_connections=worker_threads,
                pool_maxsize=worker_threads << 1,
                pool_block=False,
            )
        )
        self._page_blob_client = \
            pagexfer.operations.azure.blob.page.create_client(
                self, timeout, proxy)

    @property
    def endpoint(self):
        # type: (StorageAccount) -> str
        """Get endpoint
        :param StorageAccount self: this
        :rtype: str
        :return: endpoint
        """
        return self._endpoint

    @endpoint.setter
    def endpoint(self, value):
        # type: (StorageAccount, str) -> None
        """Set endpoint
        :param StorageAccount self: this
        :param str value: endpoint
        """
        tmp = value.split('.')
        if (len(tmp) <= 1 or not tmp[0].isalnum()):
            raise ValueError('endpoint is invalid: {}'.format(value))
        self._endpoint = value

    @staticmethod
    def _key_is_sas(key):
        # type: (str) -> bool
        """Determine if key is a sas
        :param str key: key to parse
        :rtype: bool
        :return: if key is a sas
        """
        # ? and & are outside of the base-64 character range
        if key.startswith('?'):
            return True
        tmp = key.split('&')
        if len(tmp) == 1:
            return False
        return any(x.startswith('sig=') for x in tmp)

    def _container_creation_allowed(self):
        # type: (StorageAccount) -> bool
        """Check if container creation is allowed
        :param StorageAccount self: this
        :rtype: bool
        :return: if container creation is allowed
        """
        if not self.is_sas:
            return True
        # search for account sas "c" resource
        for part in self.key.split('&'):
            tmp = part.split('=')
            if tmp[0] == 'srt' and len(tmp) > 1 and 'c' in tmp[1]:
                return True
        return False

    @property
    def page_blob_client(self):
        # type: (StorageAccount) -> azure.storage.blob.PageBlobService
        """Get page blob client
        :param StorageAccount self: this
        :rtype: azure.storage.blob.PageBlobService
        :return: page blob client
        """
        return self._page_blob_client

    def create_entity(self, container, name, snapshot=None):
        # type: (StorageAccount, str, str, str) ->
        #        pagexfer.models.azure.StorageEntity
        """Create a page blob entity bound to this account
        :param StorageAccount self: this
        :param str container: container name
        :param str name: blob name
        :param str snapshot: snapshot time
        :rtype: pagexfer.models.azure.StorageEntity
        :return: storage entity
        """
        ase = pagexfer.models.azure.StorageEntity(
            container, name, client=self._page_blob_client,
            snapshot=snapshot)
        ase.create_containers = self.create_containers
        return ase
