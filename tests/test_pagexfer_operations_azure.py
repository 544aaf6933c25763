# coding=utf-8
"""Tests for operations azure"""

# stdlib imports
import unittest.mock as mock
# non-stdlib imports
import azure.storage.blob
import pytest
# local imports
import pagexfer.models.azure as azmodels
import pagexfer.models.options as options
# module under test
import pagexfer.operations.azure as azops


def _general_options():
    return options.General(
        concurrency=options.Concurrency(worker_threads=4),
        timeout=options.Timeout(connect=None, read=None, max_retries=None),
    )


def test_storage_credentials():
    creds = azops.StorageCredentials(_general_options())

    with pytest.raises(ValueError):
        creds.add_storage_account('sa1', '', 'core.windows.net')

    with pytest.raises(ValueError):
        creds.add_storage_account(
            'sa1', 'somekey1', 'https://blob.core.windows.net')

    creds.add_storage_account('sa1', 'somekey1', 'core.windows.net')

    a = creds.get_storage_account('sa1')
    assert a.name == 'sa1'
    assert a.key == 'somekey1'
    assert a.endpoint == 'core.windows.net'
    assert isinstance(
        a.page_blob_client, azure.storage.blob.PageBlobService)

    with pytest.raises(ValueError):
        creds.get_storage_account('sa2')

    with pytest.raises(ValueError):
        creds.add_storage_account('sa1', 'somekeyxx', 'core.windows.net')

    creds.add_storage_account('sa2', 'somekey2', 'core.cloudapi.de')
    a = creds.get_storage_account('sa1')
    b = creds.get_storage_account('sa2')
    assert a.name == 'sa1'
    assert a.endpoint == 'core.windows.net'
    assert b.name == 'sa2'
    assert b.key == 'somekey2'
    assert b.endpoint == 'core.cloudapi.de'


def test_key_is_sas():
    to = mock.MagicMock()
    to.max_retries = None

    a = azops.StorageAccount(
        'name', 'AAAAAA==', 'core.windows.net', 10, to, mock.MagicMock())
    assert not a.is_sas

    with pytest.raises(ValueError):
        azops.StorageAccount(
            'name', 'abcdef&blah', 'core.windows.net', 10, to, None)

    a = azops.StorageAccount(
        'name', '?abcdef', 'core.windows.net', 10, to, None)
    assert a.is_sas
    assert a.key == 'abcdef'

    a = azops.StorageAccount(
        'name', '?sv=0&sr=1&sig=2', 'core.windows.net', 10, to, None)
    assert a.is_sas

    a = azops.StorageAccount(
        'name', 'sv=0&sr=1&sig=2', 'core.windows.net', 10, to, None)
    assert a.is_sas

    a = azops.StorageAccount(
        'name', 'sig=0&sv=0&sr=1&se=2', 'core.windows.net', 10, to, None)
    assert a.is_sas


def test_container_creation_allowed():
    to = mock.MagicMock()
    to.max_retries = None

    a = azops.StorageAccount(
        'name', 'AAAAAA==', 'core.windows.net', 10, to, None)
    assert a._container_creation_allowed()
    assert a.create_containers

    a = azops.StorageAccount(
        'name', '?sv=0&sr=1&sig=2', 'core.windows.net', 10, to, None)
    assert not a._container_creation_allowed()
    assert not a.create_containers

    a = azops.StorageAccount(
        'name', '?sv=0&sr=1&srt=ao&sig=2', 'core.windows.net', 10, to, None)
    assert not a._container_creation_allowed()

    a = azops.StorageAccount(
        'name', '?sv=0&sr=1&srt=co&sig=2', 'core.windows.net', 10, to, None)
    assert a._container_creation_allowed()


def test_endpoint():
    to = mock.MagicMock()
    to.max_retries = None

    a = azops.StorageAccount(
        'name', 'AAAAAA==', 'core.windows.net', 10, to, None)
    with pytest.raises(ValueError):
        a.endpoint = 'core'
    with pytest.raises(ValueError):
        a.endpoint = 'https://core.windows.net'
    assert a.endpoint == 'core.windows.net'


def test_create_entity():
    to = mock.MagicMock()
    to.max_retries = None

    a = azops.StorageAccount(
        'name', '?sv=0&sr=1&sig=2', 'core.windows.net', 10, to, None)
    ase = a.create_entity('cont', 'disk.vhd')
    assert isinstance(ase, azmodels.StorageEntity)
    assert ase.client is a.page_blob_client
    assert ase.path == 'cont/disk.vhd'
    assert ase.snapshot is None
    assert not ase.create_containers

    ase = a.create_entity(
        'cont', 'disk.vhd', snapshot='2017-02-23T22:21:14.8121864Z')
    assert ase.snapshot == '2017-02-23T22:21:14.8121864Z'
