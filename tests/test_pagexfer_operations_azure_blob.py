# coding=utf-8
"""Tests for general blob operations"""

# stdlib imports
import unittest.mock as mock
# non-stdlib imports
import azure.common
import azure.storage.blob
# module under test
import pagexfer.operations.azure.blob as ops


def test_get_blob_properties():
    client = mock.MagicMock()
    client.get_blob_properties.side_effect = \
        azure.common.AzureMissingResourceHttpError('msg', 404)
    assert ops.get_blob_properties(client, 'cont', 'name') is None

    blob = mock.MagicMock()
    client = mock.MagicMock()
    client.get_blob_properties.return_value = blob
    assert ops.get_blob_properties(
        client, 'cont', 'name', snapshot='snap', timeout=5) is blob
    client.get_blob_properties.assert_called_once_with(
        container_name='cont', blob_name='name', snapshot='snap', timeout=5)


def test_list_blobs():
    client = mock.MagicMock()
    page = mock.MagicMock()
    page.name = 'page.vhd'
    page.properties.blob_type = azure.storage.blob.models._BlobTypes.PageBlob
    block = mock.MagicMock()
    block.name = 'block.txt'
    block.properties.blob_type = \
        azure.storage.blob.models._BlobTypes.BlockBlob
    client.list_blobs.return_value = [block, page, block]

    blobs = list(ops.list_blobs(client, 'cont', prefix='p'))
    assert len(blobs) == 1
    assert blobs[0].name == 'page.vhd'
    assert client.list_blobs.call_args[1]['prefix'] == 'p'

    list(ops.list_blobs(client, 'cont', prefix=''))
    assert client.list_blobs.call_args[1]['prefix'] is None


def test_delete_blob():
    client = mock.MagicMock()
    ops.delete_blob(client, 'cont', 'name', timeout=5)
    client.delete_blob.assert_called_once_with(
        container_name='cont',
        blob_name='name',
        delete_snapshots=azure.storage.blob.models.DeleteSnapshot.Include,
        timeout=5,
    )

    client = mock.MagicMock()
    ops.delete_blob(client, 'cont', 'name', snapshot='snap')
    client.delete_blob.assert_called_once_with(
        container_name='cont',
        blob_name='name',
        snapshot='snap',
        timeout=None,
    )


def test_get_blob_uri():
    client = mock.MagicMock()
    client.make_blob_url.return_value = 'https://sa/cont/name'
    assert ops.get_blob_uri(client, 'cont', 'name') == 'https://sa/cont/name'
    client.make_blob_url.assert_called_once_with(
        container_name='cont', blob_name='name', snapshot=None)


def test_snapshot_blob():
    client = mock.MagicMock()
    client.snapshot_blob.return_value.snapshot = \
        '2017-02-23T22:21:14.8121864Z'
    snapshot = ops.snapshot_blob(client, 'cont', 'name', metadata={'a': 'b'})
    assert snapshot == '2017-02-23T22:21:14.8121864Z'
    assert client.snapshot_blob.call_args[1]['metadata'] == {'a': 'b'}


def test_create_container():
    ase = mock.MagicMock()
    ase.create_containers = False

    ops.create_container(ase, None)
    assert ase.client.create_container.call_count == 0

    ase.create_containers = True
    ase.client.account_name = 'sa'
    ase.container = 'cont'

    cc = set()
    ase.client.create_container.return_value = True
    ops.create_container(ase, cc)
    assert len(cc) == 1

    ase.client.create_container.return_value = False
    ops.create_container(ase, cc)
    assert len(cc) == 1
    assert ase.client.create_container.call_count == 1

    ase.container = 'cont2'
    ops.create_container(ase, cc)
    assert len(cc) == 2

    ops.create_container(ase, cc)
    assert len(cc) == 2


def test_container_exists():
    client = mock.MagicMock()
    assert ops.container_exists(client, 'cont')

    client.get_container_properties.side_effect = \
        azure.common.AzureMissingResourceHttpError('msg', 404)
    assert not ops.container_exists(client, 'cont')
