# coding=utf-8
"""Tests for page blob operations"""

# stdlib imports
import unittest.mock as mock
# non-stdlib imports
import azure.storage.blob
import azure.storage.common
# local imports
import pagexfer.models.azure as azmodels
import pagexfer.retry
import pagexfer.version
# module under test
import pagexfer.operations.azure as azops
import pagexfer.operations.azure.blob.page as ops


def test_page_align_content_length():
    assert 0 == ops.page_align_content_length(0)
    assert 512 == ops.page_align_content_length(1)
    assert 512 == ops.page_align_content_length(511)
    assert 512 == ops.page_align_content_length(512)
    assert 1024 == ops.page_align_content_length(513)
    assert 1024 == ops.page_align_content_length(1024)
    assert 1536 == ops.page_align_content_length(1025)


def test_get_mime_type():
    assert ops.get_mime_type('b.txt') == 'text/plain'
    assert ops.get_mime_type(
        'c.cant_determine_this') == 'application/octet-stream'


def test_create_client():
    to = mock.MagicMock()
    to.max_retries = None

    sa = azops.StorageAccount(
        'name', 'AAAAAA==', 'core.windows.net', 10, to, mock.MagicMock())
    client = ops.create_client(sa, to, mock.MagicMock())
    assert client is not None
    assert isinstance(client, azure.storage.blob.PageBlobService)
    assert isinstance(
        client.authentication,
        azure.storage.common._auth._StorageSharedKeyAuthentication)
    assert client._USER_AGENT_STRING.startswith(
        'pagexfer/{}'.format(pagexfer.version.__version__))
    assert client._httpclient.proxies is not None
    assert isinstance(
        client.retry.__self__, pagexfer.retry.ExponentialRetryWithMaxWait)

    sa = azops.StorageAccount(
        'name', '?key&sig=key', 'core.windows.net', 10, to, None)
    client = ops.create_client(sa, to, None)
    assert client is not None
    assert isinstance(client, azure.storage.blob.PageBlobService)
    assert isinstance(
        client.authentication,
        azure.storage.common._auth._StorageSASAuthentication)
    assert client._USER_AGENT_STRING.startswith(
        'pagexfer/{}'.format(pagexfer.version.__version__))
    assert client._httpclient.proxies is None


def test_create_blob():
    ase = azmodels.StorageEntity('cont', 'disk.vhd', client=mock.MagicMock())
    ase.size = 1000

    ops.create_blob(ase, timeout=30)
    assert ase.client.create_blob.call_count == 1
    kwargs = ase.client.create_blob.call_args[1]
    assert kwargs['container_name'] == 'cont'
    assert kwargs['blob_name'] == 'disk.vhd'
    assert kwargs['content_length'] == 1024
    assert kwargs['timeout'] == 30


def test_put_page():
    ase = azmodels.StorageEntity('cont', 'disk.vhd', client=mock.MagicMock())

    ops.put_page(ase, 512, 1023, b'\x01' * 512, timeout=10)
    ase.client.update_page.assert_called_once_with(
        container_name='cont',
        blob_name='disk.vhd',
        page=b'\x01' * 512,
        start_range=512,
        end_range=1023,
        validate_content=False,
        timeout=10,
    )
