# coding=utf-8
"""Tests for cli settings"""

# stdlib imports
# non-stdlib imports
import pytest
# local imports
import pagexfer.models.upload
# module under test
import cli.settings as settings


def _cli_options(**kwargs):
    opts = {
        'storage_account': 'sa',
        'access_key': 'AAAAAA==',
        'remote_path': 'cont/disk.vhd',
    }
    opts.update(kwargs)
    return opts


def test_add_cli_options_upload():
    opts = _cli_options(local_resource='disk.vhd', chunk_size_bytes=4194304)
    settings.add_cli_options(opts, settings.Action.Upload)
    assert opts['_action'] == 'upload'
    assert opts['azure_storage']['accounts'] == {'sa': 'AAAAAA=='}
    assert opts['upload']['source'] == 'disk.vhd'
    assert opts['upload']['destination'] == {'sa': 'cont/disk.vhd'}
    assert opts['upload']['options']['chunk_size_bytes'] == 4194304

    opts = _cli_options(remote_path=None)
    settings.add_cli_options(opts, settings.Action.Upload)
    assert 'source' not in opts['upload']
    assert 'destination' not in opts['upload']

    with pytest.raises(ValueError):
        settings.add_cli_options(_cli_options(), settings.Action.Upload)


def test_add_cli_options_remote():
    opts = _cli_options(sas='?sv=0&sig=1', access_key=None)
    settings.add_cli_options(opts, settings.Action.Delete)
    assert opts['_action'] == 'delete'
    assert opts['azure_storage']['accounts'] == {'sa': '?sv=0&sig=1'}
    assert opts['delete']['storage_account'] == 'sa'
    assert opts['delete']['remote_path'] == 'cont/disk.vhd'

    with pytest.raises(ValueError):
        settings.add_cli_options(
            _cli_options(remote_path=None), settings.Action.Snapshot)


def test_merge_global_settings():
    opts = _cli_options(
        local_resource='disk.vhd', chunk_retries=5, worker_threads=8,
        operation_timeout=60)
    settings.add_cli_options(opts, settings.Action.Upload)
    config = {}
    settings.merge_global_settings(config, opts)
    assert config['azure_storage']['accounts']['sa'] == 'AAAAAA=='
    assert config['upload'] == [
        {'source': 'disk.vhd', 'destination': {'sa': 'cont/disk.vhd'}}]
    assert config['options']['retry']['max_retries'] == 5
    assert config['options']['retry']['delay'] == 10
    assert config['options']['concurrency']['worker_threads'] == 8
    assert config['options']['timeout']['operation'] == 60
    assert config['options']['timeout']['max_retries'] == 1000
    assert config['options']['progress_bar']

    with pytest.raises(ValueError):
        settings.merge_global_settings({'options': {}}, opts)

    with pytest.raises(ValueError):
        settings.merge_global_settings({'version': 2}, opts)

    opts = {'_action': 'list'}
    with pytest.raises(ValueError):
        settings.merge_global_settings({}, opts)

    opts = {'_action': 'bogus'}
    with pytest.raises(ValueError):
        settings.merge_global_settings({'version': 1}, opts)


def test_merge_global_settings_from_config():
    opts = _cli_options(remote_path=None, access_key=None)
    opts.pop('storage_account')
    settings.add_cli_options(opts, settings.Action.Upload)
    config = {
        'version': 1,
        'azure_storage': {
            'endpoint': 'core.windows.net',
            'accounts': {'sa': 'AAAAAA=='},
        },
        'options': {
            'retry': {'max_retries': 1, 'delay': 2},
            'concurrency': {'worker_threads': 3},
            'proxy': {'host': '10.0.0.1:3128'},
        },
        'upload': [
            {
                'source': 'disk.vhd',
                'destination': {'sa': 'cont/disk.vhd'},
                'options': {'chunk_size_bytes': 1048576},
            },
        ],
    }
    settings.merge_global_settings(config, opts)
    assert config['options']['retry'] == {'max_retries': 1, 'delay': 2}
    assert config['options']['concurrency']['worker_threads'] == 3

    go = settings.create_general_options(config)
    assert go.retry.max_retries == 1
    assert go.retry.delay == 2
    assert go.concurrency.worker_threads == 3
    assert go.timeout.operation == 120
    assert go.proxy.host == '10.0.0.1'
    assert go.proxy.port == 3128
    assert go.proxy.username is None

    specs = settings.create_upload_specifications(opts, config)
    assert len(specs) == 1
    assert specs[0].options.chunk_size_bytes == 1048576
    assert specs[0].options.create_container
    assert specs[0].storage_account == 'sa'
    assert specs[0].container == 'cont'
    assert specs[0].name == 'disk.vhd'

    creds = settings.create_azure_storage_credentials(config, go)
    assert creds.get_storage_account('sa').endpoint == 'core.windows.net'


def test_create_general_options_bad_proxy():
    opts = _cli_options(proxy_host='10.0.0.1')
    settings.add_cli_options(opts, settings.Action.Delete)
    config = {}
    settings.merge_global_settings(config, opts)
    with pytest.raises(ValueError):
        settings.create_general_options(config)


def test_create_upload_specifications_defaults():
    opts = _cli_options(local_resource='disk.vhd')
    settings.add_cli_options(opts, settings.Action.Upload)
    config = {}
    settings.merge_global_settings(config, opts)
    specs = settings.create_upload_specifications(opts, config)
    assert len(specs) == 1
    assert specs[0].options.chunk_size_bytes == \
        pagexfer.models.upload.DEFAULT_CHUNK_SIZE_BYTES

    config['upload'].append(
        {'source': 'b.vhd', 'destination': {'sa': 'c/b', 'sb': 'c/b'}})
    with pytest.raises(ValueError):
        settings.create_upload_specifications(opts, config)


def test_get_remote_target():
    opts = _cli_options(
        remote_path='cont/disk.vhd?snapshot=2017-02-23T22:21:14.8121864Z')
    settings.add_cli_options(opts, settings.Action.Delete)
    sa, container, name, snapshot = settings.get_remote_target(opts)
    assert sa == 'sa'
    assert container == 'cont'
    assert name == 'disk.vhd'
    assert snapshot == '2017-02-23T22:21:14.8121864Z'

    opts = _cli_options(remote_path='cont/prefix')
    settings.add_cli_options(opts, settings.Action.List)
    assert settings.get_remote_target(opts) == (
        'sa', 'cont', 'prefix', None)
