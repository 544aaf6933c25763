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
# non-stdlib imports
# local imports
import pagexfer.models.options
import pagexfer.models.upload
import pagexfer.operations.azure
import pagexfer.util


# global defines
_SUPPORTED_YAML_CONFIG_VERSIONS = frozenset((1,))


# enums
class Action(enum.Enum):
    Upload = 1
    Copy = 2
    Snapshot = 3
    Delete = 4
    List = 5


def add_cli_options(cli_options, action):
    # type: (dict, Action) -> None
    """Adds CLI options to the configuration object
    :param dict cli_options: CLI options dict
    :param Action action: action
    """
    cli_options['_action'] = action.name.lower()
    storage_account = cli_options.get('storage_account')
    azstorage = {
        'endpoint': cli_options.get('endpoint')
    }
    if pagexfer.util.is_not_empty(storage_account):
        azstorage['accounts'] = {
            storage_account: (
                cli_options.get('access_key') or cli_options.get('sas')
            )
        }
    remote_path = cli_options.get('remote_path')
    if action == Action.Upload:
        local_resource = cli_options.get('local_resource')
        arg = {
            'source': local_resource,
            'destination': {storage_account: remote_path}
            if remote_path is not None else None,
            'options': {
                'chunk_size_bytes': cli_options.get('chunk_size_bytes'),
                'create_container': cli_options.get('create_container'),
            },
        }
        count = 0
        if arg['source'] is None:
            arg.pop('source')
            count += 1
        if arg['destination'] is None:
            arg.pop('destination')
            count += 1
        if count == 1:
            raise ValueError(
                '--local-path and --remote-path must be specified together '
                'through the commandline')
    else:
        if (pagexfer.util.is_none_or_empty(storage_account) or
                pagexfer.util.is_none_or_empty(remote_path)):
            raise ValueError(
                '--storage-account and --remote-path must be specified for '
                '{}'.format(action.name.lower()))
        arg = {
            'storage_account': storage_account,
            'remote_path': remote_path,
            'source_uri': cli_options.get('source_uri'),
            'metadata': cli_options.get('metadata'),
        }
    if 'accounts' in azstorage:
        cli_options['azure_storage'] = azstorage
    cli_options[action.name.lower()] = arg


def _merge_setting(cli_options, conf, name, name_cli=None, default=None):
    # type: (dict, dict, str, str, Any) -> Any
    """Merge a setting, preferring the CLI option if set
    :param dict cli_options: cli options
    :param dict conf: configuration sub-block
    :param str name: key name
    :param str name_cli: override key name for cli_options
    :param Any default: default value to set if missing
    :rtype: Any
    :return: merged setting value
    """
    val = cli_options.get(name_cli or name)
    if val is None:
        val = conf.get(name, default)
    return val


def merge_global_settings(config, cli_options):
    # type: (dict, dict) -> None
    """Merge "global" CLI options into main config
    :param dict config: config dict
    :param dict cli_options: cli options
    """
    # check for valid version from YAML
    if (not pagexfer.util.is_none_or_empty(config) and
            ('version' not in config or
             config['version'] not in _SUPPORTED_YAML_CONFIG_VERSIONS)):
        raise ValueError('"version" not specified in YAML config or invalid')
    # get action
    action = cli_options['_action']
    if action not in set(x.name.lower() for x in Action):
        raise ValueError('invalid action: {}'.format(action))
    # merge credentials
    if 'azure_storage' in cli_options:
        if 'azure_storage' not in config:
            config['azure_storage'] = {}
        config['azure_storage'] = pagexfer.util.merge_dict(
            config['azure_storage'], cli_options['azure_storage'])
    if ('azure_storage' not in config or
            pagexfer.util.is_none_or_empty(config['azure_storage'])):
        raise ValueError('azure storage settings not specified')
    # append upload pair from the commandline, if specified
    if action == Action.Upload.name.lower():
        if action not in config:
            config[action] = []
        if 'source' in cli_options[action]:
            srcdst = {
                'source': cli_options[action].pop('source'),
                'destination': cli_options[action].pop('destination'),
            }
            config[action].append(srcdst)
    # merge general, retry and concurrency options
    if 'options' not in config:
        config['options'] = {}
    for key in ('concurrency', 'timeout', 'retry', 'proxy'):
        if key not in config['options']:
            config['options'][key] = {}
    options = {
        'enable_azure_storage_logger': _merge_setting(
            cli_options, config['options'], 'enable_azure_storage_logger'),
        'log_file': _merge_setting(cli_options, config['options'], 'log_file'),
        'progress_bar': _merge_setting(
            cli_options, config['options'], 'progress_bar', default=True),
        'timeout': {
            'connect': _merge_setting(
                cli_options, config['options']['timeout'], 'connect',
                name_cli='timeout'),
            'read': _merge_setting(
                cli_options, config['options']['timeout'], 'read',
                name_cli='timeout'),
            'operation': _merge_setting(
                cli_options, config['options']['timeout'], 'operation',
                name_cli='operation_timeout', default=120),
            'max_retries': _merge_setting(
                cli_options, config['options']['timeout'], 'max_retries',
                default=1000),
        },
        'retry': {
            'max_retries': _merge_setting(
                cli_options, config['options']['retry'], 'max_retries',
                name_cli='chunk_retries', default=3),
            'delay': _merge_setting(
                cli_options, config['options']['retry'], 'delay',
                name_cli='chunk_retry_delay', default=10),
        },
        'verbose': _merge_setting(
            cli_options, config['options'], 'verbose', default=False),
        'quiet': _merge_setting(
            cli_options, config['options'], 'quiet', default=False),
        'concurrency': {
            'worker_threads': _merge_setting(
                cli_options, config['options']['concurrency'],
                'worker_threads', default=16),
        },
        'proxy': {
            'host': _merge_setting(
                cli_options, config['options']['proxy'], 'host',
                name_cli='proxy_host'),
            'username': _merge_setting(
                cli_options, config['options']['proxy'], 'username',
                name_cli='proxy_username'),
            'password': _merge_setting(
                cli_options, config['options']['proxy'], 'password',
                name_cli='proxy_password'),
        }
    }
    config['options'] = options


def create_azure_storage_credentials(config, general_options):
    # type: (dict, pagexfer.models.options.General) ->
    #        pagexfer.operations.azure.StorageCredentials
    """Create an Azure StorageCredentials object from configuration
    :param dict config: config dict
    :param pagexfer.models.options.General: general options
    :rtype: pagexfer.operations.azure.StorageCredentials
    :return: credentials object
    """
    creds = pagexfer.operations.azure.StorageCredentials(general_options)
    endpoint = config['azure_storage'].get('endpoint') or 'core.windows.net'
    for name in config['azure_storage'].get('accounts', {}):
        key = config['azure_storage']['accounts'][name]
        creds.add_storage_account(name, key, endpoint)
    return creds


def create_general_options(config):
    # type: (dict) -> pagexfer.models.options.General
    """Create a General Options object from configuration
    :param dict config: config dict
    :rtype: pagexfer.models.options.General
    :return: general options object
    """
    conc = config['options']['concurrency']
    # split http proxy host into host:port
    proxy = None
    if pagexfer.util.is_not_empty(config['options']['proxy']['host']):
        tmp = config['options']['proxy']['host'].split(':')
        if len(tmp) != 2:
            raise ValueError('Proxy host is malformed: host should be ip:port')
        username = config['options']['proxy']['username']
        if pagexfer.util.is_none_or_empty(username):
            username = None
        password = config['options']['proxy']['password']
        if pagexfer.util.is_none_or_empty(password):
            password = None
        proxy = pagexfer.models.options.HttpProxy(
            host=tmp[0],
            port=int(tmp[1]),
            username=username,
            password=password,
        )
    return pagexfer.models.options.General(
        concurrency=pagexfer.models.options.Concurrency(
            worker_threads=conc['worker_threads'],
        ),
        log_file=config['options']['log_file'],
        progress_bar=config['options']['progress_bar'],
        timeout=pagexfer.models.options.Timeout(
            connect=config['options']['timeout']['connect'],
            read=config['options']['timeout']['read'],
            max_retries=config['options']['timeout']['max_retries'],
            operation=config['options']['timeout']['operation'],
        ),
        retry=pagexfer.models.options.Retry(
            max_retries=config['options']['retry']['max_retries'],
            delay=config['options']['retry']['delay'],
        ),
        verbose=config['options']['verbose'],
        quiet=config['options']['quiet'],
        proxy=proxy,
    )


def create_upload_specifications(ctx_cli_options, config):
    # type: (dict, dict) -> List[pagexfer.models.upload.Specification]
    """Create a list of Upload Specification objects from configuration
    :param dict ctx_cli_options: cli options
    :param dict config: config dict
    :rtype: list
    :return: list of Upload Specification objects
    """
    cli_options = ctx_cli_options[ctx_cli_options['_action']]['options']
    specs = []
    for conf in config['upload']:
        if 'options' in conf:
            conf_options = conf['options']
        else:
            conf_options = {}
        dst = conf['destination']
        if len(dst) != 1:
            raise ValueError(
                'invalid number of destination pairs specified per entry')
        sa = next(iter(dst))
        specs.append(pagexfer.models.upload.Specification(
            upload_options=pagexfer.models.options.Upload(
                chunk_size_bytes=_merge_setting(
                    cli_options, conf_options, 'chunk_size_bytes',
                    default=pagexfer.models.upload.DEFAULT_CHUNK_SIZE_BYTES),
                create_container=_merge_setting(
                    cli_options, conf_options, 'create_container',
                    default=True),
            ),
            local_path=conf['source'],
            storage_account=sa,
            remote_path=dst[sa],
        ))
    return specs


def get_remote_target(ctx_cli_options):
    # type: (dict) -> Tuple[str, str, str, str]
    """Get the remote blob addressed on the commandline
    :param dict ctx_cli_options: cli options
    :rtype: tuple
    :return: (storage account, container, blob name, snapshot)
    """
    arg = ctx_cli_options[ctx_cli_options['_action']]
    remote_path, snapshot = pagexfer.util.split_snapshot_path(
        arg['remote_path'])
    container, name = pagexfer.util.explode_azure_path(remote_path)
    return arg['storage_account'], container, name, snapshot
