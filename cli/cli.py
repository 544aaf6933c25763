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
import json
import logging
import pathlib
# non-stdlib imports
import click
import ruamel.yaml
# pagexfer library imports
import pagexfer.api
import pagexfer.operations.azure.blob
import pagexfer.util
# local imports
try:
    import cli.settings as settings
except (SystemError, ImportError):  # noqa
    try:
        from . import settings
    except (SystemError, ImportError):  # noqa
        # for local testing
        import settings

# create logger
logger = logging.getLogger('pagexfer')
# global defines
_CONTEXT_SETTINGS = dict(help_option_names=['-h', '--help'])


class CliContext(object):
    """CliContext class: holds context for CLI commands"""
    def __init__(self):
        """Ctor for CliContext"""
        self.config = None
        self.cli_options = {}
        self.credentials = None
        self.general_options = None
        self.show_config = False

    def initialize(self):
        # type: (CliContext) -> None
        """Initialize context
        :param CliContext self: this
        """
        self._init_config()
        self.general_options = settings.create_general_options(self.config)
        self.credentials = settings.create_azure_storage_credentials(
            self.config, self.general_options)

    def _read_yaml_file(self, yaml_file):
        # type: (CliContext, pathlib.Path) -> None
        """Read a yaml file into self.config
        :param CliContext self: this
        :param pathlib.Path yaml_file: yaml file to load
        """
        yaml = ruamel.yaml.YAML(typ='safe', pure=True)
        with yaml_file.open('r') as f:
            if self.config is None:
                self.config = yaml.load(f)
            else:
                self.config = pagexfer.util.merge_dict(
                    yaml.load(f), self.config)

    def _init_config(self):
        # type: (CliContext) -> None
        """Initializes configuration of the context
        :param CliContext self: this
        """
        # load yaml config file into memory
        if pagexfer.util.is_not_empty(self.cli_options.get('yaml_config')):
            yaml_config = pathlib.Path(self.cli_options['yaml_config'])
            self._read_yaml_file(yaml_config)
        if self.config is None:
            self.config = {}
        # merge "global" cli options with config
        settings.merge_global_settings(self.config, self.cli_options)
        # set log file if specified
        logfile = self.config['options'].get('log_file', None)
        pagexfer.util.setup_logger(logger, logfile)
        # set verbose logging
        if self.config['options'].get('verbose', False):
            pagexfer.util.set_verbose_logger_handlers()
        # set azure storage logging level
        azstorage_logger = logging.getLogger('azure.storage')
        if self.config['options'].get('enable_azure_storage_logger', False):
            pagexfer.util.setup_logger(azstorage_logger, logfile)
            azstorage_logger.setLevel(logging.INFO)
        else:
            # disable azure storage logging: setting logger level to CRITICAL
            # effectively disables logging from azure storage
            azstorage_logger.setLevel(logging.CRITICAL)
        # output mixed config, masking credentials
        if self.show_config:
            shown = dict(self.config)
            shown.pop('azure_storage', None)
            logger.debug('config: \n{}'.format(
                json.dumps(shown, indent=4, default=str)))
        del self.show_config


# create a pass decorator for shared context between commands
pass_cli_context = click.make_pass_decorator(CliContext, ensure=True)


def _config_option(f):
    def callback(ctx, param, value):
        clictx = ctx.ensure_object(CliContext)
        clictx.cli_options['yaml_config'] = value
        return value
    return click.option(
        '--config',
        expose_value=False,
        default=None,
        help='YAML configuration file',
        envvar='PAGEXFER_CONFIG_FILE',
        callback=callback)(f)


def _enable_azure_storage_logger_option(f):
    def callback(ctx, param, value):
        clictx = ctx.ensure_object(CliContext)
        clictx.cli_options['enable_azure_storage_logger'] = value
        return value
    return click.option(
        '--enable-azure-storage-logger',
        expose_value=False,
        is_flag=True,
        default=None,
        help='Enable Azure Storage logger output [False]',
        callback=callback)(f)


def _log_file_option(f):
    def callback(ctx, param, value):
        clictx = ctx.ensure_object(CliContext)
        clictx.cli_options['log_file'] = value
        return value
    return click.option(
        '--log-file',
        expose_value=False,
        default=None,
        help='Log to file specified; this must be specified for progress '
        'bar to show',
        callback=callback)(f)


def _max_retries_option(f):
    def callback(ctx, param, value):
        clictx = ctx.ensure_object(CliContext)
        clictx.cli_options['max_retries'] = value
        return value
    return click.option(
        '--max-retries',
        expose_value=False,
        type=int,
        default=None,
        help='Maximum number of retries for a request by the storage '
        'client; negative values are unlimited [1000]',
        callback=callback)(f)


def _operation_timeout_option(f):
    def callback(ctx, param, value):
        clictx = ctx.ensure_object(CliContext)
        clictx.cli_options['operation_timeout'] = value
        return value
    return click.option(
        '--operation-timeout',
        expose_value=False,
        type=int,
        default=None,
        help='Server-side timeout, in seconds, for each storage call [120]',
        callback=callback)(f)


def _progress_bar_option(f):
    def callback(ctx, param, value):
        clictx = ctx.ensure_object(CliContext)
        clictx.cli_options['progress_bar'] = value
        return value
    return click.option(
        '--progress-bar/--no-progress-bar',
        expose_value=False,
        default=None,
        help='Display progress bar instead of console logs; log file must '
        'be specified [True]',
        callback=callback)(f)


def _proxy_host_option(f):
    def callback(ctx, param, value):
        clictx = ctx.ensure_object(CliContext)
        clictx.cli_options['proxy_host'] = value
        return value
    return click.option(
        '--proxy-host',
        expose_value=False,
        default=None,
        help='Proxy host in the format of IP:Port',
        envvar='PAGEXFER_PROXY_HOST',
        callback=callback)(f)


def _proxy_password_option(f):
    def callback(ctx, param, value):
        clictx = ctx.ensure_object(CliContext)
        clictx.cli_options['proxy_password'] = value
        return value
    return click.option(
        '--proxy-password',
        expose_value=False,
        default=None,
        help='Proxy password',
        envvar='PAGEXFER_PROXY_PASSWORD',
        callback=callback)(f)


def _proxy_username_option(f):
    def callback(ctx, param, value):
        clictx = ctx.ensure_object(CliContext)
        clictx.cli_options['proxy_username'] = value
        return value
    return click.option(
        '--proxy-username',
        expose_value=False,
        default=None,
        help='Proxy username',
        envvar='PAGEXFER_PROXY_USERNAME',
        callback=callback)(f)


def _show_config_option(f):
    def callback(ctx, param, value):
        clictx = ctx.ensure_object(CliContext)
        clictx.show_config = value
        return value
    return click.option(
        '--show-config',
        expose_value=False,
        is_flag=True,
        help='Show configuration',
        callback=callback)(f)


def _timeout_option(f):
    def callback(ctx, param, value):
        clictx = ctx.ensure_object(CliContext)
        clictx.cli_options['timeout'] = value
        return value
    return click.option(
        '--timeout',
        expose_value=False,
        type=float,
        default=None,
        help='Timeout, in seconds, applied to both connect and read '
        'operations',
        callback=callback)(f)


def _verbose_option(f):
    def callback(ctx, param, value):
        clictx = ctx.ensure_object(CliContext)
        clictx.cli_options['verbose'] = value
        return value
    return click.option(
        '-v', '--verbose',
        expose_value=False,
        is_flag=True,
        default=None,
        help='Verbose output',
        callback=callback)(f)


def _quiet_option(f):
    def callback(ctx, param, value):
        clictx = ctx.ensure_object(CliContext)
        clictx.cli_options['quiet'] = value
        return value
    return click.option(
        '-q', '--quiet',
        expose_value=False,
        is_flag=True,
        default=None,
        help='Quiet mode',
        callback=callback)(f)


def common_options(f):
    f = _verbose_option(f)
    f = _timeout_option(f)
    f = _show_config_option(f)
    f = _quiet_option(f)
    f = _proxy_username_option(f)
    f = _proxy_password_option(f)
    f = _proxy_host_option(f)
    f = _progress_bar_option(f)
    f = _operation_timeout_option(f)
    f = _max_retries_option(f)
    f = _log_file_option(f)
    f = _enable_azure_storage_logger_option(f)
    f = _config_option(f)
    return f


def _access_key_option(f):
    def callback(ctx, param, value):
        clictx = ctx.ensure_object(CliContext)
        clictx.cli_options['access_key'] = value
        return value
    return click.option(
        '--storage-account-key',
        expose_value=False,
        default=None,
        help='Storage account access key',
        envvar='PAGEXFER_STORAGE_ACCOUNT_KEY',
        callback=callback)(f)


def _endpoint_option(f):
    def callback(ctx, param, value):
        clictx = ctx.ensure_object(CliContext)
        clictx.cli_options['endpoint'] = value
        return value
    return click.option(
        '--endpoint',
        expose_value=False,
        default=None,
        help='Azure Storage endpoint [core.windows.net]',
        callback=callback)(f)


def _remote_path_option(f):
    def callback(ctx, param, value):
        clictx = ctx.ensure_object(CliContext)
        clictx.cli_options['remote_path'] = value
        return value
    return click.option(
        '--remote-path',
        expose_value=False,
        default=None,
        help='Remote path on Azure Storage as container/blob',
        callback=callback)(f)


def _sas_option(f):
    def callback(ctx, param, value):
        clictx = ctx.ensure_object(CliContext)
        clictx.cli_options['sas'] = value
        return value
    return click.option(
        '--sas',
        expose_value=False,
        default=None,
        help='Shared access signature',
        envvar='PAGEXFER_SAS',
        callback=callback)(f)


def _storage_account_option(f):
    def callback(ctx, param, value):
        clictx = ctx.ensure_object(CliContext)
        clictx.cli_options['storage_account'] = value
        return value
    return click.option(
        '--storage-account',
        expose_value=False,
        default=None,
        help='Storage account name',
        envvar='PAGEXFER_STORAGE_ACCOUNT',
        callback=callback)(f)


def remote_options(f):
    f = _storage_account_option(f)
    f = _sas_option(f)
    f = _remote_path_option(f)
    f = _endpoint_option(f)
    f = _access_key_option(f)
    return f


def _chunk_retries_option(f):
    def callback(ctx, param, value):
        clictx = ctx.ensure_object(CliContext)
        clictx.cli_options['chunk_retries'] = value
        return value
    return click.option(
        '--chunk-retries',
        expose_value=False,
        type=int,
        default=None,
        help='Number of times a failed chunk write is retried before the '
        'upload is aborted [3]',
        callback=callback)(f)


def _chunk_retry_delay_option(f):
    def callback(ctx, param, value):
        clictx = ctx.ensure_object(CliContext)
        clictx.cli_options['chunk_retry_delay'] = value
        return value
    return click.option(
        '--chunk-retry-delay',
        expose_value=False,
        type=float,
        default=None,
        help='Delay, in seconds, between chunk write retries [10]',
        callback=callback)(f)


def _chunk_size_bytes_option(f):
    def callback(ctx, param, value):
        clictx = ctx.ensure_object(CliContext)
        clictx.cli_options['chunk_size_bytes'] = value
        return value
    return click.option(
        '--chunk-size-bytes',
        expose_value=False,
        type=int,
        default=None,
        help='Chunk size in bytes; must be a multiple of 512 up to 4MiB '
        '[2097152]',
        callback=callback)(f)


def _create_container_option(f):
    def callback(ctx, param, value):
        clictx = ctx.ensure_object(CliContext)
        clictx.cli_options['create_container'] = value
        return value
    return click.option(
        '--create-container/--no-create-container',
        expose_value=False,
        default=None,
        help='Create the destination container if missing [True]',
        callback=callback)(f)


def _local_resource_option(f):
    def callback(ctx, param, value):
        clictx = ctx.ensure_object(CliContext)
        clictx.cli_options['local_resource'] = value
        return value
    return click.option(
        '--local-path',
        expose_value=False,
        default=None,
        help='Local disk image to upload',
        callback=callback)(f)


def _worker_threads_option(f):
    def callback(ctx, param, value):
        clictx = ctx.ensure_object(CliContext)
        clictx.cli_options['worker_threads'] = value
        return value
    return click.option(
        '--worker-threads',
        expose_value=False,
        type=int,
        default=None,
        help='Concurrent upload worker threads [16]',
        callback=callback)(f)


def upload_options(f):
    f = _worker_threads_option(f)
    f = _local_resource_option(f)
    f = _create_container_option(f)
    f = _chunk_size_bytes_option(f)
    f = _chunk_retry_delay_option(f)
    f = _chunk_retries_option(f)
    return f


def _source_uri_option(f):
    def callback(ctx, param, value):
        clictx = ctx.ensure_object(CliContext)
        clictx.cli_options['source_uri'] = value
        return value
    return click.option(
        '--source-uri',
        expose_value=False,
        required=True,
        help='URI of the blob to copy from, including any SAS',
        callback=callback)(f)


def _metadata_option(f):
    def callback(ctx, param, value):
        clictx = ctx.ensure_object(CliContext)
        metadata = {}
        for kv in value:
            tmp = kv.split('=', 1)
            if len(tmp) != 2:
                raise click.BadParameter(
                    'metadata must be in the form key=value: {}'.format(kv))
            metadata[tmp[0]] = tmp[1]
        clictx.cli_options['metadata'] = metadata or None
        return value
    return click.option(
        '--metadata',
        expose_value=False,
        multiple=True,
        help='Metadata key=value pair to set on the snapshot; may be '
        'specified multiple times',
        callback=callback)(f)


def _get_entity(ctx):
    # type: (CliContext) -> pagexfer.models.azure.StorageEntity
    """Create the storage entity addressed on the commandline
    :param CliContext ctx: cli context
    :rtype: pagexfer.models.azure.StorageEntity
    :return: storage entity
    """
    sa_name, container, name, snapshot = settings.get_remote_target(
        ctx.cli_options)
    sa = ctx.credentials.get_storage_account(sa_name)
    return sa.create_entity(container, name, snapshot=snapshot)


@click.group(context_settings=_CONTEXT_SETTINGS)
@click.version_option(version=pagexfer.__version__)
@click.pass_context
def cli(ctx):
    """pagexfer: Azure page blob disk image upload tool"""
    pass


@cli.command('upload')
@upload_options
@remote_options
@common_options
@pass_cli_context
def upload(ctx):
    """Upload a disk image to an Azure page blob"""
    settings.add_cli_options(ctx.cli_options, settings.Action.Upload)
    ctx.initialize()
    specs = settings.create_upload_specifications(
        ctx.cli_options, ctx.config)
    del ctx.cli_options
    for spec in specs:
        pagexfer.api.Uploader(
            ctx.general_options, ctx.credentials, spec
        ).start()


@cli.command('copy')
@_source_uri_option
@remote_options
@common_options
@pass_cli_context
def copy(ctx):
    """Copy a blob into a page blob server-side"""
    settings.add_cli_options(ctx.cli_options, settings.Action.Copy)
    ctx.initialize()
    ase = _get_entity(ctx)
    pagexfer.api.copy_blob(
        ase, ctx.cli_options['copy']['source_uri'],
        timeout=ctx.general_options.timeout.operation)


@cli.command('snapshot')
@_metadata_option
@remote_options
@common_options
@pass_cli_context
def snapshot(ctx):
    """Snapshot a page blob"""
    settings.add_cli_options(ctx.cli_options, settings.Action.Snapshot)
    ctx.initialize()
    ase = _get_entity(ctx)
    snapshot = pagexfer.operations.azure.blob.snapshot_blob(
        ase.client, ase.container, ase.name,
        metadata=ctx.cli_options['snapshot']['metadata'],
        timeout=ctx.general_options.timeout.operation)
    logger.info('snapshot of {} created: {}'.format(
        ase.path, pagexfer.operations.azure.blob.get_blob_uri(
            ase.client, ase.container, ase.name, snapshot=snapshot)))


@cli.command('delete')
@remote_options
@common_options
@pass_cli_context
def delete(ctx):
    """Delete a page blob with its snapshots, or a single snapshot when the
    remote path ends with ?snapshot=<time>"""
    settings.add_cli_options(ctx.cli_options, settings.Action.Delete)
    ctx.initialize()
    ase = _get_entity(ctx)
    pagexfer.operations.azure.blob.delete_blob(
        ase.client, ase.container, ase.name, snapshot=ase.snapshot,
        timeout=ctx.general_options.timeout.operation)
    logger.info('deleted {}{}'.format(
        ase.path,
        '' if ase.snapshot is None else ' snapshot {}'.format(ase.snapshot)))


@cli.command('list')
@remote_options
@common_options
@pass_cli_context
def list_blobs(ctx):
    """List page blobs; the remote path is container/prefix"""
    settings.add_cli_options(ctx.cli_options, settings.Action.List)
    ctx.initialize()
    sa_name, container, prefix, _ = settings.get_remote_target(
        ctx.cli_options)
    sa = ctx.credentials.get_storage_account(sa_name)
    if not pagexfer.operations.azure.blob.container_exists(
            sa.page_blob_client, container,
            timeout=ctx.general_options.timeout.operation):
        raise ValueError('container {} does not exist on {}'.format(
            container, sa_name))
    for blob in pagexfer.operations.azure.blob.list_blobs(
            sa.page_blob_client, container, prefix=prefix,
            timeout=ctx.general_options.timeout.operation):
        ase = sa.create_entity(container, None)
        ase.populate_from_blob(blob)
        logger.info('{} size={} snapshot={}'.format(
            ase.path, ase.size, ase.snapshot))


if __name__ == '__main__':
    cli()
