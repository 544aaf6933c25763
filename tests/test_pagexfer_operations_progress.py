# coding=utf-8
"""Tests for progress operations"""

# stdlib imports
import unittest.mock as mock
# non-stdlib imports
# local imports
import pagexfer.models.options as options
import pagexfer.models.upload as modelsul
import pagexfer.util as util
# module under test
import pagexfer.operations.progress as ops


def test_output_parameters():
    go = options.General(
        concurrency=options.Concurrency(worker_threads=4),
        log_file='abc',
    )
    spec = modelsul.Specification(
        upload_options=options.Upload(
            chunk_size_bytes=4194304,
            create_container=True,
        ),
        local_path='disk.vhd',
        storage_account='sa',
        remote_path='cont/disk.vhd',
    )
    with mock.patch('pagexfer.operations.progress.logger') as patched_log:
        ops.output_parameters(go, spec)
        assert patched_log.info.call_count == 1
        out = patched_log.info.call_args[0][0]
        assert 'disk.vhd' in out
        assert 'sa/cont/disk.vhd' in out

    go.quiet = True
    with mock.patch('pagexfer.operations.progress.logger') as patched_log:
        ops.output_parameters(go, spec)
        assert patched_log.info.call_count == 0


def test_update_progress_bar():
    go = mock.MagicMock()
    go.quiet = False
    go.progress_bar = True
    go.log_file = 'abc'

    start = util.datetime_now()

    with mock.patch('sys.stdout') as patched_stdout:
        ops.update_progress_bar(go, start, 4, 1, 8388608, 2097152)
        assert patched_stdout.write.call_count == 1

        with mock.patch('pagexfer.util.datetime_now') as patched_dt:
            patched_dt.return_value = start
            ops.update_progress_bar(go, start, 4, 4, 8388608, 8388608)
        assert patched_stdout.write.call_count == 3

        ops.update_progress_bar(go, None, 4, 1, 8388608, 2097152)
        assert patched_stdout.write.call_count == 3

        go.log_file = None
        ops.update_progress_bar(go, start, 4, 1, 8388608, 2097152)
        assert patched_stdout.write.call_count == 3

        go.log_file = 'abc'
        go.progress_bar = False
        ops.update_progress_bar(go, start, 4, 1, 8388608, 2097152)
        assert patched_stdout.write.call_count == 3
