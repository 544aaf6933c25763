# coding=utf-8
"""Tests for miscellaneous"""

# stdlib imports
# non-stdlib imports
import azure.storage.common
# module under test
import pagexfer.api
import pagexfer.version


def test_user_agent_monkey_patch():
    verstr = 'pagexfer/{}'.format(pagexfer.version.__version__)
    assert azure.storage.common._constants.USER_AGENT_STRING_PREFIX.startswith(
        verstr)


def test_api_exports():
    assert pagexfer.api.Uploader is not None
    assert pagexfer.api.UploadState.Completed.name == 'Completed'
    assert issubclass(pagexfer.api.ChunkWriteError, pagexfer.api.PageXferError)
    assert issubclass(pagexfer.api.AllocationError, RuntimeError)
