# coding=utf-8
"""Tests for util"""

# stdlib imports
import datetime
import logging
# non-stdlib imports
import pytest
# module under test
import pagexfer.util


def test_setup_logger(tmpdir):
    logger = logging.getLogger('pagexfer.test.setup_logger')
    logfile = str(tmpdir.join('log.txt'))
    pagexfer.util.setup_logger(logger, logfile)
    assert logger.level == logging.DEBUG
    assert not logger.propagate
    handler = logger.handlers[-1]
    assert isinstance(handler, logging.FileHandler)
    assert handler in pagexfer.util._REGISTERED_LOGGER_HANDLERS

    pagexfer.util.set_verbose_logger_handlers()
    assert 'threadName' in handler.formatter._fmt

    logging.getLogger().removeHandler(handler)
    logger.removeHandler(handler)
    pagexfer.util._REGISTERED_LOGGER_HANDLERS.remove(handler)
    handler.close()


def test_is_none_or_empty():
    a = None
    assert pagexfer.util.is_none_or_empty(a)
    a = []
    assert pagexfer.util.is_none_or_empty(a)
    a = {}
    assert pagexfer.util.is_none_or_empty(a)
    a = ''
    assert pagexfer.util.is_none_or_empty(a)
    a = 'asdf'
    assert not pagexfer.util.is_none_or_empty(a)
    a = [None]
    assert not pagexfer.util.is_none_or_empty(a)


def test_is_not_empty():
    a = None
    assert not pagexfer.util.is_not_empty(a)
    a = ''
    assert not pagexfer.util.is_not_empty(a)
    a = {}
    assert not pagexfer.util.is_not_empty(a)
    a = 'asdf'
    assert pagexfer.util.is_not_empty(a)
    a = {'asdf': 0}
    assert pagexfer.util.is_not_empty(a)


def test_merge_dict():
    with pytest.raises(ValueError):
        pagexfer.util.merge_dict(1, 2)

    a = {'a_only': 42, 'a_and_b': 43,
         'a_only_dict': {'a': 44}, 'a_and_b_dict': {'a_o': 45, 'a_a_b': 46}}
    b = {'b_only': 45, 'a_and_b': 46,
         'b_only_dict': {'a': 47}, 'a_and_b_dict': {'b_o': 48, 'a_a_b': 49}}
    c = pagexfer.util.merge_dict(a, b)
    assert c['a_only'] == 42
    assert c['b_only'] == 45
    assert c['a_and_b_dict']['a_o'] == 45
    assert c['a_and_b_dict']['b_o'] == 48
    assert c['a_and_b_dict']['a_a_b'] == 49
    assert c['b_only_dict']['a'] == 47
    assert c['a_and_b'] == 46
    assert a['a_and_b'] == 43
    assert b['a_and_b'] == 46


def test_datetime_now():
    a = pagexfer.util.datetime_now()
    assert type(a) == datetime.datetime
    assert a.tzinfo is not None


def test_explode_azure_path():
    cont, rpath = pagexfer.util.explode_azure_path('cont')
    assert cont == 'cont'
    assert rpath == ''

    cont, rpath = pagexfer.util.explode_azure_path('cont/a/')
    assert cont == 'cont'
    assert rpath == 'a'

    cont, rpath = pagexfer.util.explode_azure_path('/some/remote/path')
    assert cont == 'some'
    assert rpath == 'remote/path'

    cont, rpath = pagexfer.util.explode_azure_path('\\cont\\r1\\r2\\r3\\')
    assert cont == 'cont'
    assert rpath == 'r1/r2/r3'

    cont, rpath = pagexfer.util.explode_azure_path('/cont\\r1//r2\\r3/')
    assert cont == 'cont'
    assert rpath == 'r1/r2/r3'

    with pytest.raises(ValueError):
        pagexfer.util.explode_azure_path('')

    with pytest.raises(ValueError):
        pagexfer.util.explode_azure_path('//')


def test_split_snapshot_path():
    base = '/cont/a'
    param = '2017-02-23T22:21:14.8121864Z'

    a = base + '?snapshot=' + param
    assert pagexfer.util.split_snapshot_path(a) == (base, param)

    a = base + '?snapshot=abc'
    assert pagexfer.util.split_snapshot_path(a) == (a, None)

    a = base + '?snapshot='
    assert pagexfer.util.split_snapshot_path(a) == (a, None)

    a = base + '?snapshot=' + param + '?snapshot=' + param
    assert pagexfer.util.split_snapshot_path(a) == (a, None)

    assert pagexfer.util.split_snapshot_path(base) == (base, None)
