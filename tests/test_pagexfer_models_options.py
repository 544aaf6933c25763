# coding=utf-8
"""Tests for models options"""

# stdlib imports
# non-stdlib imports
import pytest
# module under test
import pagexfer.models.options as options


def test_timeout():
    a = options.Timeout(connect=None, read=1, max_retries=-1)
    assert a.connect == options._DEFAULT_REQUESTS_TIMEOUT[0]
    assert a.read == 1
    assert a.timeout == (options._DEFAULT_REQUESTS_TIMEOUT[0], 1)
    assert a.max_retries is None
    assert a.operation == 120

    a = options.Timeout(connect=2, read=0, max_retries=3, operation=30)
    assert a.connect == 2
    assert a.read == options._DEFAULT_REQUESTS_TIMEOUT[1]
    assert a.timeout == (2, options._DEFAULT_REQUESTS_TIMEOUT[1])
    assert a.max_retries == 3
    assert a.operation == 30

    a = options.Timeout(connect=2, read=3, max_retries=0, operation=0)
    assert a.max_retries == 0
    assert a.operation == 120


def test_retry():
    a = options.Retry()
    assert a.max_retries == 3
    assert a.delay == 10

    a = options.Retry(max_retries=0, delay=0)
    assert a.max_retries == 0
    assert a.delay == 0

    with pytest.raises(ValueError):
        options.Retry(max_retries=-1)

    with pytest.raises(ValueError):
        options.Retry(delay=-0.5)


def test_concurrency():
    a = options.Concurrency(worker_threads=None)
    assert a.worker_threads == 16

    a = options.Concurrency(worker_threads=0)
    assert a.worker_threads == 16

    a = options.Concurrency(worker_threads=3)
    assert a.worker_threads == 3


def test_general_options():
    with pytest.raises(ValueError):
        options.General(None)

    a = options.General(
        concurrency=options.Concurrency(worker_threads=4),
        log_file='abc.log',
        progress_bar=False,
        verbose=True,
        quiet=True,
        proxy=options.HttpProxy(
            host='abc', port=1, username='user', password='pass'),
    )
    assert a.concurrency.worker_threads == 4
    assert a.log_file == 'abc.log'
    assert not a.progress_bar
    assert a.verbose
    assert a.quiet
    assert a.timeout.operation == 120
    assert a.retry.max_retries == 3
    assert a.retry.delay == 10
    assert a.proxy.host == 'abc'
    assert a.proxy.port == 1

    a = options.General(
        concurrency=options.Concurrency(worker_threads=1),
        timeout=options.Timeout(connect=1, read=2, max_retries=5),
        retry=options.Retry(max_retries=1, delay=2),
    )
    assert a.log_file is None
    assert a.progress_bar
    assert a.timeout.timeout == (1, 2)
    assert a.retry.max_retries == 1
    assert a.retry.delay == 2
    assert a.proxy is None
