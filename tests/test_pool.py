import threading

import pytest

from querygen.pool import Pool


def test_num_and_size():
    pool = Pool(3)
    assert pool.size() == 3
    pool.wait()
    pool.wait()
    assert pool.num() == 2
    pool.done()
    assert pool.num() == 1


def test_disabled_pool():
    pool = Pool(-1)
    pool.wait()
    pool.done()
    assert pool.num() == 0
    assert pool.size() == 0


def test_done_without_wait_raises():
    with pytest.raises(RuntimeError):
        Pool(1).done()


def test_wait_blocks_until_token_returned():
    pool = Pool(1)
    pool.wait()
    acquired = threading.Event()

    def worker():
        pool.wait()
        acquired.set()
        pool.done()

    thread = threading.Thread(target=worker)
    thread.start()
    assert not acquired.wait(0.1)
    pool.done()
    assert acquired.wait(2)
    thread.join(2)
    assert pool.num() == 0


def test_async_wait_all():
    pool = Pool(2)
    pool.wait()
    event = pool.async_wait_all()
    assert not event.wait(0.1)
    pool.done()
    assert event.wait(2)


def test_context_manager():
    pool = Pool(1)
    with pool:
        assert pool.num() == 1
    assert pool.num() == 0