import threading

from digcore.safequeue import LimitedQueue, SafeQueue


def test_pop_back_returns_oldest_first():
    q = SafeQueue()
    for value in ("a", "b", "c"):
        q.push_front(value)
    assert q.pop_back() == "a"
    assert q.pop_back() == "b"
    assert len(q) == 1


def test_pop_back_empty_returns_none():
    q = SafeQueue()
    assert q.pop_back() is None
    assert len(q) == 0


def test_pop_back_n_limits_count():
    q = SafeQueue()
    q.push_front_n([1, 2, 3, 4])
    assert q.pop_back_n(2) == [1, 2]
    assert q.pop_back_n(10) == [3, 4]
    assert q.pop_back_n(3) == []


def test_pop_back_all_drains_in_order():
    q = SafeQueue()
    q.push_front_n([1, 2])
    q.push_front(3)
    assert q.pop_back_all() == [1, 2, 3]
    assert len(q) == 0
    assert q.pop_back_all() == []


def test_remove_all_empties_queue():
    q = SafeQueue()
    q.push_front_n(range(5))
    q.remove_all()
    assert len(q) == 0
    assert q.pop_back() is None


def test_concurrent_pushes_are_all_kept():
    q = SafeQueue()

    def worker(base):
        for i in range(100):
            q.push_front(base + i)

    threads = [threading.Thread(target=worker, args=(n * 1000,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    items = q.pop_back_all()
    assert len(items) == 800
    assert len(set(items)) == 800


def test_limited_queue_refuses_when_full():
    q = LimitedQueue(2)
    assert q.push_front("x") is True
    assert q.push_front("y") is True
    assert q.push_front("z") is False
    assert q.pop_back_all() == ["x", "y"]


def test_limited_queue_batch_checks_size_before_push():
    q = LimitedQueue(2)
    assert q.push_front("x") is True
    assert q.push_front_n(["y", "z"]) is True
    assert len(q) == 3
    assert q.push_front_n(["w"]) is False
    assert len(q) == 3


def test_limited_queue_pops_and_clears():
    q = LimitedQueue(5)
    q.push_front_n([1, 2, 3])
    assert q.pop_back() == 1
    assert q.pop_back_n(1) == [2]
    q.remove_all()
    assert len(q) == 0
    assert q.push_front(9) is True