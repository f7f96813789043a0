import threading

from training_center.utils.codes import CodeGenerator


def test_code_uses_prefix_and_clock():
    gen = CodeGenerator(clock=lambda: 1700000000000)
    assert gen.next('STD') == 'STD1700000000000'


def test_same_millisecond_is_bumped():
    gen = CodeGenerator(clock=lambda: 1000)
    assert [gen.next('CLS') for _ in range(3)] == ['CLS1000', 'CLS1001', 'CLS1002']


def test_clock_going_backwards_still_increases():
    ticks = iter([5000, 4000, 6000])
    gen = CodeGenerator(clock=lambda: next(ticks))
    assert [gen.next('TCH') for _ in range(3)] == ['TCH5000', 'TCH5001', 'TCH6000']


def test_prefixes_are_independent():
    gen = CodeGenerator(clock=lambda: 42)
    assert gen.next('STD') == 'STD42'
    assert gen.next('TCH') == 'TCH42'
    assert gen.next('STD') == 'STD43'


def test_concurrent_callers_never_share_a_code():
    gen = CodeGenerator(clock=lambda: 1000)
    codes = []
    lock = threading.Lock()

    def worker():
        issued = [gen.next('STD') for _ in range(200)]
        with lock:
            codes.extend(issued)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(codes) == 1600
    assert len(set(codes)) == 1600
    assert max(codes, key=lambda c: int(c[3:])) == 'STD2599'
