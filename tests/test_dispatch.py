import threading, time

from core.dispatch import dispatch_frames


def _frames(n):
    return [bytes([i]) for i in range(n)]


def test_results_come_back_in_frame_order():
    # later frames finish first
    def detect(img):
        i = img[0]
        time.sleep(0.01 * (8 - i))
        return [{"frame": i}]

    out = list(dispatch_frames(_frames(8), detect, concurrency=4))
    assert [d.index for d in out] == list(range(8))
    assert [d.faces[0]["frame"] for d in out] == list(range(8))


def test_concurrency_ceiling_is_respected():
    lock = threading.Lock()
    state = {"now": 0, "peak": 0}

    def detect(img):
        with lock:
            state["now"] += 1
            state["peak"] = max(state["peak"], state["now"])
        time.sleep(0.02)
        with lock:
            state["now"] -= 1
        return []

    out = list(dispatch_frames(_frames(20), detect, concurrency=3))
    assert len(out) == 20
    assert 1 <= state["peak"] <= 3


def test_failure_is_isolated_to_its_frame():
    def detect(img):
        if img[0] == 2:
            raise ValueError("quota exceeded")
        return [{"ok": True}]

    out = list(dispatch_frames(_frames(5), detect, concurrency=2))
    assert [d.index for d in out] == [0, 1, 2, 3, 4]
    assert out[2].failed and out[2].error == "ValueError" and out[2].message == "quota exceeded"
    assert out[2].faces == []
    assert all(not d.failed and d.faces for i, d in enumerate(out) if i != 2)


def test_frames_are_pulled_lazily_and_close_stops_work():
    pulled = []
    calls = []

    def frames():
        for i in range(100):
            pulled.append(i)
            yield bytes([i])

    def detect(img):
        calls.append(img[0])
        time.sleep(0.01)
        return []

    gen = dispatch_frames(frames(), detect, concurrency=2)
    first = next(gen)
    gen.close()
    assert first.index == 0
    assert len(pulled) < 100
    assert len(calls) < 100


def test_zero_concurrency_is_clamped():
    out = list(dispatch_frames(_frames(3), lambda img: [], concurrency=0))
    assert [d.index for d in out] == [0, 1, 2]


def test_empty_stream():
    assert list(dispatch_frames([], lambda img: [], concurrency=6)) == []
