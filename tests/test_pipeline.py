import threading

import pytest

from enmime.textproto.pipeline import Pipeline, Sequencer


def test_sequencer_first_event_runs_immediately():
    seq = Sequencer()
    seq.start(0)
    seq.end(0)
    seq.start(1)
    seq.end(1)
    with pytest.raises(RuntimeError):
        seq.end(1)


def test_sequencer_end_out_of_sync():
    seq = Sequencer()
    with pytest.raises(RuntimeError, match="out of sync"):
        seq.end(3)


def test_sequencer_orders_threads():
    seq = Sequencer()
    order = []
    lock = threading.Lock()

    def run(i):
        seq.start(i)
        with lock:
            order.append(i)
        seq.end(i)

    ids = [4, 3, 2, 1, 0]
    threads = [threading.Thread(target=run, args=(i,)) for i in ids]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=5)
    assert order == sorted(ids)

    # All five events are done, so the sequencer now expects event 5.
    with pytest.raises(RuntimeError, match="out of sync"):
        seq.end(4)


def test_pipeline_next_counts_up():
    p = Pipeline()
    ids = [p.next() for _ in range(3)]
    assert ids[0] == 0
    assert ids == list(range(ids[0], ids[0] + 3))


def test_pipeline_request_and_response_order():
    p = Pipeline()
    events = []
    lock = threading.Lock()

    def client(request_id):
        p.start_request(request_id)
        with lock:
            events.append(("req", request_id))
        p.end_request(request_id)
        p.start_response(request_id)
        with lock:
            events.append(("resp", request_id))
        p.end_response(request_id)

    ids = [p.next() for _ in range(4)]
    threads = [threading.Thread(target=client, args=(i,)) for i in reversed(ids)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=5)

    requests = [i for kind, i in events if kind == "req"]
    responses = [i for kind, i in events if kind == "resp"]
    assert requests == ids
    assert responses == ids


def test_pipeline_end_response_out_of_sync():
    p = Pipeline()
    with pytest.raises(RuntimeError):
        p.end_response(1)