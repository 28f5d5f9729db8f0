"""Tests for the RecordingCoordinator message channel."""

import threading

import pytest

from trackorb_system.coordinator import RecordingCoordinator
from trackorb_system.errors import NotRecording, RecorderBusy
from trackorb_system.sensors.orb.config import OrbConfig

from tests.conftest import encode_record


def record(t):
    return [t, 1.0, 2.0, 3.0, 0.1, 0.2, 0.3, 0.01, 0.02, 0.03]


@pytest.fixture
def coordinator(store, fixed_clock):
    config = OrbConfig.for_session()
    config.poll_interval = 0.01
    return RecordingCoordinator(store, config, clock=fixed_clock)


def test_records_in_submission_order(coordinator, store):
    coordinator.start_session()
    for i in range(100):
        assert coordinator.submit(encode_record(record(float(i))))
    session = coordinator.stop_session()

    assert [s.timestamp for s in session.samples] == [float(i) for i in range(100)]
    assert len(store.read_raw(session.name)) == 100


def test_malformed_payloads_are_dropped(coordinator):
    coordinator.start_session()
    coordinator.submit(encode_record(record(0.0)))
    coordinator.submit(b'@@@garbage@@@')
    coordinator.submit(encode_record([1, 2, 3]))
    coordinator.submit(encode_record(record(1.0)))
    session = coordinator.stop_session()

    assert [s.timestamp for s in session.samples] == [0.0, 1.0]
    status = coordinator.get_status()
    assert status['malformed'] == 2
    assert status['decoded'] == 2


def test_submit_before_start_is_rejected(coordinator):
    assert coordinator.submit(encode_record(record(0.0))) is False
    assert coordinator.rejected_count == 1


def test_link_lost_keeps_received_samples(coordinator):
    coordinator.start_session()
    coordinator.submit(encode_record(record(0.0)))
    coordinator.submit(encode_record(record(1.0)))
    coordinator.link_lost()

    assert coordinator.submit(encode_record(record(2.0))) is False
    session = coordinator.stop_session()
    assert [s.timestamp for s in session.samples] == [0.0, 1.0]


def test_stop_without_session(coordinator):
    with pytest.raises(NotRecording):
        coordinator.stop_session()


def test_full_channel_drops(store, fixed_clock):
    config = OrbConfig.for_session()
    config.channel_capacity = 1
    coordinator = RecordingCoordinator(store, config, clock=fixed_clock)

    # Fill the channel before the consumer exists
    coordinator._intake_open = True
    assert coordinator.submit(encode_record(record(0.0)))
    assert coordinator.submit(encode_record(record(1.0))) is False
    assert coordinator.dropped_count == 1


def test_concurrent_submitters(coordinator):
    coordinator.start_session()

    def worker(offset):
        for i in range(50):
            coordinator.submit(encode_record(record(offset + i)))

    threads = [threading.Thread(target=worker, args=(k * 1000.0,)) for k in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    session = coordinator.stop_session()
    assert session.sample_count == 200
    # Per-producer order survives interleaving
    for k in range(4):
        mine = [s.timestamp for s in session.samples if k * 1000 <= s.timestamp < (k + 1) * 1000]
        assert mine == sorted(mine)


def test_context_manager_persists_active_session(store, fixed_clock):
    with RecordingCoordinator(store, clock=fixed_clock) as coordinator:
        session = coordinator.start_session()
        coordinator.submit(encode_record(record(0.0)))

    assert store.has_raw(session.name)
    assert len(store.read_raw(session.name)) == 1


def test_text_payloads(store, fixed_clock):
    coordinator = RecordingCoordinator(store, OrbConfig.for_ble(), clock=fixed_clock)
    coordinator.start_session()
    coordinator.submit(b'0.5,1,2,3,4,5,6,7,8,9')
    session = coordinator.stop_session()
    assert session.samples[0].timestamp == 0.5


def test_slow_consumer_blocks_next_session(coordinator):
    coordinator.config.drain_timeout = 0.05
    release = threading.Event()
    coordinator._handle = lambda payload: release.wait(5.0)

    coordinator.start_session()
    coordinator.submit(encode_record(record(0.0)))
    coordinator.stop_session()

    stuck = coordinator.consumer_thread
    assert stuck is not None and stuck.is_alive()
    with pytest.raises(RecorderBusy):
        coordinator.start_session()
    assert not coordinator.recorder.is_recording

    release.set()
    coordinator.config.drain_timeout = 5.0
    session = coordinator.start_session()
    assert not stuck.is_alive()
    assert coordinator.consumer_thread is not stuck
    assert session.state == 'recording'
    coordinator.stop_session()
