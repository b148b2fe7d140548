"""Unit tests for the refresh signal"""

from domus.infrastructure.events import DataChange, RefreshSignal


def test_publish_bumps_version():
    signal = RefreshSignal()
    assert signal.version == 0

    change = signal.publish("house", "created", 7)

    assert signal.version == 1
    assert change == DataChange(version=1, entity="house", action="created", entity_id=7)


def test_subscribers_receive_changes():
    signal = RefreshSignal()
    received = []
    signal.subscribe(received.append)

    signal.publish("payment", "created", 1)
    signal.publish("tenant", "deleted", 2)

    assert [(c.entity, c.action, c.version) for c in received] == [
        ("payment", "created", 1),
        ("tenant", "deleted", 2),
    ]


def test_unsubscribe_stops_delivery():
    signal = RefreshSignal()
    received = []
    unsubscribe = signal.subscribe(received.append)

    signal.publish("room", "created")
    unsubscribe()
    unsubscribe()
    signal.publish("room", "updated")

    assert len(received) == 1
    assert signal.version == 2


def test_failing_subscriber_does_not_block_others():
    signal = RefreshSignal()
    received = []

    def broken(change: DataChange) -> None:
        raise RuntimeError("screen crashed")

    signal.subscribe(broken)
    signal.subscribe(received.append)

    change = signal.publish("house", "updated", 3)

    assert received == [change]
