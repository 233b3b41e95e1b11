# tests/test_observer.py
from unittest.mock import Mock

import pytest

from phasemesh.errors import ConfigurationError
from phasemesh.observer import Observer


class TestObserve:

    def test_valid_message(self, observer, make_message):
        spy = Mock()
        observer.on_valid_message(spy)
        message = make_message(sender_id="test-node", global_step=0, verification_value=7)

        assert observer.observe(message) is True

        spy.assert_called_once_with(message)
        assert observer.valid_messages == (message,)

    def test_anomaly(self, observer, make_message):
        spy = Mock()
        observer.on_anomaly(spy)
        message = make_message(sender_id="malicious-node", global_step=0, verification_value=9)

        assert observer.observe(message) is False

        spy.assert_called_once()
        anomaly = spy.call_args.args[0]
        assert anomaly.type == "pattern-mismatch"
        assert anomaly.expected == 7
        assert anomaly.received == 9
        assert anomaly.message == message
        assert anomaly.timestamp is not None
        assert observer.anomalies == (anomaly,)

    def test_message_is_not_modified(self, observer, make_message):
        message = make_message(global_step=1, verification_value=9, payload={"k": "v"})
        observer.observe(message)
        assert observer.anomalies[0].message.payload == {"k": "v"}


class TestStatistics:

    def test_empty_observer(self, observer):
        stats = observer.get_statistics()

        assert stats.total_observed == 0
        assert stats.valid_messages == 0
        assert stats.anomalies == 0
        assert stats.success_rate == 100

    def test_accurate_statistics(self, observer, make_message):
        observer.observe(make_message(sender_id="node1", global_step=0, verification_value=7))
        observer.observe(make_message(sender_id="node2", global_step=1, verification_value=9))

        stats = observer.get_statistics()

        assert stats.total_observed == 2
        assert stats.valid_messages == 1
        assert stats.anomalies == 1
        assert stats.success_rate == 50

    def test_total_is_sum_of_logs(self, observer, make_message):
        for step in range(12):
            value = [7, 4, 1][step % 3]
            # Um terço das mensagens adulteradas
            observer.observe(make_message(global_step=step, verification_value=value if step % 3 else 0))
            stats = observer.get_statistics()
            assert stats.total_observed == stats.valid_messages + stats.anomalies

        stats = observer.get_statistics()
        assert stats.anomalies == 4
        assert stats.success_rate == pytest.approx(800 / 12)


def test_clear_history_keeps_cache(observer, make_message):
    observer.observe(make_message(global_step=10, verification_value=4))
    observer.observe(make_message(global_step=11, verification_value=0))
    cache_size = observer.pattern.cache_size

    observer.clear_history()

    stats = observer.get_statistics()
    assert stats.total_observed == 0
    assert stats.success_rate == 100
    assert observer.pattern.cache_size == cache_size


def test_invalid_config():
    with pytest.raises(ConfigurationError):
        Observer({"seed": 7, "reset_interval": 0})


@pytest.mark.parametrize("seed", [10, -1])
def test_seed_must_be_a_digit(seed):
    with pytest.raises(ConfigurationError):
        Observer({"seed": seed, "reset_interval": 100})
