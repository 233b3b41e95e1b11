# tests/conftest.py
import pytest

from phasemesh.models import Message, NodeConfig
from phasemesh.network import Network
from phasemesh.node import Node
from phasemesh.observer import Observer

SEED = 7
RESET_INTERVAL = 100


@pytest.fixture
def node_config():
    return NodeConfig(node_id="test-node", seed=SEED, reset_interval=RESET_INTERVAL)


@pytest.fixture
def node(node_config):
    return Node(node_config)


@pytest.fixture
def network():
    return Network()


@pytest.fixture
def observer():
    return Observer({"seed": SEED, "reset_interval": RESET_INTERVAL})


@pytest.fixture
def make_message():
    def _make(global_step=0, verification_value=7, sender_id="other-node", payload=None):
        return Message(
            sender_id=sender_id,
            global_step=global_step,
            verification_value=verification_value,
            payload=payload if payload is not None else {},
        )
    return _make
