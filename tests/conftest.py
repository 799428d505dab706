# tests/conftest.py
import copy

import pytest

from pi_relay.config import DEFAULT_CONFIG
from pi_relay.relay.transport import MemoryTransport

# Channel order -> register byte, '1' meaning the relay is ON
VALUE_MAP = {
    '0000': 0xFF,
    '1000': 0xFE,
    '0100': 0xFD,
    '0010': 0xFB,
    '0001': 0xF7,
    '1100': 0xFC,
    '0110': 0xF9,
    '0011': 0xF3,
    '1010': 0xFA,
    '0101': 0xF5,
    '1001': 0xF6,
    '1110': 0xF8,
    '0111': 0xF1,
    '1011': 0xF2,
    '1101': 0xF4,
    '1111': 0xF0,
}


@pytest.fixture
def transport():
    """An in-memory register starting with every relay off."""
    return MemoryTransport(0xFF)


@pytest.fixture
def memory_config():
    config = copy.deepcopy(DEFAULT_CONFIG)
    config['transport'] = 'memory'
    return config
