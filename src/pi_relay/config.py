# src/pi_relay/config.py
import copy
import datetime
import logging
import os

import yaml

from .relay.transport import SMBusTransport, I2CToolsTransport, MemoryTransport, SSHConfig

CONFIG_RELATIVE_PATH = os.path.join('users', 'config', 'relay_config.yaml')

DEFAULT_CONFIG = {
    'i2c_address': 0x20,
    'device_register': 0x06,
    'i2c_bus': 1,
    'transport': 'smbus',
    'i2ctools': {
        'i2cget': '/usr/sbin/i2cget',
        'i2cset': '/usr/sbin/i2cset',
        'timeout': 10,
    },
    'ssh': {
        'host': None,
        'user': None,
        'key_path': None,
    },
    'api': {
        'host': '0.0.0.0',
        'port': 5000,
    },
    'log_dir': None,
}


def _merge(base, override):
    merged = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(path=None):
    """
    Load configuration from YAML file and merge it over DEFAULT_CONFIG.

    Without an explicit path the file is looked up under the current working
    directory first, then next to the project root. When neither exists the
    defaults are returned as-is.
    """
    if path is None:
        path = os.path.join(os.getcwd(), CONFIG_RELATIVE_PATH)
        if not os.path.exists(path):
            path = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..', CONFIG_RELATIVE_PATH))
        if not os.path.exists(path):
            return copy.deepcopy(DEFAULT_CONFIG)
    elif not os.path.exists(path):
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, 'r') as f:
        return _merge(DEFAULT_CONFIG, yaml.safe_load(f))


def build_transport(config):
    """Create the RegisterTransport named by config['transport']."""
    kind = config.get('transport', 'smbus')
    address = config['i2c_address']
    register = config['device_register']
    bus = config['i2c_bus']

    if kind == 'smbus':
        return SMBusTransport(address, register, bus)
    if kind == 'i2ctools':
        tools = config.get('i2ctools', {})
        ssh = config.get('ssh') or {}
        return I2CToolsTransport(
            address, register, bus,
            i2cget=tools.get('i2cget', '/usr/sbin/i2cget'),
            i2cset=tools.get('i2cset', '/usr/sbin/i2cset'),
            ssh=SSHConfig(ssh.get('host'), ssh.get('user'), ssh.get('key_path')),
            timeout=tools.get('timeout', 10),
        )
    if kind == 'memory':
        return MemoryTransport()
    raise ValueError(f"Unknown transport '{kind}'. Use smbus, i2ctools or memory.")


def setup_logging(log_dir=None, level=logging.INFO):
    handlers = [logging.StreamHandler()]
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        session_timestamp = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
        handlers.append(logging.FileHandler(os.path.join(log_dir, f"session_{session_timestamp}.log")))
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=handlers
    )
