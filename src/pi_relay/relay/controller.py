# src/pi_relay/relay/controller.py
import logging
import threading

from ..config import build_transport
from .errors import RelayError
from .register import RelayRegister, CHANNEL_ALL, CHANNELS


def parse_channel(text):
    """
    Turn user input ('0'..'3', 'all') into a channel value.
    Anything else is returned unchanged so the register rejects it.
    """
    if isinstance(text, str):
        stripped = text.strip()
        if stripped == CHANNEL_ALL:
            return CHANNEL_ALL
        if stripped.isascii() and stripped.isdigit():
            return int(stripped)
    return text


class RelayBoard:
    """
    Single owner of one relay register.

    The lock is held for a whole get or read-modify-write, so concurrent
    requests from the API never interleave their register updates.
    """

    def __init__(self, config, transport=None):
        self.config = config
        if transport is None:
            transport = build_transport(config)
        self.transport = transport
        self.register = RelayRegister(
            transport,
            i2c_address=config['i2c_address'],
            device_register=config['device_register'],
            block=config['i2c_bus'],
        )
        self._lock = threading.Lock()

    def get_state(self, channel=CHANNEL_ALL):
        with self._lock:
            return self.register.get_state(channel)

    def set_state(self, channel, state):
        with self._lock:
            try:
                ack = self.register.set_state(channel, state)
            except RelayError as e:
                logging.error(f"Failed to switch channel {channel!r} {state!r}: {e}")
                raise
        logging.info(f"Channel {channel} switched {state}")
        return ack

    def get_status(self):
        states = self.get_state()
        return {
            "states": states,
            "channels": {str(channel): states[channel] for channel in CHANNELS},
            "i2c_address": f"0x{self.register.i2c_address:02X}",
            "device_register": f"0x{self.register.device_register:02X}",
            "i2c_bus": self.register.block,
            "transport": getattr(self.transport, 'name', type(self.transport).__name__),
        }

    def close(self):
        logging.info("Closing relay transport.")
        self.transport.close()
