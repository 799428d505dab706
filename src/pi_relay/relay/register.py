# src/pi_relay/relay/register.py
"""
Register-level protocol for the Seeed Studio Raspberry Pi Relay Board v1.0.

The board exposes its four relays as the low nibble of a single register.
Bit ``1 << n`` belongs to channel ``n`` and the relays are active-LOW:
a cleared bit means the relay is ON, a set bit means it is OFF.
The upper nibble is always high on a healthy board, which leaves exactly
16 legal register values.
"""

from .errors import InvalidChannel, InvalidState, InvalidRegisterByte
from .transport import SMBusTransport

CHANNEL_1 = 0
CHANNEL_2 = 1
CHANNEL_3 = 2
CHANNEL_4 = 3
CHANNEL_ALL = 'all'

STATE_ON = 'on'
STATE_OFF = 'off'

CHANNELS = (CHANNEL_1, CHANNEL_2, CHANNEL_3, CHANNEL_4)
VALID_CHANNELS = CHANNELS + (CHANNEL_ALL,)
VALID_STATES = (STATE_ON, STATE_OFF)

# One entry per combination of the four relay bits
VALID_REGISTER_BYTES = frozenset([
    0xFF, 0xFE, 0xFD, 0xFB, 0xF7, 0xFC, 0xF9, 0xF3,
    0xFA, 0xF5, 0xF6, 0xF8, 0xF1, 0xF2, 0xF4, 0xF0,
])

RELAY_MASK = 0x0F

DEFAULT_I2C_ADDRESS = 0x20
DEFAULT_DEVICE_REGISTER = 0x06
DEFAULT_BLOCK = 1


def validate_channel(channel):
    """Raise InvalidChannel unless channel is 0-3 or CHANNEL_ALL."""
    # exact int only: True and 1.0 compare equal to 1
    if not (channel == CHANNEL_ALL or (type(channel) is int and channel in CHANNELS)):
        raise InvalidChannel(
            f"Invalid channel {channel!r}. Use CHANNEL_1, CHANNEL_2, CHANNEL_3, "
            f"CHANNEL_4 (0-3) or CHANNEL_ALL ('{CHANNEL_ALL}')"
        )


def validate_state(state):
    """Raise InvalidState unless state is STATE_ON or STATE_OFF."""
    if not isinstance(state, str) or state not in VALID_STATES:
        raise InvalidState(
            f"Invalid state {state!r}. Use STATE_ON ('{STATE_ON}') or STATE_OFF ('{STATE_OFF}')"
        )


def validate_register_byte(value):
    """Raise InvalidRegisterByte unless value is one of the 16 relay patterns."""
    if (not isinstance(value, int) or isinstance(value, bool)
            or value not in VALID_REGISTER_BYTES):
        raise InvalidRegisterByte(value)


def decode_register(value):
    """
    Split a validated register byte into per-channel states.
    Returns a list of 4 states, index = channel.
    """
    return [STATE_OFF if (value >> channel) & 0x1 else STATE_ON
            for channel in CHANNELS]


def _channel_mask(channel):
    if channel == CHANNEL_ALL:
        return RELAY_MASK
    return 0x1 << channel


def compute_register(value, channel, state):
    """
    Return the register byte that applies state to channel on top of value.
    Bits of every other channel, and the upper nibble, are left untouched.
    """
    mask = _channel_mask(channel)
    if state == STATE_ON:
        return value & ~mask & 0xFF
    return value | mask


class RelayRegister:
    """
    Stateless codec and validator over the relay register.

    Every call re-reads the device, so the hardware stays the single source
    of truth. set_state() is a read-modify-write and is not atomic: callers
    sharing one board must serialise access themselves (see RelayBoard).
    """

    def __init__(self, transport=None, i2c_address=DEFAULT_I2C_ADDRESS,
                 device_register=DEFAULT_DEVICE_REGISTER, block=DEFAULT_BLOCK):
        """
        transport       : RegisterTransport; an SMBusTransport is opened when omitted
        i2c_address     : 7-bit device address
        device_register : register holding the relay bits
        block           : I2C bus number, 1 = /dev/i2c-1

        An injected transport owns its own addressing; the values above are
        then replaced by the transport's when it carries them.
        """
        self.i2c_address = i2c_address
        self.device_register = device_register
        self.block = block
        if transport is None:
            transport = SMBusTransport(i2c_address, device_register, block)
        else:
            for attr in ('i2c_address', 'device_register', 'block'):
                owned = getattr(transport, attr, None)
                if owned is not None:
                    setattr(self, attr, owned)
        self.transport = transport

    def read_register(self):
        """Read the live register byte and validate it."""
        value = self.transport.read_byte()
        validate_register_byte(value)
        return value

    def get_state(self, channel=CHANNEL_ALL):
        validate_channel(channel)
        states = decode_register(self.read_register())
        if channel == CHANNEL_ALL:
            return states
        return states[channel]

    def set_state(self, channel, state):
        """
        Switch one channel (or all of them) on or off.
        Returns the transport's write acknowledgment.
        """
        validate_channel(channel)
        validate_state(state)
        new_value = compute_register(self.read_register(), channel, state)
        return self.transport.write_byte(new_value)
