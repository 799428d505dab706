# src/pi_relay/relay/errors.py


class RelayError(Exception):
    """Base class for every error raised by the relay package."""


class InvalidChannel(RelayError, ValueError):
    pass


class InvalidState(RelayError, ValueError):
    pass


class InvalidRegisterByte(RelayError):
    """The register read back something that is not one of the 16 relay patterns."""

    def __init__(self, value):
        self.value = value
        if isinstance(value, int) and not isinstance(value, bool):
            shown = f"0x{value:02X}"
        else:
            shown = repr(value)
        super().__init__(f"Invalid register value: {shown}")


class TransportError(RelayError):
    """Reading or writing the device register failed."""
