from .errors import (
    RelayError,
    InvalidChannel,
    InvalidState,
    InvalidRegisterByte,
    TransportError,
)
from .register import (
    RelayRegister,
    CHANNEL_1,
    CHANNEL_2,
    CHANNEL_3,
    CHANNEL_4,
    CHANNEL_ALL,
    STATE_ON,
    STATE_OFF,
)
from .transport import (
    RegisterTransport,
    SMBusTransport,
    I2CToolsTransport,
    MemoryTransport,
    SSHConfig,
)
