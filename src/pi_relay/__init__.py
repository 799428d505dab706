"""
pi_relay - control the Seeed Studio 4-channel Raspberry Pi relay board over I2C.
"""

__version__ = "1.0.0"
