# src/pi_relay/relay/transport.py
"""
Ways of reaching the relay register.

SMBusTransport     : direct access through /dev/i2c-N with smbus2
I2CToolsTransport  : shells out to i2cget / i2cset, optionally over SSH
MemoryTransport    : in-process register for dry runs and tests
"""

import logging
import shlex
import subprocess

import smbus2

from .errors import TransportError


class RegisterTransport:
    """Reads and writes one register byte on the relay board."""

    name = 'base'

    # Addressing, when the transport talks to a real device
    i2c_address = None
    device_register = None
    block = None

    def read_byte(self):
        raise NotImplementedError

    def write_byte(self, value):
        """Write value and return an acknowledgment."""
        raise NotImplementedError

    def close(self):
        pass


class SMBusTransport(RegisterTransport):
    name = 'smbus'

    def __init__(self, i2c_address=0x20, device_register=0x06, bus=1):
        self.i2c_address = i2c_address
        self.device_register = device_register
        self.block = self.busnum = bus
        try:
            self.bus = smbus2.SMBus(bus)
        except OSError as e:
            raise TransportError(f"Cannot open I2C bus {bus}: {e}") from e

    def read_byte(self):
        try:
            value = self.bus.read_byte_data(self.i2c_address, self.device_register)
        except OSError as e:
            raise TransportError(
                f"I2C read from 0x{self.i2c_address:02X} reg 0x{self.device_register:02X} failed: {e}"
            ) from e
        logging.debug(f"Read 0x{value:02X} from addr=0x{self.i2c_address:02X} reg=0x{self.device_register:02X}")
        return value

    def write_byte(self, value):
        try:
            self.bus.write_byte_data(self.i2c_address, self.device_register, value)
        except OSError as e:
            raise TransportError(
                f"I2C write to 0x{self.i2c_address:02X} reg 0x{self.device_register:02X} failed: {e}"
            ) from e
        logging.debug(f"Wrote 0x{value:02X} to addr=0x{self.i2c_address:02X} reg=0x{self.device_register:02X}")
        return value

    def close(self):
        """Close the I2C bus."""
        self.bus.close()


class SSHConfig:
    """Remote host used to run the i2c-tools commands."""

    def __init__(self, host=None, user=None, key_path=None):
        self.host = host
        self.user = user
        self.key_path = key_path

    @property
    def active(self):
        return bool(self.host)

    def wrap(self, command):
        """Turn a local argv into the ssh argv that runs it remotely."""
        target = f"{self.user}@{self.host}" if self.user else self.host
        ssh_cmd = ['ssh', target]
        if self.key_path:
            ssh_cmd += ['-i', self.key_path]
        ssh_cmd.append(shlex.join(command))
        return ssh_cmd

    def as_dict(self):
        return {
            'host': self.host,
            'user': self.user,
            'key_path': self.key_path,
            'active': self.active,
        }


class I2CToolsTransport(RegisterTransport):
    """
    Runs the i2c-tools binaries, locally or on a remote Pi through ssh.
    Useful where the process has no direct access to /dev/i2c-N.
    """

    name = 'i2ctools'

    def __init__(self, i2c_address=0x20, device_register=0x06, block=1,
                 i2cget='/usr/sbin/i2cget', i2cset='/usr/sbin/i2cset',
                 ssh=None, timeout=10):
        self.i2c_address = i2c_address
        self.device_register = device_register
        self.block = block
        self.i2cget = i2cget
        self.i2cset = i2cset
        self.ssh = ssh or SSHConfig()
        self.timeout = timeout

    def get_ssh_config(self):
        return self.ssh.as_dict()

    def set_ssh_config(self, host, user, key_path=None):
        self.ssh = SSHConfig(host, user, key_path)
        return self.get_ssh_config()

    def _target_args(self):
        return ['-y', str(self.block), f"0x{self.i2c_address:02x}", f"0x{self.device_register:02x}"]

    def build_command(self, *command):
        command = list(command)
        if self.ssh.active:
            return self.ssh.wrap(command)
        return command

    def _run(self, command):
        """Execute a command and return its stdout."""
        logging.debug(f"Running: {command}")
        try:
            result = subprocess.run(
                command,
                capture_output=True,
                text=True,
                timeout=self.timeout
            )
        except subprocess.TimeoutExpired as e:
            raise TransportError(f"Command timed out after {self.timeout}s: {command}") from e
        except OSError as e:
            raise TransportError(f"Cannot run {command[0]}: {e}") from e

        if result.returncode != 0:
            raise TransportError(
                f"Command failed ({result.returncode}): {result.stderr.strip() or result.stdout.strip()}"
            )
        return result.stdout.strip()

    def read_byte(self):
        output = self._run(self.build_command(self.i2cget, *self._target_args()))
        try:
            return int(output, 16)
        except ValueError:
            # Left for the register validation to reject
            return output

    def write_byte(self, value):
        self._run(self.build_command(self.i2cset, *self._target_args(), f"0x{value:02x}"))
        return value


class MemoryTransport(RegisterTransport):
    """Keeps the register in memory. Every written byte is kept in writes."""

    name = 'memory'

    def __init__(self, initial=0xFF):
        self.value = initial
        self.writes = []

    def read_byte(self):
        return self.value

    def write_byte(self, value):
        self.value = value
        self.writes.append(value)
        return value
