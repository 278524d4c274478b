"""
Modbus transports for the SDM630.

Serial (USB RS485 sticks)   -> minimalmodbus, RTU or ASCII framing
HF2211 bridge, RTU framing  -> pymodbus TCP client with RTU framer (transparent mode)
HF2211 bridge, TCP encoding -> pyModbusTCP (bridge in Modbus TCP gateway mode)
"""
import logging
from typing import Protocol

import minimalmodbus
import serial
from pyModbusTCP.client import ModbusClient
from pymodbus import FramerType
from pymodbus.client import ModbusTcpClient
from pymodbus.exceptions import ModbusException

from .errors import ProviderConnectionError
from .setting import ModbusEncoding, SupportedInterface

logger = logging.getLogger(__name__)


# ==============================================================================
# BACKENDS
# ==============================================================================
class SerialBackend:
    def __init__(self, setting):
        self.setting = setting
        self.instrument = None

    def open(self):
        s = self.setting
        mode = minimalmodbus.MODE_ASCII if s.encoding is ModbusEncoding.ASCII else minimalmodbus.MODE_RTU
        logger.debug(f"Opening {s.serial_device} @ {s.baudrate} baud, mode {mode}, address {s.provider_address}")
        # minimalmodbus/pyserial errors are IOError (SerialException, ModbusException) or ValueError
        try:
            self.instrument = minimalmodbus.Instrument(s.serial_device, s.provider_address, mode=mode)
            self.instrument.serial.baudrate = s.baudrate
            self.instrument.serial.bytesize = serial.EIGHTBITS
            self.instrument.serial.parity = serial.PARITY_NONE
            self.instrument.serial.stopbits = serial.STOPBITS_ONE
            self.instrument.serial.timeout = s.read_timeout_ms / 1000
            self.instrument.debug = False
        except (OSError, ValueError) as exc:
            # Instrument() already opened the port
            self.close()
            raise ProviderConnectionError(f"Can't open serial port {s.serial_device}: {exc}") from exc

    def read(self, function_code, address, count):
        try:
            return self.instrument.read_registers(address, count, functioncode=function_code)
        except (OSError, ValueError) as exc:
            raise ProviderConnectionError(f"Failed to read {count} registers at {address}: {exc}") from exc

    def close(self):
        if self.instrument is not None and self.instrument.serial is not None:
            self.instrument.serial.close()
        self.instrument = None


class RtuOverTcpBackend:
    def __init__(self, setting):
        self.setting = setting
        self.client = None

    def open(self):
        s = self.setting
        logger.debug(f"Connecting RTU over TCP to {s.provider_host}:{s.provider_port}, address {s.provider_address}")
        self.client = ModbusTcpClient(
            s.provider_host,
            port=s.provider_port,
            framer=FramerType.RTU,
            timeout=s.read_timeout_ms / 1000,
        )
        if not self.client.connect():
            self.client = None
            raise ProviderConnectionError(f"Unable to connect to {s.provider_host}:{s.provider_port}")

    def read(self, function_code, address, count):
        if function_code == 3:
            request = self.client.read_holding_registers
        else:
            request = self.client.read_input_registers
        try:
            response = request(address, count=count, device_id=self.setting.provider_address)
        except ModbusException as exc:
            raise ProviderConnectionError(f"Failed to read {count} registers at {address}: {exc}") from exc
        if response.isError():
            raise ProviderConnectionError(f"Modbus error response at {address}: {response}")
        return list(response.registers)

    def close(self):
        if self.client is not None:
            self.client.close()
        self.client = None


class TcpBackend:
    def __init__(self, setting):
        self.setting = setting
        self.client = None

    def open(self):
        s = self.setting
        logger.debug(f"Using pyModbusTCP, connecting to {s.provider_host}:{s.provider_port} unit ID: {s.provider_address}")
        try:
            self.client = ModbusClient(
                host=s.provider_host,
                port=int(s.provider_port),
                unit_id=s.provider_address,
                timeout=s.read_timeout_ms / 1000,
                auto_open=False,
            )
        except ValueError as exc:
            raise ProviderConnectionError(f"pyModbusTCP connection failure: {exc}") from exc
        if not self.client.open():
            error = self.client.last_error_as_txt
            self.client = None
            raise ProviderConnectionError(f"Unable to connect to {s.provider_host}:{s.provider_port}: {error}")

    def read(self, function_code, address, count):
        if function_code == 3:
            registers = self.client.read_holding_registers(address, count)
        else:
            registers = self.client.read_input_registers(address, count)
        if registers is None or len(registers) < count:
            raise ProviderConnectionError(
                f"Failed to read {count} registers at {address}: {self.client.last_error_as_txt}")
        return registers

    def close(self):
        if self.client is not None:
            self.client.close()
        self.client = None


def backend_for(setting):
    if setting.interface.is_serial:
        if setting.encoding is ModbusEncoding.TCP:
            raise ProviderConnectionError("TCP encoding is not possible on a serial interface")
        return SerialBackend(setting)
    if setting.interface is SupportedInterface.HF2211:
        if setting.encoding is ModbusEncoding.TCP:
            return TcpBackend(setting)
        if setting.encoding is ModbusEncoding.RTU:
            return RtuOverTcpBackend(setting)
        raise ProviderConnectionError("ASCII encoding is not supported over HF2211")
    raise ProviderConnectionError(f"Unsupported interface: {setting.interface}")


# ==============================================================================
# CONNECTION
# ==============================================================================
class ModbusConnection:
    """
    One Modbus connection, used as a context manager:

        with factory.create_connection(setting) as connection:
            connection.connect()
            words = connection.read_registers(4, 0, 16)

    Leaving the block always closes the transport.
    """

    def __init__(self, setting):
        self.setting = setting
        self._backend = None

    @property
    def is_connected(self):
        return self._backend is not None

    def connect(self):
        if self._backend is not None:
            return
        backend = backend_for(self.setting)
        backend.open()
        self._backend = backend

    def read_registers(self, function_code, address, count):
        if self._backend is None:
            raise ProviderConnectionError("Modbus connection is not open")
        return self._backend.read(function_code, address, count)

    def close(self):
        if self._backend is None:
            return
        try:
            self._backend.close()
        finally:
            self._backend = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


class ConnectionFactory(Protocol):
    def create_connection(self, setting): ...


class ModbusConnectionFactory:
    """Default factory; the host (or a test) can inject any ConnectionFactory."""

    def create_connection(self, setting):
        return ModbusConnection(setting)
