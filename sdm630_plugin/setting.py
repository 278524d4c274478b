"""
Connection settings, plugin metadata and provider data handed over by the host.
"""
from __future__ import annotations

from dataclasses import dataclass, field, fields, asdict
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class SupportedInterface(Enum):
    NONE = "none"
    NAMED_USB = "named_usb"      # serial device given by path, e.g. /dev/ttyUSB0
    LISTED_USB = "listed_usb"    # serial device picked from the enumerated list
    HF2211 = "hf2211"            # Elfin HF2211 RS485 <-> ethernet bridge

    @property
    def is_serial(self):
        return self in (SupportedInterface.NAMED_USB, SupportedInterface.LISTED_USB)


class KnownProtocol(Enum):
    MODBUS = "modbus"


class ModbusEncoding(Enum):
    RTU = "rtu"
    ASCII = "ascii"
    TCP = "tcp"


# ==============================================================================
# SETTING
# ==============================================================================
@dataclass
class Setting:
    """Configuration of one provider instance as stored by the host."""

    PROVIDER_HOST = "provider_host"
    PROVIDER_PORT = "provider_port"
    PROVIDER_ADDRESS = "provider_address"
    BAUDRATE = "baudrate"
    SERIAL_DEVICE = "serial_device"

    provider_host: str = ""
    provider_port: int = 502
    provider_address: int = 1
    baudrate: int = 9600
    encoding: ModbusEncoding = ModbusEncoding.RTU
    block_size: int = 16
    interface: SupportedInterface = SupportedInterface.NAMED_USB
    serial_device: str = "/dev/ttyUSB0"
    read_timeout_ms: int = 1000
    configuration: Dict[str, Any] = field(default_factory=dict)

    def get(self, key, default=None):
        if key in self._field_names():
            return getattr(self, key)
        return self.configuration.get(key, default)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["encoding"] = self.encoding.value
        data["interface"] = self.interface.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Setting":
        """Build a setting from the host's plain mapping; unknown keys go to `configuration`."""
        known = cls._field_names()
        kwargs = {k: v for k, v in data.items() if k in known}
        extra = {k: v for k, v in data.items() if k not in known}
        if "encoding" in kwargs and not isinstance(kwargs["encoding"], ModbusEncoding):
            kwargs["encoding"] = ModbusEncoding(str(kwargs["encoding"]).lower())
        if "interface" in kwargs and not isinstance(kwargs["interface"], SupportedInterface):
            kwargs["interface"] = SupportedInterface(str(kwargs["interface"]).lower())
        # the dialog delivers every field as text
        for key in ("provider_port", "provider_address", "baudrate", "block_size", "read_timeout_ms"):
            if key in kwargs:
                kwargs[key] = int(kwargs[key])
        setting = cls(**kwargs)
        setting.configuration.update(extra)
        return setting

    @classmethod
    def _field_names(cls) -> Tuple[str, ...]:
        return tuple(f.name for f in fields(cls))


class ModbusConfigurationBuilder:
    """Fluent builder for Modbus settings."""

    def __init__(self):
        self._values = {}

    def with_baudrate(self, baudrate):
        if int(baudrate) <= 0:
            raise ValueError(f"Invalid baud rate: {baudrate}")
        self._values["baudrate"] = int(baudrate)
        return self

    def with_rtu_encoding(self):
        self._values["encoding"] = ModbusEncoding.RTU
        return self

    def with_ascii_encoding(self):
        self._values["encoding"] = ModbusEncoding.ASCII
        return self

    def with_tcp_encoding(self):
        self._values["encoding"] = ModbusEncoding.TCP
        return self

    def with_provider_address(self, address):
        if not 1 <= int(address) <= 247:
            raise ValueError(f"Modbus device address must be 1..247, got {address}")
        self._values["provider_address"] = int(address)
        return self

    def with_block_size(self, block_size):
        # a single read request carries at most 125 registers
        if not 1 <= int(block_size) <= 125:
            raise ValueError(f"Block size must be 1..125, got {block_size}")
        self._values["block_size"] = int(block_size)
        return self

    def with_read_timeout(self, milliseconds):
        self._values["read_timeout_ms"] = int(milliseconds)
        return self

    def build(self) -> Setting:
        return Setting(**self._values)


# ==============================================================================
# PLUGIN METADATA
# ==============================================================================
@dataclass(frozen=True)
class PluginMetadata:
    name: str
    version: str
    author: str
    url: str = ""
    svg_image: str = ""
    supported_interfaces: Tuple[SupportedInterface, ...] = ()
    used_protocol: KnownProtocol = KnownProtocol.MODBUS
    supports: str = ""


def plugin_metadata(**kwargs):
    """Class decorator attaching a PluginMetadata as `cls.METADATA` for the host registry."""
    metadata = PluginMetadata(**kwargs)

    def decorate(cls):
        cls.METADATA = metadata
        return cls

    return decorate


@dataclass
class ProviderData:
    name: str = ""
    plugin_name: str = ""
    setting: Optional[Setting] = None
    properties: List[Any] = field(default_factory=list)
