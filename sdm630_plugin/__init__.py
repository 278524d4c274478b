"""SDM630 energy meter provider plugin."""

__all__ = [
    "Sdm630",
    "AbstractModbusProvider",
    "ModbusConnection",
    "ModbusConnectionFactory",
    "Setting",
    "ModbusConfigurationBuilder",
    "ProviderData",
    "Activity",
    "ProviderError",
    "ProviderConnectionError",
    "ResourceError",
]

from .activity import Activity
from .connection import ModbusConnection, ModbusConnectionFactory
from .errors import ProviderConnectionError, ProviderError, ResourceError
from .plugin import Sdm630
from .provider import AbstractModbusProvider
from .setting import ModbusConfigurationBuilder, ProviderData, Setting
