"""
Base class for Modbus providers: resource loading, connection handling and the
standard read cycle shared by all register-mapped devices.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .config import settings
from .connection import ConnectionFactory, ModbusConnectionFactory
from .decode import decode_value, is_value_reasonable
from .errors import ProviderError
from .properties import ProviderProperty, load_properties, load_tables

logger = logging.getLogger(__name__)


@dataclass
class ReadBlock:
    """Consecutive registers fetched with a single request."""
    function_code: int
    start: int
    count: int = 0
    properties: List[ProviderProperty] = field(default_factory=list)


def plan_blocks(properties, block_size) -> List[ReadBlock]:
    """
    Group properties into read requests. A block holds properties of one function
    code whose registers all lie within `block_size` registers from its start.
    A property longer than `block_size` gets a block of its own.
    """
    blocks = []
    ordered = sorted(properties, key=lambda p: (p.function_code, p.register))
    current = None
    for prop in ordered:
        fits = (
            current is not None
            and current.function_code == prop.function_code
            and prop.end - current.start <= block_size
        )
        if not fits:
            current = ReadBlock(function_code=prop.function_code, start=prop.register)
            blocks.append(current)
        current.properties.append(prop)
        current.count = max(current.count, prop.end - current.start)
    return blocks


class AbstractModbusProvider(ABC):

    def __init__(self, connection_factory: Optional[ConnectionFactory] = None):
        self.connection_factory = connection_factory or ModbusConnectionFactory()
        self.provider_data = None
        self.locale = settings.LOCALE
        self.resource_dir = settings.RESOURCE_DIR
        self._resource_bundle = None

    # ==========================================================================
    # HOST SIDE
    # ==========================================================================
    @property
    def resource_bundle(self):
        if self._resource_bundle is None:
            self._resource_bundle = self.get_plugin_resource_bundle()
        return self._resource_bundle

    def set_locale(self, locale):
        self.locale = locale
        self._resource_bundle = None

    def set_provider_data(self, provider_data):
        self.provider_data = provider_data

    def get_connection(self):
        if self.provider_data is None or self.provider_data.setting is None:
            raise ProviderError("No provider setting available, set provider data first")
        return self.connection_factory.create_connection(self.provider_data.setting)

    def get_supported_properties_from_file(self, filename):
        return load_properties(self.resource_dir / filename)

    def get_default_tables_from_file(self, filename):
        return load_tables(self.resource_dir / filename)

    # ==========================================================================
    # STANDARD ROUTINES
    # ==========================================================================
    def do_standard_first_run(self):
        properties = self.get_supported_properties()
        if self.provider_data is not None:
            self.provider_data.properties = list(properties)
        logger.info(f"{type(self).__name__}: {len(properties)} supported properties")

    def do_standard_activity(self, connection, variables: Dict[str, object]):
        """Read every supported property once and store the plausible values in `variables`."""
        properties = self.provider_data.properties if self.provider_data and self.provider_data.properties \
            else self.get_supported_properties()
        setting = self.provider_data.setting if self.provider_data else None
        block_size = setting.block_size if setting else self.get_default_provider_setting().block_size

        skipped = 0
        for block in plan_blocks(properties, block_size):
            # single read attempt, a failed block aborts the cycle
            words = connection.read_registers(block.function_code, block.start, block.count)
            for prop in block.properties:
                offset = prop.register - block.start
                raw = words[offset:offset + prop.length]
                try:
                    value = decode_value(raw, prop.value_type) * prop.factor
                except ValueError as exc:
                    logger.warning(f"Can't decode {prop.name}: {exc}")
                    skipped += 1
                    continue
                is_valid, reason = is_value_reasonable(value, prop)
                if not is_valid:
                    logger.warning(f"Invalid value for {prop.name}: {reason}")
                    skipped += 1
                    continue
                variables[prop.name] = value
        logger.debug(f"Activity read {len(properties) - skipped} values, skipped {skipped}")

    # ==========================================================================
    # PLUGIN CONTRACT
    # ==========================================================================
    @abstractmethod
    def get_plugin_resource_bundle(self):
        ...

    @abstractmethod
    def get_default_activity(self):
        ...

    @abstractmethod
    def get_provider_dialog(self):
        ...

    @abstractmethod
    def get_supported_properties(self):
        ...

    @abstractmethod
    def get_default_tables(self):
        ...

    @abstractmethod
    def get_default_provider_setting(self):
        ...

    @abstractmethod
    def test_provider_connection(self, setting):
        ...

    @abstractmethod
    def do_on_first_run(self):
        ...

    @abstractmethod
    def do_activity_work(self, variables):
        ...
