"""
SDM630 Three Phase Energy Meter. Solarreader provider plugin.
Requirements:
    1.python modules minimalmodbus, pyserial, pyModbusTCP, pymodbus
    2.Communication module Modbus USB to RS485 converter, or an HF2211 RS485 to ethernet bridge
"""
import logging

from .activity import Activity, TimeEvent, TimeUnit
from .errors import ProviderConnectionError
from .i18n import ResourceBundle
from .provider import AbstractModbusProvider
from .setting import KnownProtocol, ModbusConfigurationBuilder, Setting, SupportedInterface, plugin_metadata
from .ui import HtmlInputType, HtmlWidth, UIInputElementBuilder, UIList

logger = logging.getLogger(__name__)

FIELDS_FILE = "sdm630_fields.json"
TABLES_FILE = "sdm630_tables.json"


@plugin_metadata(
    name="Sdm630",
    version="1.0.1",
    author="Stefan Töngi",
    url="https://github.com/solarreader-plugins/plugin-Sdm630",
    svg_image="sdm630.svg",
    supported_interfaces=(
        SupportedInterface.NAMED_USB,
        SupportedInterface.LISTED_USB,
        SupportedInterface.HF2211,
    ),
    used_protocol=KnownProtocol.MODBUS,
    supports="SGM630",
)
class Sdm630(AbstractModbusProvider):
    """Modbus provider for Eastron SDM630 meters."""

    def __init__(self, connection_factory=None):
        super().__init__(connection_factory)
        logger.debug(f"instantiate {type(self).__module__}.{type(self).__name__}")

    def get_plugin_resource_bundle(self):
        return ResourceBundle.get_bundle("sdm630", self.locale, self.resource_dir)

    def get_default_activity(self):
        return Activity(TimeEvent.TIME, 0, TimeEvent.TIME, 86399, 20, TimeUnit.SECONDS)

    def get_provider_dialog(self):
        bundle = self.resource_bundle
        ui_list = UIList()
        ui_list.add_element(
            UIInputElementBuilder()
            .with_id("id-address")
            .with_required(True)
            .with_type(HtmlInputType.TEXT)
            .with_column_width(HtmlWidth.HALF)
            .with_label(bundle.get_string("sdm630.address.text"))
            .with_name(Setting.PROVIDER_ADDRESS)
            .with_placeholder(bundle.get_string("sdm630.address.text"))
            .with_tooltip(bundle.get_string("sdm630.address.tooltip"))
            .with_invalid_feedback(bundle.get_string("sdm630.address.error"))
            .build()
        )
        return ui_list

    def get_supported_properties(self):
        return self.get_supported_properties_from_file(FIELDS_FILE)

    def get_default_tables(self):
        return self.get_default_tables_from_file(TABLES_FILE)

    def get_default_provider_setting(self):
        return (
            ModbusConfigurationBuilder()
            .with_baudrate(19200)
            .with_rtu_encoding()
            .with_provider_address(1)
            .with_block_size(16)
            .build()
        )

    def test_provider_connection(self, setting):
        """Returns "" when the meter answers, raises ProviderConnectionError otherwise."""
        try:
            with self.connection_factory.create_connection(setting) as test_connection:
                test_connection.connect()
                return ""
        except Exception as e:
            logger.error(f"Connection test failed: {e}")
            raise ProviderConnectionError(self.resource_bundle.get_string("sdm630.connection.error")) from None

    def do_on_first_run(self):
        self.do_standard_first_run()

    def do_activity_work(self, variables):
        with self.get_connection() as modbus_connection:
            modbus_connection.connect()
            self.do_standard_activity(modbus_connection, variables)
            return True
