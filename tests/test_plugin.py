import pytest

from conftest import FakeConnectionFactory
from sdm630_plugin import ProviderConnectionError, Sdm630, Setting
from sdm630_plugin.activity import TimeEvent, TimeUnit
from sdm630_plugin.errors import ProviderError
from sdm630_plugin.properties import ProviderProperty, Table
from sdm630_plugin.setting import KnownProtocol, ModbusEncoding, SupportedInterface
from sdm630_plugin.ui import HtmlInputType, HtmlWidth


def test_metadata():
    metadata = Sdm630.METADATA
    assert metadata.name == "Sdm630"
    assert metadata.version == "1.0.1"
    assert metadata.used_protocol is KnownProtocol.MODBUS
    assert metadata.supported_interfaces == (
        SupportedInterface.NAMED_USB,
        SupportedInterface.LISTED_USB,
        SupportedInterface.HF2211,
    )


def test_default_provider_setting(provider):
    setting = provider.get_default_provider_setting()
    assert setting.baudrate == 19200
    assert setting.encoding is ModbusEncoding.RTU
    assert setting.provider_address == 1
    assert setting.block_size == 16


def test_default_activity_covers_whole_day_every_20_seconds(provider):
    activity = provider.get_default_activity()
    assert activity.start_event is TimeEvent.TIME
    assert activity.end_event is TimeEvent.TIME
    assert (activity.start_offset, activity.end_offset) == (0, 86399)
    assert activity.interval == 20
    assert activity.time_unit is TimeUnit.SECONDS
    assert activity.interval_seconds == 20


def test_provider_dialog_has_one_required_address_field(provider):
    dialog = provider.get_provider_dialog()
    assert len(dialog) == 1
    element = dialog.elements[0]
    assert element.id == "id-address"
    assert element.required is True
    assert element.type is HtmlInputType.TEXT
    assert element.column_width is HtmlWidth.HALF
    assert element.name == Setting.PROVIDER_ADDRESS
    assert element.label == "Modbus address"
    assert element.placeholder == element.label
    assert element.tooltip
    assert element.invalid_feedback


def test_provider_dialog_is_localized(provider):
    provider.set_locale("de_DE")
    element = provider.get_provider_dialog().elements[0]
    assert element.label == "Modbus-Adresse"


def test_supported_properties_and_tables(provider):
    properties = provider.get_supported_properties()
    tables = provider.get_default_tables()
    assert properties and all(isinstance(p, ProviderProperty) for p in properties)
    assert tables and all(isinstance(t, Table) for t in tables)
    names = {p.name for p in properties}
    for table in tables:
        for column in table.columns:
            assert column.variable in names


def test_connection_test_succeeds(provider, factory):
    setting = provider.get_default_provider_setting()
    assert provider.test_provider_connection(setting) == ""
    assert factory.settings[-1] is setting
    assert factory.last.closed


@pytest.mark.parametrize("error", [OSError("port busy"), ValueError("bad"), RuntimeError("boom")])
def test_connection_test_failure_is_localized(provider, error, caplog):
    provider.connection_factory = FakeConnectionFactory(connect_error=error)
    with pytest.raises(ProviderConnectionError) as excinfo:
        provider.test_provider_connection(provider.get_default_provider_setting())
    assert str(excinfo.value) == provider.resource_bundle.get_string("sdm630.connection.error")
    assert excinfo.value.__cause__ is None
    assert str(error) in caplog.text
    assert provider.connection_factory.last.closed


def test_connection_test_failure_is_an_ioerror(provider):
    provider.connection_factory = FakeConnectionFactory(connect_error=OSError("nope"))
    with pytest.raises(IOError):
        provider.test_provider_connection(Setting())


def test_first_run_loads_properties(provider):
    assert provider.provider_data.properties == []
    provider.do_on_first_run()
    assert len(provider.provider_data.properties) == len(provider.get_supported_properties())


def test_activity_work_reads_values_and_closes(provider, factory):
    provider.do_on_first_run()
    variables = {}
    assert provider.do_activity_work(variables) is True
    connection = factory.last
    assert connection.closed
    assert not connection.connected
    assert variables["Frequenz"] == 50.0
    assert variables["Spannung_L1"] == 1.0
    assert len(variables) == len(provider.get_supported_properties())
    assert all(count <= 16 for _, _, count in connection.requests)


def test_activity_work_closes_connection_on_read_error(provider):
    provider.connection_factory = FakeConnectionFactory(read_error=ProviderConnectionError("timeout"))
    with pytest.raises(ProviderConnectionError):
        provider.do_activity_work({})
    assert provider.connection_factory.last.closed


def test_activity_work_without_provider_data():
    provider = Sdm630(FakeConnectionFactory())
    with pytest.raises(ProviderError):
        provider.do_activity_work({})


def test_provider_interface(provider):
    """Walks the whole contract the way the host does after installing the plugin."""
    assert provider.get_default_provider_setting()
    assert provider.get_default_activity()
    assert provider.get_provider_dialog()
    assert provider.get_supported_properties()
    assert provider.get_default_tables()
    assert provider.test_provider_connection(provider.provider_data.setting) == ""
    provider.do_on_first_run()
    variables = {}
    assert provider.do_activity_work(variables)
    rows = [table.row(variables) for table in provider.get_default_tables()]
    assert all(value is not None for row in rows for value in row.values())
