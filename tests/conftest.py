import struct

import pytest

from sdm630_plugin import ProviderData, Sdm630


def float_words(value):
    """Big-endian IEEE754 float split into two Modbus registers."""
    return list(struct.unpack(">HH", struct.pack(">f", value)))


class FakeSdm630Connection:
    """Stands in for a ModbusConnection; every float register reads `default` unless set in `values`."""

    def __init__(self, values=None, default=1.0, connect_error=None, read_error=None):
        self.values = dict(values or {})
        self.default = default
        self.connect_error = connect_error
        self.read_error = read_error
        self.connected = False
        self.closed = False
        self.requests = []

    def connect(self):
        if self.connect_error is not None:
            raise self.connect_error
        self.connected = True

    def read_registers(self, function_code, address, count):
        if not self.connected:
            raise AssertionError("read before connect")
        if self.read_error is not None:
            raise self.read_error
        self.requests.append((function_code, address, count))
        words = []
        for register in range(address, address + count, 2):
            words.extend(float_words(self.values.get(register, self.default)))
        return words[:count]

    def close(self):
        self.connected = False
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


class FakeConnectionFactory:
    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.connections = []
        self.settings = []

    def create_connection(self, setting):
        connection = FakeSdm630Connection(**self.kwargs)
        self.connections.append(connection)
        self.settings.append(setting)
        return connection

    @property
    def last(self):
        return self.connections[-1]


@pytest.fixture
def factory():
    # the meter reports 50 Hz, everything else reads 1.0
    return FakeConnectionFactory(values={70: 50.0})


@pytest.fixture
def provider(factory):
    provider = Sdm630(factory)
    provider.set_locale("en")
    provider_data = ProviderData(name="SDM630 Test", plugin_name="SDM630")
    provider_data.setting = provider.get_default_provider_setting()
    provider.set_provider_data(provider_data)
    return provider
