"""
Exceptions raised by the SDM630 provider plugin.
Every error is an IOError so the host can treat them like any other I/O failure.
"""


class ProviderError(IOError):
    """Base class for all errors raised by this plugin."""


class ProviderConnectionError(ProviderError):
    """The Modbus transport could not be opened or a read failed."""


class ResourceError(ProviderError):
    """A bundled resource (field map, table layout, strings) is missing or malformed."""


class MissingResourceError(ResourceError, KeyError):
    """A localized string key is not present in the resource bundle."""
