import json

import pytest

from sdm630_plugin.errors import MissingResourceError, ResourceError
from sdm630_plugin.i18n import ResourceBundle
from sdm630_plugin.ui import HtmlInputType, UIInputElementBuilder, UIList

REQUIRED_KEYS = ["sdm630.address.text", "sdm630.address.tooltip", "sdm630.address.error", "sdm630.connection.error"]


def test_builder_requires_id_and_name():
    with pytest.raises(ValueError):
        UIInputElementBuilder().with_id("x").build()
    with pytest.raises(ValueError):
        UIInputElementBuilder().with_name("x").build()


def test_ui_list_to_dict():
    ui_list = UIList().add_element(UIInputElementBuilder().with_id("i").with_name("n").with_required(1).build())
    data = ui_list.to_dict()
    assert data["elements"][0]["type"] == HtmlInputType.TEXT.value
    assert data["elements"][0]["required"] is True
    assert [e.id for e in ui_list] == ["i"]


@pytest.mark.parametrize("locale", ["en", "de", "de_DE", "de-AT", "fr"])
def test_bundles_have_required_keys(locale):
    bundle = ResourceBundle.get_bundle("sdm630", locale)
    for key in REQUIRED_KEYS:
        assert bundle.get_string(key)


def test_german_overrides_default():
    assert ResourceBundle.get_bundle("sdm630", "de").get_string("sdm630.address.text") == "Modbus-Adresse"
    assert ResourceBundle.get_bundle("sdm630", "fr").get_string("sdm630.address.text") == "Modbus address"


def test_missing_key():
    bundle = ResourceBundle.get_bundle("sdm630", "en")
    with pytest.raises(MissingResourceError):
        bundle.get_string("nope")
    with pytest.raises(KeyError):
        bundle.get_string("nope")


def test_missing_bundle(tmp_path):
    with pytest.raises(ResourceError):
        ResourceBundle.get_bundle("sdm630", "en", tmp_path)


@pytest.mark.parametrize("content", [
    json.dumps(["a"]).encode("utf-8"),
    b"{not json",
    b'{"sdm630.address.text": "\xff"}',
])
def test_broken_bundle(tmp_path, content):
    (tmp_path / "sdm630.json").write_bytes(content)
    with pytest.raises(ResourceError):
        ResourceBundle.get_bundle("sdm630", "en", tmp_path)
