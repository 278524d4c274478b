"""Declarative dialog elements rendered by the host UI."""
from dataclasses import dataclass, asdict
from enum import Enum


class HtmlInputType(Enum):
    TEXT = "text"
    NUMBER = "number"
    PASSWORD = "password"
    CHECKBOX = "checkbox"


class HtmlWidth(Enum):
    FULL = "col-12"
    HALF = "col-6"
    THIRD = "col-4"
    QUARTER = "col-3"


@dataclass(frozen=True)
class UIInputElement:
    id: str
    name: str
    type: HtmlInputType = HtmlInputType.TEXT
    required: bool = False
    column_width: HtmlWidth = HtmlWidth.FULL
    label: str = ""
    placeholder: str = ""
    tooltip: str = ""
    invalid_feedback: str = ""

    def to_dict(self):
        data = asdict(self)
        data["type"] = self.type.value
        data["column_width"] = self.column_width.value
        return data


class UIInputElementBuilder:
    def __init__(self):
        self._values = {}

    def with_id(self, element_id):
        self._values["id"] = element_id
        return self

    def with_required(self, required):
        self._values["required"] = bool(required)
        return self

    def with_type(self, input_type):
        self._values["type"] = input_type
        return self

    def with_column_width(self, width):
        self._values["column_width"] = width
        return self

    def with_label(self, label):
        self._values["label"] = label
        return self

    def with_name(self, name):
        self._values["name"] = name
        return self

    def with_placeholder(self, placeholder):
        self._values["placeholder"] = placeholder
        return self

    def with_tooltip(self, tooltip):
        self._values["tooltip"] = tooltip
        return self

    def with_invalid_feedback(self, feedback):
        self._values["invalid_feedback"] = feedback
        return self

    def build(self):
        for key in ("id", "name"):
            if not self._values.get(key):
                raise ValueError(f"UI input element needs a {key}")
        return UIInputElement(**self._values)


class UIList:
    """Ordered list of dialog elements."""

    def __init__(self):
        self.elements = []

    def add_element(self, element):
        self.elements.append(element)
        return self

    def __len__(self):
        return len(self.elements)

    def __iter__(self):
        return iter(self.elements)

    def to_dict(self):
        return {"elements": [element.to_dict() for element in self.elements]}
