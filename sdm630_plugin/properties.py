"""
Field map (register -> variable) and table layouts, both loaded from bundled JSON files.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

from .errors import ResourceError


class ValueType(Enum):
    U16 = ("U16", 1, False)
    S16 = ("S16", 1, True)
    U32 = ("U32", 2, False)
    S32 = ("S32", 2, True)
    FLOAT = ("FLOAT", 2, True)

    def __init__(self, label, words, signed):
        self.label = label
        self.words = words
        self.signed = signed

    @classmethod
    def parse(cls, text):
        for value_type in cls:
            if value_type.label == str(text).upper():
                return value_type
        raise ValueError(f"Unknown value type: {text}")


@dataclass(frozen=True)
class ProviderProperty:
    name: str
    register: int
    value_type: ValueType = ValueType.FLOAT
    length: int = 2
    function_code: int = 4
    factor: float = 1
    unit: str = ""
    description: str = ""
    min: Optional[float] = None
    max: Optional[float] = None

    @property
    def end(self):
        """First register after this property."""
        return self.register + self.length

    @classmethod
    def from_dict(cls, item):
        value_type = ValueType.parse(item.get("type", "FLOAT"))
        function_code = int(item.get("function", 4))
        if function_code not in (3, 4):
            raise ValueError(f"Function code must be 3 or 4, got {function_code}")
        return cls(
            name=item["name"],
            register=int(item["register"]),
            value_type=value_type,
            length=int(item.get("length", value_type.words)),
            function_code=function_code,
            factor=float(item.get("factor", 1)),
            unit=item.get("unit", ""),
            description=item.get("description", ""),
            min=_optional_float(item.get("min")),
            max=_optional_float(item.get("max")),
        )


def _optional_float(value):
    return None if value is None else float(value)


@dataclass(frozen=True)
class TableColumn:
    columnname: str
    variable: str
    factor: float = 1

    def value_of(self, variables):
        value = variables.get(self.variable)
        if value is None:
            return None
        return value * self.factor


@dataclass(frozen=True)
class Table:
    tablename: str
    columns: List[TableColumn] = field(default_factory=list)

    def row(self, variables) -> Dict[str, object]:
        """One row for this table from the variables of an activity run."""
        return {column.columnname: column.value_of(variables) for column in self.columns}

    @classmethod
    def from_dict(cls, item):
        return cls(
            tablename=item["tablename"],
            columns=[
                TableColumn(
                    columnname=column["columnname"],
                    variable=column.get("variable", column["columnname"]),
                    factor=float(column.get("factor", 1)),
                )
                for column in item.get("columns", [])
            ],
        )


def _load_list(path, parse):
    path = Path(path)
    if not path.exists():
        raise ResourceError(f"Resource file not found: {path}")
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ResourceError(f"Can't read {path.name}: {exc}") from exc
    if not isinstance(raw, list):
        raise ResourceError(f"{path.name} must contain a JSON list")
    try:
        return [parse(item) for item in raw]
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise ResourceError(f"Invalid entry in {path.name}: {exc}") from exc


def load_properties(path) -> List[ProviderProperty]:
    properties = _load_list(path, ProviderProperty.from_dict)
    names = [p.name for p in properties]
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise ResourceError(f"Duplicate field names in {Path(path).name}: {', '.join(duplicates)}")
    return properties


def load_tables(path) -> List[Table]:
    return _load_list(path, Table.from_dict)
