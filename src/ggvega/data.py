import datetime
import math
import uuid
import warnings
from typing import Any, Literal, Sequence

import numpy as np

ColumnKind = Literal["numeric", "nominal", "temporal", "logical"]

EPOCH = datetime.datetime(1970, 1, 1, tzinfo=datetime.timezone.utc)


def _to_millis(value: datetime.date) -> float:
    if not isinstance(value, datetime.datetime):
        value = datetime.datetime(value.year, value.month, value.day)
    if value.tzinfo is None:
        value = value.replace(tzinfo=datetime.timezone.utc)
    return (value - EPOCH).total_seconds() * 1000


def normalize_value(value: Any) -> Any:
    """Convert a single cell to something Vega can read from inline JSON."""
    # before the generic unwrap: .item() gives integer nanoseconds for datetime64[ns]
    if isinstance(value, np.datetime64):
        if np.isnat(value):
            return None
        return float(value.astype("datetime64[ms]").astype(np.int64))
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, float) and math.isnan(value):
        return None
    if isinstance(value, (datetime.date, datetime.datetime)):
        return _to_millis(value)
    return value


def _columns_to_records(columns: dict[str, Any]) -> list[dict[str, Any]]:
    lengths = {k: len(v) for k, v in columns.items()}
    if len(set(lengths.values())) > 1:
        raise ValueError(f"Columns must have equal lengths, got {lengths}")
    n = next(iter(lengths.values()), 0)
    names = list(columns)
    return [{name: columns[name][i] for name in names} for i in range(n)]


def _raw_records(data: Any) -> list[dict[str, Any]]:
    if hasattr(data, "to_dict") and not isinstance(data, dict):
        return data.to_dict(orient="records")
    if isinstance(data, np.ndarray):
        if data.dtype.names is None:
            raise TypeError("Only numpy structured arrays can be used as data")
        # index rows rather than tolist(), which turns datetime64[ns] into ints
        return [{name: row[name] for name in data.dtype.names} for row in data]
    if isinstance(data, dict):
        return _columns_to_records(data)
    if isinstance(data, Sequence) and not isinstance(data, (str, bytes)):
        if not all(isinstance(row, dict) for row in data):
            raise TypeError("A sequence used as data must contain only dicts (records)")
        return list(data)
    raise TypeError(f"Unsupported data of type {type(data).__name__}")


def as_records(data: Any) -> list[dict[str, Any]]:
    """
    Normalize a dataset to a list of records with JSON-friendly values.

    Accepts a list of dicts, a dict of equal-length columns, a numpy structured array
    or any object with a pandas-style `to_dict(orient="records")`.
    """
    records = [
        {str(k): normalize_value(v) for k, v in row.items()}
        for row in _raw_records(data)
    ]
    if not records:
        warnings.warn("Dataset is empty", UserWarning)
    return records


def _raw_values(data: Any, field: str) -> list[Any]:
    rows = _raw_records(data)
    if rows and field not in rows[0]:
        raise KeyError(
            f"Unknown field '{field}', available columns are: {', '.join(rows[0])}"
        )
    return [row.get(field) for row in rows]


def kind_of(value: Any) -> ColumnKind | None:
    if value is None:
        return None
    if isinstance(value, (bool, np.bool_)):
        return "logical"
    if isinstance(value, np.datetime64):
        return None if np.isnat(value) else "temporal"
    if isinstance(value, (datetime.date, datetime.datetime)):
        return "temporal"
    if isinstance(value, (int, float, np.number)):
        if isinstance(value, (float, np.floating)) and math.isnan(value):
            return None
        return "numeric"
    return "nominal"


def column_kind(data: Any, field: str) -> ColumnKind:
    """Guess how a column should be scaled from its non-null values."""
    kinds = {kind_of(v) for v in _raw_values(data, field)} - {None}
    if not kinds:
        return "numeric"
    if len(kinds) == 1:
        return kinds.pop()
    if kinds <= {"numeric", "logical"}:
        return "numeric"
    return "nominal"


class DataRef:
    """
    A dataset with a stable identity, so that data shared between layers is emitted once.

    Args:
        values: Any supported data container (see `as_records`).
        name (str, optional): Name of the dataset in the compiled spec.
    """

    def __init__(self, values: Any, name: str | None = None):
        self.id = str(uuid.uuid4())
        self.values = values
        self.name = name
        self._records: list[dict[str, Any]] | None = None

    def records(self) -> list[dict[str, Any]]:
        if self._records is None:
            self._records = as_records(self.values)
        return self._records

    def fields(self) -> list[str]:
        records = self.records()
        return list(records[0]) if records else []

    def kind(self, field: str) -> ColumnKind:
        return column_kind(self.values, field)

    def has_field(self, field: str) -> bool:
        records = self.records()
        return not records or field in records[0]

    def __repr__(self):
        return f"<DataRef name={self.name!r} rows={len(self.records())}>"


def data_ref(data: Any, name: str | None = None) -> DataRef:
    """Wrap data in a DataRef. Existing DataRefs are returned unchanged."""
    if isinstance(data, DataRef):
        return data
    return DataRef(data, name=name)
