from typing import Any

from ggvega.data import DataRef
from ggvega.props import PropSet


class GroupBy:
    """Partition the data by `fields` for every layer added after this one."""

    def __init__(self, *fields: str):
        if not fields:
            raise ValueError("group_by needs at least one field")
        self.fields = tuple(fields)

    def resolve(self, props: PropSet, data: DataRef | None) -> tuple[str, ...]:
        return self.fields

    def __repr__(self):
        return f"<GroupBy {self.fields}>"


class Ungroup(GroupBy):
    def __init__(self):
        self.fields = ()


class AutoGroup(GroupBy):
    """Group by every discrete variable mapped in the visualization props."""

    def __init__(self, exclude: tuple[str, ...] = ()):
        self.fields = ()
        self.exclude = tuple(exclude)

    def resolve(self, props: PropSet, data: DataRef | None) -> tuple[str, ...]:
        if data is None:
            raise ValueError("auto_group needs data to find the discrete variables")
        fields = []
        for name, p in props.items():
            if name in self.exclude or p.kind != "field" or p.value in fields:
                continue
            kind = p.type or data.kind(p.value)
            if kind in ("nominal", "logical"):
                fields.append(p.value)
        return tuple(fields)


def group_by(*fields: str) -> GroupBy:
    """Draw the following layers once per partition of the data, eg. one line per group."""
    return GroupBy(*fields)


def ungroup() -> Ungroup:
    return Ungroup()


def auto_group(exclude=()) -> AutoGroup:
    return AutoGroup(exclude=exclude)


def facet_mark(
    name: str, data_name: str, groupby: tuple[str, ...], marks: list[dict[str, Any]]
) -> dict[str, Any]:
    """A group mark drawing `marks` once for each partition of `data_name`."""
    facet_name = f"{name}_facet"
    for mark in marks:
        mark["from"] = {"data": facet_name}
    return {
        "type": "group",
        "from": {"facet": {"name": facet_name, "data": data_name, "groupby": list(groupby)}},
        "marks": marks,
    }
