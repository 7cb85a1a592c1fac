"""In-memory object graph for ``project.pbxproj`` and its text rendering.

Objects are declared once through :meth:`ProjectGraph.add`, which returns a
:class:`Ref` that other objects embed in their fields (as values, list items
or dictionary keys).  :meth:`ProjectGraph.validate` walks every embedded
reference and :meth:`ProjectGraph.render` refuses to emit a graph with
dangling references.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from itertools import groupby
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence

from .errors import ProjectGraphError

UNQUOTED_PATTERN = re.compile(r"^[A-Za-z0-9_$./]+$")
FILE_HEADER = "// !$*UTF8*$!"
ARCHIVE_VERSION = 1
OBJECT_VERSION = 46


@dataclass(frozen=True)
class Ref:
    """Reference to a declared object, rendered as ``id /* comment */``."""

    object_id: str
    comment: Optional[str] = None

    def render(self) -> str:
        if self.comment:
            return f"{self.object_id} /* {self.comment} */"
        return self.object_id


@dataclass
class PBXObject:
    """A single entry in the ``objects`` dictionary."""

    object_id: str
    isa: str
    comment: Optional[str] = None
    fields: Dict[Any, Any] = field(default_factory=dict)
    inline: bool = False

    @property
    def ref(self) -> Ref:
        return Ref(self.object_id, self.comment)


def quote(value: str) -> str:
    """Quote a string value unless it is a plain OpenStep token."""

    if UNQUOTED_PATTERN.match(value):
        return value
    escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    return f'"{escaped}"'


def _render_key(key: Any) -> str:
    if isinstance(key, Ref):
        return key.object_id
    return quote(str(key))


def _render_value(value: Any, depth: int) -> str:
    if isinstance(value, Ref):
        return value.render()
    if isinstance(value, bool):
        return "YES" if value else "NO"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        return quote(value)
    if isinstance(value, Mapping):
        return _render_mapping(value, depth)
    if isinstance(value, Sequence):
        return _render_list(value, depth)
    raise ProjectGraphError(f"Cannot render value of type {type(value).__name__}.")


def _render_mapping(mapping: Mapping[Any, Any], depth: int) -> str:
    indent = "\t" * (depth + 1)
    lines = ["{"]
    for key, value in mapping.items():
        lines.append(f"{indent}{_render_key(key)} = {_render_value(value, depth + 1)};")
    lines.append("\t" * depth + "}")
    return "\n".join(lines)


def _render_list(items: Sequence[Any], depth: int) -> str:
    indent = "\t" * (depth + 1)
    lines = ["("]
    for item in items:
        lines.append(f"{indent}{_render_value(item, depth + 1)},")
    lines.append("\t" * depth + ")")
    return "\n".join(lines)


def _render_inline(obj: PBXObject) -> str:
    parts = [f"isa = {obj.isa};"]
    for key, value in obj.fields.items():
        parts.append(f"{_render_key(key)} = {_render_value(value, 0)};")
    return "{" + " ".join(parts) + " }"


def _iter_refs(value: Any) -> Iterator[Ref]:
    if isinstance(value, Ref):
        yield value
    elif isinstance(value, Mapping):
        for key, item in value.items():
            yield from _iter_refs(key)
            yield from _iter_refs(item)
    elif isinstance(value, (list, tuple)):
        for item in value:
            yield from _iter_refs(item)


class ProjectGraph:
    """Collects pbxproj objects and renders them grouped by ``isa``."""

    def __init__(self) -> None:
        self.objects: Dict[str, PBXObject] = {}
        self.root: Optional[Ref] = None

    def add(
        self,
        object_id: str,
        isa: str,
        *,
        comment: Optional[str] = None,
        inline: bool = False,
        **fields: Any,
    ) -> Ref:
        if object_id in self.objects:
            raise ProjectGraphError(f"Identifier {object_id} is declared twice.")
        obj = PBXObject(object_id=object_id, isa=isa, comment=comment, fields=dict(fields), inline=inline)
        self.objects[object_id] = obj
        return obj.ref

    def set_root(self, ref: Ref) -> None:
        self.root = ref

    def references(self) -> List[Ref]:
        """Every reference embedded in the graph, root object included."""

        refs: List[Ref] = []
        for obj in self.objects.values():
            refs.extend(_iter_refs(obj.fields))
        if self.root is not None:
            refs.append(self.root)
        return refs

    def validate(self) -> Ref:
        if self.root is None:
            raise ProjectGraphError("The project graph has no root object.")
        dangling = sorted(
            {ref.object_id for ref in self.references() if ref.object_id not in self.objects}
        )
        if dangling:
            raise ProjectGraphError(
                "Unresolved object references: " + ", ".join(dangling)
            )
        return self.root

    def render(self) -> str:
        root = self.validate()

        lines = [
            FILE_HEADER,
            "{",
            f"\tarchiveVersion = {ARCHIVE_VERSION};",
            "\tclasses = {",
            "\t};",
            f"\tobjectVersion = {OBJECT_VERSION};",
            "\tobjects = {",
        ]
        ordered = sorted(self.objects.values(), key=lambda obj: obj.isa)
        for isa, members in groupby(ordered, key=lambda obj: obj.isa):
            lines.append("")
            lines.append(f"/* Begin {isa} section */")
            for obj in members:
                head = f"\t\t{obj.ref.render()} = "
                if obj.inline:
                    lines.append(head + _render_inline(obj) + ";")
                else:
                    body = _render_mapping({"isa": obj.isa, **obj.fields}, 2)
                    lines.append(head + body + ";")
            lines.append(f"/* End {isa} section */")
        lines.extend(
            [
                "\t};",
                f"\trootObject = {root.render()};",
                "}",
                "",
            ]
        )
        return "\n".join(lines)
