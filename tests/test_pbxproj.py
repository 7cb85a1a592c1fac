"""Tests for the pbxproj object graph and renderer."""

import pytest

from blockswift.errors import ProjectGraphError
from blockswift.pbxproj import ProjectGraph, Ref, quote


@pytest.mark.parametrize(
    "value, expected",
    [
        ("Demo", "Demo"),
        ("Demo.app", "Demo.app"),
        ("$(SRCROOT)", '"$(SRCROOT)"'),
        ("<group>", '"<group>"'),
        ("", '""'),
        ("My App", '"My App"'),
        ('say "hi"', '"say \\"hi\\""'),
        ("-Onone", '"-Onone"'),
    ],
)
def test_quote(value, expected):
    assert quote(value) == expected


def _small_graph():
    graph = ProjectGraph()
    file_ref = graph.add(
        "F1",
        "PBXFileReference",
        comment="a.swift",
        inline=True,
        path="a.swift",
        sourceTree="<group>",
    )
    build_file = graph.add("B1", "PBXBuildFile", comment="a.swift in Sources", inline=True, fileRef=file_ref)
    group = graph.add("G1", "PBXGroup", children=[file_ref], sourceTree="<group>")
    project = graph.add(
        "P1",
        "PBXProject",
        comment="Project object",
        mainGroup=group,
        files=[build_file],
        attributes={"TargetAttributes": {Ref("G1"): {"CreatedOnToolsVersion": "12.5"}}},
    )
    graph.set_root(project)
    return graph


def test_render_inline_objects():
    text = _small_graph().render()
    assert (
        '\t\tF1 /* a.swift */ = {isa = PBXFileReference; path = a.swift; sourceTree = "<group>"; };'
        in text
    )
    assert "\t\tB1 /* a.swift in Sources */ = {isa = PBXBuildFile; fileRef = F1 /* a.swift */; };" in text


def test_render_nested_objects():
    text = _small_graph().render()
    assert "\t\tG1 = {\n\t\t\tisa = PBXGroup;\n\t\t\tchildren = (\n\t\t\t\tF1 /* a.swift */,\n\t\t\t);" in text
    assert "\t\t\t\tTargetAttributes = {\n\t\t\t\t\tG1 = {\n\t\t\t\t\t\tCreatedOnToolsVersion = 12.5;" in text


def test_render_envelope():
    text = _small_graph().render()
    assert text.startswith("// !$*UTF8*$!\n{\n\tarchiveVersion = 1;\n\tclasses = {\n\t};\n\tobjectVersion = 46;")
    assert text.endswith("\t};\n\trootObject = P1 /* Project object */;\n}\n")


def test_sections_are_sorted_by_isa():
    text = _small_graph().render()
    order = [
        text.index("/* Begin PBXBuildFile section */"),
        text.index("/* Begin PBXFileReference section */"),
        text.index("/* Begin PBXGroup section */"),
        text.index("/* Begin PBXProject section */"),
    ]
    assert order == sorted(order)


def test_dictionary_keys_count_as_references():
    refs = {ref.object_id for ref in _small_graph().references()}
    assert refs == {"F1", "B1", "G1", "P1"}


def test_dangling_reference_is_rejected():
    graph = ProjectGraph()
    root = graph.add("P1", "PBXProject", mainGroup=Ref("MISSING"))
    graph.set_root(root)
    with pytest.raises(ProjectGraphError, match="MISSING"):
        graph.render()


def test_duplicate_identifier_is_rejected():
    graph = ProjectGraph()
    graph.add("X", "PBXGroup")
    with pytest.raises(ProjectGraphError):
        graph.add("X", "PBXGroup")


def test_graph_without_root_is_rejected():
    graph = ProjectGraph()
    graph.add("X", "PBXGroup")
    with pytest.raises(ProjectGraphError):
        graph.validate()
    with pytest.raises(ProjectGraphError, match="no root object"):
        graph.render()


def test_validate_returns_root():
    graph = _small_graph()
    assert graph.validate() == Ref("P1", "Project object")
