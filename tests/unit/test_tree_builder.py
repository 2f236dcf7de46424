"""Tests for building the test tree from dotted labels."""

from z80_test_explorer.lookup import find_node, flatten_leaves
from z80_test_explorer.models.tree import TestInfo, TestSuiteInfo
from z80_test_explorer.models.unit_test import UnitTestCase
from z80_test_explorer.testing.factories import UnitTestCaseFactory
from z80_test_explorer.tree_builder import build_test_suite


def labels(*names: str) -> list[UnitTestCase]:
    return [UnitTestCaseFactory.build(label=name) for name in names]


def child_labels(node: TestSuiteInfo | TestInfo) -> list[str]:
    assert isinstance(node, TestSuiteInfo)
    return [child.label for child in node.children]


def test_returns_none_without_unit_tests() -> None:
    """Returns None when the engine reports no unit tests."""
    assert build_test_suite([]) is None


def test_builds_suites_per_label_prefix() -> None:
    """Groups test cases into suites by their dotted prefix."""
    suite = build_test_suite(
        labels(
            "ut_string.UTT_byte_to_string",
            "ut_string.UTT_word_to_string",
            "ut_math.UTT_add",
        )
    )

    assert suite is not None
    assert suite.id == ""
    assert suite.label == "z80-unit-tests"
    assert child_labels(suite) == ["ut_string", "ut_math"]

    ut_string, ut_math = suite.children
    assert isinstance(ut_string, TestSuiteInfo)
    assert ut_string.id == "ut_string"
    assert [child.id for child in ut_string.children] == [
        "ut_string.UTT_byte_to_string",
        "ut_string.UTT_word_to_string",
    ]
    assert isinstance(ut_math, TestSuiteInfo)
    assert [child.id for child in ut_math.children] == ["ut_math.UTT_add"]


def test_keeps_first_seen_order() -> None:
    """Orders children by first appearance, not alphabetically."""
    suite = build_test_suite(labels("b.x", "a.y", "a.z"))

    assert suite is not None
    assert child_labels(suite) == ["b", "a"]
    assert child_labels(suite.children[1]) == ["y", "z"]


def test_flattening_yields_each_label_once() -> None:
    """Every distinct label becomes exactly one test case."""
    names = ["ut.a.UTT_1", "ut.b.UTT_2", "ut.a.UTT_3", "top", "ut.a.UTT_1"]

    suite = build_test_suite(labels(*names))

    assert suite is not None
    assert [test.id for test in flatten_leaves(suite)] == [
        "ut.a.UTT_1",
        "ut.a.UTT_3",
        "ut.b.UTT_2",
        "top",
    ]


def test_test_ids_are_dotted_paths() -> None:
    """Every node id is its parent id plus its own label."""
    suite = build_test_suite(labels("outer.inner.UTT_deep"))

    assert suite is not None
    outer = suite.children[0]
    assert isinstance(outer, TestSuiteInfo)
    inner = outer.children[0]
    assert isinstance(inner, TestSuiteInfo)
    test = inner.children[0]
    assert (outer.id, inner.id, test.id) == (
        "outer",
        "outer.inner",
        "outer.inner.UTT_deep",
    )
    assert test.label == "UTT_deep"


def test_assigns_source_locations() -> None:
    """Sets file and line on each test case from its entry."""
    suite = build_test_suite(
        [
            UnitTestCase(label="ut.UTT_a", file="/src/a.asm", line=3),
            UnitTestCase(label="ut.UTT_b", file="/src/b.asm", line=7),
        ]
    )

    assert suite is not None
    test_a = find_node(suite, "ut.UTT_a")
    test_b = find_node(suite, "ut.UTT_b")
    assert isinstance(test_a, TestInfo)
    assert isinstance(test_b, TestInfo)
    assert (test_a.file, test_a.line) == ("/src/a.asm", 3)
    assert (test_b.file, test_b.line) == ("/src/b.asm", 7)


def test_test_without_location() -> None:
    """Leaves file and line unset when the engine reports none."""
    suite = build_test_suite([UnitTestCase(label="ut.UTT_a")])

    assert suite is not None
    test = find_node(suite, "ut.UTT_a")
    assert isinstance(test, TestInfo)
    assert test.file is None
    assert test.line is None


def test_duplicate_labels_use_last_location() -> None:
    """Collapses duplicate labels, keeping the last reported location."""
    suite = build_test_suite(
        [
            UnitTestCase(label="ut.UTT_a", file="/src/old.asm", line=1),
            UnitTestCase(label="ut.UTT_a", file="/src/new.asm", line=2),
        ]
    )

    assert suite is not None
    assert len(flatten_leaves(suite)) == 1
    test = find_node(suite, "ut.UTT_a")
    assert isinstance(test, TestInfo)
    assert (test.file, test.line) == ("/src/new.asm", 2)


def test_label_prefix_of_other_label_becomes_suite() -> None:
    """A label that prefixes another label turns into a suite."""
    suite = build_test_suite(labels("ut.UTT_a", "ut.UTT_a.sub"))

    assert suite is not None
    node = find_node(suite, "ut.UTT_a")
    assert isinstance(node, TestSuiteInfo)
    assert [test.id for test in flatten_leaves(suite)] == ["ut.UTT_a.sub"]


def test_skips_empty_labels() -> None:
    """Ignores entries without a label."""
    assert build_test_suite(labels("")) is None


def test_building_twice_gives_equal_trees() -> None:
    """Building from the same labels yields structurally equal trees."""
    entries = labels("b.x", "a.y", "a.z", "c")

    first = build_test_suite(entries)
    second = build_test_suite(entries)

    assert first == second
    assert first is not second


def test_every_test_case_can_be_found() -> None:
    """find_node locates every test case the builder produced."""
    suite = build_test_suite(labels("a.b.c", "a.d", "e", "f.g"))

    assert suite is not None
    for test in flatten_leaves(suite):
        found = find_node(suite, test.id)
        assert found is not None
        assert found.id == test.id
