"""Tests for finding and expanding nodes of the test tree."""

import logging

import pytest

from z80_test_explorer.lookup import find_node, flatten_leaves, resolve_test_cases
from z80_test_explorer.models.tree import TestInfo, TestSuiteInfo


@pytest.fixture
def suite() -> TestSuiteInfo:
    """Tree with two suites, one of them nested."""
    return TestSuiteInfo(
        id="",
        label="z80-unit-tests",
        children=[
            TestSuiteInfo(
                id="ut_string",
                label="ut_string",
                children=[
                    TestInfo(
                        id="ut_string.UTT_byte_to_string", label="UTT_byte_to_string"
                    ),
                    TestInfo(
                        id="ut_string.UTT_word_to_string", label="UTT_word_to_string"
                    ),
                ],
            ),
            TestSuiteInfo(
                id="ut_math",
                label="ut_math",
                children=[
                    TestSuiteInfo(
                        id="ut_math.add",
                        label="add",
                        children=[TestInfo(id="ut_math.add.UTT_1", label="UTT_1")],
                    ),
                    TestInfo(id="ut_math.UTT_sub", label="UTT_sub"),
                ],
            ),
        ],
    )


class TestFindNode:
    """Tests for find_node."""

    def test_finds_root(self, suite: TestSuiteInfo) -> None:
        """Finds the root by its empty id."""
        assert find_node(suite, "") is suite

    def test_finds_nested_test(self, suite: TestSuiteInfo) -> None:
        """Finds test cases at any depth."""
        node = find_node(suite, "ut_math.add.UTT_1")

        assert isinstance(node, TestInfo)
        assert node.label == "UTT_1"

    def test_finds_suite(self, suite: TestSuiteInfo) -> None:
        """Finds suites by their id."""
        node = find_node(suite, "ut_math.add")

        assert isinstance(node, TestSuiteInfo)

    def test_requires_exact_match(self, suite: TestSuiteInfo) -> None:
        """Does not match id prefixes or labels."""
        assert find_node(suite, "ut_str") is None
        assert find_node(suite, "UTT_sub") is None


class TestFlattenLeaves:
    """Tests for flatten_leaves."""

    def test_test_returns_itself(self) -> None:
        """A test case flattens to itself."""
        test = TestInfo(id="ut.UTT_a", label="UTT_a")

        assert flatten_leaves(test) == [test]

    def test_depth_first_left_to_right(self, suite: TestSuiteInfo) -> None:
        """Suites flatten depth-first in child order."""
        assert [test.id for test in flatten_leaves(suite)] == [
            "ut_string.UTT_byte_to_string",
            "ut_string.UTT_word_to_string",
            "ut_math.add.UTT_1",
            "ut_math.UTT_sub",
        ]


class TestResolveTestCases:
    """Tests for resolve_test_cases."""

    def test_expands_suite_to_its_tests_only(self, suite: TestSuiteInfo) -> None:
        """Running a suite selects only the test cases of that suite."""
        resolution = resolve_test_cases(suite, ["ut_string"])

        assert [test.id for test in resolution.test_cases] == [
            "ut_string.UTT_byte_to_string",
            "ut_string.UTT_word_to_string",
        ]
        assert resolution.unknown_ids == []

    def test_keeps_request_order(self, suite: TestSuiteInfo) -> None:
        """Concatenates the test cases in the order of the requested ids."""
        resolution = resolve_test_cases(
            suite, ["ut_math.UTT_sub", "ut_string.UTT_byte_to_string"]
        )

        assert [test.id for test in resolution.test_cases] == [
            "ut_math.UTT_sub",
            "ut_string.UTT_byte_to_string",
        ]

    def test_skips_unknown_ids(
        self, suite: TestSuiteInfo, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Reports unknown ids without dropping the known ones."""
        with caplog.at_level(logging.WARNING):
            resolution = resolve_test_cases(suite, ["missing", "ut_math.add"])

        assert [test.id for test in resolution.test_cases] == ["ut_math.add.UTT_1"]
        assert resolution.unknown_ids == ["missing"]
        assert "Unknown test id 'missing'" in caplog.text

    def test_everything_unknown_without_suite(self) -> None:
        """Without loaded tests every id is unknown."""
        resolution = resolve_test_cases(None, ["ut_string", "ut_math"])

        assert resolution.test_cases == []
        assert resolution.unknown_ids == ["ut_string", "ut_math"]
