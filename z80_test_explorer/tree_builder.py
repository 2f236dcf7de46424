"""Build the suite tree from the flat list of dotted unit test labels."""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from z80_test_explorer.models.tree import (
    ROOT_ID,
    ROOT_LABEL,
    TestInfo,
    TestSuiteInfo,
)
from z80_test_explorer.models.unit_test import UnitTestCase

log = logging.getLogger(__name__)


@dataclass(kw_only=True)
class _Branch:
    """Intermediate node while folding labels; no children means a test case."""

    children: dict[str, "_Branch"] = field(default_factory=dict)

    def child(self, segment: str) -> "_Branch":
        if (branch := self.children.get(segment)) is None:
            branch = self.children[segment] = _Branch()
        return branch


def build_test_suite(
    unit_tests: Sequence[UnitTestCase],
) -> TestSuiteInfo | None:
    """Convert the dotted labels into a test suite tree.

    Every label is split on '.', each segment becoming one level of the tree.
    Children keep the order in which their segment was first seen.

    Args:
        unit_tests: Labels with their source locations, as enumerated by the
            engine

    Returns:
        The root suite, or None if there are no unit tests

    """
    root = _Branch()
    for unit_test in unit_tests:
        if not unit_test.label:
            log.debug("Skipping unit test with empty label")
            continue
        branch = root
        # E.g. "ut_string" "UTT_byte_to_string"
        for segment in unit_test.label.split("."):
            branch = branch.child(segment)

    if not root.children:
        return None

    # Later entries for the same label overwrite earlier ones
    locations = {unit_test.label: unit_test for unit_test in unit_tests}

    suite = _assign_locations(_materialize(root, ROOT_LABEL, ROOT_ID), locations)
    assert isinstance(suite, TestSuiteInfo)
    return suite


def _materialize(
    branch: _Branch, label: str, node_id: str
) -> TestSuiteInfo | TestInfo:
    if not branch.children:
        return TestInfo(id=node_id, label=label)

    children = [
        _materialize(child, segment, f"{node_id}.{segment}" if node_id else segment)
        for segment, child in branch.children.items()
    ]
    return TestSuiteInfo(id=node_id, label=label, children=children)


def _assign_locations(
    node: TestSuiteInfo | TestInfo, locations: Mapping[str, UnitTestCase]
) -> TestSuiteInfo | TestInfo:
    """Return a copy of the tree with file and line set on every known test."""
    if isinstance(node, TestInfo):
        if (location := locations.get(node.id)) is None:
            return node
        return node.model_copy(update={"file": location.file, "line": location.line})

    children = [_assign_locations(child, locations) for child in node.children]
    return node.model_copy(update={"children": children})
