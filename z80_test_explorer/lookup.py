"""Find nodes in the test tree and expand them into test cases."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from z80_test_explorer.models.tree import TestInfo, TestSuiteInfo

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class Resolution:
    """Test cases selected by a run request.

    Ids that are not part of the current tree are skipped and reported in
    unknown_ids.
    """

    test_cases: Sequence[TestInfo]
    unknown_ids: Sequence[str]


def find_node(
    node: TestSuiteInfo | TestInfo, node_id: str
) -> TestSuiteInfo | TestInfo | None:
    """Search the (sub) tree depth-first for the node with exactly this id."""
    if node.id == node_id:
        return node
    if isinstance(node, TestSuiteInfo):
        for child in node.children:
            if (found := find_node(child, node_id)) is not None:
                return found
    return None


def flatten_leaves(node: TestSuiteInfo | TestInfo) -> Sequence[TestInfo]:
    """Return all test cases below node, depth-first and left to right.

    A test case returns only itself.
    """
    if isinstance(node, TestInfo):
        return [node]

    test_cases: list[TestInfo] = []
    for child in node.children:
        test_cases.extend(flatten_leaves(child))
    return test_cases


def resolve_test_cases(
    suite: TestSuiteInfo | None, node_ids: Sequence[str]
) -> Resolution:
    """Expand the requested suite and test ids into test cases.

    Args:
        suite: The current test tree, None if no tests are loaded
        node_ids: Suite or test ids in request order

    Returns:
        The test cases of all found nodes in request order, plus the ids that
        could not be found

    """
    test_cases: list[TestInfo] = []
    unknown_ids: list[str] = []

    for node_id in node_ids:
        node = find_node(suite, node_id) if suite is not None else None
        if node is None:
            log.warning("Unknown test id %r, skipping it", node_id)
            unknown_ids.append(node_id)
            continue
        test_cases.extend(flatten_leaves(node))

    return Resolution(test_cases=test_cases, unknown_ids=unknown_ids)
