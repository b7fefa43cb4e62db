"""Leaf classification of a target runtime against the baseline."""

from __future__ import annotations

from typing import Optional

from .models import APINode, Interior, Status, TypeTag
from .tree import is_mock_module, lookup

# Functions and classes are indistinguishable in some runtimes' dumps
CALLABLE_TAGS = frozenset({TypeTag.FUNCTION, TypeTag.CLASS})


def classify(
    baseline_tag: Optional[TypeTag],
    target: APINode,
    path: tuple[str, ...],
    mock_module_status: Status = Status.STUB
) -> Status:
    """
    Classify one baseline leaf against a target tree.

    Args:
        baseline_tag: Type tag of the baseline leaf, or None for an empty
            object, which no target value matches
        target: Root of the target tree
        path: Key path of the leaf
        mock_module_status: Status for leaves of placeholder modules.
            Tables report them as STUB, the support percentage as UNSUPPORTED.

    Returns:
        The leaf's status for this target
    """
    if path and is_mock_module(target, path[0]):
        return mock_module_status

    target_node = lookup(target, path)

    if target_node is None:
        return Status.UNSUPPORTED

    # An object value never equals a type tag
    if isinstance(target_node, Interior):
        return Status.MISMATCH

    target_tag = target_node.tag

    if target_tag is TypeTag.STUB:
        return Status.STUB

    if target_tag is TypeTag.MISSING and baseline_tag is not TypeTag.MISSING:
        return Status.UNSUPPORTED

    if target_tag is not baseline_tag:
        if {target_tag, baseline_tag} == CALLABLE_TAGS:
            return Status.SUPPORTED
        return Status.MISMATCH

    return Status.SUPPORTED
