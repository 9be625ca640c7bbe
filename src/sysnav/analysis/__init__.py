"""Subtree analysis: descendants, interface classification and revision diffs."""

from .classifier import ClassifiedInterfaces, InterfaceClassifier, classify_interface
from .descendants import DescendantResolver, DescendantSet
from .revision_diff import ABSENT, FieldChange, RenderableDiff, RevisionDiffRenderer

__all__ = [
    "DescendantResolver",
    "DescendantSet",
    "InterfaceClassifier",
    "ClassifiedInterfaces",
    "classify_interface",
    "RevisionDiffRenderer",
    "RenderableDiff",
    "FieldChange",
    "ABSENT",
]
