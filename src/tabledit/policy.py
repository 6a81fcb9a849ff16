from collections.abc import Iterable

from .core.ports import EditablePolicy

# Document kinds whose tables are generated summaries and should not be edited.
DEFAULT_READONLY_KINDS = ("condensed", "summary-table")


def readonly_policy(kinds: Iterable[str] = DEFAULT_READONLY_KINDS) -> EditablePolicy:
    """Build an ``is_editable(document_kind)`` predicate from a read-only list."""
    readonly = frozenset(kinds)

    def is_editable(document_kind: str) -> bool:
        return document_kind not in readonly

    return is_editable


def always_editable(document_kind: str) -> bool:
    return True
