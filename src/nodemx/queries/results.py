"""
Tagged query results.

Query functions raise NodemxError subclasses. ``execute`` is the boundary
that turns those into values: callers that prefer not to handle exceptions
get a QueryResult whose ``error`` carries the failure and its kind.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from ..models.table import Signature, TypedTable
from ..validation import ErrorKind, NodemxError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueryResult:
    """
    Outcome of one query: either ``value`` or ``error``, never both.

    ``value`` may legitimately be None (a disabled subsystem or an unset
    environment variable), so success is decided by ``error`` alone.
    """

    value: Any = None
    error: Optional[NodemxError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> Optional[ErrorKind]:
        return self.error.kind if self.error is not None else None

    def unwrap(self) -> Any:
        """Return the value, or raise the stored error."""
        if self.error is not None:
            raise self.error
        return self.value


def execute(query: Callable[..., Any], *args, **kwargs) -> QueryResult:
    """
    Run ``query`` and capture a NodemxError as a failed QueryResult.

    Exceptions that are not NodemxError propagate unchanged.
    """
    try:
        return QueryResult(value=query(*args, **kwargs))
    except NodemxError as e:
        logger.debug(f"{getattr(query, '__name__', query)} failed with {e.kind.value}: {e}")
        return QueryResult(error=e)


def checked(table: TypedTable, expected: Optional[Signature]) -> TypedTable:
    """Validate ``table`` against a caller-declared signature, when one is given."""
    if expected is not None:
        table.expect(expected)
    return table
