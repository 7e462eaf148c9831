"""
Environment variable queries.
"""

import logging
import os
from typing import Optional

from ..parsing.coercion import to_int64
from ..validation import MalformedDataError

logger = logging.getLogger(__name__)


def envvar_text(name: str) -> Optional[str]:
    """Value of environment variable ``name``, or None when it is unset."""
    return os.environ.get(name)


def envvar_bigint(name: str) -> Optional[int]:
    """
    Value of environment variable ``name`` as int64, or None when it is unset.

    Raises:
        MalformedDataError: If the value is not an integer
    """
    value = os.environ.get(name)
    if value is None:
        return None
    try:
        return to_int64(value)
    except MalformedDataError:
        raise MalformedDataError(f'contents not an integer: env variable "{name}"')
