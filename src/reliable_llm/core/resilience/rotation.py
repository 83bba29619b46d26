"""Round-robin credential rotation.

The cursor is shared by every call made through one orchestrator and is
advanced under a lock, so concurrent rotations each receive a distinct
index. Exact fairness between racing callers is not guaranteed.
"""

import itertools
import logging
import threading
from typing import Iterable, Optional, Tuple

logger = logging.getLogger(__name__)


class CredentialRotator:
    """Cycles through alternate API credentials in their original order."""

    def __init__(self, credentials: Iterable[str] = ()):
        self._credentials: Tuple[str, ...] = tuple(credentials)
        self._counter = itertools.count()
        self._lock = threading.Lock()
        self._cursor = 0
        self._current: Optional[str] = None

    def __len__(self) -> int:
        return len(self._credentials)

    @property
    def credentials(self) -> Tuple[str, ...]:
        return self._credentials

    @property
    def cursor(self) -> int:
        """Number of rotations performed so far. Never decreases."""
        return self._cursor

    @property
    def current(self) -> Optional[str]:
        """The credential most recently handed out, or None."""
        return self._current

    def rotate(self) -> Optional[str]:
        """Return the credential at the cursor and advance the cursor.

        Returns:
            The next credential, or None when no alternates are configured
        """
        if not self._credentials:
            return None
        with self._lock:
            index = next(self._counter)
            self._cursor = index + 1
            credential = self._credentials[index % len(self._credentials)]
            self._current = credential
        logger.debug(
            "Rotated credential to slot %d of %d",
            index % len(self._credentials) + 1,
            len(self._credentials),
        )
        return credential
