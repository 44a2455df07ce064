from __future__ import annotations

import logging
import threading
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version

from harclient.constants import HAR_CREATOR_NAME, HAR_VERSION
from harclient.protocol.har_types import Har, HarCreator, HarEntry, HarLogData

logger = logging.getLogger(__name__)


def _get_harclient_version() -> str:
    """Get the installed harclient version."""
    try:
        return _pkg_version('harclient')
    except PackageNotFoundError:
        return 'unknown'


class HarLog:
    """Collects the entries of executed exchanges and exports them as a HAR 1.2 dict.

    Clients running exchanges concurrently may share one log.
    """

    def __init__(self):
        self._entries: list[HarEntry] = []
        self._lock = threading.Lock()

    def add(self, entry: HarEntry) -> None:
        with self._lock:
            self._entries.append(entry)
        logger.debug('HAR log now holds %d entries', len(self._entries))

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> list[HarEntry]:
        """Return a copy of the recorded entries sorted by start time."""
        with self._lock:
            return sorted(self._entries, key=lambda e: e['startedDateTime'])

    def to_dict(self) -> Har:
        """Build a full HAR 1.2 dictionary from the recorded entries.

        Returns:
            A complete HAR 1.2 dict ready for JSON serialization.
        """
        return Har(
            log=HarLogData(
                version=HAR_VERSION,
                creator=HarCreator(
                    name=HAR_CREATOR_NAME,
                    version=_get_harclient_version(),
                ),
                pages=[],
                entries=self.entries,
            )
        )
