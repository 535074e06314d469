"""
Named Dictionary sharing.

Applications normally build one Dictionary and pass it around. When
several components must share instances by name instead, they can share
a DictionaryRegistry. There is no module-level registry; create one at
startup.
"""

import logging
import threading
from typing import Dict, List

from cxdict.dictionary import Dictionary


logger = logging.getLogger(__name__)


class DictionaryRegistry:
    """
    Get-or-create store of Dictionary instances keyed by name.

    Registration and removal are guarded by a lock. The dictionaries
    themselves are not; see Dictionary.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._default = Dictionary()
        self._named: Dict[str, Dictionary] = {}

    @property
    def default(self) -> Dictionary:
        """The unnamed instance owned by this registry."""
        return self._default

    def get(self, name: str) -> Dictionary:
        """
        Return the dictionary registered as ``name``, creating it if needed.

        Raises:
            ValueError: If ``name`` is blank
        """
        if not isinstance(name, str) or not name.strip():
            raise ValueError("Instance name must not be blank")

        with self._lock:
            dictionary = self._named.get(name)
            if dictionary is None:
                dictionary = Dictionary()
                self._named[name] = dictionary
                logger.debug(f"Created named dictionary instance: {name}")
            return dictionary

    def remove(self, name: str) -> None:
        """Unregister ``name`` and clear its dictionary. No-op if unknown."""
        with self._lock:
            dictionary = self._named.pop(name, None)

        if dictionary is not None:
            dictionary.clear()
            logger.debug(f"Removed named dictionary instance: {name}")

    def names(self) -> List[str]:
        with self._lock:
            return sorted(self._named)

    def __contains__(self, name) -> bool:
        with self._lock:
            return name in self._named
