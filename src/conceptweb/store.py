# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)
#
# JSON file persistence for word network state.

"""
Persist NetworkState as a single JSON document.

Writes go to a temporary file in the same directory and are moved into
place, so a crash never leaves a half-written state file.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Callable, Optional, Union

from .errors import StoreError
from .network import NetworkState

logger = logging.getLogger(__name__)


class JsonStateStore:
    """Load and save NetworkState at a fixed path."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load(
        self,
        default_factory: Optional[Callable[[], NetworkState]] = None
    ) -> NetworkState:
        """
        Load state, or return the default when missing or unreadable.

        A corrupt file is logged and left on disk untouched.
        """
        default_factory = default_factory or NetworkState.initial
        if not self.path.exists():
            return default_factory()
        try:
            with open(self.path, encoding='utf-8') as f:
                state = NetworkState.from_dict(json.load(f))
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            # ValueError covers JSONDecodeError and UnicodeDecodeError
            logger.warning("Ignoring unreadable state file %s: %s", self.path, e)
            return default_factory()
        if not state.networks:
            return default_factory()
        return state

    def save(self, state: NetworkState) -> None:
        """Write state atomically."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix='.conceptweb-', suffix='.json',
                                   dir=self.path.parent)
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(state.to_dict(), f, ensure_ascii=False)
            os.replace(tmp, self.path)
        except (OSError, TypeError, ValueError) as e:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise StoreError(f"Could not save state to {self.path}: {e}") from e
        logger.debug("Saved %d networks to %s", len(state.networks), self.path)

    def usage_bytes(self) -> int:
        """Size of the stored state, 0 if nothing is stored."""
        try:
            return self.path.stat().st_size
        except FileNotFoundError:
            return 0
