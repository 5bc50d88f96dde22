from __future__ import annotations

import itertools
import uuid
from typing import Callable

IdFactory = Callable[[], str]


def uuid_ids() -> str:
    return uuid.uuid4().hex


class SequentialIds:
    """Deterministic ids: ``prefix1``, ``prefix2``, ..."""

    def __init__(self, prefix: str = "", start: int = 1):
        self.prefix = prefix
        self._counter = itertools.count(start)

    def __call__(self) -> str:
        return f"{self.prefix}{next(self._counter)}"
