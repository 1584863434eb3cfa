"""Persisted boolean flags backed by the record store."""
from __future__ import annotations

from ..db.store import RecordStore
from ..models.app_flag import AppFlag


class FlagStore:
    """Key/value flags read and written through the record store."""

    def __init__(self, store: RecordStore) -> None:
        self._store = store

    def get(self, key: str, default: bool = False) -> bool:
        flag = self._store.get(AppFlag, key)
        if flag is None:
            return default
        return flag.value

    def set(self, key: str, value: bool = True) -> None:
        flag = self._store.get(AppFlag, key)
        if flag is None:
            self._store.add(AppFlag(key=key, value=value))
        else:
            flag.value = value
        self._store.save()

    def keys_with_prefix(self, prefix: str) -> set[str]:
        """Return keys of flags set to True under ``prefix``."""

        flags = self._store.fetch(AppFlag, AppFlag.key.startswith(prefix, autoescape=True), AppFlag.value.is_(True))
        return {flag.key for flag in flags}
