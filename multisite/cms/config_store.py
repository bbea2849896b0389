"""
Config Store

Key/value configuration table of the CMS (``dev.host``, ...).
"""
from __future__ import annotations
from typing import Any, Dict, Optional


class ConfigStore:
    """
    Key/value configuration.

    The table may be missing altogether (no data file yet); writes are
    refused until it exists.
    """

    def __init__(self, table: Optional[Dict[str, Any]] = None):
        self._table = dict(table) if table is not None else None

    def table_exists(self) -> bool:
        return self._table is not None

    def get(self, key: str, default: Any = None) -> Any:
        if self._table is None:
            return default
        return self._table.get(key, default)

    def __getitem__(self, key: str) -> Any:
        if self._table is None:
            raise KeyError(key)
        return self._table[key]

    def __setitem__(self, key: str, value: Any) -> None:
        if self._table is None:
            raise RuntimeError("Config table does not exist")
        self._table[key] = value

    def __contains__(self, key: str) -> bool:
        return self._table is not None and key in self._table

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._table or {})
