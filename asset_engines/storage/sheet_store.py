"""Workbook-backed tabular store with positional rows.

A workbook holds named tables. Each table has a fixed header row and data rows
addressed by their sheet row number (header is row 1, first data row is row 2).
Rows also carry an optional background colour.

Backends are selected by ``ASSET_SHEET_BACKEND``:
  memory      process-local workbooks (default, tests)
  filesystem  var/asset_sheets/{tenant}/{env}/{project}.json, rewritten per mutation
  firestore   one document per workbook in ``asset_workbooks``
"""
from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence

from asset_engines.common.identity import RequestContext
from asset_engines.config import runtime_config

logger = logging.getLogger(__name__)

HEADER_ROW = 1
FIRST_DATA_ROW = 2


class SheetTable:
    def __init__(
        self,
        name: str,
        header: Sequence[str],
        rows: Optional[List[List[Any]]] = None,
        formats: Optional[List[Optional[str]]] = None,
        on_change: Optional[Callable[[], None]] = None,
    ) -> None:
        self.name = name
        self.header = list(header)
        self._rows: List[List[Any]] = [self._fit(r) for r in (rows or [])]
        self._formats: List[Optional[str]] = list(formats or [None] * len(self._rows))
        self._on_change = on_change

    def _fit(self, values: Sequence[Any]) -> List[Any]:
        fitted = list(values)[: len(self.header)]
        return fitted + [""] * (len(self.header) - len(fitted))

    def _index(self, row_ref: int) -> Optional[int]:
        idx = row_ref - FIRST_DATA_ROW
        if isinstance(row_ref, bool) or idx < 0 or idx >= len(self._rows):
            return None
        return idx

    def _changed(self) -> None:
        if self._on_change:
            self._on_change()

    # --- reads ---
    def row_count(self) -> int:
        return len(self._rows)

    def row_refs(self) -> List[int]:
        return list(range(FIRST_DATA_ROW, FIRST_DATA_ROW + len(self._rows)))

    def rows(self) -> List[List[Any]]:
        return [list(r) for r in self._rows]

    def formats(self) -> List[Optional[str]]:
        return list(self._formats)

    def has_row(self, row_ref: int) -> bool:
        return self._index(row_ref) is not None

    def read_row(self, row_ref: int) -> Optional[List[Any]]:
        idx = self._index(row_ref)
        return None if idx is None else list(self._rows[idx])

    def read_record(self, row_ref: int) -> Optional[Dict[str, Any]]:
        values = self.read_row(row_ref)
        if values is None:
            return None
        return dict(zip(self.header, values))

    def column_values(self, column: str) -> List[Any]:
        col = self.header.index(column)
        return [r[col] for r in self._rows]

    def row_format(self, row_ref: int) -> Optional[str]:
        idx = self._index(row_ref)
        return None if idx is None else self._formats[idx]

    # --- writes ---
    def append_row(self, values: Sequence[Any], background: Optional[str] = None) -> int:
        self._rows.append(self._fit(values))
        self._formats.append(background)
        self._changed()
        return FIRST_DATA_ROW + len(self._rows) - 1

    def write_row(self, row_ref: int, values: Sequence[Any]) -> None:
        idx = self._index(row_ref)
        if idx is None:
            raise IndexError(f"Row {row_ref} does not exist in table {self.name}")
        self._rows[idx] = self._fit(values)
        self._changed()

    def set_row_format(self, row_ref: int, background: Optional[str]) -> None:
        idx = self._index(row_ref)
        if idx is None:
            raise IndexError(f"Row {row_ref} does not exist in table {self.name}")
        self._formats[idx] = background
        self._changed()

    def replace_rows(self, rows: List[Sequence[Any]], formats: Optional[List[Optional[str]]] = None) -> None:
        self._rows = [self._fit(r) for r in rows]
        self._formats = list(formats) if formats is not None else [None] * len(self._rows)
        self._changed()

    def to_dict(self) -> Dict[str, Any]:
        # Firestore rejects nested arrays, so rows are stored as maps.
        return {
            "header": list(self.header),
            "rows": [{"values": list(v), "format": f} for v, f in zip(self._rows, self._formats)],
        }

    @classmethod
    def from_dict(cls, name: str, data: Dict[str, Any], on_change: Optional[Callable[[], None]] = None) -> "SheetTable":
        rows = data.get("rows") or []
        return cls(
            name,
            data.get("header") or [],
            rows=[r.get("values") or [] for r in rows],
            formats=[r.get("format") for r in rows],
            on_change=on_change,
        )


class Workbook:
    """Named tables plus the lock that serializes every mutation on them."""

    def __init__(self, key: tuple[str, str, str], persist: Optional[Callable[["Workbook"], None]] = None) -> None:
        self.key = key
        self.lock = threading.RLock()
        self._tables: Dict[str, SheetTable] = {}
        self._persist = persist

    def _changed(self) -> None:
        if self._persist:
            self._persist(self)

    def table_names(self) -> List[str]:
        return list(self._tables.keys())

    def get_table(self, name: str) -> Optional[SheetTable]:
        return self._tables.get(name)

    def create_table(self, name: str, header: Sequence[str]) -> SheetTable:
        with self.lock:
            existing = self._tables.get(name)
            if existing:
                return existing
            table = SheetTable(name, header, on_change=self._changed)
            self._tables[name] = table
            self._changed()
            logger.info("Created table %s in workbook %s", name, "/".join(self.key))
            return table

    def to_dict(self) -> Dict[str, Any]:
        return {"tables": {name: t.to_dict() for name, t in self._tables.items()}}

    def load(self, data: Dict[str, Any]) -> None:
        for name, table_data in (data.get("tables") or {}).items():
            self._tables[name] = SheetTable.from_dict(name, table_data, on_change=self._changed)


class WorkbookStore(Protocol):
    def open(self, ctx: RequestContext) -> Workbook: ...


class InMemoryWorkbookStore:
    def __init__(self) -> None:
        self._items: Dict[tuple[str, str, str], Workbook] = {}
        self._lock = threading.Lock()

    def open(self, ctx: RequestContext) -> Workbook:
        with self._lock:
            workbook = self._items.get(ctx.scope_key)
            if workbook is None:
                workbook = Workbook(ctx.scope_key)
                self._items[ctx.scope_key] = workbook
            return workbook


class FileSystemWorkbookStore(InMemoryWorkbookStore):
    """One JSON document per workbook, rewritten after every mutation."""

    def __init__(self, base_dir: Optional[str | Path] = None) -> None:
        super().__init__()
        self._base_dir = Path(base_dir or runtime_config.get_sheet_dir())
        self._base_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, key: tuple[str, str, str]) -> Path:
        tenant, env, project = (part.replace("/", "_").replace("..", "_") for part in key)
        return self._base_dir / tenant / env / f"{project}.json"

    def _persist(self, workbook: Workbook) -> None:
        path = self._path(workbook.key)
        path.parent.mkdir(parents=True, exist_ok=True)
        try:
            tmp = path.with_suffix(".json.tmp")
            tmp.write_text(json.dumps(workbook.to_dict()))
            tmp.replace(path)
        except OSError as exc:
            logger.error(f"Failed to write workbook {path}: {exc}")
            raise RuntimeError(f"Workbook persist failed: {exc}") from exc

    def open(self, ctx: RequestContext) -> Workbook:
        with self._lock:
            workbook = self._items.get(ctx.scope_key)
            if workbook is not None:
                return workbook
            workbook = Workbook(ctx.scope_key, persist=self._persist)
            path = self._path(ctx.scope_key)
            if path.exists():
                try:
                    workbook.load(json.loads(path.read_text()))
                except ValueError as exc:
                    logger.warning(f"Ignoring malformed workbook {path}: {exc}")
            self._items[ctx.scope_key] = workbook
            return workbook


class FirestoreWorkbookStore(InMemoryWorkbookStore):
    """Firestore implementation."""

    def __init__(self, client: Optional[object] = None) -> None:  # pragma: no cover - optional dep
        super().__init__()
        try:
            from google.cloud import firestore  # type: ignore
        except Exception as exc:
            raise RuntimeError("google-cloud-firestore not installed") from exc

        project = runtime_config.get_firestore_project()
        if not project:
            raise RuntimeError("GCP project is required for Firestore workbook store")
        self._client = client or firestore.Client(project=project)  # type: ignore[arg-type]
        self._collection = "asset_workbooks"

    def _doc(self, key: tuple[str, str, str]):  # pragma: no cover - optional dep
        return self._client.collection(self._collection).document("__".join(key))

    def _persist(self, workbook: Workbook) -> None:  # pragma: no cover - optional dep
        self._doc(workbook.key).set(workbook.to_dict())

    def open(self, ctx: RequestContext) -> Workbook:  # pragma: no cover - optional dep
        with self._lock:
            workbook = self._items.get(ctx.scope_key)
            if workbook is not None:
                return workbook
            workbook = Workbook(ctx.scope_key, persist=self._persist)
            snap = self._doc(ctx.scope_key).get()
            if snap and snap.exists:
                workbook.load(snap.to_dict() or {})
            self._items[ctx.scope_key] = workbook
            return workbook


def _default_store() -> WorkbookStore:
    backend = runtime_config.get_sheet_backend()
    if backend == "filesystem":
        return FileSystemWorkbookStore()
    if backend == "firestore":
        return FirestoreWorkbookStore()
    return InMemoryWorkbookStore()


_workbook_store: Optional[WorkbookStore] = None


def get_workbook_store() -> WorkbookStore:
    global _workbook_store
    if _workbook_store is None:
        _workbook_store = _default_store()
    return _workbook_store


def set_workbook_store(store: WorkbookStore) -> None:
    global _workbook_store
    _workbook_store = store


def open_workbook(ctx: RequestContext) -> Workbook:
    return get_workbook_store().open(ctx)
