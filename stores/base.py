# stores/base.py

"""
Entity stores: per-session caches of one backend table.

A store is a non-authoritative mirror of server rows. Writes go to the
backend first; only a successful response is reconciled into the cache
(merge the returned row, drop the deleted id, or refetch when the backend
sent nothing back). A failed call raises and leaves the cache untouched.
Nothing is retried, and concurrent fetches are not coalesced: the last
response to arrive wins.

Projections (get / by_tenant / by_status / by_room) read the cache only.
"""

from threading import Lock
from typing import Any, Callable, Optional

from core.errors import InvalidTransitionError, RemoteFetchError, RemoteMutationError
from core.logging_config import get_logger
from core.utils import sanitize


class EntityStore:
    table: str = ""
    storage_key: str = ""
    select_columns: str = "*"
    order_by: Optional[str] = None
    order_desc: bool = False

    tenant_field: str = "tenant_id"
    room_field: str = "room_id"
    status_field: str = "status"

    def __init__(self, client, storage=None, namespace: str = "anonymous"):
        self.client = client
        self.storage = storage
        self.namespace = namespace

        self._rows: list[dict] = []
        self._lock = Lock()

        self.stale = True
        self.last_scope: Optional[dict] = None
        self.log = get_logger(f"stores.{self.table or 'base'}")

    # ---------------------------------------------------------
    # Cache access
    # ---------------------------------------------------------
    @property
    def rows(self) -> list[dict]:
        with self._lock:
            return list(self._rows)

    def __len__(self):
        with self._lock:
            return len(self._rows)

    # ---------------------------------------------------------
    # Remote reads
    # ---------------------------------------------------------
    def _query(self, scope: Optional[dict]):
        query = self.client.table(self.table).select(self.select_columns)
        for key, value in (scope or {}).items():
            query = query.eq(key, value)
        if self.order_by:
            query = query.order(self.order_by, desc=self.order_desc)
        return query

    def fetch_all(self, scope: Optional[dict] = None) -> list[dict]:
        """Load rows (optionally scoped by equality filters) and replace the cache."""
        try:
            result = self._query(scope).execute()
        except Exception as e:
            self.log.error(f"Fetch {self.table} failed (scope={scope}): {e}")
            raise RemoteFetchError(f"Failed to fetch {self.table}", e)

        rows = list(result.data or [])
        with self._lock:
            self._rows = rows
            self.stale = False
            self.last_scope = dict(scope) if scope else None

        self.persist()
        return list(rows)

    def fetch_one(self, record_id: str) -> Optional[dict]:
        """
        Read one row from the backend, bypassing the cache. A cached copy of
        the row is refreshed; rows outside the cached scope are not added.
        """
        try:
            result = (
                self.client.table(self.table)
                .select(self.select_columns)
                .eq("id", record_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            self.log.error(f"Fetch {self.table} {record_id} failed: {e}")
            raise RemoteFetchError(f"Failed to fetch {self.table} {record_id}", e)

        rows = list(result.data or [])
        if not rows:
            return None

        row = rows[0]
        with self._lock:
            for i, existing in enumerate(self._rows):
                if existing.get("id") == record_id:
                    self._rows[i] = {**existing, **row}
                    row = self._rows[i]
                    break
            else:
                return dict(row)
        self.persist()
        return dict(row)

    def ensure_loaded(self, scope: Optional[dict] = None) -> list[dict]:
        """Fetch only when the cache is stale or was loaded for another scope."""
        wanted = dict(scope) if scope else None
        if self.stale or self.last_scope != wanted:
            return self.fetch_all(scope)
        return self.rows

    # ---------------------------------------------------------
    # Remote writes
    # ---------------------------------------------------------
    def _execute(self, operation: str, call: Callable[[], Any]) -> list[dict]:
        try:
            result = call()
        except Exception as e:
            self.log.error(f"{operation} failed: {e}")
            raise RemoteMutationError(operation, e)
        return list(getattr(result, "data", None) or [])

    def prepare_create(self, data: dict) -> dict:
        """Hook: adjust an insert payload (defaults, forced fields)."""
        return data

    def create(self, data: dict) -> dict:
        payload = sanitize(self.prepare_create(dict(data)), drop_none=True)
        returned = self._execute(
            f"Create {self.table}",
            lambda: self.client.table(self.table)
            .insert(payload, returning="representation")
            .execute(),
        )
        return self.reconcile("create", returned, patch=payload)

    def update(self, record_id: str, patch: dict, expect: Optional[dict] = None) -> Optional[dict]:
        """
        `expect` makes the write conditional: it only applies while the row
        still holds those values. A conditional write that matched nothing
        returns None and leaves the cache alone.
        """
        payload = sanitize(dict(patch))

        def call():
            query = (
                self.client.table(self.table)
                .update(payload, returning="representation")
                .eq("id", record_id)
            )
            for key, value in (expect or {}).items():
                query = query.eq(key, value)
            return query.execute()

        returned = self._execute(f"Update {self.table} {record_id}", call)
        if expect and not returned:
            self.log.info(f"Conditional update of {self.table} {record_id} matched no row")
            return None
        return self.reconcile("update", returned, record_id=record_id, patch=payload)

    def change_status(self, record_id: str, requested, status_type) -> Optional[dict]:
        """
        Guarded status write. The current status comes from the backend, and
        the update is conditional on it, so a row moved by someone else in
        between is reported as InvalidTransitionError. Asking for the status
        the row already has is a no-op. Returns None for a missing row.
        """
        requested = status_type(requested)
        row = self.fetch_one(record_id)
        if row is None:
            return None

        current = status_type(row[self.status_field])
        if current == requested:
            return row
        if not current.can_transition_to(requested):
            raise InvalidTransitionError(current.value, requested.value)

        updated = self.update(
            record_id,
            {self.status_field: requested.value},
            expect={self.status_field: current.value},
        )
        if updated is None:
            latest = self.fetch_one(record_id)
            if latest is None:
                return None
            raise InvalidTransitionError(latest[self.status_field], requested.value)
        return updated

    def update_where(self, filters: dict, patch: dict) -> list[dict]:
        """Bulk update every row matching the equality filters."""
        payload = sanitize(dict(patch))

        def call():
            query = self.client.table(self.table).update(payload, returning="representation")
            for key, value in filters.items():
                query = query.eq(key, value)
            return query.execute()

        returned = self._execute(f"Update {self.table} where {filters}", call)
        self.reconcile("update_where", returned, patch=payload, where=filters)
        return returned

    def delete(self, record_id: str) -> None:
        self._execute(
            f"Delete {self.table} {record_id}",
            lambda: self.client.table(self.table).delete().eq("id", record_id).execute(),
        )
        self.reconcile("delete", [], record_id=record_id)

    # ---------------------------------------------------------
    # Reconciliation (the only place writes touch the cache)
    # ---------------------------------------------------------
    def reconcile(
        self,
        operation: str,
        returned: list[dict],
        record_id: Optional[str] = None,
        patch: Optional[dict] = None,
        where: Optional[dict] = None,
    ) -> Optional[dict]:
        if operation == "delete":
            with self._lock:
                self._rows = [r for r in self._rows if r.get("id") != record_id]
            self.persist()
            return None

        if operation == "update_where":
            # Bulk writes may match zero rows; merge the known patch locally
            with self._lock:
                self._rows = [
                    {**r, **(patch or {})}
                    if all(r.get(k) == v for k, v in (where or {}).items())
                    else r
                    for r in self._rows
                ]
            self.persist()
            return None

        if not returned:
            # Backend sent no representation: the cache can't be patched
            # reliably, so mark it stale and reload the last scope.
            self.stale = True
            self.log.info(f"{operation} on {self.table} returned no row; refetching")
            self.fetch_all(self.last_scope)
            return self.get(record_id) if record_id else None

        row = returned[0]
        with self._lock:
            for i, existing in enumerate(self._rows):
                if existing.get("id") == row.get("id"):
                    # keep expanded relations (tenant, room, ...) from the fetch
                    self._rows[i] = {**existing, **row}
                    row = self._rows[i]
                    break
            else:
                self._rows.append(row)
            self._sort_locked()

        self.persist()
        return dict(row)

    def _sort_locked(self):
        if not self.order_by:
            return
        field = self.order_by
        present = [r for r in self._rows if r.get(field) is not None]
        missing = [r for r in self._rows if r.get(field) is None]
        present.sort(key=lambda r: r[field], reverse=self.order_desc)
        self._rows = present + missing

    # ---------------------------------------------------------
    # Projections (cache only, no network)
    # ---------------------------------------------------------
    def get(self, record_id: str) -> Optional[dict]:
        with self._lock:
            for row in self._rows:
                if row.get("id") == record_id:
                    return dict(row)
        return None

    def where(self, **filters) -> list[dict]:
        with self._lock:
            return [
                dict(r) for r in self._rows
                if all(r.get(k) == v for k, v in filters.items())
            ]

    def by_tenant(self, tenant_id: str) -> list[dict]:
        return self.where(**{self.tenant_field: tenant_id})

    def by_room(self, room_id: str) -> list[dict]:
        return self.where(**{self.room_field: room_id})

    def by_status(self, status) -> list[dict]:
        return self.where(**{self.status_field: str(status)})

    # ---------------------------------------------------------
    # Local persisted state
    # ---------------------------------------------------------
    def persist(self):
        if self.storage is None or not self.storage_key:
            return
        with self._lock:
            snapshot = {
                "rows": list(self._rows),
                "stale": self.stale,
                "scope": self.last_scope,
            }
        try:
            self.storage.set_item(self.namespace, self.storage_key, snapshot)
        except OSError as e:
            self.log.warning(f"Could not persist {self.storage_key}: {e}")

    def rehydrate(self) -> bool:
        """Restore the cache saved by a previous request. Returns True if found."""
        if self.storage is None or not self.storage_key:
            return False
        snapshot = self.storage.get_item(self.namespace, self.storage_key)
        if not isinstance(snapshot, dict):
            return False
        with self._lock:
            self._rows = list(snapshot.get("rows") or [])
            self.stale = bool(snapshot.get("stale", True))
            self.last_scope = snapshot.get("scope")
        return True

    def clear(self):
        """Teardown: empty the cache and forget the persisted copy."""
        with self._lock:
            self._rows = []
            self.stale = True
            self.last_scope = None
        if self.storage is not None and self.storage_key:
            self.storage.remove_item(self.namespace, self.storage_key)
