# stores/registry.py

"""
All entity stores of one signed-in session, built together and torn down
together on logout.
"""

from core.errors import RemoteFetchError
from stores.maintenance import MaintenanceStore
from stores.meter_readings import MeterReadingStore
from stores.notifications import NotificationStore
from stores.payments import PaymentStore
from stores.rooms import RoomStore
from stores.tenants import TenantStore


class StoreRegistry:
    def __init__(self, client, storage=None, namespace: str = "anonymous"):
        self.client = client
        self.storage = storage
        self.namespace = namespace

        self.rooms = RoomStore(client, storage, namespace)
        self.tenants = TenantStore(client, storage, namespace)
        self.maintenance = MaintenanceStore(client, storage, namespace)
        self.payments = PaymentStore(client, storage, namespace)
        self.notifications = NotificationStore(client, storage, namespace)
        self.meter_readings = MeterReadingStore(client, storage, namespace)

    @classmethod
    def for_session(cls, session, storage=None) -> "StoreRegistry":
        """Stores namespaced by the session's user; rehydrated from local state."""
        namespace = session.user.id if session.user else "anonymous"
        registry = cls(session.client, storage, namespace)
        registry.rehydrate()
        return registry

    def all(self):
        return [
            self.rooms,
            self.tenants,
            self.maintenance,
            self.payments,
            self.notifications,
            self.meter_readings,
        ]

    def rehydrate(self):
        for store in self.all():
            store.rehydrate()

    def clear(self):
        for store in self.all():
            store.clear()

    def room_for_tenant(self, tenant_id: str):
        """The tenant's room, loading rooms if needed. None when unknown."""
        try:
            self.rooms.ensure_loaded()
        except RemoteFetchError as e:
            # fall back to whatever the cache already holds
            self.rooms.log.warning(f"Room lookup for tenant {tenant_id} used cached rows: {e}")
        return self.rooms.for_tenant(tenant_id)
