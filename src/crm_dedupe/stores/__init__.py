from crm_dedupe.stores.memory import InMemoryCustomerStore
from crm_dedupe.stores.sqlite import SqliteCustomerStore

__all__ = ["InMemoryCustomerStore", "SqliteCustomerStore"]
