"""Domain store: collections, lifecycle, cascades and derived views."""

from promodesk.store.domain_store import DomainStore
from promodesk.store.kinds import EntityKind
from promodesk.store.views import DerivedViews

__all__ = ["DerivedViews", "DomainStore", "EntityKind"]
