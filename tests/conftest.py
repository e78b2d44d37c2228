"""Shared pytest fixtures for the promoDesk test suite."""

from __future__ import annotations

from datetime import date

import pytest

from promodesk.models.entities import Artist, Music
from promodesk.providers.storage.memory_storage import MemoryStorageProvider
from promodesk.store.domain_store import DomainStore
from promodesk.store.kinds import EntityKind
from promodesk.store.views import DerivedViews
from tests.factories import FIXED_NOW, make_artist, make_music, sequential_ids


@pytest.fixture
def storage() -> MemoryStorageProvider:
    return MemoryStorageProvider()


@pytest.fixture
def store(storage: MemoryStorageProvider) -> DomainStore:
    """A hydrated store over empty in-memory storage with a pinned clock."""
    s = DomainStore(storage, clock=lambda: FIXED_NOW, id_factory=sequential_ids())
    s.hydrate()
    return s


@pytest.fixture
def views(store: DomainStore) -> DerivedViews:
    return DerivedViews(store)


@pytest.fixture
def today() -> date:
    return FIXED_NOW.date()


@pytest.fixture
def artist_with_song(store: DomainStore) -> tuple[Artist, Music]:
    """One saved artist owning one saved track."""
    artist = store.save(EntityKind.ARTISTS, make_artist())
    track = store.save(EntityKind.MUSIC, make_music(artist.id))
    return artist, track  # type: ignore[return-value]
