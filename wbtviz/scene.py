"""Ownership table for the geometry currently shown in the host scene.

Every object the pipeline creates is registered in a :class:`SceneArena`
under an explicit ``(kind, slot)`` key. Rebuilding a kind destroys all of its
entries first, so nothing depends on host-side reference counting and no
stale geometry survives a new trajectory or a style change.

A backend is optional. Without one the arena is a purely in-memory record of
what would be drawn, which is what the tests and headless tools use.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Hashable, List, Optional, Protocol, Tuple

from .geometry import Geometry


class TrajectoryKind(Enum):
    BASE = "base"
    CONTACT = "contact"


class SceneHandle(Protocol):
    def remove(self) -> None: ...


class SceneBackend(Protocol):
    """Host scene able to materialise geometry records."""

    def add(self, name: str, geometry: Geometry) -> SceneHandle: ...


SceneKey = Tuple[TrajectoryKind, Hashable]


@dataclass(eq=False)
class SceneEntry:
    key: SceneKey
    name: str
    geometry: Geometry
    handle: Optional[Any] = None


class SceneArena:
    """Explicit ``(kind, slot) -> object`` table with destroy-on-rebuild.

    Args:
        backend: Optional host scene receiving every added geometry
        root: Scene-graph prefix for object names
    """

    def __init__(self, backend: Optional[SceneBackend] = None, root: str = "/whole_body"):
        self.backend = backend
        self.root = root.rstrip("/")
        self._entries: Dict[SceneKey, SceneEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: SceneKey) -> bool:
        return key in self._entries

    def name_for(self, kind: TrajectoryKind, slot: Hashable) -> str:
        if isinstance(slot, tuple):
            slot = "/".join(str(s) for s in slot)
        return f"{self.root}/{kind.value}/{slot}"

    def add(self, kind: TrajectoryKind, slot: Hashable, geometry: Geometry) -> SceneEntry:
        """Register ``geometry`` under ``(kind, slot)``, replacing any previous owner."""
        key = (kind, slot)
        if key in self._entries:
            self._remove(self._entries.pop(key))
        name = self.name_for(kind, slot)
        handle = self.backend.add(name, geometry) if self.backend is not None else None
        entry = SceneEntry(key, name, geometry, handle)
        self._entries[key] = entry
        return entry

    def get(self, kind: TrajectoryKind, slot: Hashable) -> Optional[SceneEntry]:
        return self._entries.get((kind, slot))

    def entries(self, kind: Optional[TrajectoryKind] = None) -> List[SceneEntry]:
        """Entries in insertion order, optionally restricted to one kind."""
        return [e for e in self._entries.values() if kind is None or e.key[0] is kind]

    def geometries(self, kind: TrajectoryKind, geometry_type: Optional[type] = None) -> List[Geometry]:
        return [
            e.geometry
            for e in self.entries(kind)
            if geometry_type is None or isinstance(e.geometry, geometry_type)
        ]

    def destroy(self, kind: TrajectoryKind) -> int:
        """Destroy every object owned by ``kind``; returns how many were removed."""
        doomed = [key for key in self._entries if key[0] is kind]
        for key in doomed:
            self._remove(self._entries.pop(key))
        return len(doomed)

    def destroy_all(self) -> int:
        count = len(self._entries)
        for entry in self._entries.values():
            self._remove(entry)
        self._entries.clear()
        return count

    @staticmethod
    def _remove(entry: SceneEntry) -> None:
        if entry.handle is not None:
            entry.handle.remove()
