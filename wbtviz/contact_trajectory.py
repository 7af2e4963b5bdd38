"""Contact (end-effector) trajectory multiplexer.

Contacts are not positionally stable: a foot appears in a step's contact list
while it is relevant and disappears while it is not, and its index within the
list changes from step to step. Identity is therefore resolved by name.

1. A pre-scan assigns every distinct contact name a stable slot, in the order
   the names are first seen.
2. Each step is then assembled per slot: if the slot's contact is present,
   its base-frame position is composed with that step's base pose
   (``p_base + R(rpy_base) @ p_contact``) and emitted into the slot's own
   geometry; otherwise the slot gets nothing for that step.

Because every slot owns an independent object, and strips only connect
adjacent steps, a lift-off gap shows up as a break rather than a jump.
"""

import warnings
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Optional, Tuple

import numpy as np

from .base_trajectory import assemble_base_pose
from .config import ContactTrajectoryConfig
from .errors import NonFiniteStateWarning
from .geometry import Geometry, PointSamples, Polyline, Ribbon
from .spatial import Transform, all_finite, quaternion_from_rpy, rotate_vector_by_quaternion
from .style import RenderStyle
from .trajectory import ContactState, Trajectory, TrajectoryStep


@dataclass
class ContactSlot:
    """Stable identity of one contact name within a trajectory.

    Attributes:
        name: Contact name
        index: Slot index, in first-seen order
        last_index: Position of this contact in the most recent step's
            contact list where it was present, or None before first sighting
    """

    name: str
    index: int
    last_index: Optional[int] = None


class ContactSlotTable:
    """Name -> slot mapping built once per trajectory by a pre-scan."""

    def __init__(self, names: Optional[List[str]] = None):
        self._slots: Dict[str, ContactSlot] = {}
        for name in names or []:
            self.assign(name)

    @classmethod
    def from_trajectory(cls, trajectory: Trajectory) -> "ContactSlotTable":
        return cls(trajectory.contact_names())

    def assign(self, name: str) -> ContactSlot:
        """Return the slot for ``name``, creating it on first sighting."""
        if name not in self._slots:
            self._slots[name] = ContactSlot(name, len(self._slots))
        return self._slots[name]

    def __len__(self) -> int:
        return len(self._slots)

    def __iter__(self) -> Iterator[ContactSlot]:
        return iter(self._slots.values())

    def __contains__(self, name: str) -> bool:
        return name in self._slots

    def __getitem__(self, name: str) -> ContactSlot:
        return self._slots[name]

    @property
    def names(self) -> List[str]:
        return list(self._slots)

    def resolve_step(self, step: TrajectoryStep) -> List[Tuple[ContactSlot, ContactState]]:
        """Match the contacts of ``step`` to their slots.

        Updates each present slot's ``last_index``. Slots whose name is absent
        from the step are skipped. If a name appears twice in one step, the
        first occurrence wins.

        Returns:
            ``(slot, contact)`` pairs in slot order
        """
        positions: Dict[str, int] = {}
        for k, contact in enumerate(step.contacts):
            positions.setdefault(contact.name, k)
        resolved = []
        for slot in self._slots.values():
            k = positions.get(slot.name)
            if k is None:
                continue
            slot.last_index = k
            resolved.append((slot, step.contacts[k]))
        return resolved


@dataclass(eq=False)
class ContactSamples:
    """Base-frame-composed contact positions collected for one slot."""

    slot: ContactSlot
    step_indices: List[int] = field(default_factory=list)
    points: List[np.ndarray] = field(default_factory=list)

    def as_arrays(self) -> Tuple[np.ndarray, np.ndarray]:
        return np.asarray(self.step_indices, dtype=int), np.asarray(self.points, dtype=float).reshape(-1, 3)


def compose_contact_position(
    base_position: np.ndarray, base_rpy: np.ndarray, local_position: np.ndarray
) -> np.ndarray:
    """``base_position + R(base_rpy) @ local_position``."""
    return base_position + rotate_vector_by_quaternion(local_position, quaternion_from_rpy(base_rpy))


def collect_contact_samples(
    trajectory: Trajectory, slots: ContactSlotTable
) -> List[ContactSamples]:
    """Assemble per-slot contact positions across all steps."""
    samples = [ContactSamples(slot) for slot in slots]
    axes = trajectory.base_axes
    for i, step in enumerate(trajectory):
        resolved = slots.resolve_step(step)
        if not resolved:
            continue
        base_position, base_rpy = assemble_base_pose(step, axes)
        for slot, contact in resolved:
            with np.errstate(invalid="ignore"):
                xpos = compose_contact_position(base_position, base_rpy, contact.position)
            if not all_finite(xpos):
                warnings.warn(
                    f"Contact '{slot.name}' at step {i} is not finite, resetting to zero",
                    NonFiniteStateWarning,
                    stacklevel=2,
                )
                xpos = np.zeros(3)
            samples[slot.index].step_indices.append(i)
            samples[slot.index].points.append(xpos)
    return samples


# =============================================================================
# Builders, one per render style
# =============================================================================


def build_polyline(
    samples: ContactSamples, world: Transform, config: ContactTrajectoryConfig
) -> Polyline:
    steps, points = samples.as_arrays()
    return Polyline.from_points(world.apply_many(points), config.rgba, steps)


def build_ribbon(
    samples: ContactSamples, world: Transform, config: ContactTrajectoryConfig
) -> Ribbon:
    steps, points = samples.as_arrays()
    return Ribbon.from_points(world.apply_many(points), config.rgba, config.line_width, steps)


def build_point_samples(
    samples: ContactSamples, world: Transform, config: ContactTrajectoryConfig
) -> PointSamples:
    steps, points = samples.as_arrays()
    n = len(points)
    return PointSamples(
        points=points,
        anchor_positions=np.tile(world.position, (n, 1)),
        anchor_wxyzs=np.tile(world.wxyz, (n, 1)),
        colors=np.tile(np.asarray(config.rgba, dtype=float), (n, 1)),
        radius=config.line_width,
        step_indices=steps,
    )


BUILDERS: Dict[
    RenderStyle, Callable[[ContactSamples, Transform, ContactTrajectoryConfig], Geometry]
] = {
    RenderStyle.POLYLINE: build_polyline,
    RenderStyle.RIBBON: build_ribbon,
    RenderStyle.POINT_SAMPLES: build_point_samples,
}


@dataclass(eq=False)
class ContactTrajectoryGeometry:
    slots: ContactSlotTable
    geometries: List[Geometry]

    def __len__(self) -> int:
        return len(self.geometries)


def process_contact_trajectory(
    trajectory: Trajectory, config: ContactTrajectoryConfig, world: Transform
) -> ContactTrajectoryGeometry:
    """Build one geometry per distinct contact name, in first-seen order."""
    slots = ContactSlotTable.from_trajectory(trajectory)
    builder = BUILDERS[config.style]
    geometries = [builder(s, world, config) for s in collect_contact_samples(trajectory, slots)]
    return ContactTrajectoryGeometry(slots, geometries)
