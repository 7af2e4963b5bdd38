"""Whole-body trajectory data model.

A :class:`Trajectory` is an ordered list of :class:`TrajectoryStep` objects.
Each step carries the floating-base coordinates, tagged by semantic axis
rather than by position in the list, and the contacts that are active at that
instant. Contacts come and go as limbs lift off and touch down, so the
contact list of a step is unordered and variable in length.

Example:
    ```python
    from wbtviz.trajectory import Trajectory, TrajectoryStep

    steps = [
        TrajectoryStep.from_pose(
            position=[0.1 * i, 0.0, 0.5],
            rpy=[0.0, 0.0, 0.0],
            contacts={"lf_foot": [0.3, 0.2, -0.5], "rh_foot": [-0.3, -0.2, -0.5]},
        )
        for i in range(10)
    ]
    traj = Trajectory(steps, frame_id="odom")
    ```
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

import numpy as np


class BaseAxis(Enum):
    """Semantic identifier of a floating-base coordinate."""

    AX = "AX"  # roll
    AY = "AY"  # pitch
    AZ = "AZ"  # yaw
    LX = "LX"
    LY = "LY"
    LZ = "LZ"

    @classmethod
    def parse(cls, value: Union["BaseAxis", str, int]) -> "BaseAxis":
        """Accept an enum member, its name, or its index in AX..LZ order."""
        if isinstance(value, cls):
            return value
        if isinstance(value, (int, np.integer)):
            members = list(cls)
            if not 0 <= int(value) < len(members):
                raise ValueError(f"Base axis index must be in [0, {len(members)}), got {value}")
            return members[int(value)]
        try:
            return cls(str(value).upper())
        except ValueError:
            raise ValueError(
                f"Unknown base axis '{value}', expected one of {[a.value for a in cls]}"
            ) from None


LINEAR_AXES = (BaseAxis.LX, BaseAxis.LY, BaseAxis.LZ)
ANGULAR_AXES = (BaseAxis.AX, BaseAxis.AY, BaseAxis.AZ)


@dataclass(frozen=True)
class BaseState:
    """One base coordinate at one step."""

    id: BaseAxis
    position: float
    velocity: float = 0.0
    acceleration: float = 0.0


@dataclass(frozen=True, eq=False)
class ContactState:
    """A named contact and its position in the base frame."""

    name: str
    position: np.ndarray

    def __post_init__(self):
        object.__setattr__(self, "position", np.asarray(self.position, dtype=float).reshape(3))


@dataclass
class TrajectoryStep:
    """One instant of the motion plan.

    Attributes:
        base: Base coordinates, identified by :class:`BaseAxis` tag
        contacts: Active contacts, in no particular order
        time: Optional time stamp of the step, relative to the trajectory
    """

    base: List[BaseState] = field(default_factory=list)
    contacts: List[ContactState] = field(default_factory=list)
    time: float = 0.0

    @classmethod
    def from_pose(
        cls,
        position: Sequence[float],
        rpy: Sequence[float] = (0.0, 0.0, 0.0),
        contacts: Optional[Dict[str, Sequence[float]]] = None,
        time: float = 0.0,
    ) -> "TrajectoryStep":
        """Build a step from a base position, a roll-pitch-yaw triple and a
        ``{name: position}`` mapping of contacts.
        """
        base = [BaseState(axis, float(v)) for axis, v in zip(ANGULAR_AXES, rpy)]
        base += [BaseState(axis, float(v)) for axis, v in zip(LINEAR_AXES, position)]
        contact_states = [ContactState(name, pos) for name, pos in (contacts or {}).items()]
        return cls(base=base, contacts=contact_states, time=time)

    def base_value(self, axis: BaseAxis, default: float = 0.0) -> float:
        for state in self.base:
            if state.id is axis:
                return state.position
        return default


@dataclass
class Trajectory:
    """Ordered sequence of steps expressed in ``frame_id`` at time ``stamp``."""

    steps: List[TrajectoryStep] = field(default_factory=list)
    frame_id: str = "world"
    stamp: float = 0.0

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self):
        return iter(self.steps)

    def __getitem__(self, idx: int) -> TrajectoryStep:
        return self.steps[idx]

    @property
    def is_empty(self) -> bool:
        return not self.steps

    @property
    def base_axes(self) -> tuple:
        """Axes declared by the first step; these are read for every step."""
        if not self.steps:
            return ()
        seen = []
        for state in self.steps[0].base:
            if state.id not in seen:
                seen.append(state.id)
        return tuple(seen)

    def contact_names(self) -> List[str]:
        """Distinct contact names in first-seen order."""
        names: Dict[str, None] = {}
        for step in self.steps:
            for contact in step.contacts:
                names.setdefault(contact.name, None)
        return list(names)

    @classmethod
    def from_dict(cls, data: dict) -> "Trajectory":
        """Build a trajectory from a message-shaped dictionary.

        The expected layout is::

            {
                "header": {"frame_id": "odom", "stamp": 0.0},
                "trajectory": [
                    {
                        "time": 0.0,
                        "base": [{"id": "LX", "position": 0.0}, ...],
                        "contacts": [
                            {"name": "lf_foot", "position": {"x": 0.3, "y": 0.2, "z": -0.5}},
                            ...
                        ],
                    },
                    ...
                ],
            }

        Contact positions may also be given as ``[x, y, z]`` lists.

        Raises:
            ValueError: If a base axis is unknown or missing, a contact has no
                name, or a contact position does not have three components.
        """
        header = data.get("header", {})
        steps = []
        for i, raw_step in enumerate(data.get("trajectory", [])):
            base = [
                BaseState(
                    BaseAxis.parse(_require(b, "id", "base state", i)),
                    float(b.get("position", 0.0)),
                    float(b.get("velocity", 0.0)),
                    float(b.get("acceleration", 0.0)),
                )
                for b in raw_step.get("base", [])
            ]
            contacts = []
            for c in raw_step.get("contacts", []):
                pos = c.get("position", [0.0, 0.0, 0.0])
                if isinstance(pos, dict):
                    pos = [pos.get("x", 0.0), pos.get("y", 0.0), pos.get("z", 0.0)]
                if len(pos) != 3:
                    raise ValueError(
                        f"Contact '{c.get('name')}' at step {i} must have 3 position "
                        f"components, got {len(pos)}"
                    )
                name = str(_require(c, "name", "contact", i))
                contacts.append(ContactState(name, [float(p) for p in pos]))
            steps.append(
                TrajectoryStep(base=base, contacts=contacts, time=float(raw_step.get("time", 0.0)))
            )
        return cls(
            steps=steps,
            frame_id=str(header.get("frame_id", "world")),
            stamp=float(header.get("stamp", 0.0)),
        )

    def to_dict(self) -> dict:
        return {
            "header": {"frame_id": self.frame_id, "stamp": self.stamp},
            "trajectory": [
                {
                    "time": step.time,
                    "base": [
                        {
                            "id": b.id.value,
                            "position": b.position,
                            "velocity": b.velocity,
                            "acceleration": b.acceleration,
                        }
                        for b in step.base
                    ],
                    "contacts": [
                        {"name": c.name, "position": c.position.tolist()} for c in step.contacts
                    ],
                }
                for step in self.steps
            ],
        }


def _require(entry: dict, key: str, what: str, step: int):
    if key not in entry:
        raise ValueError(f"{what.capitalize()} at step {step} has no '{key}' field")
    return entry[key]


def load_trajectory(path: Union[str, Path]) -> Trajectory:
    """Load a trajectory from a JSON file (see :meth:`Trajectory.from_dict`)."""
    with open(path, "r", encoding="utf-8") as f:
        return Trajectory.from_dict(json.load(f))


def save_trajectory(trajectory: Trajectory, path: Union[str, Path]) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(trajectory.to_dict(), f, indent=2)
