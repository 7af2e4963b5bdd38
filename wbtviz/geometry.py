"""Geometry records produced by the trajectory builders.

These are plain data: the builders fill them, the :class:`~wbtviz.scene.SceneArena`
owns them and a scene backend (e.g. viser) turns them into host objects.
"""

from dataclasses import dataclass, field
from typing import Union

import numpy as np

from .spatial import rotate_vector_by_quaternion


def _rgba_rows(color, n: int) -> np.ndarray:
    return np.tile(np.asarray(color, dtype=float).reshape(1, 4), (n, 1))


def _connected(step_indices: np.ndarray) -> np.ndarray:
    """Mask over consecutive vertex pairs, True where their steps are adjacent."""
    step_indices = np.asarray(step_indices, dtype=int)
    if len(step_indices) < 2:
        return np.zeros(0, dtype=bool)
    return np.diff(step_indices) == 1


def _pairs(rows: np.ndarray, connected: np.ndarray) -> np.ndarray:
    """Rows of the connected vertex pairs, shape (M, 2, D)."""
    if len(rows) < 2:
        return np.zeros((0, 2, rows.shape[-1]))
    return np.stack([rows[:-1][connected], rows[1:][connected]], axis=1)


@dataclass(eq=False)
class Polyline:
    """Connected strip through world-frame vertices, one colour per vertex.

    ``step_indices`` records the trajectory step of every vertex; consecutive
    vertices are only joined when their steps are adjacent.
    """

    points: np.ndarray
    colors: np.ndarray
    step_indices: np.ndarray

    @classmethod
    def from_points(cls, points, color, step_indices=None) -> "Polyline":
        points = np.asarray(points, dtype=float).reshape(-1, 3)
        if step_indices is None:
            step_indices = np.arange(len(points))
        return cls(points, _rgba_rows(color, len(points)), np.asarray(step_indices, dtype=int))

    def __len__(self) -> int:
        return len(self.points)

    def connected(self) -> np.ndarray:
        return _connected(self.step_indices)

    def segments(self) -> np.ndarray:
        return _pairs(self.points, self.connected())

    def segment_colors(self) -> np.ndarray:
        """RGBA at both ends of every segment, shape (M, 2, 4)."""
        return _pairs(self.colors, self.connected())


@dataclass(eq=False)
class Ribbon:
    """Screen-facing band through world-frame vertices with an explicit width."""

    points: np.ndarray
    colors: np.ndarray
    step_indices: np.ndarray
    line_width: float

    @classmethod
    def from_points(cls, points, color, line_width, step_indices=None) -> "Ribbon":
        points = np.asarray(points, dtype=float).reshape(-1, 3)
        if step_indices is None:
            step_indices = np.arange(len(points))
        return cls(
            points,
            _rgba_rows(color, len(points)),
            np.asarray(step_indices, dtype=int),
            float(line_width),
        )

    def __len__(self) -> int:
        return len(self.points)

    def connected(self) -> np.ndarray:
        return _connected(self.step_indices)

    def segments(self) -> np.ndarray:
        return _pairs(self.points, self.connected())

    def segment_colors(self) -> np.ndarray:
        """RGBA at both ends of every segment, shape (M, 2, 4)."""
        return _pairs(self.colors, self.connected())


@dataclass(eq=False)
class PointSamples:
    """Discrete markers, each positioned locally inside its own anchor frame.

    Attributes:
        points: Local positions, shape (N, 3)
        anchor_positions: Anchor translations into the world frame, shape (N, 3)
        anchor_wxyzs: Anchor orientations, shape (N, 4)
        colors: RGBA per marker, shape (N, 4)
        radius: Marker radius in meters
    """

    points: np.ndarray
    anchor_positions: np.ndarray
    anchor_wxyzs: np.ndarray
    colors: np.ndarray
    radius: float
    step_indices: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=int))

    def __len__(self) -> int:
        return len(self.points)

    def world_points(self) -> np.ndarray:
        """Marker positions resolved into the world frame."""
        return np.array(
            [
                pos + rotate_vector_by_quaternion(p, q)
                for p, pos, q in zip(self.points, self.anchor_positions, self.anchor_wxyzs)
            ]
        ).reshape(-1, 3)


@dataclass(eq=False)
class AxisAnnotation:
    """Oriented frame marker placed at a sampled trajectory point."""

    position: np.ndarray
    wxyz: np.ndarray
    scale: float
    alpha: float
    step_index: int

    AXES_LENGTH = 0.04
    AXES_RADIUS = 0.008

    @property
    def axes_length(self) -> float:
        return self.AXES_LENGTH * self.scale

    @property
    def axes_radius(self) -> float:
        return self.AXES_RADIUS * self.scale


Geometry = Union[Polyline, Ribbon, PointSamples, AxisAnnotation]
