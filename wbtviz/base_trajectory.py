"""Base (floating-body) trajectory builder.

For every step the base position and roll-pitch-yaw are assembled from the
axis-tagged base states, sanitised, and mapped into the world frame. The
resulting :class:`BasePath` is shared by the three encodings:

- ``POLYLINE``: one connected strip through the world positions
- ``RIBBON``: the same vertices as a band of explicit width
- ``POINT_SAMPLES``: one marker per step, each with its own anchor frame

Independently of the encoding, orientation frames are placed along the path:
on the first and last step, and on any step at least
``axes_scale * sqrt(0.0032)`` away from the previously annotated one.
"""

import warnings
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Sequence, Tuple

import numpy as np

from .config import BaseTrajectoryConfig
from .errors import NonFiniteStateWarning
from .geometry import AxisAnnotation, Geometry, PointSamples, Polyline, Ribbon
from .spatial import (
    IDENTITY_WXYZ,
    Transform,
    all_finite,
    quaternion_from_rpy,
    quaternion_multiply,
)
from .style import RenderStyle
from .trajectory import BaseAxis, Trajectory, TrajectoryStep

# Squared spacing between orientation frames, relative to the frame scale
ANNOTATION_SPACING_SQ = 0.0032

_POSITION_AXES = {BaseAxis.LX: 0, BaseAxis.LY: 1, BaseAxis.LZ: 2}
_RPY_AXES = {BaseAxis.AX: 0, BaseAxis.AY: 1, BaseAxis.AZ: 2}


def assemble_base_pose(
    step: TrajectoryStep, axes: Sequence[BaseAxis]
) -> Tuple[np.ndarray, np.ndarray]:
    """Read position and roll-pitch-yaw of ``step`` by semantic axis tag.

    Args:
        step: Trajectory step
        axes: Axes to read (those declared by the first step). Axes not
            listed, or missing from ``step``, read as 0.

    Returns:
        Tuple of (position (3,), rpy (3,)), not sanitised
    """
    position = np.zeros(3)
    rpy = np.zeros(3)
    wanted = set(axes)
    for state in step.base:
        if state.id not in wanted:
            continue
        if state.id in _POSITION_AXES:
            position[_POSITION_AXES[state.id]] = state.position
        else:
            rpy[_RPY_AXES[state.id]] = state.position
    return position, rpy


def sanitize_base_pose(
    position: np.ndarray, rpy: np.ndarray, step_index: int
) -> Tuple[np.ndarray, np.ndarray]:
    """Replace a non-finite position with zero and a non-finite rpy with identity."""
    if not all_finite(position):
        warnings.warn(
            f"Base position at step {step_index} is not finite, resetting to zero",
            NonFiniteStateWarning,
            stacklevel=2,
        )
        position = np.zeros(3)
    if not all_finite(rpy):
        warnings.warn(
            f"Base orientation at step {step_index} is not finite, resetting to identity",
            NonFiniteStateWarning,
            stacklevel=2,
        )
        rpy = np.zeros(3)
    return position, rpy


def compute_axis_annotations(
    world_positions: np.ndarray,
    local_wxyzs: np.ndarray,
    world_wxyz: np.ndarray,
    scale: float,
    alpha: float = 1.0,
) -> List[AxisAnnotation]:
    """Distance-gated orientation frames along a path.

    The first and last points are always annotated. An interior point is
    annotated when its squared distance to the last annotated point reaches
    ``scale**2 * 0.0032``.
    """
    n = len(world_positions)
    threshold = scale * scale * ANNOTATION_SPACING_SQ
    annotations = []
    last = None
    for i in range(n):
        xpos = world_positions[i]
        if i not in (0, n - 1) and np.sum((xpos - last) ** 2) < threshold:
            continue
        annotations.append(
            AxisAnnotation(
                position=xpos.copy(),
                wxyz=quaternion_multiply(local_wxyzs[i], world_wxyz),
                scale=scale,
                alpha=alpha,
                step_index=i,
            )
        )
        last = xpos
    return annotations


@dataclass(eq=False)
class BasePath:
    """Per-step base poses of one trajectory, local and world."""

    local_positions: np.ndarray
    local_wxyzs: np.ndarray
    world_positions: np.ndarray
    world: Transform
    annotations: List[AxisAnnotation] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.local_positions)


def compute_base_path(
    trajectory: Trajectory, world: Transform, axes_scale: float = 1.0, alpha: float = 1.0
) -> BasePath:
    axes = trajectory.base_axes
    n = len(trajectory)
    local_positions = np.zeros((n, 3))
    local_wxyzs = np.tile(IDENTITY_WXYZ, (n, 1))
    for i, step in enumerate(trajectory):
        position, rpy = sanitize_base_pose(*assemble_base_pose(step, axes), i)
        local_positions[i] = position
        local_wxyzs[i] = quaternion_from_rpy(rpy)
    world_positions = world.apply_many(local_positions) if n else np.zeros((0, 3))
    annotations = compute_axis_annotations(
        world_positions, local_wxyzs, world.wxyz, axes_scale, alpha
    )
    return BasePath(local_positions, local_wxyzs, world_positions, world, annotations)


# =============================================================================
# Builders, one per render style
# =============================================================================


def build_polyline(path: BasePath, config: BaseTrajectoryConfig) -> Polyline:
    return Polyline.from_points(path.world_positions, config.rgba)


def build_ribbon(path: BasePath, config: BaseTrajectoryConfig) -> Ribbon:
    return Ribbon.from_points(path.world_positions, config.rgba, config.line_width)


def build_point_samples(path: BasePath, config: BaseTrajectoryConfig) -> PointSamples:
    n = len(path)
    return PointSamples(
        points=path.local_positions.copy(),
        anchor_positions=np.tile(path.world.position, (n, 1)),
        anchor_wxyzs=np.tile(path.world.wxyz, (n, 1)),
        colors=np.tile(np.asarray(config.rgba, dtype=float), (n, 1)),
        radius=config.line_width,
        step_indices=np.arange(n),
    )


BUILDERS: Dict[RenderStyle, Callable[[BasePath, BaseTrajectoryConfig], Geometry]] = {
    RenderStyle.POLYLINE: build_polyline,
    RenderStyle.RIBBON: build_ribbon,
    RenderStyle.POINT_SAMPLES: build_point_samples,
}


@dataclass(eq=False)
class BaseTrajectoryGeometry:
    geometry: Geometry
    annotations: List[AxisAnnotation]
    path: BasePath


def process_base_trajectory(
    trajectory: Trajectory, config: BaseTrajectoryConfig, world: Transform
) -> BaseTrajectoryGeometry:
    """Build the base path geometry and its orientation frames.

    Args:
        trajectory: Non-empty trajectory
        config: Base appearance; ``config.style`` selects the builder
        world: Transform from the trajectory frame into the fixed frame

    Returns:
        The geometry for ``config.style`` plus the axis annotations
    """
    path = compute_base_path(trajectory, world, config.axes_scale, config.alpha)
    geometry = BUILDERS[config.style](path, config)
    return BaseTrajectoryGeometry(geometry, path.annotations, path)
