"""Frame transform lookup.

The pipeline never computes frame transforms itself. A
:class:`FrameTransformProvider` answers "where is ``frame_id`` in the fixed
frame at ``stamp``?" and may fail; on failure the provider still returns a
fallback transform (usually identity) that the builders use as-is.
"""

import warnings
from typing import Dict, Optional, Protocol, Tuple

from .errors import FrameTransformWarning
from .spatial import Transform


class FrameTransformProvider(Protocol):
    """Resolves message frames into the fixed frame."""

    fixed_frame: str

    def resolve(self, frame_id: str, stamp: float) -> Tuple[bool, Transform]:
        """Return ``(ok, transform)``; ``transform`` is a fallback when ``ok`` is False."""
        ...


class StaticTransformProvider:
    """Provider backed by a fixed table of frame transforms.

    Args:
        fixed_frame: Name of the world frame everything is rendered in
        transforms: Optional mapping from frame name to its transform into
            ``fixed_frame``
        fallback: Transform returned for unknown frames. Defaults to identity.
    """

    def __init__(
        self,
        fixed_frame: str = "world",
        transforms: Optional[Dict[str, Transform]] = None,
        fallback: Optional[Transform] = None,
    ):
        self.fixed_frame = fixed_frame
        self.transforms = dict(transforms or {})
        self.fallback = fallback if fallback is not None else Transform.identity()

    def set_transform(self, frame_id: str, transform: Transform) -> None:
        self.transforms[frame_id] = transform

    def resolve(self, frame_id: str, stamp: float) -> Tuple[bool, Transform]:
        if not frame_id or frame_id == self.fixed_frame:
            return True, Transform.identity()
        if frame_id in self.transforms:
            return True, self.transforms[frame_id]
        return False, self.fallback


def lookup_world_transform(
    provider: FrameTransformProvider, frame_id: str, stamp: float
) -> Transform:
    """Query ``provider`` once and report failures as a diagnostic.

    Returns:
        The resolved transform, or the provider's fallback on failure.
    """
    ok, transform = provider.resolve(frame_id, stamp)
    if not ok:
        warnings.warn(
            f"Error transforming from frame '{frame_id}' to frame '{provider.fixed_frame}'",
            FrameTransformWarning,
            stacklevel=2,
        )
    return transform
