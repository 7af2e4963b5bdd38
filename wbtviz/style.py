"""Render style selection.

Each trajectory kind (base, contact) has its own :class:`StyleDispatcher`.
A style change tears down everything the kind currently owns and, when a
trajectory is loaded, rebuilds it immediately, so the scene never shows a mix
of styles.
"""

from enum import Enum
from typing import Callable, Dict, FrozenSet, Optional, Union

from .scene import SceneArena, TrajectoryKind
from .trajectory import Trajectory


class RenderStyle(Enum):
    POLYLINE = "polyline"
    RIBBON = "ribbon"
    POINT_SAMPLES = "points"

    @classmethod
    def parse(cls, value: Union["RenderStyle", str]) -> "RenderStyle":
        """Accept a member, its value ("ribbon") or its name ("RIBBON")."""
        if isinstance(value, cls):
            return value
        text = str(value)
        for style in cls:
            if text.lower() in (style.value, style.name.lower()):
                return style
        raise ValueError(f"Unknown render style '{value}', expected one of {[s.value for s in cls]}")


# Every style can be reached from every other one
_TRANSITIONS: Dict[RenderStyle, FrozenSet[RenderStyle]] = {
    style: frozenset(s for s in RenderStyle if s is not style) for style in RenderStyle
}


class StyleDispatcher:
    """Style state machine for one trajectory kind.

    Args:
        kind: Trajectory kind whose arena entries this dispatcher owns
        arena: Ownership table to tear down on transitions
        rebuild: Called with the loaded trajectory after a transition
        style: Initial style
    """

    def __init__(
        self,
        kind: TrajectoryKind,
        arena: SceneArena,
        rebuild: Callable[[Trajectory], None],
        style: RenderStyle = RenderStyle.POINT_SAMPLES,
    ):
        self.kind = kind
        self.arena = arena
        self._rebuild = rebuild
        self.style = RenderStyle.parse(style)

    def can_transition(self, style: RenderStyle) -> bool:
        return style in _TRANSITIONS[self.style]

    def select(self, style: Union[RenderStyle, str], trajectory: Optional[Trajectory] = None) -> bool:
        """Switch to ``style``.

        Args:
            style: Requested style
            trajectory: Currently loaded trajectory, or None if nothing is loaded

        Returns:
            True if a transition happened, False if ``style`` was already active
        """
        style = RenderStyle.parse(style)
        if not self.can_transition(style):
            return False
        self.arena.destroy(self.kind)
        self.style = style
        if trajectory is not None:
            self._rebuild(trajectory)
        return True
