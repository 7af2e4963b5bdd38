"""Whole-body trajectory display.

:class:`WholeBodyTrajectoryDisplay` ties the builders together. It keeps the
last received trajectory as explicit state and exposes the events that
trigger a rebuild as plain method calls:

- ``process_message``: new trajectory, rebuild everything
- ``set_base_style`` / ``set_contact_style``: style change, rebuild one kind
- ``update_base_properties`` / ``update_contact_properties``: appearance
  change, rebuild one kind
- ``fixed_frame_changed``: frame change, rebuild everything

Every pass is synchronous and fully replaces what the affected kind owns.
"""

import warnings
from typing import List, Optional

from . import io
from .base_trajectory import process_base_trajectory
from .config import DisplayConfig
from .contact_trajectory import ContactSlotTable, process_contact_trajectory
from .errors import EmptyTrajectoryWarning
from .frames import FrameTransformProvider, StaticTransformProvider, lookup_world_transform
from .geometry import AxisAnnotation
from .scene import SceneArena, SceneBackend, TrajectoryKind
from .style import RenderStyle, StyleDispatcher
from .trajectory import Trajectory

BASE_PATH_SLOT = "path"
AXES_SLOT = "axes"
CONTACT_SLOT = "slot"


class WholeBodyTrajectoryDisplay:
    """Renders base and contact trajectories of a whole-body motion plan.

    Args:
        config: Display configuration. Defaults to :class:`DisplayConfig`.
        provider: Frame transform provider. Defaults to a static provider
            whose fixed frame is "world".
        backend: Optional host scene (e.g. :class:`~wbtviz.plotting.viser.ViserSceneBackend`)
        root: Scene-graph prefix for every object the display creates
    """

    def __init__(
        self,
        config: Optional[DisplayConfig] = None,
        provider: Optional[FrameTransformProvider] = None,
        backend: Optional[SceneBackend] = None,
        root: str = "/whole_body",
    ):
        self.config = config if config is not None else DisplayConfig()
        self.provider = provider if provider is not None else StaticTransformProvider()
        self.arena = SceneArena(backend, root)
        self.trajectory: Optional[Trajectory] = None
        self.contact_slots = ContactSlotTable()
        self.base_dispatcher = StyleDispatcher(
            TrajectoryKind.BASE, self.arena, self._draw_base, self.config.base.style
        )
        self.contact_dispatcher = StyleDispatcher(
            TrajectoryKind.CONTACT, self.arena, self._draw_contacts, self.config.contact.style
        )
        self._printed_header = False

    # -------------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------------

    def process_message(self, trajectory: Trajectory) -> None:
        """Replace the current trajectory and rebuild all geometry."""
        self.trajectory = trajectory
        self.destroy_objects()
        self._draw_base(trajectory)
        self._draw_contacts(trajectory)

        if self.config.dev.printing and self._drawable(trajectory):
            if not self._printed_header:
                io.header()
                self._printed_header = True
            io.pass_summary(
                trajectory,
                self.base_style,
                len(self.annotations),
                self.contact_style,
                len(self.contact_slots),
            )

    def set_base_style(self, style) -> bool:
        style = RenderStyle.parse(style)
        self.config.base = self.config.base.replace(style=style)
        return self.base_dispatcher.select(style, self.trajectory)

    def set_contact_style(self, style) -> bool:
        style = RenderStyle.parse(style)
        self.config.contact = self.config.contact.replace(style=style)
        return self.contact_dispatcher.select(style, self.trajectory)

    def update_base_properties(self, **changes) -> None:
        """Apply appearance changes (line_width, color, alpha, axes_scale) to the base."""
        style = changes.pop("style", None)
        self.config.base = self.config.base.replace(**changes)
        if style is not None and self.set_base_style(style):
            return
        self._rebuild(TrajectoryKind.BASE)

    def update_contact_properties(self, **changes) -> None:
        """Apply appearance changes (line_width, color, alpha) to the contacts."""
        style = changes.pop("style", None)
        self.config.contact = self.config.contact.replace(**changes)
        if style is not None and self.set_contact_style(style):
            return
        self._rebuild(TrajectoryKind.CONTACT)

    def fixed_frame_changed(self) -> None:
        self._rebuild(TrajectoryKind.BASE)
        self._rebuild(TrajectoryKind.CONTACT)

    def reset(self) -> None:
        """Destroy all geometry and forget the current trajectory."""
        self.destroy_objects()
        self.trajectory = None

    def destroy_objects(self) -> None:
        self.arena.destroy_all()
        self.contact_slots = ContactSlotTable()

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def base_style(self) -> RenderStyle:
        return self.base_dispatcher.style

    @property
    def contact_style(self) -> RenderStyle:
        return self.contact_dispatcher.style

    @property
    def annotations(self) -> List[AxisAnnotation]:
        return self.arena.geometries(TrajectoryKind.BASE, AxisAnnotation)

    def base_geometry(self):
        entry = self.arena.get(TrajectoryKind.BASE, BASE_PATH_SLOT)
        return entry.geometry if entry is not None else None

    def contact_geometries(self) -> list:
        return [
            e.geometry
            for e in self.arena.entries(TrajectoryKind.CONTACT)
            if e.key[1][0] == CONTACT_SLOT
        ]

    # -------------------------------------------------------------------------
    # Passes
    # -------------------------------------------------------------------------

    def _rebuild(self, kind: TrajectoryKind) -> None:
        self.arena.destroy(kind)
        if self.trajectory is None:
            return
        if kind is TrajectoryKind.BASE:
            self._draw_base(self.trajectory)
        else:
            self._draw_contacts(self.trajectory)

    def _drawable(self, trajectory: Trajectory, warn: bool = False) -> bool:
        if trajectory.is_empty:
            reason = "trajectory has no steps"
        elif not trajectory.base_axes:
            reason = "first trajectory step has no base states"
        else:
            return True
        if warn:
            warnings.warn(f"Nothing to draw: {reason}", EmptyTrajectoryWarning, stacklevel=3)
            if self.config.dev.printing:
                io.empty_notice(reason)
        return False

    def _draw_base(self, trajectory: Trajectory) -> None:
        if not self._drawable(trajectory, warn=True):
            return
        world = lookup_world_transform(self.provider, trajectory.frame_id, trajectory.stamp)
        result = process_base_trajectory(trajectory, self.config.base, world)
        self.arena.add(TrajectoryKind.BASE, BASE_PATH_SLOT, result.geometry)
        for i, annotation in enumerate(result.annotations):
            self.arena.add(TrajectoryKind.BASE, (AXES_SLOT, i), annotation)

    def _draw_contacts(self, trajectory: Trajectory) -> None:
        # Contact positions are relative to the base, so the same guard applies
        if not self._drawable(trajectory):
            self.contact_slots = ContactSlotTable()
            return
        world = lookup_world_transform(self.provider, trajectory.frame_id, trajectory.stamp)
        result = process_contact_trajectory(trajectory, self.config.contact, world)
        self.contact_slots = result.slots
        for slot, geometry in zip(result.slots, result.geometries):
            self.arena.add(TrajectoryKind.CONTACT, (CONTACT_SLOT, slot.index), geometry)
