"""Plotly integration for viser - 2D trajectory plots embedded in the GUI.

The figures from :mod:`wbtviz.plotting` are shown in a GUI folder next to the
3D scene and can be refreshed whenever a new trajectory arrives.
"""

import warnings

import plotly.graph_objects as go
import viser

from wbtviz.errors import EmptyTrajectoryWarning
from wbtviz.plotting.plotting import (
    plot_base_position,
    plot_contact_heights,
    plot_contact_schedule,
)
from wbtviz.trajectory import Trajectory


def _figures(trajectory: Trajectory) -> dict[str, go.Figure] | None:
    if trajectory.is_empty or not trajectory.base_axes:
        warnings.warn(
            "Trajectory has nothing to plot, skipping plots", EmptyTrajectoryWarning
        )
        return None
    return {
        "base": plot_base_position(trajectory),
        "schedule": plot_contact_schedule(trajectory),
        "heights": plot_contact_heights(trajectory),
    }


def add_trajectory_plots(
    server: viser.ViserServer,
    trajectory: Trajectory,
    folder_name: str | None = "Plots",
    aspect: float = 1.5,
) -> tuple:
    """Add the base position, contact schedule and contact height plots to the GUI.

    Args:
        server: ViserServer instance
        trajectory: Trajectory to plot
        folder_name: Optional GUI folder name to organize plots
        aspect: Aspect ratio for plot display (width/height)

    Returns:
        Tuple of (plot_handles, update_callback). ``update_callback`` takes a
        new trajectory and replaces the figures in place; the handles dict is
        empty when the trajectory has nothing to plot.

    Example::

        _, update_plots = viser.add_trajectory_plots(server, trajectory)
        display.process_message(new_trajectory)
        update_plots(new_trajectory)
    """
    figures = _figures(trajectory)
    handles = {}

    def add_all(figs: dict[str, go.Figure]) -> None:
        for key, fig in figs.items():
            handles[key] = server.gui.add_plotly(figure=fig, aspect=aspect)

    if figures is not None:
        if folder_name:
            with server.gui.add_folder(folder_name):
                add_all(figures)
        else:
            add_all(figures)

    def update(new_trajectory: Trajectory) -> None:
        new_figures = _figures(new_trajectory)
        if new_figures is None:
            return
        for key, fig in new_figures.items():
            if key in handles:
                handles[key].figure = fig

    return handles, update
