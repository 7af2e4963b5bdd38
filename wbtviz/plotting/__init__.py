"""Trajectory plotting utilities.

**2D Plots** (plotly-based)::

    from wbtviz.plotting import plot_base_position
    plot_base_position(trajectory).show()

**3D Visualization** (viser-based):
    See ``wbtviz.plotting.viser`` for the scene backend, marker renderer and
    GUI controls.
"""

from . import viser
from .plotting import plot_base_position, plot_contact_heights, plot_contact_schedule

__all__ = [
    # 2D plotting functions (plotly)
    "plot_base_position",
    "plot_contact_schedule",
    "plot_contact_heights",
    # 3D visualization submodule (viser)
    "viser",
]
