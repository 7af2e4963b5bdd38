"""Viser-based 3D rendering of whole-body trajectories.

Example usage:
    from wbtviz import WholeBodyTrajectoryDisplay
    from wbtviz.plotting import viser

    server = viser.create_server(trajectory)
    display = WholeBodyTrajectoryDisplay(backend=viser.ViserSceneBackend(server))
    viser.add_display_controls(server, display)
    display.process_message(trajectory)
    server.sleep_forever()
"""

# Server setup
from .server import compute_grid_size, create_server

# Scene backend for the display
from .scene import HandleGroup, ViserSceneBackend, rgba_to_uint8

# Sink for flushed primitive batches
from .markers import ViserMarkerRenderer

# GUI
from .controls import add_display_controls
from .plotly_integration import add_trajectory_plots

__all__ = [
    # Server
    "create_server",
    "compute_grid_size",
    # Scene
    "ViserSceneBackend",
    "HandleGroup",
    "rgba_to_uint8",
    "ViserMarkerRenderer",
    # GUI
    "add_display_controls",
    "add_trajectory_plots",
]
