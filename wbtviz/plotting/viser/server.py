"""Viser server setup sized to a trajectory."""

import numpy as np
import viser

from wbtviz.base_trajectory import compute_base_path
from wbtviz.spatial import Transform
from wbtviz.trajectory import Trajectory


def compute_grid_size(pos: np.ndarray, padding: float = 1.2, minimum: float = 1.0) -> float:
    """Compute grid size based on trajectory extent.

    Args:
        pos: Position array of shape (N, 3)
        padding: Padding factor (1.2 = 20% padding)
        minimum: Smallest grid returned, used for empty or stationary paths

    Returns:
        Grid size (width and height)
    """
    pos = np.asarray(pos, dtype=float).reshape(-1, 3)
    if len(pos) == 0:
        return minimum
    extent = np.abs(pos[:, :2]).max() * 2 * padding
    return max(float(extent), minimum)


def create_server(
    trajectory: Trajectory | None = None,
    dark_mode: bool = True,
    port: int = 8080,
) -> viser.ViserServer:
    """Create a viser server with basic scene setup.

    Args:
        trajectory: Optional trajectory whose base path sizes the grid
        dark_mode: Whether to use dark theme
        port: Port the server listens on

    Returns:
        ViserServer instance with grid and origin frame
    """
    server = viser.ViserServer(port=port)
    if dark_mode:
        server.gui.configure_theme(dark_mode=True)

    pos = np.zeros((0, 3))
    if trajectory is not None and not trajectory.is_empty and trajectory.base_axes:
        pos = compute_base_path(trajectory, Transform.identity()).world_positions

    grid_size = compute_grid_size(pos)
    server.scene.add_grid(
        "/grid",
        width=grid_size,
        height=grid_size,
        position=np.array([0.0, 0.0, 0.0]),
    )
    server.scene.add_frame(
        "/origin",
        wxyz=(1.0, 0.0, 0.0, 0.0),
        position=(0.0, 0.0, 0.0),
    )

    return server
