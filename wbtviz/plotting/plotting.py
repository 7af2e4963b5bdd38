import numpy as np
import plotly.graph_objects as go
from plotly.subplots import make_subplots

from wbtviz.base_trajectory import compute_base_path
from wbtviz.contact_trajectory import ContactSlotTable, collect_contact_samples
from wbtviz.spatial import Transform
from wbtviz.trajectory import Trajectory


def _step_axis(trajectory: Trajectory) -> tuple[np.ndarray, str]:
    """Use step times when they are informative, step indices otherwise."""
    times = np.array([step.time for step in trajectory])
    if len(times) > 1 and np.all(np.diff(times) > 0):
        return times, "Time (s)"
    return np.arange(len(trajectory)), "Step"


def plot_base_position(trajectory: Trajectory, world: Transform | None = None):
    """Plot the base position components over the trajectory.

    Non-finite samples are reset to zero, exactly as in the 3D view.

    Args:
        trajectory: Trajectory to plot
        world: Optional transform into the fixed frame. Defaults to identity.

    Returns:
        Plotly figure with one subplot per axis
    """
    if trajectory.is_empty:
        raise ValueError("Cannot plot an empty trajectory")

    path = compute_base_path(trajectory, world or Transform.identity())
    x, x_title = _step_axis(trajectory)

    fig = make_subplots(rows=3, cols=1, shared_xaxes=True, subplot_titles=("x", "y", "z"))
    for i, label in enumerate(("x", "y", "z")):
        fig.add_trace(
            go.Scatter(
                x=x,
                y=path.world_positions[:, i],
                mode="lines+markers",
                line={"color": "rgb(0, 85, 255)", "width": 2},
                marker={"size": 4},
                name=label,
                showlegend=False,
            ),
            row=i + 1,
            col=1,
        )
        annotated = [a.step_index for a in path.annotations]
        fig.add_trace(
            go.Scatter(
                x=x[annotated],
                y=path.world_positions[annotated, i],
                mode="markers",
                marker={"color": "orange", "size": 8, "symbol": "diamond"},
                name="Axes",
                legendgroup="axes",
                showlegend=i == 0,
            ),
            row=i + 1,
            col=1,
        )

    fig.update_xaxes(title_text=x_title, row=3, col=1)
    fig.update_layout(title="Base Position", template="plotly_dark")
    return fig


def plot_contact_schedule(trajectory: Trajectory):
    """Gait diagram: one row per contact, marking the steps where it is present.

    Returns:
        Plotly figure with one trace per contact, in first-seen order
    """
    slots = ContactSlotTable.from_trajectory(trajectory)
    x, x_title = _step_axis(trajectory)

    fig = go.Figure()
    for samples in collect_contact_samples(trajectory, slots):
        steps = np.asarray(samples.step_indices, dtype=int)
        fig.add_trace(
            go.Scatter(
                x=x[steps],
                y=[samples.slot.name] * len(steps),
                mode="markers",
                marker={"symbol": "square", "size": 10},
                name=samples.slot.name,
            )
        )

    fig.update_layout(
        title="Contact Schedule",
        xaxis_title=x_title,
        yaxis_title="Contact",
        template="plotly_dark",
    )
    return fig


def plot_contact_heights(trajectory: Trajectory, world: Transform | None = None):
    """Plot the height of every contact over the trajectory.

    Gaps in a trace are steps where the contact is absent.
    """
    world = world or Transform.identity()
    slots = ContactSlotTable.from_trajectory(trajectory)
    x, x_title = _step_axis(trajectory)

    fig = go.Figure()
    for samples in collect_contact_samples(trajectory, slots):
        steps, points = samples.as_arrays()
        z = np.full(len(trajectory), np.nan)
        z[steps] = world.apply_many(points)[:, 2]
        fig.add_trace(go.Scatter(x=x, y=z, mode="lines", name=samples.slot.name))

    fig.update_layout(
        title="Contact Heights",
        xaxis_title=x_title,
        yaxis_title="z (m)",
        template="plotly_dark",
    )
    return fig
