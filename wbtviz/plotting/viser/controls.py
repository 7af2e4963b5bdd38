"""Display controls for viser visualization.

This module contains GUI controls mirroring the display properties: one
folder for the base trajectory and one for the end-effector (contact)
trajectories.
"""

import numpy as np
import viser

from wbtviz.config import MIN_LINE_WIDTH
from wbtviz.display import WholeBodyTrajectoryDisplay
from wbtviz.style import RenderStyle

STYLE_OPTIONS = tuple(style.value for style in RenderStyle)


def _rgb255(color) -> tuple[int, int, int]:
    return tuple(int(round(c * 255)) for c in np.clip(color, 0.0, 1.0))


def _add_appearance_controls(server: viser.ViserServer, config) -> dict:
    return {
        "style": server.gui.add_dropdown(
            "Line Style", options=STYLE_OPTIONS, initial_value=config.style.value
        ),
        "line_width": server.gui.add_number(
            "Line Width", initial_value=config.line_width, min=MIN_LINE_WIDTH, step=0.001
        ),
        "color": server.gui.add_rgb("Line Color", initial_value=_rgb255(config.color)),
        "alpha": server.gui.add_slider(
            "Alpha", min=0.0, max=1.0, step=0.01, initial_value=config.alpha
        ),
    }


def add_display_controls(
    server: viser.ViserServer,
    display: WholeBodyTrajectoryDisplay,
    base_folder: str = "Base",
    contact_folder: str = "End-Effector",
) -> dict:
    """Add GUI controls for the display properties.

    Every edit calls straight into the display, which rebuilds only the
    affected trajectory kind.

    Args:
        server: ViserServer instance
        display: Display whose properties the controls edit
        base_folder: Name for the base trajectory GUI folder
        contact_folder: Name for the contact trajectory GUI folder

    Returns:
        Dict with "base" and "contact" handle dicts, plus the "reset" button
    """
    with server.gui.add_folder(base_folder):
        base = _add_appearance_controls(server, display.config.base)
        base["axes_scale"] = server.gui.add_number(
            "Axes Scale", initial_value=display.config.base.axes_scale, min=0.0, step=0.1
        )

    with server.gui.add_folder(contact_folder):
        contact = _add_appearance_controls(server, display.config.contact)

    reset_button = server.gui.add_button("Reset")

    @base["style"].on_update
    def _(_) -> None:
        display.set_base_style(base["style"].value)

    @contact["style"].on_update
    def _(_) -> None:
        display.set_contact_style(contact["style"].value)

    def bind(handles: dict, key: str, update) -> None:
        @handles[key].on_update
        def _(_) -> None:
            value = handles[key].value
            if key == "color":
                value = tuple(c / 255.0 for c in value)
            update(**{key: value})

    for key in ("line_width", "color", "alpha", "axes_scale"):
        bind(base, key, display.update_base_properties)
    for key in ("line_width", "color", "alpha"):
        bind(contact, key, display.update_contact_properties)

    @reset_button.on_click
    def _(_) -> None:
        display.reset()

    return {"base": base, "contact": contact, "reset": reset_button}
