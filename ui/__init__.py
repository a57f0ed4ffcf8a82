"""
ui/
---
Presentation layer.

    from ui import render_canvas
    from ui import status_badge, playback_controls, input_form, …
"""

from ui.canvas import render_canvas, CanvasConfig

from ui.controls import (
    enabled_controls,
    status_badge,
    playback_controls,
    algorithm_selector,
    input_form,
    message_panel,
    analytics_panel,
    pseudocode_viewer,
    explanation_panel,
)

__all__ = [
    "render_canvas",
    "CanvasConfig",
    "enabled_controls",
    "status_badge",
    "playback_controls",
    "algorithm_selector",
    "input_form",
    "message_panel",
    "analytics_panel",
    "pseudocode_viewer",
    "explanation_panel",
]
