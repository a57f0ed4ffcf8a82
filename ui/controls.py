"""
controls.py — UI Control Panels
=================================
Every UI panel is a pure function that takes state and returns HTML.

Panels:
  • status_badge            – current ControllerState, observable via
                              data-state and a state-<name> class
  • playback_controls       – submit/pause/resume/step/reset/speed, each
                              button enabled only where the FSM allows it
  • algorithm_selector      – dropdown of registered algorithms
  • input_form              – one field per algorithm input
  • message_panel           – input errors, algorithm failures, warnings, result
  • analytics_panel         – metrics of a recorded run
  • pseudocode_viewer       – with live line highlighting
  • explanation_panel       – Learning Mode "why this step happened"

Design:
  - All panels are stateless render functions.
  - State is passed in as kwargs.
  - Output is raw HTML strings (no templating engine); anything that
    came from the user is escaped.
  - The main app stitches them together.
"""

from typing import Any, Dict, FrozenSet, List, Optional

from markupsafe import escape

from algorithms import AlgoInfo
from engine import ControllerState, RunMetrics, SchedulerMode, SPEED_PRESETS


# ---------------------------------------------------------------------------
# Which controls are live in which state
# ---------------------------------------------------------------------------
def enabled_controls(state: ControllerState, mode: str = SchedulerMode.TIMED.value) -> FrozenSet[str]:
    """Names of the buttons a user may press in `state`."""
    enabled = {"submit"}
    if state == ControllerState.VALIDATING:
        return frozenset()
    if state != ControllerState.IDLE:
        enabled.add("reset")
    if state == ControllerState.RUNNING:
        enabled.add("pause")
        if mode == SchedulerMode.MANUAL.value:
            enabled.add("step")
    if state == ControllerState.PAUSED:
        enabled.update({"resume", "step"})
    return frozenset(enabled)


def _disabled(name: str, enabled: FrozenSet[str]) -> str:
    return "" if name in enabled else "disabled"


# ---------------------------------------------------------------------------
# Status badge
# ---------------------------------------------------------------------------
def status_badge(state: ControllerState, step_count: int = 0) -> str:
    name = state.value
    return (f'<div id="status" class="status-badge state-{name}" data-state="{name}">'
            f'{name.upper()} <span class="step-count">· step {step_count}</span></div>')


# ---------------------------------------------------------------------------
# Playback Controls
# ---------------------------------------------------------------------------
def playback_controls(
    state: ControllerState = ControllerState.IDLE,
    mode: str = SchedulerMode.TIMED.value,
    interval_ms: float = SPEED_PRESETS["medium"],
) -> str:
    enabled = enabled_controls(state, mode)
    options = []
    for preset, ms in SPEED_PRESETS.items():
        sel = "selected" if ms == interval_ms else ""
        options.append(f'<option value="{preset}" {sel}>{preset.capitalize()} ({ms:.0f} ms)</option>')

    return f"""
    <div class="panel playback-controls" data-state="{state.value}">
      <h3>⏯ Playback</h3>
      <div class="button-row">
        <button id="btn-submit" class="btn-primary" title="Validate and run" {_disabled("submit", enabled)}>▶ Run</button>
        <button id="btn-pause" title="Pause" {_disabled("pause", enabled)}>⏸</button>
        <button id="btn-resume" title="Resume" {_disabled("resume", enabled)}>⏵</button>
        <button id="btn-step" title="Explore next step" {_disabled("step", enabled)}>⏭</button>
        <button id="btn-reset" title="Reset to idle" {_disabled("reset", enabled)}>⟲</button>
      </div>
      <div class="speed-control">
        <label>Speed:</label>
        <select id="speed-selector">
          {''.join(options)}
        </select>
        <span class="mode-label">{mode} mode</span>
      </div>
    </div>
    """


# ---------------------------------------------------------------------------
# Algorithm Selector
# ---------------------------------------------------------------------------
def algorithm_selector(algorithms: List[AlgoInfo], selected_key: str = "bubble_sort") -> str:
    groups: Dict[str, List[str]] = {}
    for algo in algorithms:
        sel = "selected" if algo.key == selected_key else ""
        groups.setdefault(algo.family, []).append(
            f'<option value="{algo.key}" {sel}>{algo.label} — {algo.complexity_time}</option>'
        )
    optgroups = [
        f'<optgroup label="{family.capitalize()}">{"".join(opts)}</optgroup>'
        for family, opts in groups.items()
    ]
    return f"""
    <div class="panel algorithm-selector">
      <h3>🧠 Algorithm</h3>
      <select id="algo-selector">
        {''.join(optgroups)}
      </select>
    </div>
    """


# ---------------------------------------------------------------------------
# Input form
# ---------------------------------------------------------------------------
_MULTILINE = {"graph"}


def input_form(info: AlgoInfo, values: Optional[Dict[str, Any]] = None) -> str:
    values = values if values is not None else info.fields
    rows = []
    for name, sample in info.fields.items():
        current = values.get(name, sample)
        current = "" if current is None else str(current)
        if name == "undirected":
            checked = "checked" if current.lower() in ("1", "true", "yes", "on") else ""
            rows.append(f'<label><input type="checkbox" name="undirected" {checked}> Undirected</label>')
        elif name in _MULTILINE:
            rows.append(
                f'<label>{name.capitalize()}:'
                f'<textarea name="{name}" rows="6">{escape(current)}</textarea></label>'
            )
        else:
            rows.append(
                f'<label>{name.capitalize()}: <input type="text" name="{name}" value="{escape(current)}"></label>'
            )
    return f"""
    <form id="input-form" class="panel input-form" data-algorithm="{info.key}">
      <h3>✏️ Input</h3>
      <p class="hint">{escape(info.description)}</p>
      {''.join(rows)}
    </form>
    """


# ---------------------------------------------------------------------------
# Message panel
# ---------------------------------------------------------------------------
def message_panel(
    error: Optional[Dict[str, Any]] = None,
    warning: Optional[str] = None,
    result: Optional[Dict[str, Any]] = None,
) -> str:
    parts = []
    if error:
        where = f" ({escape(error['field'])})" if error.get("field") else ""
        parts.append(
            f'<div class="message error" data-category="{escape(error["category"])}">'
            f'<strong>{escape(error["category"])}: {escape(error["kind"])}</strong>{where}'
            f'<p>{escape(error["message"])}</p></div>'
        )
    if warning:
        parts.append(f'<div class="message warning">⚠️ {escape(warning)}</div>')
    if result:
        rows = "".join(
            f"<tr><td>{escape(k)}</td><td>{escape(_short(v))}</td></tr>"
            for k, v in result.items() if k != "table"
        )
        parts.append(f'<div class="message result"><strong>Result</strong><table>{rows}</table></div>')
    if not parts:
        parts.append('<p class="placeholder">No messages.</p>')
    return f'<div class="panel message-panel">{"".join(parts)}</div>'


def _short(value: Any, limit: int = 120) -> str:
    text = str(value)
    return text if len(text) <= limit else text[:limit] + "…"


# ---------------------------------------------------------------------------
# Analytics Panel
# ---------------------------------------------------------------------------
def analytics_panel(metrics: Optional[RunMetrics] = None) -> str:
    if not metrics:
        return """
        <div class="panel analytics-panel">
          <h3>📊 Analytics</h3>
          <p class="placeholder">Record a run to see metrics.</p>
        </div>
        """

    outcome = "✅ Done" if metrics.outcome == ControllerState.DONE.value else f"❌ {escape(metrics.error)}"
    return f"""
    <div class="panel analytics-panel">
      <h3>📊 Analytics — {escape(metrics.algo_label)}</h3>
      <table>
        <tr><td>Total Steps:</td><td><strong>{metrics.total_steps}</strong></td></tr>
        <tr><td>Comparisons:</td><td><strong>{metrics.comparisons}</strong></td></tr>
        <tr><td>Swaps:</td><td><strong>{metrics.swaps}</strong></td></tr>
        <tr><td>Writes:</td><td><strong>{metrics.writes}</strong></td></tr>
        <tr><td>Nodes Visited:</td><td><strong>{metrics.visits}</strong></td></tr>
        <tr><td>Edges Examined:</td><td><strong>{metrics.relaxations}</strong></td></tr>
        <tr><td>Wall Time:</td><td><strong>{metrics.wall_time_ms:.2f} ms</strong></td></tr>
        <tr><td>Memory:</td><td><strong>{metrics.memory_bytes // 1024} KB</strong></td></tr>
        <tr><td>Outcome:</td><td><strong>{outcome}</strong></td></tr>
      </table>
    </div>
    """


# ---------------------------------------------------------------------------
# Pseudocode Viewer
# ---------------------------------------------------------------------------
def pseudocode_viewer(pseudocode_lines: List[str], current_line: int = -1) -> str:
    if not pseudocode_lines:
        return """
        <div class="code-block">
          <div class="placeholder">Select an algorithm to view pseudocode</div>
        </div>
        """

    lines_html = []
    for i, line in enumerate(pseudocode_lines):
        highlight = "highlight" if i == current_line else ""
        lines_html.append(f'<div class="code-line {highlight}" data-line="{i}">{escape(line)}</div>')

    return f"""
    <div class="code-block">
      {''.join(lines_html)}
    </div>
    """


# ---------------------------------------------------------------------------
# Explanation Panel (Learning Mode)
# ---------------------------------------------------------------------------
def explanation_panel(explanation: str = "") -> str:
    if not explanation:
        return ('<div class="explanation-text">▶ Press <strong>Run</strong> to see step-by-step '
                'explanations of what is happening at each stage.</div>')
    return f'<div class="explanation-text">{escape(explanation)}</div>'
