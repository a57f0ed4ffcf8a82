"""
main.py — Step-Driven Algorithm Visualizer Flask App
=====================================================
The web server that powers the visualizer.

Routes:
  GET  /                       – main UI
  GET  /api/algorithms         – registry metadata (labels, fields, pseudocode)
  POST /api/select             – switch this session to another algorithm
  POST /api/submit             – validate input and start a run
  POST /api/pause              – pause the run
  POST /api/resume             – resume the run
  POST /api/step               – consume exactly one step ("Explore Next")
  POST /api/reset              – back to idle
  POST /api/speed              – preset name or ms per step
  GET  /api/state              – tick the timed run, then return snapshot + panels
  POST /api/record             – run the current input to completion off-screen, return metrics

State management:
  Each browser session owns one VisualizationController, kept in a
  process-local registry keyed by a random id stored in the Flask
  session cookie.  Nothing is persisted; a restart starts everyone at
  IDLE.  Controllers are not thread-safe: every route holds its
  session's lock for the whole controller call, so overlapping requests
  from one browser run one after another.  The page polls with a
  chained timeout, never more than one /api/state request in flight.
"""

import logging
import secrets
import threading
from collections import OrderedDict
from contextlib import contextmanager
from typing import Any, ContextManager, Dict, Iterator, Optional, Tuple

from flask import Flask, current_app, jsonify, render_template_string, request, session

from algorithms import list_algorithms
from config import SETTINGS, Settings
from engine import (
    Recorder,
    SchedulerMode,
    UnknownAlgorithm,
    VisualizationController,
)
from ui import (
    algorithm_selector,
    analytics_panel,
    explanation_panel,
    input_form,
    message_panel,
    playback_controls,
    pseudocode_viewer,
    render_canvas,
    status_badge,
)

logger = logging.getLogger(__name__)

DEFAULT_ALGORITHM = "bubble_sort"


# ---------------------------------------------------------------------------
# Session → controller registry
# ---------------------------------------------------------------------------
class SessionSlot:
    """
    Everything one browser session owns.

    Attributes:
        controller : The session's VisualizationController.
        last_input : Raw form mapping of the last submit (for re-rendering
                     the form and for /api/record).
        lock       : Held for the whole of every call into `controller`.
    """

    def __init__(self, controller: VisualizationController):
        self.controller: VisualizationController  = controller
        self.last_input: Optional[Dict[str, Any]] = None
        self.lock = threading.Lock()

    def switch(self, key: str, mode: SchedulerMode, settings: Settings) -> VisualizationController:
        """New controller for `key`; the old one's run is cancelled.  Raises UnknownAlgorithm."""
        controller = VisualizationController(key, mode=mode, settings=settings)
        old, self.controller = self.controller, controller
        self.last_input = None
        old.reset()
        return controller


class ControllerRegistry:
    """
    One SessionSlot per session id, least recently used first.

    The registry lock guards the dict only; a slot's own lock serialises
    the requests of one session, since a controller must never be driven
    from two threads at once.  Past `settings.max_sessions` slots the
    least recently used session is dropped; its next request starts over
    at IDLE.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self._lock  = threading.Lock()
        self._slots: "OrderedDict[str, SessionSlot]" = OrderedDict()

    def _slot(self, sid: str) -> SessionSlot:
        with self._lock:
            slot = self._slots.get(sid)
            if slot is not None:
                self._slots.move_to_end(sid)
                return slot
            slot = SessionSlot(VisualizationController(DEFAULT_ALGORITHM, settings=self.settings))
            self._slots[sid] = slot
            while len(self._slots) > max(1, self.settings.max_sessions):
                self._slots.popitem(last=False)
                logger.info("session limit %d reached; dropped the least recently used session",
                            self.settings.max_sessions)
            return slot

    @contextmanager
    def session(self, sid: str) -> Iterator[SessionSlot]:
        """Lock and yield the slot of `sid`, creating it on first use."""
        slot = self._slot(sid)
        with slot.lock:
            yield slot

    def __contains__(self, sid: object) -> bool:
        with self._lock:
            return sid in self._slots

    def __len__(self) -> int:
        with self._lock:
            return len(self._slots)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def _registry() -> ControllerRegistry:
    return current_app.extensions["visualizer"]


def _session_id() -> str:
    if "sid" not in session:
        session["sid"] = secrets.token_urlsafe(16)
    return session["sid"]


def _slot() -> ContextManager[SessionSlot]:
    return _registry().session(_session_id())


def _body() -> Dict[str, Any]:
    """JSON body if there is one, else form fields."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def _payload(controller: VisualizationController) -> Dict[str, Any]:
    """Snapshot + freshly rendered panels; what every API call returns."""
    snap = controller.current_state()
    vis  = snap.visualization_state
    err  = snap.error.to_dict() if snap.error else None
    return {
        "snapshot": snap.to_dict(),
        "panels": {
            "status":      status_badge(snap.controller_state, vis["step_count"] if vis else 0),
            "playback":    playback_controls(snap.controller_state, snap.mode, snap.interval_ms),
            "canvas":      render_canvas(vis),
            "messages":    message_panel(err, snap.warning, vis["result"] if vis else None),
            "pseudocode":  pseudocode_viewer(controller.algorithm.pseudocode, vis["pseudocode_line"] if vis else -1),
            "explanation": explanation_panel(vis["explanation"] if vis else ""),
        },
    }


def _bad_request(message: str) -> Tuple[Any, int]:
    return jsonify({"error": message}), 400


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------
def create_app(settings: Optional[Settings] = None) -> Flask:
    settings = settings or SETTINGS
    app = Flask(__name__)
    app.secret_key = settings.secret_key
    app.extensions["visualizer"] = ControllerRegistry(settings)
    app.config["VISUALIZER_SETTINGS"] = settings

    # -----------------------------------------------------------------
    # Main UI Route
    # -----------------------------------------------------------------
    @app.route("/")
    def index():
        with _slot() as slot:
            info = slot.controller.algorithm
            payload = _payload(slot.controller)
            values = slot.last_input
        return render_template_string(
            INDEX_TEMPLATE,
            algo_selector=algorithm_selector(list_algorithms(), info.key),
            form=input_form(info, values),
            analytics=analytics_panel(),
            **payload["panels"],
        )

    # -----------------------------------------------------------------
    # API: registry
    # -----------------------------------------------------------------
    @app.route("/api/algorithms")
    def api_algorithms():
        return jsonify({"algorithms": [a.to_dict() for a in list_algorithms()]})

    @app.route("/api/select", methods=["POST"])
    def api_select():
        body = _body()
        key  = body.get("algorithm", "")
        try:
            mode = SchedulerMode(body.get("mode", SchedulerMode.TIMED.value))
        except ValueError:
            return _bad_request(f"unknown mode {body.get('mode')!r}")
        with _slot() as slot:
            try:
                controller = slot.switch(key, mode, settings)
            except UnknownAlgorithm as exc:
                return _bad_request(str(exc))
            payload = _payload(controller)
        logger.info("session switched to %s (%s mode)", key, mode.value)
        payload["panels"]["form"] = input_form(controller.algorithm)
        payload["algorithm"] = controller.algorithm.to_dict()
        return jsonify(payload)

    # -----------------------------------------------------------------
    # API: lifecycle
    # -----------------------------------------------------------------
    @app.route("/api/submit", methods=["POST"])
    def api_submit():
        body = _body()
        raw  = body.get("input", body)
        with _slot() as slot:
            if isinstance(raw, dict):
                slot.last_input = dict(raw)
            slot.controller.submit(raw)      # a non-mapping lands in ERROR as MalformedStructure
            return jsonify(_payload(slot.controller))

    @app.route("/api/pause", methods=["POST"])
    def api_pause():
        with _slot() as slot:
            slot.controller.pause()
            return jsonify(_payload(slot.controller))

    @app.route("/api/resume", methods=["POST"])
    def api_resume():
        with _slot() as slot:
            slot.controller.resume()
            return jsonify(_payload(slot.controller))

    @app.route("/api/step", methods=["POST"])
    def api_step():
        with _slot() as slot:
            slot.controller.step_once()
            return jsonify(_payload(slot.controller))

    @app.route("/api/reset", methods=["POST"])
    def api_reset():
        with _slot() as slot:
            slot.controller.reset()
            return jsonify(_payload(slot.controller))

    @app.route("/api/speed", methods=["POST"])
    def api_speed():
        speed = _body().get("speed", "")
        if isinstance(speed, str) and speed.strip().replace(".", "", 1).isdigit():
            speed = float(speed)
        with _slot() as slot:
            slot.controller.set_speed(speed)
            return jsonify(_payload(slot.controller))

    @app.route("/api/state")
    def api_state():
        with _slot() as slot:
            slot.controller.tick()
            return jsonify(_payload(slot.controller))

    # -----------------------------------------------------------------
    # API: analytics
    # -----------------------------------------------------------------
    @app.route("/api/record", methods=["POST"])
    def api_record():
        body = _body()
        with _slot() as slot:
            key = slot.controller.algorithm.key
            raw = body.get("input") or slot.last_input
        if not isinstance(raw, dict):
            return _bad_request("nothing to record yet; submit an input first")
        recorder = Recorder(settings)
        metrics  = recorder.record(key, raw)
        return jsonify({"metrics": recorder.export()["metrics"], "analytics": analytics_panel(metrics)})

    return app


# ---------------------------------------------------------------------------
# Page template
# ---------------------------------------------------------------------------
INDEX_TEMPLATE = """
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Step-Driven Algorithm Visualizer</title>
  <link rel="preconnect" href="https://fonts.googleapis.com">
  <link rel="preconnect" href="https://fonts.gstatic.com" crossorigin>
  <link href="https://fonts.googleapis.com/css2?family=JetBrains+Mono:wght@400;500;700&family=DM+Sans:wght@400;500;700&display=swap" rel="stylesheet">
  <style>
    * { margin: 0; padding: 0; box-sizing: border-box; }

    :root {
      --bg-dark: #0d1117;
      --bg-darker: #010409;
      --bg-panel: #161b22;
      --border: #30363d;
      --text-primary: #e6edf3;
      --text-secondary: #7d8590;
      --text-muted: #484f58;
      --accent-cyan: #0ea5e9;
      --accent-teal: #06b6d4;
      --accent-emerald: #10b981;
      --accent-amber: #f59e0b;
      --accent-rose: #f43f5e;
      --glow-cyan: rgba(14, 165, 233, 0.4);
    }

    body {
      font-family: 'DM Sans', -apple-system, BlinkMacSystemFont, sans-serif;
      background: var(--bg-darker);
      color: var(--text-primary);
      display: flex;
      height: 100vh;
      overflow: hidden;
    }

    #sidebar {
      width: 360px;
      background: linear-gradient(180deg, var(--bg-dark) 0%, var(--bg-darker) 100%);
      border-right: 1px solid var(--border);
      overflow-y: auto;
      padding: 24px 16px;
    }

    #main { flex: 1; display: flex; flex-direction: column; }

    #canvas-container {
      flex: 1;
      display: flex;
      align-items: center;
      justify-content: center;
      border-bottom: 1px solid var(--border);
    }

    #bottom-panel {
      display: grid;
      grid-template-columns: 1fr 1fr;
      gap: 20px;
      padding: 20px;
      background: var(--bg-dark);
      min-height: 260px;
      max-height: 340px;
      overflow: hidden;
    }

    #pseudocode-container, #explanation-container {
      background: var(--bg-panel);
      border: 1px solid var(--border);
      border-radius: 12px;
      padding: 20px;
      overflow-y: auto;
    }

    h3 {
      font-size: 13px;
      font-weight: 700;
      margin-bottom: 14px;
      text-transform: uppercase;
      letter-spacing: 0.5px;
      color: var(--accent-cyan);
    }

    .code-block {
      font-family: 'JetBrains Mono', monospace;
      font-size: 13px;
      line-height: 1.6;
    }
    .code-line { padding: 4px 12px; border-radius: 6px; white-space: pre; }
    .code-line.highlight {
      background: linear-gradient(90deg, rgba(6, 182, 212, 0.15) 0%, transparent 100%);
      border-left: 3px solid var(--accent-cyan);
      box-shadow: 0 0 20px var(--glow-cyan);
    }
    .explanation-text { color: var(--text-secondary); line-height: 1.8; font-size: 14px; }

    .panel {
      background: var(--bg-panel);
      border: 1px solid var(--border);
      border-radius: 12px;
      padding: 18px;
      margin-bottom: 16px;
    }

    .status-badge {
      display: inline-block;
      padding: 6px 14px;
      border-radius: 8px;
      font-weight: 700;
      font-size: 12px;
      letter-spacing: 0.5px;
      margin-bottom: 16px;
      background: var(--border);
    }
    .status-badge.state-running    { background: var(--accent-cyan); }
    .status-badge.state-paused     { background: var(--accent-amber); }
    .status-badge.state-done       { background: var(--accent-emerald); }
    .status-badge.state-error      { background: var(--accent-rose); }
    .status-badge.state-validating { background: var(--accent-teal); }

    .button-row { display: flex; gap: 8px; margin-bottom: 12px; }
    button {
      background: linear-gradient(135deg, var(--accent-cyan), var(--accent-teal));
      color: #fff;
      border: none;
      padding: 10px 14px;
      border-radius: 8px;
      cursor: pointer;
      font-size: 13px;
      font-weight: 600;
    }
    button:disabled { opacity: 0.35; cursor: not-allowed; }
    .btn-primary { background: linear-gradient(135deg, var(--accent-emerald), #059669); }

    select, input[type="text"], textarea {
      width: 100%;
      padding: 10px 12px;
      margin: 6px 0;
      background: var(--bg-darker);
      border: 1px solid var(--border);
      border-radius: 8px;
      color: var(--text-primary);
      font-size: 13px;
    }
    textarea { font-family: 'JetBrains Mono', monospace; resize: vertical; }
    label {
      display: block;
      margin: 10px 0 4px;
      font-size: 12px;
      color: var(--text-secondary);
      text-transform: uppercase;
    }

    .message { padding: 10px; border-radius: 8px; margin-bottom: 8px; font-size: 13px; }
    .message.error   { border-left: 3px solid var(--accent-rose); background: rgba(244, 63, 94, 0.1); }
    .message.warning { border-left: 3px solid var(--accent-amber); background: rgba(245, 158, 11, 0.1); }
    .message.result  { border-left: 3px solid var(--accent-emerald); }
    table { width: 100%; font-size: 13px; margin-top: 8px; }
    table td:last-child { text-align: right; color: var(--accent-cyan); font-family: 'JetBrains Mono', monospace; }
    .hint, .placeholder { font-size: 12px; color: var(--text-muted); font-style: italic; }
  </style>
</head>
<body>
  <div id="sidebar">
    <div id="status-slot">{{ status|safe }}</div>
    <div id="algo-selector-slot">{{ algo_selector|safe }}</div>
    <div id="form-slot">{{ form|safe }}</div>
    <div id="playback">{{ playback|safe }}</div>
    <div id="messages">{{ messages|safe }}</div>
    <div id="analytics">{{ analytics|safe }}</div>
    <button id="btn-record" class="btn-secondary">Record full run</button>
  </div>

  <div id="main">
    <div id="canvas-container">
      <div id="canvas-svg">{{ canvas|safe }}</div>
    </div>
    <div id="bottom-panel">
      <div id="pseudocode-container">
        <h3>Pseudocode</h3>
        <div id="pseudocode">{{ pseudocode|safe }}</div>
      </div>
      <div id="explanation-container">
        <h3>Step Explanation</h3>
        <div id="explanation">{{ explanation|safe }}</div>
      </div>
    </div>
  </div>

  <script>
    let pollTimer = null;
    let pollBusy  = false;

    async function post(url, data) {
      const res = await fetch(url, {
        method: 'POST',
        headers: {'Content-Type': 'application/json'},
        body: JSON.stringify(data || {}),
      });
      return res.json();
    }

    function render(data) {
      if (!data.panels) return;
      const p = data.panels;
      document.getElementById('status-slot').innerHTML = p.status;
      document.getElementById('playback').innerHTML = p.playback;
      document.getElementById('canvas-svg').innerHTML = p.canvas;
      document.getElementById('messages').innerHTML = p.messages;
      document.getElementById('pseudocode').innerHTML = p.pseudocode;
      document.getElementById('explanation').innerHTML = p.explanation;
      if (p.form) document.getElementById('form-slot').innerHTML = p.form;
      const state = data.snapshot.controller_state;
      if (state === 'running' && data.snapshot.mode === 'timed') startPolling();
      else stopPolling();
    }

    function startPolling() {
      if (pollTimer || pollBusy) return;
      pollTimer = setTimeout(poll, 50);
    }

    // the next poll is only scheduled once render() has seen this one
    async function poll() {
      pollTimer = null;
      pollBusy = true;
      let data;
      try {
        data = await (await fetch('/api/state')).json();
      } finally {
        pollBusy = false;
      }
      render(data);
    }

    function stopPolling() {
      clearTimeout(pollTimer);
      pollTimer = null;
    }

    function formInput() {
      const form = document.getElementById('input-form');
      const out = {};
      for (const el of form.elements) {
        if (!el.name) continue;
        out[el.name] = el.type === 'checkbox' ? (el.checked ? 'true' : '') : el.value;
      }
      return out;
    }

    // Playback controls (delegated: the panel is re-rendered on every update)
    document.addEventListener('click', async (e) => {
      const id = e.target.id;
      if (id === 'btn-submit') render(await post('/api/submit', {input: formInput()}));
      if (id === 'btn-pause')  render(await post('/api/pause'));
      if (id === 'btn-resume') render(await post('/api/resume'));
      if (id === 'btn-step')   render(await post('/api/step'));
      if (id === 'btn-reset')  render(await post('/api/reset'));
      if (id === 'btn-record') {
        const data = await post('/api/record', {input: formInput()});
        if (data.analytics) document.getElementById('analytics').innerHTML = data.analytics;
      }
    });

    document.addEventListener('change', async (e) => {
      if (e.target.id === 'algo-selector') render(await post('/api/select', {algorithm: e.target.value}));
      if (e.target.id === 'speed-selector') render(await post('/api/speed', {speed: e.target.value}));
    });
  </script>
</body>
</html>
"""


app = create_app()


# ---------------------------------------------------------------------------
# Run
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    logging.basicConfig(
        level=SETTINGS.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Step-Driven Algorithm Visualizer on http://%s:%d", SETTINGS.host, SETTINGS.port)
    app.run(host=SETTINGS.host, port=SETTINGS.port)
