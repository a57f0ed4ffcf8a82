"""
canvas.py — SVG State Renderer
================================
Pure rendering function: VisualizationState snapshot → SVG string.

One drawing per state kind:
  • array    – bar chart; highlighted / marked bars recoloured, pointers
               under the bars, the sliding window as a band
  • graph    – nodes on a circle, edges with arrows and weights, plus
               frontier / distances / order panels
  • table    – the DP table, unfilled cells blank
  • buckets  – one row per bucket, keys chained left to right
  • forest   – one box per element with its parent underneath; roots glow

Design decisions:
  - NO mutation.  This function is stateless — the caller passes in
    the snapshot dict and gets back a string.
  - State-based colouring is a simple dict lookup on CanvasConfig.
  - Every user-supplied label is escaped before it reaches the SVG.
"""

import math
from typing import Any, Dict, List, Optional, Tuple

from markupsafe import escape


# ---------------------------------------------------------------------------
# Visual Config: color palette, dimensions, fonts
# ---------------------------------------------------------------------------
class CanvasConfig:
    # canvas
    width:  int = 900
    height: int = 520
    bg:     str = "#0d1117"

    # bar / node colors (state → fill)
    colors: Dict[str, str] = {
        "default":    "#1c2128",   # dark grey
        "bar":        "#30363d",
        "highlight":  "#f59e0b",   # amber, touched by the latest step
        "sorted":     "#10b981",   # emerald green
        "found":      "#a855f7",   # purple
        "chosen":     "#a855f7",
        "frontier":   "#0ea5e9",   # cyan blue
        "visited":    "#10b981",
        "current":    "#06b6d4",   # bright teal
        "source":     "#0ea5e9",
        "target":     "#ec4899",   # pink
        "window":     "rgba(14, 165, 233, 0.15)",
        "root":       "#06b6d4",
    }

    # edge colors
    edge_colors: Dict[str, str] = {
        "default":  "#30363d",
        "active":   "#06b6d4",
    }

    node_radius:        int = 20
    node_stroke:        str = "#30363d"
    label_color:        str = "#e6edf3"
    label_size:         int = 13
    muted:              str = "#7d8590"
    edge_arrow_size:    int = 10

    # overlay panels
    overlay_bg:         str = "#161b22"
    overlay_border:     str = "#30363d"
    overlay_text:       str = "#7d8590"
    overlay_accent:     str = "#0ea5e9"
    overlay_font_size:  int = 13


CONFIG = CanvasConfig()

_FONT = "font-family=\"'DM Sans', sans-serif\""
_MONO = "font-family=\"'JetBrains Mono', monospace\""


# ---------------------------------------------------------------------------
# Main Render Function
# ---------------------------------------------------------------------------
def render_canvas(vis: Optional[Dict[str, Any]], config: CanvasConfig = CONFIG) -> str:
    """
    Returns an SVG string.

    Args:
        vis    : VisualizationState snapshot (dict) or None before a run.
        config : Visual config.
    """
    parts = [
        f'<svg width="{config.width}" height="{config.height}" '
        f'viewBox="0 0 {config.width} {config.height}" '
        f'xmlns="http://www.w3.org/2000/svg" style="background: {config.bg};">',
        f'<rect width="{config.width}" height="{config.height}" fill="{config.bg}"/>',
    ]

    if vis is None:
        parts.append(_text(config.width / 2, config.height / 2, "Submit input to start a run.",
                           config.muted, size=16, anchor="middle"))
    else:
        renderer = _RENDERERS.get(vis.get("kind"), _render_array)
        parts.append(renderer(vis, config))

    parts.append("</svg>")
    return "\n".join(parts)


def _text(x: float, y: float, label: Any, fill: str, size: int = 13,
          anchor: str = "start", weight: str = "500", mono: bool = False) -> str:
    font = _MONO if mono else _FONT
    return (f'<text x="{x:.1f}" y="{y:.1f}" text-anchor="{anchor}" font-size="{size}" {font} '
            f'fill="{fill}" font-weight="{weight}">{escape(str(label))}</text>')


def _marked_color(idx: int, marked: Dict[str, List[int]], config: CanvasConfig) -> Optional[str]:
    for label, indices in marked.items():
        if idx in indices:
            return config.colors.get(label, config.colors["sorted"])
    return None


# ---------------------------------------------------------------------------
# Arrays
# ---------------------------------------------------------------------------
def _render_array(vis: Dict[str, Any], config: CanvasConfig) -> str:
    values = vis.get("array") or []
    if not values:
        return ""
    n        = len(values)
    left     = 40
    usable   = config.width - 2 * left
    slot     = usable / n
    bar_w    = max(4.0, slot * 0.8)
    base_y   = config.height - 110
    top      = max(abs(v) for v in values) or 1
    scale    = (base_y - 60) / top
    marked   = vis.get("marked") or {}
    hl       = set(vis.get("highlighted") or [])

    parts = ['<g class="array">']

    window = vis.get("window")
    if window:
        x0 = left + window["lo"] * slot
        x1 = left + (window["hi"] + 1) * slot
        parts.append(f'<rect class="window" x="{x0:.1f}" y="40" width="{x1 - x0:.1f}" '
                     f'height="{base_y - 30:.1f}" fill="{config.colors["window"]}" rx="6"/>')
        parts.append(_text((x0 + x1) / 2, 32, f"Σ = {window['value']}", config.overlay_accent,
                           anchor="middle", weight="700"))

    for i, v in enumerate(values):
        h    = max(2.0, abs(v) * scale)
        x    = left + i * slot + (slot - bar_w) / 2
        y    = base_y - h if v >= 0 else base_y
        fill = _marked_color(i, marked, config) or config.colors["bar"]
        if i in hl:
            fill = config.colors["highlight"]
        parts.append(f'<rect class="bar" data-index="{i}" x="{x:.1f}" y="{y:.1f}" '
                     f'width="{bar_w:.1f}" height="{h:.1f}" fill="{fill}" rx="3"/>')
        if n <= 40:
            parts.append(_text(x + bar_w / 2, base_y + 18, v, config.label_color, size=12, anchor="middle"))
            parts.append(_text(x + bar_w / 2, base_y + 34, i, config.muted, size=10, anchor="middle", mono=True))

    # pointers stack under their slot so lo/mid/hi never overlap
    stacked: Dict[int, int] = {}
    for name, idx in (vis.get("pointers") or {}).items():
        if not 0 <= idx < n:
            continue
        row = stacked.get(idx, 0)
        stacked[idx] = row + 1
        cx = left + idx * slot + slot / 2
        parts.append(_text(cx, base_y + 56 + row * 16, f"↑ {name}", config.overlay_accent,
                           size=12, anchor="middle", weight="700", mono=True))

    parts.append("</g>")
    return "\n".join(parts)


# ---------------------------------------------------------------------------
# Graphs
# ---------------------------------------------------------------------------
def _layout(nodes: List[str], config: CanvasConfig) -> Dict[str, Tuple[float, float]]:
    """Place nodes evenly on a circle, first node at 12 o'clock."""
    cx, cy = 300, config.height / 2
    radius = min(cx, cy) - 50
    if len(nodes) == 1:
        return {nodes[0]: (cx, cy)}
    pos = {}
    for i, nid in enumerate(nodes):
        angle = -math.pi / 2 + 2 * math.pi * i / len(nodes)
        pos[nid] = (cx + radius * math.cos(angle), cy + radius * math.sin(angle))
    return pos


def _render_graph(vis: Dict[str, Any], config: CanvasConfig) -> str:
    graph = vis.get("graph") or {}
    nodes = graph.get("nodes", [])
    pos   = _layout(nodes, config)
    parts = ['<g class="graph">']

    weighted = any(e.get("weight", 1) != 1 for e in graph.get("edges", []))
    for edge in graph.get("edges", []):
        parts.append(_render_edge(edge, pos, vis, weighted, config))
    for nid in nodes:
        parts.append(_render_node(nid, pos[nid], vis, graph, config))

    parts.append(_render_list_panel("Frontier", vis.get("frontier") or [], config, x=620, y=20))
    distances = vis.get("distances") or {}
    if distances:
        parts.append(_render_distances_panel(distances, config, x=620, y=200))
    elif vis.get("order"):
        parts.append(_render_list_panel("Order", vis["order"], config, x=620, y=200))
    parts.append("</g>")
    return "\n".join(parts)


def _render_node(nid: str, xy: Tuple[float, float], vis: Dict[str, Any],
                 graph: Dict[str, Any], config: CanvasConfig) -> str:
    x, y = xy
    key  = "default"
    if nid in (vis.get("visited") or []):
        key = "visited"
    elif nid in (vis.get("frontier") or []):
        key = "frontier"
    fill   = config.colors[key]
    stroke = config.node_stroke
    if nid == graph.get("target"):
        stroke = config.colors["target"]
    elif nid == graph.get("source"):
        stroke = config.colors["source"]

    glow = ""
    if nid == vis.get("current"):
        stroke = config.colors["current"]
        glow = (f'<circle cx="{x:.1f}" cy="{y:.1f}" r="{config.node_radius + 8}" fill="none" '
                f'stroke="{config.colors["current"]}" stroke-width="2" opacity="0.3"/>')

    return "\n".join([
        f'<g class="node state-{key}" data-id="{escape(nid)}">',
        glow,
        f'  <circle cx="{x:.1f}" cy="{y:.1f}" r="{config.node_radius}" fill="{fill}" '
        f'stroke="{stroke}" stroke-width="3"/>',
        "  " + _text(x, y + 5, nid, config.label_color, size=config.label_size, anchor="middle", weight="600"),
        "</g>",
    ])


def _render_edge(edge: Dict[str, Any], pos: Dict[str, Tuple[float, float]], vis: Dict[str, Any],
                 weighted: bool, config: CanvasConfig) -> str:
    x1, y1 = pos[edge["source"]]
    x2, y2 = pos[edge["target"]]
    dx, dy = x2 - x1, y2 - y1
    dist   = math.sqrt(dx * dx + dy * dy)
    if dist < 0.001:
        return ""  # self loop

    active = edge["id"] == vis.get("active_edge")
    stroke = config.edge_colors["active" if active else "default"]
    width  = 4 if active else 2

    ux, uy = dx / dist, dy / dist
    r = config.node_radius
    sx, sy = x1 + ux * r, y1 + uy * r
    tx, ty = x2 - ux * r, y2 - uy * r

    parts = [
        f'<g class="edge" data-id="{escape(edge["id"])}">',
        f'  <line x1="{sx:.1f}" y1="{sy:.1f}" x2="{tx:.1f}" y2="{ty:.1f}" stroke="{stroke}" stroke-width="{width}"/>',
    ]
    if edge.get("directed", True):
        parts.append("  " + _render_arrow(tx, ty, ux, uy, stroke, config))
    if weighted:
        mx, my = (x1 + x2) / 2 - uy * 12, (y1 + y2) / 2 + ux * 12
        parts.append(f'  <circle cx="{mx:.1f}" cy="{my:.1f}" r="12" fill="{config.overlay_bg}" opacity="0.9"/>')
        parts.append("  " + _text(mx, my + 4, edge["weight"], config.muted, size=12, anchor="middle", weight="600"))
    parts.append("</g>")
    return "\n".join(parts)


def _render_arrow(x: float, y: float, ux: float, uy: float, color: str, config: CanvasConfig) -> str:
    """Draw an arrowhead at (x, y) pointing in direction (ux, uy)."""
    size = config.edge_arrow_size
    px, py = -uy, ux
    p1_x = x - ux * size + px * (size * 0.5)
    p1_y = y - uy * size + py * (size * 0.5)
    p2_x = x - ux * size - px * (size * 0.5)
    p2_y = y - uy * size - py * (size * 0.5)
    return f'<polygon points="{x:.1f},{y:.1f} {p1_x:.1f},{p1_y:.1f} {p2_x:.1f},{p2_y:.1f}" fill="{color}"/>'


# ---------------------------------------------------------------------------
# Overlay Panels
# ---------------------------------------------------------------------------
def _panel_frame(title: str, config: CanvasConfig, x: int, y: int, height: int, css: str) -> List[str]:
    return [
        f'<g class="{css}" transform="translate({x},{y})">',
        f'  <rect width="260" height="{height}" fill="{config.overlay_bg}" stroke="{config.overlay_border}" '
        f'stroke-width="1" rx="8" opacity="0.95"/>',
        "  " + _text(12, 22, title, config.overlay_accent, weight="700"),
    ]


def _render_list_panel(title: str, items: List[Any], config: CanvasConfig, x: int, y: int) -> str:
    parts = _panel_frame(title, config, x, y, 160, f"{title.lower()}-panel")
    shown = ", ".join(str(i) for i in items[:12]) or "(empty)"
    if len(items) > 12:
        shown += f" … +{len(items) - 12} more"
    # wrap roughly every 30 characters
    for row, start in enumerate(range(0, min(len(shown), 240), 30)):
        parts.append("  " + _text(16, 48 + row * 16, shown[start:start + 30], config.overlay_text,
                                  size=config.overlay_font_size, mono=True))
    parts.append("</g>")
    return "\n".join(parts)


def _render_distances_panel(distances: Dict[str, Any], config: CanvasConfig, x: int, y: int) -> str:
    parts = _panel_frame("Distances", config, x, y, 300, "distances-panel")
    items = sorted(distances.items(), key=lambda kv: (kv[1], kv[0]))
    for i, (nid, d) in enumerate(items[:15]):
        parts.append("  " + _text(16, 48 + i * 16, f"{nid}: {d}", config.overlay_text,
                                  size=config.overlay_font_size, mono=True))
    if len(items) > 15:
        parts.append("  " + _text(16, 48 + 15 * 16, f"… +{len(items) - 15} more", "#484f58", size=11))
    parts.append("</g>")
    return "\n".join(parts)


# ---------------------------------------------------------------------------
# DP table
# ---------------------------------------------------------------------------
def _render_table(vis: Dict[str, Any], config: CanvasConfig) -> str:
    table = vis.get("table") or []
    if not table:
        return ""
    rows, cols = len(table), len(table[0])
    cell = max(14, min(40, (config.width - 80) // cols, (config.height - 80) // rows))
    hl   = None
    last = vis.get("last_step") or {}
    if last.get("cell"):
        hl = tuple(last["cell"])
    chosen = set((vis.get("marked") or {}).get("chosen", []))

    parts = ['<g class="dp-table" transform="translate(50,40)">']
    for c in range(cols):
        parts.append(_text(c * cell + cell / 2, -8, c, config.muted, size=10, anchor="middle", mono=True))
    for r, row in enumerate(table):
        label_fill = config.colors["chosen"] if r - 1 in chosen else config.muted
        parts.append(_text(-10, r * cell + cell / 2 + 4, r, label_fill, size=10, anchor="end", mono=True))
        for c, val in enumerate(row):
            fill = config.colors["highlight"] if hl == (r, c) else "#1f2937"
            parts.append(f'<rect x="{c * cell}" y="{r * cell}" width="{cell}" height="{cell}" '
                         f'fill="{fill}" stroke="#374151" stroke-width="1"/>')
            if val is not None and cell >= 18:
                parts.append(_text(c * cell + cell / 2, r * cell + cell / 2 + 4, val, config.label_color,
                                   size=9, anchor="middle"))
    parts.append("</g>")
    return "\n".join(parts)


# ---------------------------------------------------------------------------
# Hash buckets
# ---------------------------------------------------------------------------
def _render_buckets(vis: Dict[str, Any], config: CanvasConfig) -> str:
    buckets = vis.get("buckets") or []
    row_h   = max(18, min(40, (config.height - 40) // max(1, len(buckets))))
    hl      = set(vis.get("highlighted") or [])
    parts   = ['<g class="buckets" transform="translate(40,20)">']
    for b, chain in enumerate(buckets):
        y    = b * row_h
        fill = config.colors["highlight"] if b in hl else config.colors["bar"]
        parts.append(f'<rect x="0" y="{y}" width="48" height="{row_h - 4}" fill="{fill}" rx="4"/>')
        parts.append(_text(24, y + row_h / 2 + 2, b, config.label_color, size=12, anchor="middle", mono=True))
        for k, key in enumerate(chain):
            kx = 80 + k * 70
            parts.append(f'<line x1="{kx - 30}" y1="{y + row_h / 2 - 2}" x2="{kx}" y2="{y + row_h / 2 - 2}" '
                         f'stroke="{config.node_stroke}" stroke-width="2"/>')
            parts.append(f'<rect x="{kx}" y="{y}" width="52" height="{row_h - 4}" fill="{config.colors["default"]}" '
                         f'stroke="{config.overlay_accent}" rx="4"/>')
            parts.append(_text(kx + 26, y + row_h / 2 + 2, key, config.label_color, size=12, anchor="middle"))
    parts.append("</g>")
    return "\n".join(parts)


# ---------------------------------------------------------------------------
# Union-find forest
# ---------------------------------------------------------------------------
def _render_forest(vis: Dict[str, Any], config: CanvasConfig) -> str:
    parents = vis.get("parents") or []
    n       = len(parents)
    if n == 0:
        return ""
    slot = (config.width - 80) / n
    hl   = set(vis.get("highlighted") or [])
    parts = ['<g class="forest">']
    for i, p in enumerate(parents):
        cx   = 40 + i * slot + slot / 2
        root = p == i
        fill = config.colors["root"] if root else config.colors["default"]
        if i in hl:
            fill = config.colors["highlight"]
        parts.append(f'<circle class="element" data-index="{i}" cx="{cx:.1f}" cy="200" r="{min(20, slot / 2.5):.1f}" '
                     f'fill="{fill}" stroke="{config.node_stroke}" stroke-width="2"/>')
        parts.append(_text(cx, 205, i, config.label_color, size=12, anchor="middle", weight="600"))
        if not root:
            px = 40 + p * slot + slot / 2
            bend = 120 - min(100, abs(p - i) * 12)
            parts.append(f'<path d="M {cx:.1f} 180 Q {(cx + px) / 2:.1f} {bend} {px:.1f} 180" fill="none" '
                         f'stroke="{config.overlay_accent}" stroke-width="2"/>')
        parts.append(_text(cx, 250, f"p={p}", config.muted, size=11, anchor="middle", mono=True))
    parts.append("</g>")
    return "\n".join(parts)


_RENDERERS = {
    "array":   _render_array,
    "graph":   _render_graph,
    "table":   _render_table,
    "buckets": _render_buckets,
    "forest":  _render_forest,
}
