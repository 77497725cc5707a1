import json

import numpy as np


def _fmt(value, precision):
    text = f"{value:.{precision}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text == "-0":
        text = "0"
    return text


def path_data(curves, precision=3):
    # SVG path "d" attribute for a chain of cubic curves
    if not curves:
        return ""
    start = curves[0][0]
    commands = [f"M {_fmt(start[0], precision)} {_fmt(start[1], precision)}"]
    for curve in curves:
        coords = " ".join(f"{_fmt(x, precision)} {_fmt(y, precision)}" for x, y in curve[1:])
        commands.append(f"C {coords}")
    return " ".join(commands)


def curves_to_list(curves):
    return [np.asarray(curve, dtype=float).tolist() for curve in curves]


def bounding_box(strokes_curves):
    # Bounds of every control point, the curves lie inside their control hull
    coords = [np.asarray(curve, dtype=float) for curves in strokes_curves for curve in curves]
    if not coords:
        return np.zeros(2), np.zeros(2)
    coords = np.concatenate(coords, axis=0)
    return coords.min(axis=0), coords.max(axis=0)


def write_svg(path, strokes_curves, stroke_width=1.0, precision=3, padding=None):
    if padding is None:
        padding = stroke_width
    low, high = bounding_box(strokes_curves)
    low = low - padding
    size = np.maximum(high + padding - low, 1.0)

    view_box = " ".join(_fmt(v, precision) for v in (*low, *size))
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="{view_box}" '
        f'width="{_fmt(size[0], precision)}" height="{_fmt(size[1], precision)}">',
    ]
    for curves in strokes_curves:
        if not curves:
            continue
        lines.append(
            f'  <path d="{path_data(curves, precision)}" fill="none" stroke="black" '
            f'stroke-width="{_fmt(stroke_width, precision)}" stroke-linecap="round" stroke-linejoin="round"/>'
        )
    lines.append("</svg>")

    with open(path, "w") as f:
        f.write("\n".join(lines) + "\n")


def write_json(path, strokes_curves):
    with open(path, "w") as f:
        json.dump({"strokes": [curves_to_list(curves) for curves in strokes_curves]}, f, indent=2)
