import json
import pathlib

import numpy as np
from scipy.ndimage import gaussian_filter1d


def as_points(points):
    # Convert any sequence of (x, y) pairs to a float (n, 2) array
    points = np.asarray(points, dtype=float)
    if points.size == 0:
        return points.reshape(0, 2)
    if points.ndim != 2 or points.shape[1] != 2:
        raise ValueError(f"points must have shape (n, 2), got {points.shape}")
    return points


def dedupe_points(points):
    # Remove points exactly equal to an earlier point, keep first occurrences
    points = as_points(points)
    seen = set()
    keep = []
    for i, point in enumerate(map(tuple, points.tolist())):
        if point not in seen:
            seen.add(point)
            keep.append(i)
    return points[keep]


def simplify_stroke(points, tolerance=1.0):
    # Simplify the stroke using the Ramer-Douglas-Peucker algorithm
    points = as_points(points)
    if tolerance <= 0 or len(points) < 3:
        return points

    keep = np.zeros(len(points), dtype=bool)
    keep[0] = keep[-1] = True
    ranges = [(0, len(points) - 1)]
    while ranges:
        first, last = ranges.pop()
        if last - first < 2:
            continue

        # Find the point with the maximum distance from the line
        start, end = points[first], points[last]
        offsets = points[first + 1 : last] - start
        line_vec = end - start
        line_len = np.linalg.norm(line_vec)
        if line_len == 0:
            # closed loop, measure from the shared endpoint
            distances = np.linalg.norm(offsets, axis=1)
        else:
            # perpendicular distance
            distances = np.abs(offsets[:, 0] * line_vec[1] - offsets[:, 1] * line_vec[0]) / line_len

        split_idx = int(np.argmax(distances))
        if distances[split_idx] < tolerance:
            continue

        split = first + 1 + split_idx
        keep[split] = True
        ranges.append((split, last))
        ranges.append((first, split))

    return points[keep]


def smooth_stroke(points, sigma=1.0):
    """Gaussian smoothing along the stroke.

    The first and last points are pinned so the fitted path still starts and
    ends where the pen went down and up.
    """
    points = as_points(points)
    if sigma <= 0 or len(points) < 3:
        return points

    smoothed = gaussian_filter1d(points, sigma=sigma, axis=0, mode="nearest")
    smoothed[0] = points[0]
    smoothed[-1] = points[-1]
    return smoothed


def _is_point(item):
    return (
        isinstance(item, (list, tuple))
        and len(item) == 2
        and all(isinstance(v, (int, float)) for v in item)
    )


def load_strokes(path):
    """Read strokes from a file.

    ``.json`` files hold either a single stroke ``[[x, y], ...]``, a list of
    strokes, or an object with a ``"strokes"`` key. Any other suffix is read
    as text with one point per line, separated by whitespace (or commas for
    ``.csv``), and yields a single stroke.
    """
    path = pathlib.Path(path)
    if path.suffix.lower() == ".json":
        with open(path, "r") as f:
            data = json.load(f)
        if isinstance(data, dict):
            if "strokes" not in data:
                raise ValueError(f"{path}: expected a 'strokes' key")
            data = data["strokes"]
        if not isinstance(data, list):
            raise ValueError(f"{path}: expected a list of strokes")
        if data and _is_point(data[0]):
            data = [data]
        return [as_points(stroke) for stroke in data]

    delimiter = "," if path.suffix.lower() == ".csv" else None
    points = np.loadtxt(path, delimiter=delimiter, comments="#", ndmin=2)
    return [as_points(points)]
