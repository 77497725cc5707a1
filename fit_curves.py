import numpy as np

from cubic_bezier import q, q_prime, q_prime_prime, straight_bezier
from strokes import as_points, dedupe_points

MAX_ITERATIONS = 20
# Number of samples used to approximate arc length along a candidate curve
GRANULARITY = 10


def fit_curve(points, error):
    """Fit a piecewise cubic Bezier path to a sequence of 2D points.

    ``error`` is the largest distance, in the units of ``points``, that any
    point may lie from its position on the fitted path. Returns a list of
    (4, 2) arrays holding ``p0, c1, c2, p1``; consecutive curves share their
    end point. Fewer than two distinct points yield an empty list.
    """
    if not np.isfinite(error) or error <= 0:
        raise ValueError(f"error must be a finite positive number, got {error}")

    points = as_points(points)
    if not np.all(np.isfinite(points)):
        raise ValueError("points must have finite coordinates")

    points = dedupe_points(points)
    if len(points) < 2:
        return []

    t_hat1 = normalize(points[1] - points[0])
    t_hat2 = normalize(points[-2] - points[-1])

    return fit_cubic(points, t_hat1, t_hat2, error)


def normalize(v):
    length = np.linalg.norm(v)
    if length == 0:
        return np.zeros_like(v, dtype=float)
    return v / length


def fit_cubic(points, t_hat1, t_hat2, error):
    """Fit ``points`` between the end tangents ``t_hat1`` and ``t_hat2``.

    Regions that cannot be fit by a single curve are split at their worst
    point and both halves are fit again. Pending regions are kept on an
    explicit stack, left half on top, so long strokes do not run into the
    recursion limit and curves come out in stroke order.
    """
    points = as_points(points)
    beziers = []
    pending = [(0, len(points) - 1, np.asarray(t_hat1, dtype=float), np.asarray(t_hat2, dtype=float))]

    while pending:
        first, last, left_tangent, right_tangent = pending.pop()
        region = points[first : last + 1]

        bezier, split_point = fit_region(region, left_tangent, right_tangent, error)
        if bezier is not None:
            beziers.append(bezier)
            continue

        # fitting failed split and retry, the split point is shared by both halves
        to_center = center_tangent(region, split_point)
        split = first + split_point
        pending.append((split, last, -to_center, right_tangent))
        pending.append((first, split, left_tangent, to_center))

    return beziers


def fit_region(points, t_hat1, t_hat2, error):
    # Returns (bezier, None) when the region is fit, (None, split_point) otherwise
    num_points = points.shape[0]

    # Use heuristic if region has only two points
    if num_points == 2:
        distance = np.linalg.norm(points[1] - points[0]) / 3.0
        bezier = np.array([points[0], points[0] + t_hat1 * distance, points[1] + t_hat2 * distance, points[1]])
        return bezier, None

    # Errors are squared distances
    target_error = error**2
    iteration_error = target_error * 4

    u = chord_length_parametrization(points)
    bezier = generate_bezier(points, u, t_hat1, t_hat2)

    max_error, split_point = compute_max_error(bezier, points, u)

    if max_error == 0 or max_error < target_error:
        return bezier, None

    # If error not too large, try reparameterization and iteration
    if max_error < iteration_error:
        u_prime = u
        prev_error, prev_split = max_error, split_point
        for _ in range(MAX_ITERATIONS):
            u_prime = reparameterize(bezier, points, u_prime)
            bezier = generate_bezier(points, u_prime, t_hat1, t_hat2)

            # always compare against the chord-length parameters of the polyline
            max_error, split_point = compute_max_error(bezier, points, u)
            if max_error < target_error:
                return bezier, None

            # stop once the fit no longer improves
            if split_point == prev_split and 0.9999 <= max_error / prev_error <= 1.0001:
                break

            prev_error, prev_split = max_error, split_point

    return None, min(max(split_point, 1), num_points - 2)


def chord_length_parametrization(points):
    # Compute the chord length for each segment
    lengths = np.linalg.norm(points[1:] - points[:-1], axis=1)
    # Compute the cumulative length
    cumulative_lengths = np.insert(np.cumsum(lengths), 0, 0)
    # Normalize to get parameters in [0, 1]
    return cumulative_lengths / cumulative_lengths[-1]


def center_tangent(points, split_point):
    # Tangent at the split point from the chord between its two neighbours
    center = points[split_point - 1] - points[split_point + 1]
    if not np.any(center):
        # neighbours coincide, use the perpendicular of the chord to the split point
        center = points[split_point - 1] - points[split_point]
        center = np.array([-center[1], center[0]])
    return normalize(center)


def reparameterize(bezier, points, u):
    return newton_raphson_root_find(bezier, points, u)


def newton_raphson_root_find(bezier, point, u):
    """One Newton-Raphson step towards the parameter closest to ``point``.

    Solves ``(Q(u) - p) . Q'(u) = 0``. Works on a single point and scalar
    ``u`` or on (n, 2) points with n parameters. A zero denominator leaves
    the parameter unchanged.
    """
    d = q(bezier, u) - point
    Q1_u = q_prime(bezier, u)
    Q2_u = q_prime_prime(bezier, u)

    numerator = np.sum(d * Q1_u, axis=-1)
    denominator = np.sum(Q1_u * Q1_u, axis=-1) + 2 * np.sum(d * Q2_u, axis=-1)

    with np.errstate(divide="ignore", invalid="ignore"):
        return np.where(denominator != 0, u - numerator / denominator, u)


def compute_max_error(bezier, points, u):
    """Largest squared distance between ``points`` and the curve.

    Each point is compared with the curve point lying at the same relative
    arc length as the point's chord-length parameter. Returns the error and
    the index of the first point reaching it.
    """
    t_dist_map = map_t_to_relative_distances(bezier, GRANULARITY)
    t = find_t(u, t_dist_map)

    # Just finding the max, so no need for the square root
    error = np.sum((q(bezier, t) - points) ** 2, axis=-1)
    split_point = int(np.argmax(error))
    max_error = float(error[split_point])
    if max_error == 0:
        split_point = len(points) // 2

    return max_error, split_point


def map_t_to_relative_distances(bezier, n):
    # Cumulative length fraction of the curve at t = i / n, for i in 0..n
    samples = q(bezier, np.arange(n + 1) / n)
    lengths = np.linalg.norm(samples[1:] - samples[:-1], axis=1)
    cumulative_lengths = np.insert(np.cumsum(lengths), 0, 0)
    return cumulative_lengths / cumulative_lengths[-1]


def find_t(u, t_dist_map):
    # Interpolate t between the two samples bracketing the length fraction u
    u = np.asarray(u, dtype=float)
    n = len(t_dist_map) - 1

    i = np.clip(np.searchsorted(t_dist_map, u, side="left"), 1, n)
    len_min = t_dist_map[i - 1]
    len_max = t_dist_map[i]
    t_min = (i - 1) / n
    t_max = i / n

    span = len_max - len_min
    with np.errstate(divide="ignore", invalid="ignore"):
        t = np.where(span > 0, (u - len_min) / span * (t_max - t_min) + t_min, t_min)

    return np.where(u < 0, 0.0, np.where(u > 1, 1.0, t))


def generate_bezier(points, u, t_hat1, t_hat2):
    """Least-squares cubic through the end points of ``points``.

    The inner control points are constrained to ``p0 + alpha_l * t_hat1`` and
    ``p1 + alpha_r * t_hat2``; the two scales are solved with Cramer's rule.
    Unusable scales (singular system, negative or vanishing alpha) fall back
    to a third of the chord length along each tangent.
    """
    first_point = points[0]
    last_point = points[-1]

    u = np.asarray(u, dtype=float)
    A0 = np.outer(3 * u * (1.0 - u) ** 2, t_hat1)
    A1 = np.outer(3 * u**2 * (1.0 - u), t_hat2)

    C = np.zeros((2, 2))
    X = np.zeros((2,))

    C[0, 0] = np.sum(np.vecdot(A0, A0))
    C[0, 1] = np.sum(np.vecdot(A0, A1))
    C[1, 0] = C[0, 1]
    C[1, 1] = np.sum(np.vecdot(A1, A1))

    # Difference between the points and a straight line at each u
    tmp = points - q(straight_bezier(first_point, last_point), u)

    X[0] = np.sum(np.vecdot(A0, tmp))
    X[1] = np.sum(np.vecdot(A1, tmp))

    det_C0_C1 = C[0, 0] * C[1, 1] - C[1, 0] * C[0, 1]
    det_C0_X = C[0, 0] * X[1] - C[1, 0] * X[0]
    det_X_C1 = X[0] * C[1, 1] - X[1] * C[0, 1]

    alpha_l = 0.0 if det_C0_C1 == 0 else det_X_C1 / det_C0_C1
    alpha_r = 0.0 if det_C0_C1 == 0 else det_C0_X / det_C0_C1

    # if alpha is negative or vanishing, use heuristic
    seg_length = np.linalg.norm(first_point - last_point)
    epsilon = 1.0e-6 * seg_length
    if alpha_l < epsilon or alpha_r < epsilon:
        alpha_l = alpha_r = seg_length / 3.0

    bezier = np.array([first_point, first_point + t_hat1 * alpha_l, last_point + t_hat2 * alpha_r, last_point])

    return bezier
