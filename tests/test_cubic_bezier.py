import numpy as np

from cubic_bezier import bezier_point, hodograph, q, q_prime, q_prime_prime, straight_bezier

BEZIER = np.array([[0.0, 0.0], [1.0, 3.0], [4.0, 3.0], [5.0, -1.0]])


def _q_reference(b, t):
    s = 1.0 - t
    return s**3 * b[0] + 3 * s**2 * t * b[1] + 3 * s * t**2 * b[2] + t**3 * b[3]


def test_q_hits_end_points():
    np.testing.assert_array_equal(q(BEZIER, 0.0), BEZIER[0])
    np.testing.assert_array_equal(q(BEZIER, 1.0), BEZIER[3])


def test_q_matches_bernstein_form():
    for t in [0.1, 0.25, 0.5, 0.9]:
        np.testing.assert_allclose(q(BEZIER, t), _q_reference(BEZIER, t))


def test_q_extrapolates_outside_unit_interval():
    for t in [-0.5, 1.5, 2.0]:
        np.testing.assert_allclose(q(BEZIER, t), _q_reference(BEZIER, t))


def test_q_is_vectorised_over_t():
    t = np.linspace(0, 1, 7)
    points = q(BEZIER, t)
    assert points.shape == (7, 2)
    np.testing.assert_allclose(points[3], _q_reference(BEZIER, t[3]))


def test_q_prime_matches_closed_form():
    p0, c1, c2, p1 = BEZIER
    for t in [0.0, 0.3, 0.8, 1.0, 1.4]:
        s = 1.0 - t
        expected = 3 * s**2 * (c1 - p0) + 6 * s * t * (c2 - c1) + 3 * t**2 * (p1 - c2)
        np.testing.assert_allclose(q_prime(BEZIER, t), expected)


def test_q_prime_matches_finite_difference():
    h = 1e-6
    t = 0.37
    numeric = (q(BEZIER, t + h) - q(BEZIER, t - h)) / (2 * h)
    np.testing.assert_allclose(q_prime(BEZIER, t), numeric, rtol=1e-6)


def test_q_prime_prime_matches_closed_form():
    p0, c1, c2, p1 = BEZIER
    for t in [0.0, 0.5, 1.0, -0.2]:
        expected = 6 * (1 - t) * (p0 - 2 * c1 + c2) + 6 * t * (c1 - 2 * c2 + p1)
        np.testing.assert_allclose(q_prime_prime(BEZIER, t), expected, atol=1e-12)


def test_hodograph_scales_by_degree():
    np.testing.assert_array_equal(hodograph(BEZIER), 3 * np.diff(BEZIER, axis=0))


def test_straight_bezier_runs_along_chord():
    line = straight_bezier(np.array([0.0, 0.0]), np.array([20.0, 0.0]))
    np.testing.assert_array_equal(line, [[0, 0], [0, 0], [20, 0], [20, 0]])
    points = q(line, np.array([0.0, 0.5, 1.0]))
    np.testing.assert_allclose(points, [[0, 0], [10, 0], [20, 0]])


def test_bezier_point_lower_degrees():
    line = np.array([[0.0, 0.0], [2.0, 4.0]])
    np.testing.assert_allclose(bezier_point(1, line, 0.25), [0.5, 1.0])
    quad = np.array([[0.0, 0.0], [1.0, 2.0], [2.0, 0.0]])
    np.testing.assert_allclose(bezier_point(2, quad, 0.5), [1.0, 1.0])
