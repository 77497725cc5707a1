import json

import numpy as np

from path_export import bounding_box, curves_to_list, path_data, write_json, write_svg

CURVES = [
    np.array([[0.0, 0.0], [3.3333333, 3.3333333], [5.2859548, 10.0], [10.0, 10.0]]),
    np.array([[10.0, 10.0], [13.3333333, 10.0], [7.6429774, 2.3570226], [10.0, 0.0]]),
]


def test_path_data():
    d = path_data(CURVES, precision=2)
    assert d == "M 0 0 C 3.33 3.33 5.29 10 10 10 C 13.33 10 7.64 2.36 10 0"


def test_path_data_negative_zero():
    curve = np.array([[0.0, 0.0], [-0.0001, 1.0], [1.0, -0.0], [2.0, 0.0]])
    assert path_data([curve], precision=2) == "M 0 0 C 0 1 1 0 2 0"


def test_path_data_empty():
    assert path_data([]) == ""


def test_curves_to_list():
    assert curves_to_list(CURVES[:1]) == [[[0.0, 0.0], [3.3333333, 3.3333333], [5.2859548, 10.0], [10.0, 10.0]]]


def test_bounding_box():
    low, high = bounding_box([CURVES, []])
    np.testing.assert_allclose(low, [0.0, 0.0])
    np.testing.assert_allclose(high, [13.3333333, 10.0])


def test_write_svg(tmp_path):
    path = tmp_path / "out.svg"
    write_svg(path, [CURVES, [], CURVES[:1]], stroke_width=2.0, precision=2)
    text = path.read_text()
    assert text.startswith("<?xml")
    assert text.count("<path ") == 2
    assert 'viewBox="-2 -2 17.33 14"' in text
    assert 'stroke-width="2"' in text


def test_write_json(tmp_path):
    path = tmp_path / "out.json"
    write_json(path, [CURVES, []])
    data = json.loads(path.read_text())
    assert len(data["strokes"]) == 2
    assert data["strokes"][1] == []
    np.testing.assert_allclose(data["strokes"][0], np.stack(CURVES))
