import pathlib
import argparse
import json

import numpy as np
import tqdm.auto as tqdm

from fit_curves import fit_curve
from path_export import write_json, write_svg
from strokes import load_strokes, simplify_stroke, smooth_stroke

DEFAULT_SETTINGS = {
    "tolerance": 1.0,
    "simplify": 0.0,
    "smooth": 0.0,
    "precision": 3,
    "stroke_width": 1.0,
}


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Fit digitized strokes with piecewise cubic Bezier curves"
    )
    parser.add_argument("path", type=pathlib.Path, help="Path to the input strokes (.json, .csv or .txt)")
    parser.add_argument("output", type=pathlib.Path, help="Path to the output file (.svg or .json)")
    parser.add_argument(
        "--params", type=pathlib.Path, default=None, help="Path to the parameters file"
    )
    parser.add_argument(
        "--tolerance",
        type=float,
        default=None,
        help="Largest allowed distance between an input point and the fitted curve",
    )
    parser.add_argument(
        "--simplify",
        type=float,
        default=None,
        help="Ramer-Douglas-Peucker tolerance applied before fitting (0 disables)",
    )
    parser.add_argument(
        "--smooth",
        type=float,
        default=None,
        help="Standard deviation, in points, of the gaussian smoothing applied before fitting (0 disables)",
    )
    parser.add_argument(
        "--precision", type=int, default=None, help="Decimals written to the SVG output"
    )
    parser.add_argument(
        "--format",
        default=None,
        choices=["svg", "json"],
        help="Output format, guessed from the output suffix when omitted",
    )
    parser.add_argument(
        "--debug", action="store_true", help="Print per stroke statistics"
    )
    return parser, parser.parse_args(argv)


def get_settings(params_path, overrides=None):
    settings = dict(DEFAULT_SETTINGS)
    if params_path is not None:
        with open(params_path, "r") as f:
            params = json.load(f)
        if not isinstance(params, dict):
            raise ValueError(f"{params_path}: parameters must be a JSON object")
        unknown = set(params) - set(DEFAULT_SETTINGS)
        if unknown:
            raise ValueError(f"{params_path}: unknown parameters {sorted(unknown)}")
        settings.update(params)

    for key, value in (overrides or {}).items():
        if value is not None:
            settings[key] = value

    if not np.isfinite(settings["tolerance"]) or settings["tolerance"] <= 0:
        raise ValueError(f"tolerance must be a finite positive number, got {settings['tolerance']}")
    return settings


def get_format(output_path, output_format=None):
    if output_format is None:
        output_format = "json" if output_path.suffix.lower() == ".json" else "svg"
    if output_format not in ("svg", "json"):
        raise ValueError(f"unsupported output format {output_format!r}")
    return output_format


def fit_strokes(strokes, settings, debug=False):
    fitted = []
    skipped = 0
    num_segments = 0

    bar = tqdm.tqdm(total=len(strokes))
    for i, stroke in enumerate(strokes):
        points = smooth_stroke(stroke, sigma=settings["smooth"])
        points = simplify_stroke(points, tolerance=settings["simplify"])
        curves = fit_curve(points, error=settings["tolerance"])
        if not curves:
            skipped += 1
        fitted.append(curves)
        num_segments += len(curves)

        if debug:
            print(f"Stroke {i}: {len(stroke)} points, {len(points)} after preprocessing, {len(curves)} segments")
        bar.update(1)
        bar.set_description(f"Segments: {num_segments}")
    bar.close()

    return fitted, skipped


def main(argv=None):
    parser, args = parse_args(argv)
    print(f"Input strokes path: {args.path}")
    print(f"Output path: {args.output}")

    try:
        settings = get_settings(
            args.params,
            {
                "tolerance": args.tolerance,
                "simplify": args.simplify,
                "smooth": args.smooth,
                "precision": args.precision,
            },
        )
        strokes = load_strokes(args.path)
    except (OSError, ValueError) as e:
        parser.error(str(e))

    output_format = get_format(args.output, args.format)
    print(f"Fitting {len(strokes)} strokes with tolerance {settings['tolerance']}")

    fitted, skipped = fit_strokes(strokes, settings, debug=args.debug)
    if skipped:
        print(f"Skipped {skipped} strokes with fewer than two distinct points")

    match output_format:
        case "svg":
            write_svg(
                args.output,
                fitted,
                stroke_width=settings["stroke_width"],
                precision=settings["precision"],
            )
        case "json":
            write_json(args.output, fitted)

    print(f"Fitted {sum(len(curves) for curves in fitted)} segments, saved to {args.output}")


if __name__ == "__main__":
    main()
