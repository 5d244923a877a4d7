"""
Run the spirograph headless and print what was drawn.

    python -m spirograph3d --ticks 500 --outer-radius 80 --inner-radius 40

To watch it instead, render the manim scene:
    manim -pql spirograph3d/scene.py SpirographScene
"""

import argparse

import numpy as np

from .engine import SpirographEngine
from .errors import InvalidParameterError
from .logging_config import setup_logging

# (flag, parameter key, type, help)
PARAM_FLAGS = (
	("--outer-radius", "outer_radius", float, "Radius R of the fixed ring"),
	("--inner-radius", "inner_radius", float, "Radius r of the rolling gear (non-zero)"),
	("--pen-offset", "pen_offset", float, "Distance d of the pen from the gear center"),
	("--height-amplitude", "height_amplitude", float, "Amplitude h of the vertical wave"),
	("--speed", "speed", float, "Drawing speed (> 0)"),
	("--max-points", "max_points", int, "Stop drawing after this many points"),
	("--camera-height", "camera_height_offset", float, "Camera height above the curve"),
	("--camera-distance", "camera_longitudinal_offset", float, "Camera offset along the tangent"),
	("--camera-tilt", "camera_tilt_blend", float, "Bank blend in [0, 1]"),
	("--camera-lag", "camera_lag", float, "How far (in t) the camera trails the pen"),
)

SWITCH_FLAGS = (
	("--show-gears", "show_gears", "Evaluate the driving gear each frame"),
	("--tangent-follow", "tangent_follow_enabled", "Ride the curve with the chase camera"),
	("--auto-rotate", "auto_rotate", "Slowly spin the pattern while not following"),
)


def _parse_cli(argv=None):
	parser = argparse.ArgumentParser(description="Draw a 3D spirograph headless and summarize the result.")
	for flag, key, kind, help_text in PARAM_FLAGS:
		parser.add_argument(flag, dest=key, type=kind, help=help_text)
	for flag, key, help_text in SWITCH_FLAGS:
		parser.add_argument(flag, dest=key, action=argparse.BooleanOptionalAction, default=None, help=help_text)
	parser.add_argument("--ticks", type=int, default=500, help="Number of animation frames to simulate")
	parser.add_argument("--reset-after", type=int, metavar="N", help="Call reset() before frame N")
	parser.add_argument("--clear-after", type=int, metavar="N", help="Call clear() before frame N")
	parser.add_argument("--randomize", action="store_true", help="Start from a random curve shape")
	parser.add_argument("--seed", type=int, help="Seed for --randomize")
	parser.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
	parser.add_argument("--log-file", type=str, help="Also write logs to this file")
	return parser, parser.parse_args(argv)


def collect_update(args):
	"""Partial parameter update holding only the flags that were given."""
	keys = [key for _, key, _, _ in PARAM_FLAGS] + [key for _, key, _ in SWITCH_FLAGS]
	return {key: getattr(args, key) for key in keys if getattr(args, key) is not None}


def _print_summary(engine):
	P = engine.points
	print(f"Frames drawn: t={engine.t:.4f}, points={len(P)}, drawing={engine.is_drawing}")
	if len(P):
		mins = P.min(axis=0)
		maxs = P.max(axis=0)
		spans = maxs - mins
		print("Point ranges:")
		print(f"  x: [{mins[0]:.3e}, {maxs[0]:.3e}] span={spans[0]:.3e}")
		print(f"  y: [{mins[1]:.3e}, {maxs[1]:.3e}] span={spans[1]:.3e}")
		print(f"  z: [{mins[2]:.3e}, {maxs[2]:.3e}] span={spans[2]:.3e}")
	if engine.camera.following:
		pose = engine.camera.pose
		print(f"Camera (t={engine.camera.state.camera_t:.4f}):")
		print(f"  position: {np.array2string(pose.position, precision=3)}")
		print(f"  look at:  {np.array2string(pose.look_target, precision=3)}")
		print(f"  up:       {np.array2string(pose.up, precision=3)}")


def main(argv=None):
	parser, args = _parse_cli(argv)
	if args.ticks < 0:
		parser.error("--ticks must be >= 0")
	setup_logging(args.log_level, args.log_file)

	engine = SpirographEngine()
	try:
		if args.randomize:
			engine.randomize(np.random.default_rng(args.seed))
		update = collect_update(args)
		if update:
			engine.apply_parameter_update(update)
	except InvalidParameterError as e:
		parser.error(str(e))

	print("Configuration:")
	snapshot = engine.store.snapshot().as_dict()
	print({k: snapshot[k] for k in sorted(snapshot)})

	for frame in range(args.ticks):
		if frame == args.reset_after:
			engine.reset()
		if frame == args.clear_after:
			engine.clear()
		engine.tick()

	_print_summary(engine)
	return 0
