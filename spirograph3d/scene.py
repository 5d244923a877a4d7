"""
Draw the 3D spirograph live with Manim.

    manim -pql spirograph3d/scene.py SpirographScene

Curve parameters come from PARAMS (any key accepted by the parameter store);
set them with set_params(...) before rendering. Rendering knobs live in CONFIG.
"""

import logging

import numpy as np
from manim import (
	DEGREES,
	WHITE,
	Circle,
	Dot3D,
	Line,
	PMobject,
	ThreeDAxes,
	ThreeDScene,
	VGroup,
	VMobject,
)

from spirograph3d.engine import SpirographEngine
from spirograph3d.logging_config import setup_logging

logger = logging.getLogger(__name__)

# Parameter update applied before the first frame
PARAMS = {}

CONFIG = {
	"DURATION": 10.0,          # seconds of animation to render
	"TARGET_SPAN": 8.0,        # the curve's outer diameter is scaled to this world span
	"SHOW_AXES": False,
	"FREE_PHI": 65.0,          # free camera elevation (degrees)
	"FREE_THETA": -45.0,       # free camera azimuth (degrees)
	"MIN_FOCAL_DISTANCE": 2.0, # keep the chase camera's perspective sane
	"GEAR_COLOR": "#ffdd44",
	"RING_COLOR": "#66bbff",
	"LINE_OPACITY": 0.9,
	"SHOW_PARTICLES": True,     # secondary-colored dot at every drawn point
	"PARTICLE_OPACITY": 0.8,
	"LOG_LEVEL": "INFO",
}


def set_config(**kwargs):
	"""Update CONFIG keys from kwargs."""
	for k, v in kwargs.items():
		if k in CONFIG:
			CONFIG[k] = v


def set_params(**kwargs):
	"""Merge kwargs into PARAMS (validated when the scene builds its engine)."""
	PARAMS.update(kwargs)


def fit_scale(params, target_span):
	"""Uniform scale that maps the curve's outer diameter onto target_span."""
	extent = abs(params.outer_radius - params.inner_radius) + params.pen_offset
	extent = max(extent, params.height_amplitude)
	if extent <= 0:
		return 1.0
	return float(target_span) / (2.0 * extent)


def to_scene(P, scale, rotation=0.0):
	"""Curve coordinates (Y up) -> Manim coordinates (Z up).

	``rotation`` spins the pattern about the curve's vertical axis first.
	Accepts (3,) or (N,3).
	"""
	P = np.asarray(P, dtype=float)
	x, y, z = P[..., 0], P[..., 1], P[..., 2]
	if rotation:
		c, s = np.cos(rotation), np.sin(rotation)
		x, z = x * c + z * s, -x * s + z * c
	return np.stack([x, -z, y], axis=-1) * scale


def particle_size(line_thickness):
	"""Dot size of the particle layer, half the line thickness."""
	return 0.5 * float(line_thickness)


def make_particles(snap):
	"""Empty point cloud styled with the snapshot's secondary color."""
	return PMobject(color=snap.secondary_color, stroke_width=particle_size(snap.line_thickness))


def set_particles(particles, pts, color):
	"""Replace the cloud's points with pts (N,3), all in one color."""
	particles.reset_points()
	if len(pts):
		particles.add_points(pts, color=color, alpha=CONFIG["PARTICLE_OPACITY"])
	return particles


def pose_to_orientation(pose, scale):
	"""CameraPose -> keyword arguments for ThreeDScene.set_camera_orientation.

	Returns None when the camera sits on its look target.
	"""
	cam = to_scene(pose.position, scale)
	target = to_scene(pose.look_target, scale)
	up = to_scene(pose.up, 1.0)
	offset = cam - target
	dist = float(np.linalg.norm(offset))
	if dist <= 1e-12:
		return None
	phi = float(np.arccos(np.clip(offset[2] / dist, -1.0, 1.0)))
	theta = float(np.arctan2(offset[1], offset[0]))
	# Screen axes of the un-rolled camera; gamma rolls screen-up onto the pose's up
	screen_up = np.array([-np.cos(phi) * np.cos(theta), -np.cos(phi) * np.sin(theta), np.sin(phi)])
	screen_right = np.array([-np.sin(theta), np.cos(theta), 0.0])
	gamma = float(np.arctan2(np.dot(up, screen_right), np.dot(up, screen_up)))
	return {
		"phi": phi,
		"theta": theta,
		"gamma": gamma,
		"focal_distance": max(dist, float(CONFIG["MIN_FOCAL_DISTANCE"])),
		"frame_center": target,
	}


class SpirographScene(ThreeDScene):
	"""Grow the curve frame by frame; optionally show gears and ride the curve."""

	def construct(self):
		setup_logging(CONFIG.get("LOG_LEVEL", "INFO"))
		engine = SpirographEngine()
		if PARAMS:
			engine.apply_parameter_update(PARAMS)
		snap = engine.store.snapshot()
		scale = fit_scale(snap.curve, CONFIG["TARGET_SPAN"])
		logger.info(f"Rendering spirograph {snap.curve} at scale {scale:.4f}")

		self.set_camera_orientation(phi=CONFIG["FREE_PHI"] * DEGREES, theta=CONFIG["FREE_THETA"] * DEGREES)
		if CONFIG.get("SHOW_AXES", False):
			half = 0.5 * CONFIG["TARGET_SPAN"]
			self.add(ThreeDAxes(
				x_range=(-half, half, 1.0),
				y_range=(-half, half, 1.0),
				z_range=(-half, half, 1.0),
				axis_config={"stroke_color": WHITE, "stroke_width": 1},
			))

		path = VMobject()
		path.set_fill(opacity=0)
		path.set_stroke(color=snap.primary_color, width=snap.line_thickness, opacity=CONFIG["LINE_OPACITY"])
		particles = make_particles(snap) if CONFIG.get("SHOW_PARTICLES", True) else None

		gears = None
		if snap.show_gears:
			R, r = snap.outer_radius, snap.inner_radius
			ring = Circle(radius=R * scale, color=CONFIG["RING_COLOR"], stroke_opacity=0.7)
			wheel = Circle(radius=r * scale, color=CONFIG["GEAR_COLOR"], stroke_opacity=0.7)
			spoke = Line(color=CONFIG["GEAR_COLOR"])
			arm = Line(color=snap.primary_color)
			pen = Dot3D(radius=0.05, color=snap.primary_color)
			gears = VGroup(ring, wheel, spoke, arm, pen)

		def update_frame(mob, dt):
			frame = engine.tick()
			rotation = 0.0 if frame.camera is not None else frame.pattern_rotation
			pts = to_scene(frame.points, scale, rotation)
			if len(pts) >= 2:
				mob.set_points_as_corners(pts)
			if particles is not None:
				set_particles(particles, pts, snap.secondary_color)
			if gears is not None and frame.gear is not None:
				_, wheel, spoke, arm, pen = gears
				center = to_scene(frame.gear.center, scale, rotation)
				tip = to_scene(frame.gear.pen, scale, rotation)
				radius = frame.gear.inner_ring[1] * scale
				wheel.move_to(center)
				angle = frame.gear.rotation + rotation
				spoke.put_start_and_end_on(center, center + radius * np.array([np.cos(angle), np.sin(angle), 0.0]))
				# A zero-length line cannot be repositioned later
				if not np.allclose(center, tip):
					arm.put_start_and_end_on(center, tip)
				pen.move_to(tip)
			if frame.camera is not None:
				orientation = pose_to_orientation(frame.camera, scale)
				if orientation is not None:
					self.set_camera_orientation(**orientation)

		path.add_updater(update_frame)
		self.add(path)
		if particles is not None:
			self.add(particles)
		if gears is not None:
			self.add(gears)
		self.wait(CONFIG["DURATION"])
		path.clear_updaters()
		logger.info(f"Rendered {len(engine.drawing)} points (t={engine.t:.3f})")
