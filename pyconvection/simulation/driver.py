"""
Minimal time stepping driver around a ConvectiveParameterization.

The shallow water dynamics are not part of PyConvection: the driver takes an
`advance(h, forcing, dt)` callable that integrates the height over one step
given the convective forcing. The default, euler_height_step, integrates the
forcing alone (no dynamics), which is what the mass budget validation needs.

Each iteration:
1. on_step_start(h, t): convective state update and halo refresh
2. forcing_field(t, h): height source on every cell
3. h = advance(h, forcing, dt)
4. clock update, then every callback whose interval divides the iteration

Author: B.G.
"""

import logging

import numpy as np

logger = logging.getLogger(__name__)


def euler_height_step(h, forcing, dt):
	"""Forward Euler step of dh/dt = forcing."""
	return h + dt * forcing


class Simulation:
	"""
	Time loop calling the convective scheme once per step.

	Args:
		parameterization (ConvectiveParameterization): the convective scheme
		height (np.ndarray): (ny, nx) initial height, copied
		dt (float): time step
		stop_time (float): the loop stops once time >= stop_time
		advance (callable, optional): advance(h, forcing, dt) -> new h. Default: euler_height_step
		progress_interval (int, optional): iterations between progress log lines, 0 disables. Default: 100
		start_time (float, optional): initial time. Default: 0

	Attributes:
		h (np.ndarray): current height
		time (float): current time
		iteration (int): number of completed steps
		callbacks (dict): name -> (func, interval); func receives the simulation

	Author: B.G.
	"""

	def __init__(self, parameterization, height, dt, stop_time, advance = euler_height_step,
		progress_interval = 100, start_time = 0.):

		if not dt > 0:
			raise ValueError(f"dt must be > 0, got {dt}")

		self.parameterization = parameterization
		self.grid = parameterization.grid
		self.h = np.array(self.grid.check_field(height, "height"), dtype = np.float64)
		self.dt = float(dt)
		self.stop_time = float(stop_time)
		self.start_time = float(start_time)
		self.advance = advance
		self.iteration = 0
		self.forcing = None
		self.callbacks = {}

		if progress_interval:
			self.add_callback("progress", progress, progress_interval)

	@property
	def time(self):
		# from the iteration count, to avoid accumulating round off
		return self.start_time + self.iteration * self.dt

	def add_callback(self, name, func, interval = 1):
		"""Run func(simulation) after every `interval` completed iterations."""
		if int(interval) < 1:
			raise ValueError(f"Callback interval must be >= 1, got {interval}")
		self.callbacks[name] = (func, int(interval))

	def time_step(self):
		"""Advance the simulation by one step."""
		t = self.time
		self.parameterization.on_step_start(self.h, t)
		self.forcing = self.parameterization.forcing_field(t, self.h)
		self.h = self.advance(self.h, self.forcing, self.dt)
		self.iteration += 1

		for func, interval in self.callbacks.values():
			if self.iteration % interval == 0:
				func(self)

	def run(self):
		"""Step until stop_time is reached. Returns the final height."""
		logger.info("Running from t=%.1f to t=%.1f with dt=%.3f", self.time, self.stop_time, self.dt)
		while self.time < self.stop_time - 1e-9 * self.dt:
			self.time_step()
		logger.info("Simulation stopped at iteration %d, time %.1f", self.iteration, self.time)
		return self.h


def progress(sim):
	"""Log iteration, time, step and height extrema."""
	logger.info("Iter: %d, time: %.1f, Δt: %.3f, max|h|: %.2f, min|h|: %.2f, convecting: %d",
		sim.iteration, sim.time, sim.dt, np.abs(sim.h).max(), np.abs(sim.h).min(),
		sim.parameterization.tracker.count_convecting())
