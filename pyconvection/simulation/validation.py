"""
Validation of the mass added (or removed) by a single convective event.

Integrating the forcing of one event over its duration and over the plane:

	spatial integral of the stencil    q0 / 2
	time integral of (1 - q**2)/tau_c  2 / 3

so one event exchanges q0 / 3 of mass with the layer, added in free
atmosphere mode and removed in boundary layer mode.

single_event_mass_budget triggers exactly one cell on an otherwise quiet
periodic domain, switches radiative cooling and relaxation off, integrates
the height forcing over tau_c with forward Euler and compares the measured
mass change with this expectation.

Based on:
Yang, D., and A. P. Ingersoll, 2013: Triggered Convection, Gravity Waves, and
the MJO: A Shallow-Water Model. J. Atmos. Sci., 70, 2476-2486 (equation 4).

Author: B.G.
"""

import logging
from typing import NamedTuple

import numpy as np

from ..convection import ConvectiveParameterization
from ..convection.reference import time_pulse
from ..grid import Grid
from ..parameters import ConvectionParameters
from .driver import Simulation

logger = logging.getLogger(__name__)


class MassBudget(NamedTuple):
	measured: float
	expected_discrete: float
	expected_analytic: float

	@property
	def relative_error(self):
		"""Measured mass against the analytic expectation."""
		return abs(self.measured - self.expected_analytic) / abs(self.expected_analytic)


def single_event_mass_budget(q0 = 1.0e9, convective_radius = 20000.0, tau_c = 50.0, h_threshold = 40.0,
	boundary_layer = False, cells_per_radius = 10, nx = 32, ny = 32, nsteps = 100, strategy = None):
	"""
	Run one isolated convective event and measure the mass it exchanges.

	Args:
		q0 (float): heating amplitude
		convective_radius (float): event radius R
		tau_c (float): event duration
		h_threshold (float): trigger height
		boundary_layer (bool): mode of the scheme
		cells_per_radius (int): R / dx
		nx, ny (int): grid size, must exceed the stencil diameter
		nsteps (int): forward Euler steps over tau_c
		strategy (str, optional): execution strategy

	Returns:
		MassBudget: measured mass change, expectation from the discrete stencil
			and time steps, and the analytic q0 / 3 (signed)

	Author: B.G.
	"""
	params = ConvectionParameters(tau_c = tau_c, h_threshold = h_threshold, convective_radius = convective_radius,
		q0 = q0, boundary_layer = boundary_layer)
	dx = convective_radius / cells_per_radius
	grid = Grid.for_radius(nx, ny, dx, dx, convective_radius)
	conv = ConvectiveParameterization(grid, params, strategy = strategy)

	# quiet background away from the threshold, one triggering cell
	margin = 5.0
	h0 = np.full(grid.rshp, h_threshold + params.sign * margin)
	h0[ny // 2, nx // 2] = h_threshold - params.sign * 1.0

	dt = tau_c / nsteps
	sim = Simulation(conv, h0, dt, stop_time = tau_c, progress_interval = 0)
	h = sim.run()
	conv.destroy()

	cell_area = grid.dx * grid.dy
	measured = float((h - h0).sum()) * cell_area
	time_factor = float(np.sum(np.maximum(time_pulse(np.arange(nsteps) * dt, tau_c), 0.0))) * dt / tau_c
	expected_discrete = params.sign * conv.stencil.total_mass() * time_factor
	expected_analytic = params.sign * q0 / 3.0

	logger.info("Single event mass: measured %.6e, discrete %.6e, analytic %.6e",
		measured, expected_discrete, expected_analytic)
	return MassBudget(measured, expected_discrete, expected_analytic)
