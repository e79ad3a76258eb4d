"""
Driver facing entry point of the convective scheme.

A time stepping driver interacts with the scheme through two calls:

- on_step_start(height, current_time): once per integration step, before any
  forcing is requested. Updates the convective state and its halos.
- source_term(i, j, current_time, height): wherever the discretised height
  equation needs its source term at cell (i, j).

Usage:
	import pyconvection as pc

	params = pc.ConvectionParameters.from_dict(pc.constants.FPLANE_LONG_RUN)
	grid = pc.grid.Grid.for_radius(128, 128, 781.25, 781.25, params.convective_radius)
	conv = pc.ConvectiveParameterization(grid, params, strategy="cpu")

	for step in range(nsteps):
		conv.on_step_start(h, t)
		F = conv.forcing_field(t, h)   # or conv.source_term(i, j, t, h) per cell
		...

Author: B.G.
"""

import logging

from .. import constants as cte
from ..environment import resolve_strategy
from ..pool import FieldPool
from .forcing import ForcingEvaluator, u_damping, v_damping
from .stencil import HeatingStencil
from .tracker import ConvectiveStateTracker

logger = logging.getLogger(__name__)


class ConvectiveParameterization:
	"""
	Triggered convection mass source for a shallow water height equation.

	Bundles the heating stencil, the state tracker and the forcing evaluator
	built from one immutable parameter set, with a single execution strategy.

	Args:
		grid (Grid): grid geometry; its halo must fit the stencil
		params (ConvectionParameters): scheme parameters
		strategy (str, optional): "sequential", "cpu" or "gpu". Default: the
			strategy given to environment.initialise, else "sequential"

	Raises:
		ConfigurationError: invalid parameters, grid, halo or strategy

	Author: B.G.
	"""

	def __init__(self, grid, params, strategy = None):
		self.grid = grid
		self.params = params.check()
		self.strategy = resolve_strategy(strategy)
		self.pool = None if self.strategy == cte.SEQUENTIAL else FieldPool()

		self.stencil = HeatingStencil.from_parameters(self.params, grid, strategy = self.strategy, pool = self.pool)
		grid.check_halo(self.stencil.rx, self.stencil.ry)
		self.tracker = ConvectiveStateTracker(grid, self.params, strategy = self.strategy, pool = self.pool)
		self.evaluator = ForcingEvaluator(self.tracker, self.stencil)

		logger.info("Convective parameterization ready on %r with strategy %s (boundary_layer=%s)",
			grid, self.strategy, self.params.boundary_layer)

	def on_step_start(self, height, current_time):
		"""Update the convective state (halos included) for the step starting at current_time."""
		self.tracker.update(height, current_time)

	def source_term(self, i, j, current_time, height):
		"""Height forcing at cell (i, j) = (column, row), see ForcingEvaluator.evaluate."""
		return self.evaluator.evaluate(i, j, current_time, height)

	__call__ = source_term

	def forcing_field(self, current_time, height):
		"""Height forcing on every interior cell, (ny, nx)."""
		return self.evaluator.evaluate_field(current_time, height)

	def u_damping(self, u):
		return u_damping(u, self.params.relaxation_parameter)

	def v_damping(self, v):
		return v_damping(v, self.params.relaxation_parameter)

	@property
	def isconvecting(self):
		"""(ny, nx) boolean convecting flags."""
		return self.tracker.get_isconvecting()

	@property
	def triggered_time(self):
		"""(ny, nx) trigger times."""
		return self.tracker.get_triggered_time()

	def destroy(self):
		"""Free the Taichi fields of this parameterization."""
		if self.pool is not None:
			self.pool.destroy()
			self.pool = None
