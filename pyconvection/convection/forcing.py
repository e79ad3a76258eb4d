"""
Forcing evaluator: net height source at a cell from convection, radiation and relaxation.

For cell (i, j) at time t:

	F = sign * sum_{convecting neighbours n} w[-di, -dj] * (1 - q_n**2) / tau_c
	    + radiative_term
	    - (h[i, j] - relaxation_height) * relaxation_parameter

	q_n = 2 * (t - triggered_time[n] - tau_c / 2) / tau_c

sign is +1 (mass source) in free atmosphere mode and -1 (mass sink) in
boundary layer mode. The time pulse of a neighbour whose event window does
not contain t is clamped to zero and a NumericWarning is emitted.

Momentum damping (u_damping, v_damping) applies the same relaxation
parameter to the velocity components.

Author: B.G.
"""

import logging
import warnings

import numpy as np

from .. import constants as cte
from ..environment import KERNEL_LOCK
from ..errors import ConfigurationError, NumericWarning
from ..grid import neighbourer_flat as nei
from . import conv_kernels as ck
from . import reference as ref

logger = logging.getLogger(__name__)


def u_damping(u, relaxation_parameter):
	"""Linear damping of the u field, - u * relaxation_parameter."""
	return - u * relaxation_parameter


def v_damping(v, relaxation_parameter):
	"""Linear damping of the v field, - v * relaxation_parameter."""
	return - v * relaxation_parameter


def relaxation(h, relaxation_height, relaxation_parameter):
	"""Newtonian relaxation of the height towards relaxation_height."""
	return - (h - relaxation_height) * relaxation_parameter


def _warn_clamped(clamped, t):
	if clamped > 0:
		warnings.warn(
			f"{clamped} convective contribution(s) outside their event window at t={t} clamped to zero",
			NumericWarning, stacklevel = 3)


class ForcingEvaluator:
	"""
	Computes the height forcing from the state of a ConvectiveStateTracker.

	Evaluation only reads the tracker fields, the stencil and the height, so
	any number of queries may run after an update, in any order, with the
	same results. Queries must not be issued before the first update.
	Point queries may be issued concurrently from several threads; on the
	Taichi engines they are serialised on environment.KERNEL_LOCK.

	Args:
		tracker (ConvectiveStateTracker): state fields, halos refreshed
		stencil (HeatingStencil): heating weights built with the tracker's strategy

	Raises:
		ConfigurationError: the grid halo is narrower than the stencil, or stencil and
			tracker use different engines

	Author: B.G.
	"""

	def __init__(self, tracker, stencil):
		self.tracker = tracker
		self.stencil = stencil
		self.grid = tracker.grid
		self.params = tracker.params
		if (stencil.field is None) == tracker.uses_taichi:
			raise ConfigurationError(
				f"Stencil built for strategy {stencil.strategy!r}, tracker runs {tracker.strategy!r}"
			)
		self.grid.check_halo(stencil.rx, stencil.ry)

		if tracker.uses_taichi:
			pool = tracker.pool
			self._result = pool.get(cte.FLOAT, 0)
			self._clamped = pool.get(cte.COUNT, 0)

	def _check_ready(self):
		if self.tracker.time is None:
			raise RuntimeError("Forcing queried before the first convective state update")

	def heat_at_point(self, i, j, current_time):
		"""
		Signed convective heating received by cell (i, j) = (column, row).

		Raises:
			IndexError: (i, j) outside the interior
		"""
		self.grid.check_index(i, j)
		self._check_ready()
		t = float(current_time)
		p = self.params

		if self.tracker.uses_taichi:
			g = self.grid
			s = nei.flat_index(j, i, g.nx, g.hx, g.hy)
			# the scalar result and counter are shared by every query
			with KERNEL_LOCK:
				self._clamped.field[None] = 0
				ck.heat_at_point(self._result.field, self._clamped.field, s, t, p.tau_c,
					self.tracker.isconvecting.field, self.tracker.triggered_time.field, self.stencil.field.field,
					nei.storage_width(g.nx, g.hx), self.stencil.rx, self.stencil.ry)
				heat, clamped = self._result.field[None], self._clamped.field[None]
		else:
			heat, clamped = ref.heat_at_point(j, i, self.tracker.isconvecting, self.tracker.triggered_time,
				self.stencil.weights, t, p.tau_c, self.grid)

		_warn_clamped(clamped, t)
		return p.sign * float(heat)

	def evaluate(self, i, j, current_time, height):
		"""
		Total forcing at cell (i, j) = (column, row) at current_time.

		Args:
			i, j (int): interior column and row, 0-based
			current_time (float): time of the query
			height (np.ndarray or float): (ny, nx) height, or the height of cell (i, j)

		Returns:
			float: forcing density on the height equation

		Raises:
			IndexError: (i, j) outside the interior, never clamped
			RuntimeError: no state update happened yet

		Author: B.G.
		"""
		heat = self.heat_at_point(i, j, current_time)
		if np.ndim(height) == 0:
			h_ij = float(height)
		else:
			h_ij = float(self.grid.check_field(height, "height")[j, i])
		p = self.params
		return heat + p.radiative_term + relaxation(h_ij, p.relaxation_height, p.relaxation_parameter)

	def evaluate_field(self, current_time, height):
		"""
		evaluate() on every interior cell in one data parallel pass.

		Returns:
			np.ndarray: (ny, nx) forcing

		Author: B.G.
		"""
		self._check_ready()
		h = self.grid.check_field(height, "height")
		t = float(current_time)
		p = self.params
		g = self.grid

		if self.tracker.uses_taichi:
			with KERNEL_LOCK:
				hfield = self.tracker.load_height(h)
				self._clamped.field[None] = 0
				with self.tracker.pool.get(cte.FLOAT, g.size) as out:
					ck.forcing_field(out.field, hfield.field, self._clamped.field,
						self.tracker.isconvecting.field, self.tracker.triggered_time.field, self.stencil.field.field,
						t, p.tau_c, p.sign, p.radiative_term, p.relaxation_height, p.relaxation_parameter,
						g.nx, g.ny, g.hx, g.hy, self.stencil.rx, self.stencil.ry)
					forcing = out.to_numpy().reshape(g.rshp)
				clamped = self._clamped.field[None]
		else:
			forcing, clamped = ref.forcing_field(self.tracker.isconvecting, self.tracker.triggered_time,
				self.stencil.weights, h, t, p, g)

		_warn_clamped(clamped, t)
		return forcing
