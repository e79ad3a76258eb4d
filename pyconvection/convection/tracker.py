"""
Convective state tracker: per-cell convecting flag and trigger time.

Author: B.G.
"""

import logging

import numpy as np

from .. import constants as cte
from ..environment import KERNEL_LOCK, resolve_strategy
from ..grid import halo
from ..pool import FieldPool
from . import conv_kernels as ck
from . import reference as ref

logger = logging.getLogger(__name__)


class ConvectiveStateTracker:
	"""
	Owns and updates the two state fields of the convective scheme.

	- isconvecting: 1 while the cell is inside an active event, else 0
	- triggered_time: time at which the current event of the cell started

	Both are flat haloed storages (numpy arrays for the sequential strategy,
	pooled Taichi fields otherwise), allocated once with all cells idle and
	trigger times at 0, mutated in place by update() and read only until the
	next update().

	Args:
		grid (Grid): grid geometry, halos included
		params (ConvectionParameters): scheme parameters
		strategy (str, optional): "sequential", "cpu" or "gpu"
		pool (FieldPool, optional): pool the Taichi fields are taken from

	Attributes:
		time (float): time of the last update, None before the first one

	Author: B.G.
	"""

	def __init__(self, grid, params, strategy = None, pool = None):
		self.grid = grid
		self.params = params.check()
		self.strategy = resolve_strategy(strategy)
		self.time = None

		n = grid.storage_size
		if self.strategy == cte.SEQUENTIAL:
			self.isconvecting = np.zeros(n, dtype = np.uint8)
			self.triggered_time = np.zeros(n, dtype = np.float64)
			self._h = None
		else:
			self.pool = FieldPool() if pool is None else pool
			self.isconvecting = self.pool.get(cte.FLAG, n)
			self.triggered_time = self.pool.get(cte.TIME, n)
			self._h = self.pool.get(cte.FLOAT, grid.size)
			self.isconvecting.field.fill(0)
			self.triggered_time.field.fill(0.)

	@property
	def uses_taichi(self):
		return self.strategy != cte.SEQUENTIAL

	def update(self, height, current_time):
		"""
		Update both state fields from the current height, then refresh their halos.

		Per cell: an event still running (elapsed < tau_c) keeps going; a cell
		meeting the trigger condition convects, and starts a new event with
		triggered_time = current_time if it was not already running one.

		Args:
			height (np.ndarray): (ny, nx) height, read only
			current_time (float): current simulation time

		Author: B.G.
		"""
		h = self.grid.check_field(height, "height")
		p = self.params
		t = float(current_time)

		if self.uses_taichi:
			with KERNEL_LOCK:
				self.load_height(h)
				ck.update_convective_events(self.isconvecting.field, self.triggered_time.field, self._h.field,
					t, p.tau_c, p.h_threshold, int(p.boundary_layer),
					self.grid.nx, self.grid.ny, self.grid.hx, self.grid.hy)
		else:
			ref.update_convective_events(self.grid.interior(self.isconvecting), self.grid.interior(self.triggered_time),
				h, t, p.tau_c, p.h_threshold, p.boundary_layer)

		self.fill_halo()
		self.time = t

	def fill_halo(self):
		"""Refresh the periodic halos of both state fields."""
		g = self.grid
		if self.uses_taichi:
			with KERNEL_LOCK:
				halo.fill_halo(self.isconvecting.field, g.nx, g.ny, g.hx, g.hy)
				halo.fill_halo(self.triggered_time.field, g.nx, g.ny, g.hx, g.hy)
		else:
			halo.fill_halo_numpy(self.isconvecting, g.nx, g.ny, g.hx, g.hy)
			halo.fill_halo_numpy(self.triggered_time, g.nx, g.ny, g.hx, g.hy)

	def load_height(self, h):
		"""Copy a (ny, nx) height into the interior height field used by the kernels."""
		self._h.from_numpy(np.ascontiguousarray(h, dtype = np.float64).ravel())
		return self._h

	def storage(self):
		"""(isconvecting, triggered_time) flat haloed storages as numpy arrays."""
		if self.uses_taichi:
			return self.isconvecting.to_numpy(), self.triggered_time.to_numpy()
		return self.isconvecting, self.triggered_time

	def get_isconvecting(self):
		"""(ny, nx) boolean copy of the convecting flags."""
		flags, _ = self.storage()
		return self.grid.interior(flags) != 0

	def get_triggered_time(self):
		"""(ny, nx) copy of the trigger times."""
		_, times = self.storage()
		return self.grid.interior(times).copy()

	def count_convecting(self):
		"""Number of interior cells currently convecting."""
		return int(self.get_isconvecting().sum())
