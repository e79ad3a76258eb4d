"""
Grid geometry of the convective scheme: interior size, spacing and halo widths.

Author: B.G.
"""

import logging

import numpy as np

from .. import constants as cte
from ..errors import ConfigurationError
from . import neighbourer_flat as nei

logger = logging.getLogger(__name__)


class Grid:
	"""
	Doubly periodic 2D regular grid with halo metadata.

	The grid itself stores no field: it describes the interior size, the
	spacing and the halo width that every state field of the convective scheme
	is allocated with. The halo must be at least as wide as the heating
	stencil so that neighbour lookups near the domain edges stay inside the
	storage.

	Attributes:
		nx (int): Number of grid columns (x-direction)
		ny (int): Number of grid rows (y-direction)
		dx (float): Grid spacing in x (meters)
		dy (float): Grid spacing in y (meters)
		hx (int): Halo width in x (columns on each side)
		hy (int): Halo width in y (rows on each side)
		rshp (tuple): Reshape tuple (ny, nx) for converting 1D to 2D arrays

	Author: B.G.
	"""

	def __init__(self, nx:int, ny:int, dx:float, dy:float = None, halo = cte.MIN_HALO):
		"""
		Args:
			nx (int): Number of grid columns
			ny (int): Number of grid rows
			dx (float): Grid spacing in x
			dy (float, optional): Grid spacing in y. Default: dx
			halo (int or tuple, optional): Halo width, or (hx, hy). Default: 3

		Raises:
			ConfigurationError: non positive sizes, spacings or negative halo
		"""
		dy = dx if dy is None else dy
		hx, hy = (halo, halo) if np.isscalar(halo) else halo

		if int(nx) < 1 or int(ny) < 1:
			raise ConfigurationError(f"Grid size must be >= 1, got ({nx}, {ny})")
		if not (dx > 0 and dy > 0):
			raise ConfigurationError(f"Grid spacing must be > 0, got ({dx}, {dy})")
		if int(hx) < 0 or int(hy) < 0:
			raise ConfigurationError(f"Halo width must be >= 0, got ({hx}, {hy})")

		self.nx = int(nx)
		self.ny = int(ny)
		self.dx = float(dx)
		self.dy = float(dy)
		self.hx = int(hx)
		self.hy = int(hy)
		self.rshp = (self.ny, self.nx)

		logger.info("Built grid %dx%d, spacing (%g, %g), halo (%d, %d)",
			self.nx, self.ny, self.dx, self.dy, self.hx, self.hy)

	@classmethod
	def for_radius(cls, nx, ny, dx, dy, convective_radius):
		"""
		Grid whose halo fits a heating stencil of the given radius.

		The halo is max(r, 3) in each direction, r being the stencil half width.
		"""
		if not (dx > 0 and dy > 0):
			raise ConfigurationError(f"Grid spacing must be > 0, got ({dx}, {dy})")
		rx, ry = stencil_half_widths(convective_radius, dx, dy)
		return cls(nx, ny, dx, dy, halo = (max(rx, cte.MIN_HALO), max(ry, cte.MIN_HALO)))

	@property
	def size(self):
		"""Number of interior cells."""
		return self.nx * self.ny

	@property
	def storage_size(self):
		"""Number of entries of a haloed field."""
		return nei.storage_size(self.nx, self.ny, self.hx, self.hy)

	@property
	def storage_shape(self):
		"""2D shape of a haloed field."""
		return (self.ny + 2 * self.hy, nei.storage_width(self.nx, self.hx))

	def check_halo(self, rx, ry):
		"""
		Raise ConfigurationError if a stencil of half widths (rx, ry) does not fit the halo.

		The halo must reach floor(R/dx), not R/dx: no offset beyond the half width
		lies inside the disk, so e.g. R = 250, dx = 100 needs a halo of 2.
		"""
		if rx > self.hx or ry > self.hy:
			raise ConfigurationError(
				f"Halo ({self.hx}, {self.hy}) is narrower than the stencil half width ({rx}, {ry})"
			)

	def check_index(self, i, j):
		"""Raise IndexError if (i, j) = (column, row) is not an interior cell."""
		if not (0 <= i < self.nx and 0 <= j < self.ny):
			raise IndexError(f"Cell ({i}, {j}) outside the {self.nx}x{self.ny} interior")

	def check_field(self, field, name = "field"):
		"""Return field as a (ny, nx) numpy array, raising ConfigurationError on shape mismatch."""
		arr = np.asarray(field)
		if arr.shape == (self.size,):
			arr = arr.reshape(self.rshp)
		if arr.shape != self.rshp:
			raise ConfigurationError(f"{name} has shape {arr.shape}, expected {self.rshp}")
		return arr

	def interior(self, storage):
		"""(ny, nx) view of the interior of a flat haloed numpy array."""
		return storage.reshape(self.storage_shape)[self.hy:self.hy + self.ny, self.hx:self.hx + self.nx]

	def __repr__(self):
		return f"Grid(nx={self.nx}, ny={self.ny}, dx={self.dx}, dy={self.dy}, halo=({self.hx}, {self.hy}))"


def stencil_half_widths(convective_radius, dx, dy):
	"""
	Number of cells the heating stencil spans on each side of its centre.

	floor(R/dx) is the largest offset that can pass the disk test
	(di*dx)**2 <= R**2.
	"""
	return int(convective_radius // dx), int(convective_radius // dy)
