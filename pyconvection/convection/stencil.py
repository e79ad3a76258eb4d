"""
Heating stencil: spatial profile of a single convective event.

The mass source of an event centred on a cell spreads over the disk of radius
R = convective_radius with a profile decreasing linearly in the squared
distance (triangular in rho**2, not gaussian):

	w(di, dj) = q0 * (1 - rho2 / R**2) / (pi * R**2),   rho2 = (di*dx)**2 + (dj*dy)**2 <= R**2
	w(di, dj) = 0                                          outside the disk

The continuous integral of this profile over the disk is q0 / 2.

Author: B.G.
"""

import logging

import numpy as np

from .. import constants as cte
from ..environment import resolve_strategy
from ..errors import ConfigurationError
from ..grid.gridfields import stencil_half_widths
from ..pool import FieldPool
from . import conv_kernels as ck
from . import reference as ref

logger = logging.getLogger(__name__)


class HeatingStencil:
	"""
	Precomputed, read only table of heating weights indexed by signed offsets.

	Attributes:
		radius (float): convective radius R
		amplitude (float): heating amplitude q0
		dx, dy (float): grid spacing
		rx, ry (int): half widths, offsets span [-rx, rx] x [-ry, ry]
		weights (np.ndarray): (2*ry + 1, 2*rx + 1) weights indexed [dj + ry, di + rx]
		field (TPField): flat device copy of the weights (Taichi strategies only)

	Author: B.G.
	"""

	def __init__(self, radius, dx, amplitude, dy = None, strategy = None, pool = None):
		"""
		Build the stencil. Use HeatingStencil.build or from_parameters.

		Raises:
			ConfigurationError: radius or spacing not strictly positive
		"""
		dy = dx if dy is None else dy
		if not radius > 0:
			raise ConfigurationError(f"convective_radius must be > 0, got {radius}")
		if not (dx > 0 and dy > 0):
			raise ConfigurationError(f"Grid spacing must be > 0, got ({dx}, {dy})")

		self.radius = float(radius)
		self.amplitude = float(amplitude)
		self.dx = float(dx)
		self.dy = float(dy)
		self.rx, self.ry = stencil_half_widths(radius, dx, dy)
		self.strategy = resolve_strategy(strategy)
		self.field = None

		R2 = self.radius * self.radius
		if self.strategy == cte.SEQUENTIAL:
			self.weights = ref.fill_heating_stencil(self.amplitude, R2, self.dx, self.dy, self.rx, self.ry)
		else:
			pool = FieldPool() if pool is None else pool
			self.field = pool.get(cte.FLOAT, self.shape[0] * self.shape[1])
			ck.fill_heating_stencil(self.field.field, self.amplitude, R2, self.dx, self.dy, self.rx, self.ry)
			self.weights = self.field.to_numpy().reshape(self.shape)

		# read only from now on
		self.weights.setflags(write = False)
		logger.info("Heating stencil of radius %g built: half widths (%d, %d)", self.radius, self.rx, self.ry)

	@classmethod
	def build(cls, radius, dx, amplitude, dy = None, **kwargs):
		"""Build a stencil of given radius, spacing and amplitude."""
		return cls(radius, dx, amplitude, dy = dy, **kwargs)

	@classmethod
	def from_parameters(cls, params, grid, strategy = None, pool = None):
		"""Stencil of a ConvectionParameters set on a Grid."""
		return cls(params.convective_radius, grid.dx, params.q0, dy = grid.dy, strategy = strategy, pool = pool)

	@property
	def shape(self):
		return (2 * self.ry + 1, 2 * self.rx + 1)

	def weight(self, di, dj):
		"""Weight at signed offset (di, dj); zero beyond the half widths."""
		if abs(di) > self.rx or abs(dj) > self.ry:
			return 0.0
		return float(self.weights[dj + self.ry, di + self.rx])

	def total_mass(self):
		"""Discrete integral of the profile, sum of weights times the cell area."""
		return float(self.weights.sum()) * self.dx * self.dy

	def analytic_mass(self):
		"""Continuous integral of the profile over the disk, q0 / 2."""
		return self.amplitude / 2.0

	def __repr__(self):
		return f"HeatingStencil(radius={self.radius}, amplitude={self.amplitude}, half_widths=({self.rx}, {self.ry}))"
