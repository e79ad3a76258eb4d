"""
Periodic halo refresh for haloed flat fields.

After the interior of a field has been written, its halo must be refilled
from the periodic images of the interior before any stencil reads it. Halo
cell (r, c) in storage coordinates copies interior cell
(wrap(r - hy, ny), wrap(c - hx, nx)). Halo widths larger than the grid are
allowed: wrapping then goes around more than once.

Both versions only read interior entries and only write halo entries, so the
refresh is race free in parallel.

Author: B.G.
"""

import numpy as np
import taichi as ti

from .neighbourer_flat import wrap, twrap, rc_from_i, i_from_rc


def halo_source_indices(nx, ny, hx, hy):
	"""
	Storage row and column that every storage entry copies from.

	Returns:
		tuple: (rows, cols) integer arrays of lengths ny + 2*hy and nx + 2*hx.
			Interior entries map onto themselves.

	Author: B.G.
	"""
	rows = wrap(np.arange(ny + 2 * hy) - hy, ny) + hy
	cols = wrap(np.arange(nx + 2 * hx) - hx, nx) + hx
	return rows, cols


def fill_halo_numpy(storage, nx, ny, hx, hy):
	"""
	Refresh the halo of a numpy storage array in place.

	Args:
		storage (np.ndarray): flat array of (ny + 2*hy) * (nx + 2*hx) entries
		nx, ny (int): interior size
		hx, hy (int): halo widths
	"""
	rows, cols = halo_source_indices(nx, ny, hx, hy)
	view = storage.reshape(ny + 2 * hy, nx + 2 * hx)
	view[...] = view[np.ix_(rows, cols)]


@ti.kernel
def fill_halo(field: ti.template(), nx: ti.i32, ny: ti.i32, hx: ti.i32, hy: ti.i32):
	"""
	Refresh the halo of a flat Taichi field in place.

	Args:
		field: flat field of (ny + 2*hy) * (nx + 2*hx) entries
		nx, ny: interior size
		hx, hy: halo widths

	Author: B.G.
	"""
	width = nx + 2 * hx
	for i in range((ny + 2 * hy) * width):
		row, col = rc_from_i(i, width)
		if row < hy or row >= ny + hy or col < hx or col >= nx + hx:
			src = i_from_rc(twrap(row - hy, ny) + hy, twrap(col - hx, nx) + hx, width)
			field[i] = field[src]
