"""
Flat index arithmetic and periodic wrapping on haloed 2D grids.

Every state field is stored as a flat row-major array covering the interior
(ny rows, nx columns) surrounded by a halo of hy rows and hx columns on each
side. The storage row width is W = nx + 2*hx. Interior cell (row, col) lives
at flat index (row + hy) * W + (col + hx), so a neighbour at offset (di, dj)
is a plain index shift as long as |di| <= hx and |dj| <= hy.

Python helpers work on ints and numpy arrays alike; the ti.func versions are
the same arithmetic for use inside kernels.

Author: B.G.
"""

import taichi as ti


#########################################
###### PYTHON SCOPE #####################
#########################################

def wrap(i, n):
	"""
	Periodic wraparound of index i on a dimension of size n (0-based).

	wrap(-1, n) == n - 1, wrap(n, n) == 0. Works elementwise on numpy arrays.
	"""
	return i % n


def storage_width(nx, hx):
	"""Row width of the haloed storage."""
	return nx + 2 * hx


def storage_size(nx, ny, hx, hy):
	"""Number of entries of the haloed storage."""
	return (nx + 2 * hx) * (ny + 2 * hy)


def flat_index(row, col, nx, hx, hy):
	"""Flat storage index of interior cell (row, col); halo cells have row/col outside [0, n)."""
	return (row + hy) * (nx + 2 * hx) + (col + hx)


#########################################
###### TAICHI SCOPE #####################
#########################################

@ti.func
def twrap(i: ti.i32, n: ti.i32) -> ti.i32:
	"""Periodic wraparound, kernel version of wrap (Taichi % follows python semantics)."""
	return i % n


@ti.func
def rc_from_i(i: ti.i32, width: ti.i32):
	"""
	Convert a flat index to (row, col) in a row-major array of given width.

	Args:
		i: Flat index
		width: Row width

	Returns:
		tuple: (row, col)

	Author: B.G.
	"""
	return i // width, i % width


@ti.func
def i_from_rc(row: ti.i32, col: ti.i32, width: ti.i32) -> ti.i32:
	"""Convert (row, col) to a flat index in a row-major array of given width."""
	return row * width + col


@ti.func
def interior_to_storage(k: ti.i32, nx: ti.i32, hx: ti.i32, hy: ti.i32) -> ti.i32:
	"""
	Map the flat interior index k (row-major over nx columns) to the haloed
	storage index.
	"""
	row, col = rc_from_i(k, nx)
	return i_from_rc(row + hy, col + hx, nx + 2 * hx)
