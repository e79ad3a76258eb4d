"""
Sequential numpy implementation of the convective scheme.

This is the "sequential" execution strategy and the reference the Taichi
kernels of conv_kernels are tested against. Every function mirrors one
kernel and follows the same per-cell rules:

- update_convective_events  <->  conv_kernels.update_convective_events
- fill_heating_stencil      <->  conv_kernels.fill_heating_stencil
- heat_at_point             <->  conv_kernels.heat_at_point
- forcing_field             <->  conv_kernels.forcing_field

State arrays are the flat haloed storages described in
pyconvection.grid.neighbourer_flat.

Based on:
Yang, D., and A. P. Ingersoll, 2013: Triggered Convection, Gravity Waves, and
the MJO: A Shallow-Water Model. J. Atmos. Sci., 70, 2476-2486.

Author: B.G.
"""

import numpy as np


def trigger_condition(h, h_threshold, boundary_layer):
	"""
	Cells whose height triggers convection.

	Boundary layer mode triggers on h >= h_threshold, free atmosphere mode on
	h <= h_threshold.
	"""
	if boundary_layer:
		return h >= h_threshold
	return h <= h_threshold


def update_convective_events(isconvecting, triggered_time, h, t, tau_c, h_threshold, boundary_layer):
	"""
	Advance the convective state of every cell to time t, in place.

	Args:
		isconvecting (np.ndarray): (ny, nx) view on the flag storage (uint8)
		triggered_time (np.ndarray): (ny, nx) view on the trigger time storage
		h (np.ndarray): (ny, nx) height
		t (float): current time
		tau_c (float): duration of a convective event
		h_threshold (float): trigger height
		boundary_layer (bool): comparison and sign convention

	Note:
		Each cell only reads and writes its own entries, the update is done in place.

	Author: B.G.
	"""
	time_convecting = t - triggered_time
	# has been convecting less than tau_c?
	needs_to_convect_by_time = (isconvecting != 0) & (time_convecting < tau_c)
	needs_to_convect_by_height = trigger_condition(h, h_threshold, boundary_layer)
	will_start_convecting = needs_to_convect_by_height & ~needs_to_convect_by_time

	isconvecting[...] = needs_to_convect_by_time | needs_to_convect_by_height
	triggered_time[...] = np.where(will_start_convecting, t, triggered_time)


def fill_heating_stencil(q0, R2, dx, dy, rx, ry):
	"""
	Spatial profile of a convective event.

	Returns:
		np.ndarray: (2*ry + 1, 2*rx + 1) weights indexed [dj + ry, di + rx].
			q0 * (1 - rho2/R2) / (pi * R2) inside the disk rho2 <= R2, 0 outside.

	Author: B.G.
	"""
	di = np.arange(-rx, rx + 1)
	dj = np.arange(-ry, ry + 1)
	DI, DJ = np.meshgrid(di, dj)
	rho2 = (DI * dx) ** 2 + (DJ * dy) ** 2
	return np.where(rho2 <= R2, q0 * (1.0 - rho2 / R2) / (np.pi * R2), 0.0)


def time_pulse(elapsed, tau_c):
	"""
	Parabolic time profile of a convective event, 1 - quotient**2.

	Zero at elapsed = 0 and elapsed = tau_c, one at tau_c / 2, negative
	outside the event window.
	"""
	quotient = 2.0 * (elapsed - tau_c / 2.0) / tau_c
	return 1.0 - quotient * quotient


def heat_at_point(row, col, isconvecting, triggered_time, weights, t, tau_c, grid):
	"""
	Sum of the contributions of all convecting neighbours of interior cell (row, col).

	Args:
		row, col (int): interior cell
		isconvecting, triggered_time (np.ndarray): flat haloed storages
		weights (np.ndarray): stencil weights, see fill_heating_stencil
		t (float): current time
		tau_c (float): duration of a convective event
		grid (Grid): geometry of the storages

	Returns:
		tuple: (unsigned heating, number of clamped contributions)

	Author: B.G.
	"""
	ry, rx = (weights.shape[0] - 1) // 2, (weights.shape[1] - 1) // 2
	flags = isconvecting.reshape(grid.storage_shape)
	times = triggered_time.reshape(grid.storage_shape)
	r0, c0 = row + grid.hy, col + grid.hx

	forcing = 0.0
	clamped = 0
	for dj in range(-ry, ry + 1):
		for di in range(-rx, rx + 1):
			if not flags[r0 + dj, c0 + di]:
				continue
			# the stencil is centred on the source, not on the receiver
			w = weights[ry - dj, rx - di]
			if w == 0.0:
				continue
			pulse = time_pulse(t - times[r0 + dj, c0 + di], tau_c)
			if pulse < 0.0:
				pulse = 0.0
				clamped += 1
			forcing += w * pulse / tau_c
	return forcing, clamped


def heat_field(isconvecting, triggered_time, weights, t, tau_c, grid):
	"""
	heat_at_point for every interior cell, vectorised over cells.

	Returns:
		tuple: ((ny, nx) unsigned heating, number of clamped contributions)

	Author: B.G.
	"""
	ry, rx = (weights.shape[0] - 1) // 2, (weights.shape[1] - 1) // 2
	flags = isconvecting.reshape(grid.storage_shape) != 0
	times = triggered_time.reshape(grid.storage_shape)
	nx, ny, hx, hy = grid.nx, grid.ny, grid.hx, grid.hy

	forcing = np.zeros(grid.rshp)
	clamped = 0
	for dj in range(-ry, ry + 1):
		for di in range(-rx, rx + 1):
			w = weights[ry - dj, rx - di]
			if w == 0.0:
				continue
			nflags = flags[hy + dj:hy + dj + ny, hx + di:hx + di + nx]
			if not nflags.any():
				continue
			pulse = time_pulse(t - times[hy + dj:hy + dj + ny, hx + di:hx + di + nx], tau_c)
			outside = nflags & (pulse < 0.0)
			clamped += int(outside.sum())
			forcing += np.where(nflags, w * np.maximum(pulse, 0.0) / tau_c, 0.0)
	return forcing, clamped


def forcing_field(isconvecting, triggered_time, weights, h, t, params, grid):
	"""
	Total height forcing on every interior cell: convective heating, radiative
	term and Newtonian relaxation.

	Returns:
		tuple: ((ny, nx) forcing, number of clamped contributions)
	"""
	heat, clamped = heat_field(isconvecting, triggered_time, weights, t, params.tau_c, grid)
	forcing = params.sign * heat + params.radiative_term \
		- (h - params.relaxation_height) * params.relaxation_parameter
	return forcing, clamped
