"""
Taichi kernels of the triggered convection scheme.

Kernel versions of the functions of reference.py, used by the "cpu" and "gpu"
execution strategies. All state fields are flat haloed storages (see
pyconvection.grid.neighbourer_flat); height and forcing fields are flat
interior arrays of nx*ny entries.

Parallel structure:
- update_convective_events: one thread per interior cell, each thread only
  touches its own flag and trigger time, so the update is done in place
- forcing_field / heat_at_point: read neighbour state, write nothing shared
  except the atomic clamp counter

Based on:
Yang, D., and A. P. Ingersoll, 2013: Triggered Convection, Gravity Waves, and
the MJO: A Shallow-Water Model. J. Atmos. Sci., 70, 2476-2486.

Author: B.G.
"""

import taichi as ti

from ..grid.neighbourer_flat import rc_from_i, interior_to_storage


@ti.kernel
def update_convective_events(
	isconvecting: ti.template(),
	triggered_time: ti.template(),
	h: ti.template(),
	t: ti.f64,
	tau_c: ti.f64,
	h_threshold: ti.f64,
	boundary_layer: ti.i32,
	nx: ti.i32,
	ny: ti.i32,
	hx: ti.i32,
	hy: ti.i32
):
	"""
	Advance the convective state of every interior cell to time t.

	Args:
		isconvecting (ti.template): flag storage (u8)
		triggered_time (ti.template): trigger time storage
		h (ti.template): interior height, nx*ny entries
		t: current time
		tau_c: duration of a convective event
		h_threshold: trigger height
		boundary_layer: 1 triggers on h >= h_threshold, 0 on h <= h_threshold

	Note:
		Halos are not refreshed here, call halo.fill_halo on both storages.

	Author: B.G.
	"""
	for k in range(nx * ny):
		s = interior_to_storage(k, nx, hx, hy)

		# has been convecting less than tau_c?
		by_time = 0
		if isconvecting[s] != 0:
			if t - triggered_time[s] < tau_c:
				by_time = 1

		by_height = 0
		if boundary_layer != 0:
			if h[k] >= h_threshold:
				by_height = 1
		else:
			if h[k] <= h_threshold:
				by_height = 1

		# time is only updated for a new convective event
		if by_height == 1 and by_time == 0:
			triggered_time[s] = t

		if by_time + by_height > 0:
			isconvecting[s] = ti.u8(1)
		else:
			isconvecting[s] = ti.u8(0)


@ti.kernel
def fill_heating_stencil(q: ti.template(), q0: ti.f64, R2: ti.f64, dx: ti.f64, dy: ti.f64, rx: ti.i32, ry: ti.i32):
	"""
	Fill the flat stencil field, (2*ry + 1) rows of (2*rx + 1) weights.

	Author: B.G.
	"""
	width = 2 * rx + 1
	for i in range((2 * ry + 1) * width):
		row, col = rc_from_i(i, width)
		ddx = (col - rx) * dx
		ddy = (row - ry) * dy
		rho2 = ddx * ddx + ddy * ddy
		if rho2 <= R2:
			q[i] = q0 * (1.0 - rho2 / R2) / (ti.math.pi * R2)
		else:
			q[i] = 0.0


@ti.func
def time_pulse(elapsed: ti.f64, tau_c: ti.f64) -> ti.f64:
	"""Parabolic time profile, 1 - quotient**2 (see reference.time_pulse)."""
	quotient = 2.0 * (elapsed - tau_c / 2.0) / tau_c
	return 1.0 - quotient * quotient


@ti.func
def heat_at_storage(
	s: ti.i32,
	t: ti.f64,
	tau_c: ti.f64,
	isconvecting: ti.template(),
	triggered_time: ti.template(),
	stencil: ti.template(),
	clamped: ti.template(),
	width: ti.i32,
	rx: ti.i32,
	ry: ti.i32
) -> ti.f64:
	"""
	Unsigned heating received by the cell at storage index s from every
	convecting neighbour in a (2*rx + 1) x (2*ry + 1) square around it.

	Author: B.G.
	"""
	swidth = 2 * rx + 1
	forcing = ti.f64(0.0)
	for dj in range(-ry, ry + 1):
		for di in range(-rx, rx + 1):
			n = s + dj * width + di
			if isconvecting[n] != 0:
				# the stencil is centred on the source, not on the receiver
				w = stencil[(ry - dj) * swidth + (rx - di)]
				if w != 0.0:
					pulse = time_pulse(t - triggered_time[n], tau_c)
					if pulse < 0.0:
						pulse = 0.0
						clamped[None] += 1
					forcing += w * pulse / tau_c
	return forcing


@ti.kernel
def heat_at_point(
	result: ti.template(),
	clamped: ti.template(),
	s: ti.i32,
	t: ti.f64,
	tau_c: ti.f64,
	isconvecting: ti.template(),
	triggered_time: ti.template(),
	stencil: ti.template(),
	width: ti.i32,
	rx: ti.i32,
	ry: ti.i32
):
	"""
	Unsigned heating at a single storage index, written to the scalar field result.

	Author: B.G.
	"""
	# single outer iteration so that the stencil loops run serially
	for _ in range(1):
		result[None] = heat_at_storage(s, t, tau_c, isconvecting, triggered_time, stencil, clamped, width, rx, ry)


@ti.kernel
def forcing_field(
	forcing: ti.template(),
	h: ti.template(),
	clamped: ti.template(),
	isconvecting: ti.template(),
	triggered_time: ti.template(),
	stencil: ti.template(),
	t: ti.f64,
	tau_c: ti.f64,
	sign: ti.f64,
	radiative_term: ti.f64,
	relaxation_height: ti.f64,
	relaxation_parameter: ti.f64,
	nx: ti.i32,
	ny: ti.i32,
	hx: ti.i32,
	hy: ti.i32,
	rx: ti.i32,
	ry: ti.i32
):
	"""
	Total height forcing on every interior cell.

	forcing = sign * heating + radiative_term - (h - relaxation_height) * relaxation_parameter

	Args:
		forcing (ti.template): output, nx*ny entries
		h (ti.template): interior height, nx*ny entries
		clamped (ti.template): scalar counter of clamped contributions

	Author: B.G.
	"""
	width = nx + 2 * hx
	for k in range(nx * ny):
		s = interior_to_storage(k, nx, hx, hy)
		heat = heat_at_storage(s, t, tau_c, isconvecting, triggered_time, stencil, clamped, width, rx, ry)
		forcing[k] = sign * heat + radiative_term - (h[k] - relaxation_height) * relaxation_parameter
