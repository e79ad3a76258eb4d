import logging

import numpy as np
import matplotlib.pyplot as plt
import pyconvection as pc
import pyconvection.constants as cte

logging.basicConfig(level = logging.INFO, format = "%(name)s - %(message)s")

pc.environment.initialise(cte.CPU)

def add_dips(array, depth, n, rng):
	"""
	Lower the height of n random cells by depth, seeding the first convective events.
	"""
	ny, nx = array.shape
	rows = rng.integers(0, ny, n)
	cols = rng.integers(0, nx, n)
	array[rows, cols] -= depth
	return array


# f-plane setup of the long runs: 128 x 128 cells of 781.25 m, R = 20 km
nx, ny = 128, 128
dx = 1e5 / nx
params = pc.ConvectionParameters.from_dict(cte.FPLANE_LONG_RUN)
grid = pc.grid.Grid.for_radius(nx, ny, dx, dx, params.convective_radius)
conv = pc.ConvectiveParameterization(grid, params)

rng = np.random.default_rng(123)
h0 = params.h_threshold + 1. + 0.2 * rng.random(grid.rshp)
h0 = add_dips(h0, 2., 20, rng)

# forcing alone, the shallow water dynamics live in the host solver
sim = pc.simulation.Simulation(conv, h0, dt = 1., stop_time = 300., progress_interval = 25)

fig, ax = plt.subplots()
plt.ion()
plt.show()

def snapshot(sim):
	ax.clear()
	for cbar_ax in fig.axes[1:]:
		cbar_ax.remove()
	pc.visu.plot_convective_state(sim.h, sim.parameterization.isconvecting, ax = ax,
		title = f"t = {sim.time:.0f} s, {sim.parameterization.tracker.count_convecting()} convecting")
	fig.canvas.draw_idle()
	fig.canvas.start_event_loop(0.01)

sim.add_callback("snapshot", snapshot, 25)
h = sim.run()

budget = pc.simulation.single_event_mass_budget(**{k: cte.FPLANE_LONG_RUN[k] for k in ("q0", "convective_radius", "tau_c", "h_threshold")})
print(f"single event mass: measured {budget.measured:.4e}, expected {budget.expected_analytic:.4e} ({100 * budget.relative_error:.2f} %)")

conv.destroy()
plt.ioff()
plt.show()
