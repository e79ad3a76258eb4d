"""
Time stepping driver and validation runs for PyConvection.

Core Modules:
- driver: Simulation, a minimal time loop calling the convective scheme once
  per step with a user supplied height integrator
- validation: mass exchanged by a single convective event against q0 / 3

Usage:
	import pyconvection as pc

	sim = pc.simulation.Simulation(conv, h0, dt=1., stop_time=600.)
	h = sim.run()

	budget = pc.simulation.single_event_mass_budget()
	budget.relative_error

Author: B.G.
"""

from .driver import Simulation, euler_height_step, progress
from .validation import MassBudget, single_event_mass_budget

__all__ = [
	"Simulation",
	"euler_height_step",
	"progress",
	"MassBudget",
	"single_event_mass_budget",
]
