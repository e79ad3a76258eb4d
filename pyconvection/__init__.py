"""
PyConvection - triggered convection for shallow water models, on Taichi.

A Python package implementing the triggered convection parameterization of
Yang and Ingersoll (2013) as a mass source for shallow water solvers. Every
cell whose height crosses a threshold starts a convective event of duration
tau_c, during which mass is injected (or removed, in boundary layer mode)
over a disk of radius R with a parabolic time profile. Kernels are written
with Taichi and run on cpu threads or gpu; a numpy implementation serves as
sequential engine and reference.

Key Features:
- Per-cell convective state machine (convecting flag and trigger time)
- Radially truncated heating stencil and stencil-based forcing kernel
- Radiative cooling, Newtonian height relaxation and momentum damping
- Doubly periodic grids with halos, flat row-major storage
- Interchangeable execution strategies: sequential (numpy), cpu, gpu (Taichi)
- Minimal time stepping driver and single event mass budget validation

Core Components:
- convection: stencil, state tracker, forcing evaluator, driver facing entry point
- grid: grid geometry, flat indexing, periodic halo refresh
- simulation: time loop and validation runs
- pool: owned pools of Taichi fields
- visu: matplotlib snapshots
- parameters: immutable parameter set (pydantic)
- environment: execution strategy selection
- constants: dtypes, strategy names, reference parameter sets

Basic Usage:
	import numpy as np
	import pyconvection as pc

	pc.environment.initialise("cpu")

	params = pc.ConvectionParameters(tau_c=50., h_threshold=40., convective_radius=250., q0=1e6)
	grid = pc.grid.Grid(10, 10, 100., halo=3)
	conv = pc.ConvectiveParameterization(grid, params)

	h = np.full(grid.rshp, 50.)
	h[5, 5] = 35.   # below h_threshold, triggers
	conv.on_step_start(h, 0.)
	conv.source_term(5, 5, 25., h)

Scientific Background:
Yang, D., and A. P. Ingersoll, 2013: Triggered Convection, Gravity Waves, and
the MJO: A Shallow-Water Model. J. Atmos. Sci., 70, 2476-2486.

Author: B.G.
"""

import logging

__version__ = "0.1.0"
__author__ = "B.G."

logging.getLogger(__name__).addHandler(logging.NullHandler())

# Import all submodules in alphabetical order
from . import constants
from . import convection
from . import environment
from . import errors
from . import grid
from . import parameters
from . import pool
from . import simulation
from . import visu

from .convection import ConvectiveParameterization
from .errors import ConfigurationError, NumericWarning
from .parameters import ConvectionParameters

# Export all submodules
__all__ = [
	"constants",
	"convection",
	"environment",
	"errors",
	"grid",
	"parameters",
	"pool",
	"simulation",
	"visu",
	"ConvectiveParameterization",
	"ConvectionParameters",
	"ConfigurationError",
	"NumericWarning",
]
