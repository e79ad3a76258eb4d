"""
Triggered convection submodule for PyConvection.

Implements the convective parameterization of Yang and Ingersoll (2013) for
shallow water models: cells whose height crosses a threshold start a
convective event of fixed duration tau_c, during which they inject (or, in
boundary layer mode, remove) mass over a disk of radius R with a parabolic
time profile.

Core Modules:
- stencil: HeatingStencil, spatial profile of one event
- tracker: ConvectiveStateTracker, per-cell convecting flag and trigger time
- forcing: ForcingEvaluator, net height source at any cell, momentum damping
- parameterization: ConvectiveParameterization, the driver facing entry point
- conv_kernels: Taichi kernels ("cpu" and "gpu" strategies)
- reference: numpy implementation ("sequential" strategy)

Usage:
	import pyconvection as pc
	import numpy as np

	pc.environment.initialise("cpu")
	params = pc.ConvectionParameters(tau_c=50., h_threshold=40., convective_radius=250., q0=1e6)
	grid = pc.grid.Grid(10, 10, 100., halo=3)
	conv = pc.convection.ConvectiveParameterization(grid, params)

	h = np.full((10, 10), 50.)
	h[5, 5] = 35.
	conv.on_step_start(h, 0.)
	conv.source_term(5, 5, 25., h)

Scientific Background:
Yang, D., and A. P. Ingersoll, 2013: Triggered Convection, Gravity Waves, and
the MJO: A Shallow-Water Model. J. Atmos. Sci., 70, 2476-2486,
https://doi.org/10.1175/JAS-D-12-0255.1.

Author: B.G.
"""

from . import conv_kernels
from . import reference
from .stencil import HeatingStencil
from .tracker import ConvectiveStateTracker
from .forcing import ForcingEvaluator, u_damping, v_damping, relaxation
from .parameterization import ConvectiveParameterization

__all__ = [
	# Core classes
	"HeatingStencil",
	"ConvectiveStateTracker",
	"ForcingEvaluator",
	"ConvectiveParameterization",

	# Damping and relaxation terms
	"u_damping",
	"v_damping",
	"relaxation",

	# Module names
	"conv_kernels",
	"reference",
]
