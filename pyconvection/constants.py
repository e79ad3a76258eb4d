"""
Global constants and default parameters for PyConvection.

This module centralises the data types used by the Taichi fields, the names of
the execution strategies and the reference parameter sets of the triggered
convection scheme (Yang and Ingersoll 2013) as they were used in the shallow
water runs this package was built for.

Constant Categories:
- Field data types: storage type of every Taichi field allocated by the package
- Execution strategies: names accepted by environment.initialise()
- Grid constants: minimum halo width
- Reference runs: parameter dictionaries accepted by ConvectionParameters.from_dict

Usage:
	import pyconvection as pc

	params = pc.ConvectionParameters.from_dict(pc.constants.DEBUG_RUN)
	grid = pc.grid.Grid.for_radius(500, 500, 3000., 3000., params.convective_radius)

Author: B.G.
"""

import taichi as ti


#########################################
###### FIELD DATA TYPES #################
#########################################

# Convecting flag (0 or 1). Taichi has no portable boolean field type.
FLAG = ti.u8

# Trigger times. Kept in double precision: simulated times reach 1e6 s and
# the duration test (elapsed < tau_c) must not drift.
TIME = ti.f64

# Height, stencil weights and forcing fields. Double precision so that the
# Taichi engines take the same threshold decisions as the numpy engine.
FLOAT = ti.f64

# Counters filled by kernels
COUNT = ti.i32


#########################################
###### EXECUTION STRATEGIES #############
#########################################

# numpy reference, single thread
SEQUENTIAL = "sequential"
# Taichi kernels on the multi-threaded cpu backend
CPU = "cpu"
# Taichi kernels on the default gpu backend (cuda, vulkan, metal...)
GPU = "gpu"

STRATEGIES = (SEQUENTIAL, CPU, GPU)

TAICHI_ARCHS = {
	CPU: ti.cpu,
	GPU: ti.gpu,
}


#########################################
###### GRID CONSTANTS ###################
#########################################

# Smallest halo allocated by Grid.for_radius, whatever the stencil size
MIN_HALO = 3


#########################################
###### REFERENCE PARAMETER SETS #########
#########################################

# 15 days debug run: convection acts as a boundary layer mass sink
DEBUG_RUN = {
	"tau_c": 10800.0,                            # duration of convective events (s)
	"h_threshold": 130.0,                        # critical height triggering convection (m)
	"q0": 3e9,                                   # amplitude of a convective event
	"radiative_cooling_rate": (1.12/3)*1.0e-8,  # large scale forcing
	"convective_radius": 30000.0,                # radius of a convective event (m)
	"relaxation_parameter": 1.0/(2*86400),       # 1/tau, friction and height recovery
	"relaxation_height": 129.0,                  # target of the height recovery (m)
	"boundary_layer": True,
}

# Long f-plane run: convection adds mass
FPLANE_LONG_RUN = {
	"tau_c": 50.0,
	"h_threshold": 40.0,
	"q0": 1.0e9,
	"radiative_cooling_rate": 1.0e-8,
	"convective_radius": 20000.0,
	"relaxation_parameter": 1.0/3600.0,
	"relaxation_height": 38.0,
	"boundary_layer": False,
}
