"""
Grid geometry, flat indexing and periodic halos for PyConvection.

Core Classes:
- Grid: doubly periodic 2D regular grid with halo metadata

Core Modules:
- neighbourer_flat: flat row-major index arithmetic and periodic wrapping
- halo: periodic halo refresh (numpy and Taichi versions)

Usage:
	import pyconvection as pc

	grid = pc.grid.Grid(128, 128, 781.25, halo=25)
	grid = pc.grid.Grid.for_radius(128, 128, 781.25, 781.25, convective_radius=20000.)

Author: B.G.
"""

from . import neighbourer_flat
from . import halo
from .gridfields import Grid, stencil_half_widths
from .neighbourer_flat import wrap

__all__ = [
	"Grid",
	"stencil_half_widths",
	"wrap",
	"neighbourer_flat",
	"halo",
]
