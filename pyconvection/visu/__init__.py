"""
Visualisation helpers for PyConvection.

- snapshot: matplotlib view of the height field with convecting cells outlined

Author: B.G.
"""

from .snapshot import plot_convective_state

__all__ = [
	"plot_convective_state",
]
