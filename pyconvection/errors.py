"""
Exception and warning types raised by PyConvection.

- ConfigurationError: invalid parameters or grid, raised at setup before any step
- NumericWarning: non fatal, a time pulse drifted outside its event window and was clamped

Author: B.G.
"""


class ConfigurationError(ValueError):
	"""Invalid setup: parameters, grid geometry, halo width or execution strategy."""


class NumericWarning(RuntimeWarning):
	"""A convective contribution fell outside its event window and was clamped to zero."""
