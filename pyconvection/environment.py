"""
Environment initialization and execution strategy management for PyConvection.

The convective scheme can run with three interchangeable engines:
- "sequential": numpy reference implementation, single threaded
- "cpu": Taichi kernels on the multi-threaded cpu backend
- "gpu": Taichi kernels on the gpu backend

Taichi is a process-wide runtime, so the strategy is chosen once at setup.
Components accept an explicit strategy argument and otherwise fall back on
the one recorded here.

Usage:
	import pyconvection as pc

	pc.environment.initialise("cpu")
	...
	pc.environment.reboot()   # before switching to "gpu"

Author: B.G.
"""

import logging
import threading

import taichi as ti

from . import constants as cte
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

_STRATEGY = None

# Held around every Taichi kernel launch: the runtime accepts one launch at a time
KERNEL_LOCK = threading.RLock()


def check_strategy(strategy):
	"""Raise ConfigurationError if strategy is not one of constants.STRATEGIES."""
	if strategy not in cte.STRATEGIES:
		raise ConfigurationError(
			f"Unknown execution strategy {strategy!r}, expected one of {cte.STRATEGIES}"
		)
	return strategy


def initialise(strategy=cte.CPU, **ti_kwargs):
	"""
	Select the execution strategy and start the Taichi runtime if needed.

	Args:
		strategy (str): "sequential", "cpu" or "gpu". Default: "cpu"
		**ti_kwargs: forwarded to ti.init (debug, cpu_max_num_threads, ...)

	Raises:
		RuntimeError: If already initialised (call reboot() first)
		ConfigurationError: If the strategy name is unknown

	Author: B.G.
	"""
	global _STRATEGY
	if _STRATEGY is not None:
		raise RuntimeError(f"PyConvection already initialised with strategy {_STRATEGY!r}")

	check_strategy(strategy)

	if strategy in cte.TAICHI_ARCHS:
		ti.init(arch=cte.TAICHI_ARCHS[strategy], **ti_kwargs)
		logger.info("Taichi runtime started for strategy %s", strategy)
	else:
		logger.info("Using the sequential numpy engine")

	_STRATEGY = strategy


def reboot():
	"""
	Reset the Taichi runtime and forget the selected strategy.

	Every Taichi field allocated before is invalid afterwards.

	Author: B.G.
	"""
	global _STRATEGY
	if _STRATEGY in cte.TAICHI_ARCHS:
		ti.reset()
	_STRATEGY = None


def current_strategy():
	"""Strategy given to initialise(), or None."""
	return _STRATEGY


def resolve_strategy(strategy=None):
	"""
	Strategy a component should use: the explicit one, else the initialised
	one, else "sequential".
	"""
	if strategy is None:
		strategy = _STRATEGY if _STRATEGY is not None else cte.SEQUENTIAL
	return check_strategy(strategy)
