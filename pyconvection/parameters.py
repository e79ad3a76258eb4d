"""
Immutable parameter set of the triggered convection scheme.

One ConvectionParameters instance is built at setup and shared, read only, by
the heating stencil, the state tracker and the forcing evaluator.

Usage::

    from pyconvection.parameters import ConvectionParameters

    params = ConvectionParameters.from_file("params.json")
    params = ConvectionParameters.from_dict(pyconvection.constants.DEBUG_RUN)
"""

from __future__ import annotations

import json
import math
import os

from pydantic import BaseModel, ValidationError

from .errors import ConfigurationError


class ConvectionParameters(BaseModel):
    """Physical parameters of the convective parameterization."""

    tau_c: float
    h_threshold: float
    convective_radius: float
    q0: float
    radiative_cooling_rate: float = 0.0
    relaxation_parameter: float = 0.0
    relaxation_height: float = 0.0
    boundary_layer: bool = False

    model_config = {"frozen": True, "extra": "forbid"}

    def check(self) -> "ConvectionParameters":
        """Raise ConfigurationError on values the scheme cannot run with."""
        if not self.tau_c > 0:
            raise ConfigurationError(f"tau_c must be > 0, got {self.tau_c}")
        if not self.convective_radius > 0:
            raise ConfigurationError(
                f"convective_radius must be > 0, got {self.convective_radius}"
            )
        if not math.isfinite(self.h_threshold):
            raise ConfigurationError(
                f"h_threshold must be finite, got {self.h_threshold}"
            )
        for name in ("q0", "radiative_cooling_rate", "relaxation_parameter",
                     "relaxation_height"):
            if not math.isfinite(getattr(self, name)):
                raise ConfigurationError(f"{name} must be finite")
        return self

    @property
    def sign(self) -> float:
        """+1 when convection adds mass, -1 in boundary layer mode."""
        return -1.0 if self.boundary_layer else 1.0

    @property
    def radiative_term(self) -> float:
        """Constant radiative contribution to the height forcing."""
        return -self.radiative_cooling_rate if self.boundary_layer else self.radiative_cooling_rate

    @classmethod
    def from_dict(cls, data: dict) -> "ConvectionParameters":
        """Validate a mapping, raising ConfigurationError on any problem."""
        try:
            params = cls.model_validate(data)
        except ValidationError as exc:
            raise ConfigurationError(str(exc)) from exc
        return params.check()

    @classmethod
    def from_file(cls, path: str) -> "ConvectionParameters":
        """Load and validate a JSON parameter file."""
        if not os.path.isfile(path):
            raise FileNotFoundError(f'Could not find parameter file "{path}"')
        with open(path) as f:
            data = json.load(f)
        return cls.from_dict(data)
