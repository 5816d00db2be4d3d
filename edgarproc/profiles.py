"""Diurnal profiles of the emission sectors.

A diurnal profile gives, for each hour of the day (starting at 00:00), a
dimensionless weight redistributing the emissions over the day. Unlike
the ratios of a temporal profile, the weights are not normalized: they
typically average to 1.0 over the day but this is not required.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from os import PathLike
from pathlib import Path
from typing import Any

import numpy as np
import yaml

from edgarproc.fields import N_HOURS

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class DiurnalProfile:
    """Hourly weights of the emissions of a sector.

    :param weights: 24 non negative weights, the first one is for 00:00.
    :param name: Optional name of the profile.
    """

    weights: np.ndarray = field(default_factory=lambda: np.ones(N_HOURS))
    name: str = ""

    def __post_init__(self) -> None:
        self.weights = np.array(self.weights, dtype=float).reshape(-1)
        if self.weights.shape != (N_HOURS,):
            raise ValueError(
                f"{self.weights.shape=} must contain exactly {N_HOURS} values."
            )
        if np.any(self.weights < 0) or not np.all(np.isfinite(self.weights)):
            raise ValueError(f"{self.weights=} must be finite and non negative.")

    @property
    def mean(self) -> float:
        return float(self.weights.mean())

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, DiurnalProfile):
            raise TypeError(f"{other=} must be a {DiurnalProfile}.")
        return bool(np.all(self.weights == other.weights))


FLAT = DiurnalProfile(name="flat")

INDUSTRY = DiurnalProfile(
    [
        0.75, 0.75, 0.78, 0.82, 0.88, 0.95,
        1.02, 1.09, 1.16, 1.22, 1.28, 1.30,
        1.22, 1.24, 1.25, 1.16, 1.08, 1.01,
        0.95, 0.90, 0.85, 0.81, 0.78, 0.75,
    ],
    name="industry",
)  # fmt: skip

POWER_GENERATION = DiurnalProfile(
    [
        0.79, 0.72, 0.72, 0.71, 0.74, 0.80,
        0.92, 1.08, 1.19, 1.22, 1.21, 1.21,
        1.17, 1.15, 1.14, 1.13, 1.10, 1.07,
        1.04, 1.02, 1.02, 1.01, 0.96, 0.88,
    ],
    name="power_generation",
)  # fmt: skip

RESIDENTIAL = DiurnalProfile(
    [
        0.38, 0.36, 0.36, 0.36, 0.37, 0.50,
        1.19, 1.53, 1.57, 1.56, 1.35, 1.16,
        1.07, 1.06, 1.00, 0.98, 0.99, 1.12,
        1.41, 1.52, 1.39, 1.35, 1.00, 0.42,
    ],
    name="residential",
)  # fmt: skip

# Road and non-road land transport
TRANSPORT = DiurnalProfile(
    [
        0.19, 0.09, 0.06, 0.05, 0.09, 0.22,
        0.86, 1.84, 1.86, 1.41, 1.24, 1.20,
        1.32, 1.44, 1.45, 1.59, 2.03, 2.08,
        1.51, 1.06, 0.74, 0.62, 0.61, 0.44,
    ],
    name="transport",
)  # fmt: skip


def from_yaml(yaml_file: PathLike) -> dict[str, DiurnalProfile]:
    """Read diurnal profiles from a yaml file.

    The file maps names to lists of 24 weights::

        industry: [0.75, 0.75, ...]
        flat: [1.0, 1.0, ...]
    """
    yaml_file = Path(yaml_file)

    with open(yaml_file, "r") as f:
        data = yaml.safe_load(f)

    if data is None:
        logger.warning(f"Empty yaml file {yaml_file=}")
        return {}
    elif not isinstance(data, dict):
        raise ValueError(f"Invalid yaml file {yaml_file=}, expected to load a dict.")

    profiles = {}
    for name, weights in data.items():
        try:
            profiles[name] = DiurnalProfile(weights, name=name)
        except Exception as e:
            raise ValueError(
                f"Cannot create profile {name=} from {yaml_file=} with {weights=}"
            ) from e

    return profiles


def to_yaml(profiles: list[DiurnalProfile], yaml_file: PathLike):
    """Write a list of named profiles to a yaml file."""
    yaml_file = Path(yaml_file)
    yaml_file.parent.mkdir(parents=True, exist_ok=True)

    data = {}
    for profile in profiles:
        if not profile.name:
            raise ValueError(f"Cannot write {profile=} without a name.")
        data[profile.name] = profile.weights.tolist()

    with open(yaml_file, "w") as f:
        yaml.dump(data, f)
