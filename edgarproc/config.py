"""Configuration of the EDGAR processing."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from os import PathLike
from pathlib import Path

import yaml

from edgarproc import FILES_DIR

logger = logging.getLogger(__name__)


@dataclass
class EdgarConfig:
    """Flags selecting what is processed.

    :param use_nox: Process the NOx emissions.
    :param use_co: Process the CO emissions.
    :param use_sox: Process the SO2 emissions (anthropogenic and ships).
    :param use_ship: Include the shipping sectors. If False, ship SO2 is
        zero and the shipping sectors of the other tracers are skipped.
    :param use_future_emissions: Multiply the values returned by the
        accessor by the future emission scale factors.
    :param data_dir: Directory containing the EDGAR files.
    """

    use_nox: bool = True
    use_co: bool = True
    use_sox: bool = True
    use_ship: bool = True
    use_future_emissions: bool = False
    data_dir: Path = field(default_factory=lambda: FILES_DIR / "EDGAR_200607")

    def __post_init__(self):
        self.data_dir = Path(self.data_dir)
        for f in fields(self):
            if f.name == "data_dir":
                continue
            value = getattr(self, f.name)
            if not isinstance(value, bool):
                raise TypeError(f"{f.name}={value!r} must be a bool.")

    @classmethod
    def from_yaml(cls, yaml_file: PathLike) -> EdgarConfig:
        """Load the configuration from a yaml file.

        Missing keys get their default value. Relative ``data_dir`` are
        relative to the yaml file.
        """
        yaml_file = Path(yaml_file)
        with open(yaml_file, "r") as f:
            data = yaml.safe_load(f)

        if data is None:
            logger.warning(f"Empty yaml file {yaml_file=}, using default config.")
            return cls()
        elif not isinstance(data, dict):
            raise ValueError(f"Invalid yaml file {yaml_file=}, expected to load a dict.")

        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            logger.warning(f"Ignoring unknown keys {sorted(unknown)} in {yaml_file}.")

        kwargs = {k: v for k, v in data.items() if k in known}
        if "data_dir" in kwargs:
            data_dir = Path(kwargs["data_dir"])
            if not data_dir.is_absolute():
                data_dir = yaml_file.parent / data_dir
            kwargs["data_dir"] = data_dir

        return cls(**kwargs)

    def to_yaml(self, yaml_file: PathLike):
        """Write the configuration to a yaml file."""
        yaml_file = Path(yaml_file)
        yaml_file.parent.mkdir(parents=True, exist_ok=True)
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data["data_dir"] = str(self.data_dir)
        with open(yaml_file, "w") as f:
            yaml.dump(data, f)
