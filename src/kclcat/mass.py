"""Module computing the mass of KCL files.

KCL files carry their material parameters and units as comments:

    // units = mm
    // material-density: 2.70
    // material-density-units: g:cm3

We parse these hints with pure functions and delegate the actual
computation to the `zoo` command line tool:

    zoo kcl mass --material-density=2.70 --material-density-unit=g:cm3 \\
        --output-unit=kg --src-unit=mm --format=json bracket.kcl

which prints a JSON object like `{"mass": "12.3456", "output_unit": "kg"}`.
"""

from __future__ import annotations

import json
import logging
import re
import subprocess
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from pathlib import Path
from tempfile import TemporaryDirectory
from typing import Final, Protocol

from .datadir import data_dir_or_default, temp_dir_for_data_dir
from .errors import CalculationError
from .ghremote import KCL_SUFFIX

DEFAULT_SOURCE_UNIT: Final[str] = "in"

OUTPUT_UNIT_FOR_SOURCE_UNIT: Final[dict[str, str]] = {
    "in": "lb",
    "mm": "kg",
}
"""Fixed mapping from the source length unit to the output mass unit."""

_DENSITY_RE = re.compile(r"^//\s*material-density\s*:\s*([\d.]+)")
_DENSITY_UNIT_RE = re.compile(r"^//\s*material-density-units\s*:\s*(\S+)")
_SOURCE_UNIT_RE = re.compile(r"^//\s*units\s*=\s*(\w+)")
_TWO_PLACES = Decimal("0.01")

log = logging.getLogger("mass")


@dataclass(frozen=True, kw_only=True)
class MaterialParameters:
    """Material density and its unit, verbatim from the file comments."""

    density: str | None
    density_unit: str | None


@dataclass(frozen=True, kw_only=True)
class UnitHints:
    """Source length unit of the model and the matching output mass unit."""

    source_unit: str
    output_unit: str


@dataclass(frozen=True, kw_only=True)
class MassResult:
    """Mass computed by a MassCalculator, rounded to two decimals."""

    mass: float
    unit: str


def _first_match(pattern: re.Pattern[str], content: str) -> str | None:
    for line in content.splitlines():
        match = pattern.match(line.strip())
        if match:
            return match.group(1)
    return None


def extract_material_parameters(content: str) -> MaterialParameters:
    """Return the first density and density unit found in the comments."""
    return MaterialParameters(
        density=_first_match(_DENSITY_RE, content),
        density_unit=_first_match(_DENSITY_UNIT_RE, content),
    )


def extract_source_unit(content: str) -> UnitHints:
    """
    Return the source unit declared with `// units = ...` and the output unit.

    Without a declaration we assume inches. Units we do not know about
    are passed through to the calculator and produce pounds.
    """
    source_unit = _first_match(_SOURCE_UNIT_RE, content)
    source_unit = source_unit.lower() if source_unit else DEFAULT_SOURCE_UNIT
    return UnitHints(
        source_unit=source_unit,
        output_unit=OUTPUT_UNIT_FOR_SOURCE_UNIT.get(source_unit, "lb"),
    )


class MassCalculator(Protocol):
    """
    Capability of computing the mass of a KCL file.

    Methods:
        compute_mass: compute the mass of the given content or
            raise CalculationError.
    """

    def compute_mass(
        self,
        content: str,
        density: str | None,
        density_unit: str | None,
        file_id: str,
    ) -> MassResult: ...


class ScratchArea:
    """
    Temporary directory holding local copies of KCL files.

    Use as a context manager scoped to the application run:

        with ScratchArea(data_dir=data_dir) as scratch:
            calculator = ZooMassCalculator(scratch)
            ...

    The directory lives under $datadir/temp and is removed on exit.
    """

    def __init__(self, *, data_dir: str | Path | None = None) -> None:
        self.parent = temp_dir_for_data_dir(data_dir_or_default(data_dir))
        self._tmp_dir: TemporaryDirectory[str] | None = None

    def __enter__(self) -> ScratchArea:
        self.parent.mkdir(parents=True, exist_ok=True)
        self._tmp_dir = TemporaryDirectory(dir=self.parent)
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        if self._tmp_dir is not None:
            self._tmp_dir.cleanup()
            self._tmp_dir = None
        return False

    @property
    def path(self) -> Path:
        if self._tmp_dir is None:
            raise RuntimeError("scratch area used outside of its context")
        return Path(self._tmp_dir.name)

    def write(self, name: str, content: str) -> Path:
        """Write content to a scratch file and return its path."""
        dest = self.path / name
        dest.write_text(content)
        log.debug("saved %s locally at %s", name, dest)
        return dest


class ZooMassCalculator:
    """
    MassCalculator that shells out to `zoo kcl mass`.

    Each invocation writes the content into the scratch area and runs
    one process, waiting for it to exit.
    """

    def __init__(self, scratch: ScratchArea, *, executable: str = "zoo") -> None:
        self.scratch = scratch
        self.executable = executable

    def compute_mass(
        self,
        content: str,
        density: str | None,
        density_unit: str | None,
        file_id: str,
    ) -> MassResult:
        if density is None or density_unit is None:
            raise CalculationError(f"{file_id}: missing material density or density unit")

        hints = extract_source_unit(content)
        log.info(
            "computing mass of %s (source unit %s, output unit %s)... start",
            file_id,
            hints.source_unit,
            hints.output_unit,
        )
        local_path = self.scratch.write(f"{file_id}{KCL_SUFFIX}", content)
        argv = [
            self.executable,
            "kcl",
            "mass",
            f"--material-density={density}",
            f"--material-density-unit={density_unit}",
            f"--output-unit={hints.output_unit}",
            f"--src-unit={hints.source_unit}",
            "--format=json",
            str(local_path),
        ]
        try:
            proc = subprocess.run(argv, capture_output=True, text=True, check=False)
        except OSError as exc:
            raise CalculationError(f"{file_id}: cannot run {self.executable}: {exc}") from exc

        if proc.returncode != 0:
            raise CalculationError(
                f"{file_id}: {self.executable} exited with {proc.returncode}: {proc.stderr.strip()}"
            )

        result = parse_mass_output(proc.stdout, file_id=file_id)
        log.info("computing mass of %s... ok (%.2f %s)", file_id, result.mass, result.unit)
        return result


def parse_mass_output(stdout: str, *, file_id: str = "") -> MassResult:
    """
    Parse the JSON printed by the calculator.

    Raises:
        CalculationError: if the output is not JSON or lacks the expected fields.
    """
    try:
        parsed = json.loads(stdout)
    except json.JSONDecodeError as exc:
        raise CalculationError(f"{file_id}: cannot parse calculator output: {exc}") from exc

    if (
        not isinstance(parsed, dict)
        or parsed.get("mass") is None
        or parsed.get("output_unit") in (None, "")
    ):
        raise CalculationError(f"{file_id}: mass or output unit missing in calculator output")

    # Round half up, the way the mass is displayed with two decimals
    try:
        mass = Decimal(str(parsed["mass"])).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise CalculationError(f"{file_id}: invalid mass {parsed['mass']!r}") from exc
    if not mass.is_finite():
        raise CalculationError(f"{file_id}: invalid mass {parsed['mass']!r}")

    return MassResult(mass=float(mass), unit=str(parsed["output_unit"]))
