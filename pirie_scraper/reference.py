"""
Street, suffix, suburb and hundred reference tables.

The tables are loaded once and passed explicitly to the address resolver.
All mappings are read-only after loading.
"""

import csv
import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional, Tuple, Union

from .models import ReferenceDataError


STREET_NAMES_FILE = "streetnames.txt"
STREET_SUFFIXES_FILE = "streetsuffixes.txt"
SUBURB_NAMES_FILE = "suburbnames.txt"

PathLike = Union[str, Path]


def _empty_mapping() -> Mapping:
    return MappingProxyType({})


@dataclass(frozen=True)
class ReferenceData:
    """Immutable lookup context for address resolution."""
    street_suburbs: Mapping[str, Tuple[str, ...]] = field(default_factory=_empty_mapping)
    street_suffixes: Mapping[str, str] = field(default_factory=_empty_mapping)
    suburb_names: Mapping[str, str] = field(default_factory=_empty_mapping)
    hundred_suburbs: Mapping[str, Tuple[str, ...]] = field(default_factory=_empty_mapping)

    @classmethod
    def from_dicts(
        cls,
        street_suburbs: Optional[Dict[str, List[str]]] = None,
        street_suffixes: Optional[Dict[str, str]] = None,
        suburb_names: Optional[Dict[str, str]] = None,
        hundred_suburbs: Optional[Dict[str, List[str]]] = None
    ) -> "ReferenceData":
        """
        Build reference data from plain dictionaries.

        Keys are lowercased; multi-valued entries keep their order.
        """
        return cls(
            street_suburbs=_freeze_multi(street_suburbs or {}),
            street_suffixes=MappingProxyType(
                {k.lower(): v for k, v in (street_suffixes or {}).items()}
            ),
            suburb_names=MappingProxyType(
                {k.lower(): v for k, v in (suburb_names or {}).items()}
            ),
            hundred_suburbs=_freeze_multi(hundred_suburbs or {}),
        )

    def suburbs_for_street(self, street_name: str) -> Tuple[str, ...]:
        return self.street_suburbs.get(street_name.lower(), ())

    def suburbs_for_hundred(self, hundred_name: str) -> Tuple[str, ...]:
        return self.hundred_suburbs.get(hundred_name.lower(), ())

    def expand_suffix(self, abbreviation: str) -> Optional[str]:
        return self.street_suffixes.get(abbreviation.lower())

    def lookup_suburb(self, suburb_name: str) -> str:
        return self.suburb_names.get(suburb_name.lower(), "")


def _freeze_multi(table: Dict[str, List[str]]) -> Mapping[str, Tuple[str, ...]]:
    frozen: Dict[str, List[str]] = {}
    for key, values in table.items():
        frozen.setdefault(key.lower(), []).extend(values)
    return MappingProxyType({k: tuple(v) for k, v in frozen.items()})


def _read_lines(path: PathLike, min_fields: int,
                logger: logging.Logger) -> Iterator[List[str]]:
    """Yield the fields of each usable line of a delimited file."""
    path = Path(path)
    if not path.exists():
        raise ReferenceDataError(f"Reference file not found: {path}")

    with open(path, newline='', encoding='utf-8') as f:
        for line_number, fields in enumerate(csv.reader(f), 1):
            if not fields or not any(value.strip() for value in fields):
                continue
            if len(fields) < min_fields:
                logger.warning(f"{path.name}:{line_number}: expected {min_fields} fields, "
                               f"found {len(fields)}; line skipped")
                continue
            yield fields


def load_street_suburbs(path: PathLike,
                        logger: Optional[logging.Logger] = None) -> Mapping[str, Tuple[str, ...]]:
    """
    Load street name to suburb associations.

    Each line is ``streetName,suburbName``. A street may repeat across lines
    when it passes through several suburbs.

    Args:
        path: Path to the street names file
        logger: Logger instance

    Returns:
        Read-only mapping of lowercase street name to suburbs
    """
    logger = logger or logging.getLogger(__name__)
    table: Dict[str, List[str]] = {}
    for fields in _read_lines(path, 2, logger):
        street_name = fields[0].strip().lower()
        table.setdefault(street_name, []).append(fields[1].strip())
    return _freeze_multi(table)


def load_street_suffixes(path: PathLike,
                         logger: Optional[logging.Logger] = None) -> Mapping[str, str]:
    """Load ``abbreviation,fullWord`` pairs keyed by lowercase abbreviation."""
    logger = logger or logging.getLogger(__name__)
    table: Dict[str, str] = {}
    for fields in _read_lines(path, 2, logger):
        table[fields[0].strip().lower()] = fields[1].strip()
    return MappingProxyType(table)


def load_suburbs(path: PathLike,
                 logger: Optional[logging.Logger] = None
                 ) -> Tuple[Mapping[str, str], Mapping[str, Tuple[str, ...]]]:
    """
    Load suburb records.

    Each line is ``suburbName,"SUBURB STATE POSTCODE",hundred1;hundred2``.
    Every listed hundred is associated with the suburb's display string.

    Args:
        path: Path to the suburb names file
        logger: Logger instance

    Returns:
        Tuple of (suburb name mapping, hundred name mapping)
    """
    logger = logger or logging.getLogger(__name__)
    suburbs: Dict[str, str] = {}
    hundreds: Dict[str, List[str]] = {}

    for fields in _read_lines(path, 2, logger):
        suburb_name = fields[0].strip().lower()
        display_name = fields[1].strip()
        suburbs[suburb_name] = display_name

        hundred_field = fields[2] if len(fields) > 2 else ""
        for hundred_name in hundred_field.split(";"):
            hundred_name = hundred_name.strip().lower()
            if hundred_name:
                hundreds.setdefault(hundred_name, []).append(display_name)

    return MappingProxyType(suburbs), _freeze_multi(hundreds)


def load_reference_data(data_dir: PathLike = ".",
                        logger: Optional[logging.Logger] = None) -> ReferenceData:
    """
    Read all street, suffix, suburb and hundred information.

    Args:
        data_dir: Directory holding the three reference files
        logger: Logger instance

    Returns:
        ReferenceData context
    """
    logger = logger or logging.getLogger(__name__)
    data_dir = Path(data_dir)

    street_suburbs = load_street_suburbs(data_dir / STREET_NAMES_FILE, logger)
    street_suffixes = load_street_suffixes(data_dir / STREET_SUFFIXES_FILE, logger)
    suburb_names, hundred_suburbs = load_suburbs(data_dir / SUBURB_NAMES_FILE, logger)

    logger.debug(f"Loaded {len(street_suburbs)} streets, {len(street_suffixes)} suffixes, "
                 f"{len(suburb_names)} suburbs and {len(hundred_suburbs)} hundreds")

    return ReferenceData(
        street_suburbs=street_suburbs,
        street_suffixes=street_suffixes,
        suburb_names=suburb_names,
        hundred_suburbs=hundred_suburbs,
    )
