"""DOI string format for the journal: ``10.ISUFST.CICT/{year}.{serial}``."""

import re
from typing import Optional

DOI_PREFIX = "10.ISUFST.CICT"
SERIAL_WIDTH = 5

DOI_PATTERN = re.compile(r"^10\.ISUFST\.CICT/(\d{4})\.(\d{5})$")


def format_doi(year: int, serial: int) -> str:
    """Build the DOI for ``serial`` within ``year``, zero-padded to five digits.

    >>> format_doi(2024, 1)
    '10.ISUFST.CICT/2024.00001'
    """
    return f"{DOI_PREFIX}/{year}.{serial:0{SERIAL_WIDTH}d}"


def parse_doi(doi: str) -> Optional[tuple[int, int]]:
    """Return ``(year, serial)`` for a well-formed DOI, else None."""
    match = DOI_PATTERN.match(doi)
    if match is None:
        return None
    return int(match.group(1)), int(match.group(2))


def is_valid_doi(doi: str) -> bool:
    return DOI_PATTERN.match(doi) is not None
