"""DOI allocation on top of the per-year sequence."""

from ictirc.doi import format_doi
from ictirc.repositories.doi_sequence_repository import DoiSequenceRepository
from ictirc.utils.logger import get_logger

log = get_logger(__name__)


class DoiService:
    def __init__(self, sequence_repository: DoiSequenceRepository):
        self.sequence_repository = sequence_repository

    async def allocate(self, year: int) -> str:
        """Reserve the next serial for ``year`` and return its DOI.

        Serials are never reused, including after revocation. The increment
        belongs to the caller's transaction and rolls back with it.
        """
        serial = await self.sequence_repository.next_serial(year)
        doi = format_doi(year, serial)
        log.info("doi allocated", year=year, serial=serial, doi=doi)
        return doi
