"""Field changes that accompany a transition to PUBLISHED."""

from datetime import datetime
from typing import Any

from ictirc.models.paper import Paper
from ictirc.services.doi_service import DoiService


class PublicationService:
    def __init__(self, doi_service: DoiService):
        self.doi_service = doi_service

    async def publication_values(self, paper: Paper, now: datetime) -> dict[str, Any]:
        """Stamp ``published_at`` and allocate a DOI for the current year if missing."""
        values: dict[str, Any] = {"published_at": now}
        if paper.doi is None:
            values["doi"] = await self.doi_service.allocate(now.year)
        return values
