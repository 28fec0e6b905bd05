# hvacquote/services/lead_store.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, List, Optional

from hvacquote.schemas.lead import Lead, LeadCreate


class LeadStore:
    """Captured leads, kept in process memory."""

    def __init__(self) -> None:
        self._leads: Dict[int, Lead] = {}
        self._next_id = 1

    def add(self, data: LeadCreate) -> Lead:
        lead = Lead(
            **data.model_dump(),
            id=self._next_id,
            createdAt=datetime.now(timezone.utc),
        )
        self._next_id += 1
        self._leads[lead.id] = lead
        return lead

    def get(self, lead_id: int) -> Optional[Lead]:
        return self._leads.get(lead_id)

    def list_all(self) -> List[Lead]:
        # newest first
        return sorted(self._leads.values(), key=lambda l: l.id, reverse=True)
