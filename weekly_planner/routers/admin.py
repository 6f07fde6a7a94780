"""Administrative maintenance endpoints."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from ..db.fixtures import seed_demo_data
from ..db.models import User
from ..dependencies import get_storage, require_admin
from ..schemas import ReseedResponse
from ..services.storage import Storage

LOGGER = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.post("/reseed-demo-data", response_model=ReseedResponse)
def reseed_demo_data(
    storage: Storage = Depends(get_storage), admin: User = Depends(require_admin)
) -> ReseedResponse:
    created = seed_demo_data(storage)
    LOGGER.info("Admin %s reseeded demo data (%d new records)", admin.username, created)
    return ReseedResponse(message="Demo data seeded successfully", created=created)
