from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from dockslot.db.base import get_db
from dockslot.db.models.profile import Profile
from dockslot.schemas.profile import (
    CaptainRegister,
    CaptainRegisterResponse,
    CaptainResponse,
    CaptainSettingsUpdate,
)
from dockslot.core.security import get_current_captain
from dockslot.services import captains as captain_service

router = APIRouter(prefix="/captains", tags=["captains"])


@router.post("/register", response_model=CaptainRegisterResponse, status_code=201)
def register(payload: CaptainRegister, db: Session = Depends(get_db)):
    captain, token = captain_service.register_captain(db, payload)
    return {"captain": captain, "api_token": token}


@router.get("/me", response_model=CaptainResponse)
def get_me(current_captain: Profile = Depends(get_current_captain)):
    return current_captain


@router.patch("/me", response_model=CaptainResponse)
def update_me(
    payload: CaptainSettingsUpdate,
    db: Session = Depends(get_db),
    current_captain: Profile = Depends(get_current_captain),
):
    return captain_service.update_settings(db, current_captain, payload)
