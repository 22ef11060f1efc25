"""
FastAPI app entrypoint.
"""
import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from dockslot.config import settings
from dockslot.core.errors import (
    DockSlotError,
    dockslot_error_handler,
    request_validation_handler,
    unhandled_error_handler,
)
from dockslot.db.base import Base, engine
from dockslot.api.routes import availability as availability_router
from dockslot.api.routes import bookings as bookings_router
from dockslot.api.routes import captains as captains_router
from dockslot.api.routes import public as public_router
from dockslot.api.routes import trip_types as trip_types_router

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


app = FastAPI(title="DockSlot", version="0.1.0")

app.add_exception_handler(DockSlotError, dockslot_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)
app.add_exception_handler(Exception, unhandled_error_handler)


@app.on_event("startup")
def startup():
    Base.metadata.create_all(bind=engine)
    logger.info("DockSlot API ready")


@app.get("/")
def root():
    return {"message": "DockSlot booking API running"}


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


app.include_router(captains_router.router)
app.include_router(availability_router.router)
app.include_router(trip_types_router.router)
app.include_router(bookings_router.router)
app.include_router(public_router.router)
