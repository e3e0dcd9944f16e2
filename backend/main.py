# booking-backend/main.py

import logging
from typing import Annotated, List, Literal, Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, ConfigDict, EmailStr, StringConstraints, field_validator
from pydantic.alias_generators import to_camel

import settings
from booking_ledger import BookingError, BookingLedger, BookingResult
from booking_store import BookingStore, JsonFileStore, MemoryStore, SqlStore, sample_bookings
from csv_export import bookings_to_csv, export_filename
from notifications import send_calendar_invite, send_status_notification
from schemas import Booking, BookingStatus, SlotAvailability
from slot_generator import SlotCatalog, SlotPolicy, utcnow

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

MISSING_FIELDS = "Missing required fields"
INVALID_EMAIL = "Invalid email address"
INVALID_STATUS = 'Invalid status. Must be "approved" or "denied"'
INVALID_BODY = "Invalid request body"

ERROR_STATUS_CODES = {
    BookingError.INVALID_SLOT: status.HTTP_400_BAD_REQUEST,
    BookingError.SLOT_ALREADY_BOOKED: status.HTTP_409_CONFLICT,
    BookingError.BOOKING_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    BookingError.STORAGE_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


# --- Pydantic Models for API Request/Response ---
RequiredText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class BookingRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    slot_id: RequiredText
    customer_name: RequiredText
    customer_email: EmailStr
    reason: RequiredText

    @field_validator("customer_email", mode="before")
    @classmethod
    def normalize_email(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value


class StatusUpdate(BaseModel):
    status: Literal["approved", "denied"]


# --- Wiring ---
def slot_policy_from_settings() -> SlotPolicy:
    return SlotPolicy(
        horizon_days=settings.HORIZON_DAYS,
        horizon_start=settings.HORIZON_START,
        day_start_hour=settings.BUSINESS_START_HOUR,
        day_end_hour=settings.BUSINESS_END_HOUR,
        interval_minutes=settings.SLOT_INTERVAL_MINUTES,
        weekdays_only=settings.WEEKDAYS_ONLY,
    )


def build_store(catalog: SlotCatalog) -> BookingStore:
    backend = settings.BOOKING_STORAGE.lower()
    if backend == "json":
        return JsonFileStore(settings.BOOKINGS_FILE)
    if backend == "sql":
        return SqlStore(settings.DATABASE_URL)
    if backend == "memory":
        seed = sample_bookings(catalog.slots(), utcnow()) if settings.SEED_SAMPLE_BOOKINGS else []
        return MemoryStore(seed)
    raise ValueError(f"Unknown BOOKING_STORAGE {settings.BOOKING_STORAGE!r}; use json, memory or sql")


def build_ledger() -> BookingLedger:
    """Construct the slot catalog, the configured store and the ledger over them."""
    catalog = SlotCatalog(slot_policy_from_settings())
    return BookingLedger(catalog, build_store(catalog))


def _unwrap(result: BookingResult) -> Booking:
    if not result.ok:
        raise HTTPException(status_code=ERROR_STATUS_CODES[result.error], detail=result.error.value)
    return result.booking


def _validation_message(request: Request, errors: list) -> str:
    if any(e["type"] == "json_invalid" for e in errors):
        return INVALID_BODY
    if request.method == "PATCH" or any("status" in e["loc"] for e in errors):
        return INVALID_STATUS
    email_errors = [e for e in errors if e["loc"][-1:] == ("customerEmail",)]
    if len(email_errors) == len(errors) and all(e["type"] != "missing" for e in errors):
        return INVALID_EMAIL
    return MISSING_FIELDS


def create_app(ledger: Optional[BookingLedger] = None) -> FastAPI:
    """Create the booking API around ``ledger`` (built from settings when omitted)."""
    if ledger is None:
        ledger = build_ledger()

    # Initialize FastAPI app
    app = FastAPI(
        title="Appointment Booking API",
        description="API for requesting appointment slots and reviewing requests.",
        version="0.2.0",
    )
    app.state.ledger = ledger

    # --- CORS Configuration ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": _validation_message(request, exc.errors())},
        )

    # --- API Endpoints ---

    @app.on_event("startup")
    async def startup_event():
        catalog = app.state.ledger.catalog
        logger.info(
            "Slot catalog ready: %d slots generated for %s; storage=%s",
            len(catalog), catalog.generated_for, app.state.ledger.store.name,
        )

    @app.get("/")
    async def read_root():
        return {"message": "Welcome to the Appointment Booking API!"}

    @app.get("/health")
    def health():
        return {"status": "ok", "slots": len(app.state.ledger.catalog)}

    @app.get("/api/slots", response_model=List[SlotAvailability])
    def get_slots():
        """List every slot of the current week with its real-time availability."""
        return app.state.ledger.list_availability()

    @app.get("/api/bookings", response_model=List[Booking])
    def get_bookings(status: Optional[BookingStatus] = None):
        """List booking requests ordered by appointment time."""
        return app.state.ledger.list_bookings(status=status)

    @app.get("/api/bookings/summary")
    def get_booking_summary():
        """Count bookings per status for the operator dashboard."""
        return app.state.ledger.status_counts()

    @app.get("/api/bookings/export")
    def export_bookings():
        """Download every booking as CSV."""
        content = bookings_to_csv(app.state.ledger.list_bookings())
        filename = export_filename(utcnow().date())
        return Response(
            content=content,
            media_type="text/csv",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    @app.get("/api/bookings/{booking_id}", response_model=Booking)
    def get_booking(booking_id: str):
        return _unwrap(app.state.ledger.get_booking(booking_id))

    @app.post("/api/bookings", response_model=Booking, status_code=status.HTTP_201_CREATED)
    def create_booking(booking_request: BookingRequest):
        """
        Request a slot. The booking starts out pending until the operator
        approves or denies it.
        """
        booking = _unwrap(
            app.state.ledger.create_booking(
                slot_id=booking_request.slot_id,
                customer_name=booking_request.customer_name,
                customer_email=booking_request.customer_email,
                reason=booking_request.reason,
            )
        )
        send_calendar_invite(booking)
        return booking

    @app.patch("/api/bookings/{booking_id}", response_model=Booking)
    def update_booking_status(booking_id: str, update: StatusUpdate):
        """Approve or deny a booking request. Denying frees the slot."""
        booking = _unwrap(app.state.ledger.update_status(booking_id, BookingStatus(update.status)))
        send_status_notification(booking)
        return booking

    return app


app = create_app()
