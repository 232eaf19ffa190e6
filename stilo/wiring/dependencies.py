from functools import lru_cache
import logging
from datetime import datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from stilo.core.config import settings
from stilo.application.dto.booking_context import BookingContext
from stilo.application.ports.business_catalog import BusinessCatalogPort
from stilo.application.ports.identity import IdentityPort
from stilo.application.ports.reservation_store import ReservationStorePort
from stilo.application.ports.session_store import BookingSessionStorePort
from stilo.application.use_cases.booking_flow import BookingFlowController
from stilo.domain.entities.identity import CustomerIdentity
from stilo.infrastructure.memory.memory_catalog import MemoryBusinessCatalog
from stilo.infrastructure.memory.memory_reservations import MemoryReservationStore
from stilo.infrastructure.memory.memory_sessions import MemoryBookingSessionStore
from stilo.infrastructure.memory.static_identity import StaticIdentityProvider
from stilo.infrastructure.supabase.rest_client import SupabaseRestClient
from stilo.infrastructure.supabase.supabase_catalog import SupabaseBusinessCatalog
from stilo.infrastructure.supabase.supabase_identity import SupabaseIdentityProvider
from stilo.infrastructure.supabase.supabase_reservations import SupabaseReservationStore


_memory_catalog: MemoryBusinessCatalog | None = None
_memory_reservations: MemoryReservationStore | None = None
_session_store: MemoryBookingSessionStore | None = None


def _use_supabase() -> bool:
    return settings.BACKEND_PROVIDER.lower() == "supabase"


@lru_cache
def get_timezone() -> ZoneInfo:
    try:
        return ZoneInfo(settings.LOCAL_TIMEZONE)
    except (ZoneInfoNotFoundError, ValueError):
        logging.getLogger(__name__).warning(
            "Unknown LOCAL_TIMEZONE, falling back to UTC", extra={"reason": settings.LOCAL_TIMEZONE}
        )
        return ZoneInfo("UTC")


def local_now() -> datetime:
    """Current local wall-clock time, naive."""
    return datetime.now(get_timezone()).replace(tzinfo=None)


@lru_cache
def get_supabase_client() -> SupabaseRestClient:
    return SupabaseRestClient()


def get_business_catalog() -> BusinessCatalogPort:
    global _memory_catalog
    if _use_supabase():
        return SupabaseBusinessCatalog(get_supabase_client())
    if _memory_catalog is None:
        _memory_catalog = MemoryBusinessCatalog()
    return _memory_catalog


def get_reservation_store(access_token: str | None = None) -> ReservationStorePort:
    global _memory_reservations
    if _use_supabase():
        return SupabaseReservationStore(get_supabase_client(), get_timezone(), access_token=access_token)
    if _memory_reservations is None:
        _memory_reservations = MemoryReservationStore()
    return _memory_reservations


def get_identity(access_token: str | None) -> IdentityPort:
    if _use_supabase():
        return SupabaseIdentityProvider(get_supabase_client(), access_token, sign_in_path=settings.SIGN_IN_PATH)
    # Memory backend: the bearer token is taken as the customer id.
    identity = CustomerIdentity(id=access_token) if access_token else None
    return StaticIdentityProvider(identity, sign_in_path=settings.SIGN_IN_PATH)


def get_session_store() -> BookingSessionStorePort:
    global _session_store
    if _session_store is None:
        _session_store = MemoryBookingSessionStore()
    return _session_store


def build_booking_context(business_id: str, access_token: str | None = None) -> BookingContext:
    return BookingContext(
        business_id=business_id,
        catalog=get_business_catalog(),
        reservations=get_reservation_store(access_token),
        identity=get_identity(access_token),
        clock=local_now,
        window_days=settings.BOOKING_WINDOW_DAYS,
    )


def build_booking_controller(business_id: str, access_token: str | None = None) -> BookingFlowController:
    return BookingFlowController(build_booking_context(business_id, access_token))
