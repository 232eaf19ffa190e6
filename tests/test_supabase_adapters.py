"""
Supabase adapters against a mocked PostgREST / auth API (httpx.MockTransport).
"""

from __future__ import annotations

import json
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import httpx
import pytest

from stilo.application.exceptions import BackendContractError, BackendUnavailableError, ReservationRejectedError
from stilo.domain.entities.reservation import ReservationRequest, ReservationStatus
from stilo.infrastructure.supabase.rest_client import SupabaseRestClient
from stilo.infrastructure.supabase.supabase_catalog import SupabaseBusinessCatalog
from stilo.infrastructure.supabase.supabase_identity import SupabaseIdentityProvider
from stilo.infrastructure.supabase.supabase_reservations import SupabaseReservationStore
from stilo.infrastructure.supabase.timestamps import day_bounds, from_wire, to_wire

LOCAL = timezone(timedelta(hours=-4))


def make_client(handler) -> SupabaseRestClient:
    return SupabaseRestClient(
        url="https://demo.supabase.co/",
        api_key="anon-key",
        timeout=5,
        transport=httpx.MockTransport(handler),
    )


def test_timestamps_keep_local_wall_clock():
    wire = to_wire(datetime(2026, 10, 20, 9, 30), LOCAL)
    assert wire == "2026-10-20T09:30:00-04:00"
    assert from_wire("2026-10-20T13:30:00Z", LOCAL) == datetime(2026, 10, 20, 9, 30)
    assert from_wire("2026-10-20T09:30:00", LOCAL) == datetime(2026, 10, 20, 9, 30)

    start, end = day_bounds(date(2026, 10, 20), LOCAL)
    assert start == "2026-10-20T00:00:00-04:00"
    assert end.startswith("2026-10-20T23:59:59")


@pytest.mark.asyncio
async def test_reservations_query_filters_day_status_and_staff():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json=[
                {
                    "id": 7,
                    "start_time": "2026-10-20T14:00:00+00:00",
                    "end_time": "2026-10-20T15:00:00+00:00",
                    "stylist_id": "stf-a",
                    "status": "confirmed",
                }
            ],
        )

    store = SupabaseReservationStore(make_client(handler), LOCAL, access_token="user-token")
    [reservation] = await store.get_reservations_for_date("biz-1", date(2026, 10, 20), "stf-a")

    assert reservation.id == "7"
    assert reservation.start == datetime(2026, 10, 20, 10, 0)
    assert reservation.end == datetime(2026, 10, 20, 11, 0)
    assert reservation.staff_id == "stf-a"
    assert reservation.business_id == "biz-1"

    [request] = seen
    assert request.url.path == "/rest/v1/bookings"
    params = request.url.params
    assert params["business_id"] == "eq.biz-1"
    assert params.get_list("start_time") == ["gte.2026-10-20T00:00:00-04:00", "lte.2026-10-20T23:59:59.999999-04:00"]
    assert params["status"] == "neq.cancelled"
    assert params["stylist_id"] == "eq.stf-a"
    assert request.headers["apikey"] == "anon-key"
    assert request.headers["Authorization"] == "Bearer user-token"


@pytest.mark.asyncio
async def test_any_staff_query_has_no_stylist_filter():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[])

    store = SupabaseReservationStore(make_client(handler), LOCAL)
    assert await store.get_reservations_for_date("biz-1", date(2026, 10, 20)) == []
    assert "stylist_id" not in seen[0].url.params
    assert seen[0].headers["Authorization"] == "Bearer anon-key"


@pytest.mark.asyncio
async def test_create_reservation_posts_wire_payload():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        body = json.loads(request.content)
        return httpx.Response(201, json=[{**body, "id": "bk-1"}])

    store = SupabaseReservationStore(make_client(handler), LOCAL, access_token="user-token")
    request = ReservationRequest(
        business_id="biz-1",
        customer_id="cust-1",
        service_id="svc-cut",
        staff_id=None,
        start=datetime(2026, 10, 20, 10, 30),
        end=datetime(2026, 10, 20, 11, 30),
    )
    reservation = await store.create_reservation(request)

    assert reservation.id == "bk-1"
    assert reservation.start == request.start
    assert reservation.end == request.end
    assert reservation.staff_id is None
    assert reservation.customer_id == "cust-1"
    assert reservation.status == ReservationStatus.confirmed

    sent = seen[0]
    assert sent.method == "POST"
    assert sent.headers["Prefer"] == "return=representation"
    payload = json.loads(sent.content)
    assert payload["start_time"] == "2026-10-20T10:30:00-04:00"
    assert payload["stylist_id"] is None
    assert payload["status"] == "confirmed"


@pytest.mark.asyncio
async def test_rejected_insert_surfaces_backend_message():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(409, json={"message": "duplicate key value violates unique constraint"})

    store = SupabaseReservationStore(make_client(handler), LOCAL)
    request = ReservationRequest(
        business_id="biz-1",
        customer_id="cust-1",
        service_id="svc-cut",
        staff_id="stf-a",
        start=datetime(2026, 10, 20, 10),
        end=datetime(2026, 10, 20, 11),
    )
    with pytest.raises(ReservationRejectedError, match="duplicate key"):
        await store.create_reservation(request)


@pytest.mark.asyncio
async def test_server_error_and_network_failure_are_unavailable():
    def broken(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="upstream down")

    def unreachable(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    for handler in (broken, unreachable):
        store = SupabaseReservationStore(make_client(handler), LOCAL)
        with pytest.raises(BackendUnavailableError):
            await store.get_reservations_for_date("biz-1", date(2026, 10, 20))


@pytest.mark.asyncio
async def test_malformed_booking_row_is_a_contract_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[{"id": 1, "start_time": "not a time", "end_time": None}])

    store = SupabaseReservationStore(make_client(handler), LOCAL)
    with pytest.raises(BackendContractError):
        await store.get_reservations_for_date("biz-1", date(2026, 10, 20))


@pytest.mark.asyncio
async def test_catalog_reads_tables():
    tables = {
        "businesses": [{"name": "Test Salon"}],
        "business_hours": [
            {"day_of_week": 0, "is_closed": True, "open_time": None, "close_time": None},
            {"day_of_week": 1, "is_closed": False, "open_time": "09:00:00", "close_time": "17:00:00"},
            {"is_closed": False},
        ],
        "services": [
            {"id": 2, "name": "Beard Trim", "duration_minutes": 30, "price": "20.00"},
            {"id": 1, "name": "Haircut", "duration_minutes": 60, "price": 30},
        ],
        "stylists": [{"id": "stf-a", "name": "Ana", "avatar_url": None}],
    }
    seen: dict[str, httpx.Request] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        table = request.url.path.rsplit("/", 1)[-1]
        seen[table] = request
        return httpx.Response(200, json=tables[table])

    catalog = SupabaseBusinessCatalog(make_client(handler))

    assert await catalog.get_business_name("biz-1") == "Test Salon"
    hours = await catalog.get_operating_hours("biz-1")
    assert [h.day_of_week for h in hours] == [0, 1]
    assert hours[1].open_time == "09:00:00"

    services = await catalog.get_active_services("biz-1")
    assert [s.id for s in services] == ["2", "1"]
    assert services[0].price == Decimal("20.00")
    assert seen["services"].url.params["is_active"] == "eq.true"
    assert seen["services"].url.params["order"] == "price"

    [member] = await catalog.get_active_staff("biz-1")
    assert member.name == "Ana"


@pytest.mark.asyncio
async def test_unknown_business_has_no_name():
    catalog = SupabaseBusinessCatalog(make_client(lambda request: httpx.Response(200, json=[])))
    assert await catalog.get_business_name("missing") is None


@pytest.mark.asyncio
async def test_identity_resolves_user_or_signed_out():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/auth/v1/user"
        if request.headers["Authorization"] == "Bearer good-token":
            return httpx.Response(200, json={"id": "user-1", "email": "ana@example.com"})
        return httpx.Response(401, json={"message": "invalid JWT"})

    client = make_client(handler)

    identity = await SupabaseIdentityProvider(client, "good-token").get_current_identity()
    assert identity.id == "user-1"
    assert identity.email == "ana@example.com"

    assert await SupabaseIdentityProvider(client, "expired-token").get_current_identity() is None
    assert await SupabaseIdentityProvider(client, None).get_current_identity() is None


def test_identity_redirect_carries_return_path():
    client = make_client(lambda request: httpx.Response(200, json={}))
    provider = SupabaseIdentityProvider(client, None, sign_in_path="/login")
    url = provider.redirect_to_authentication("/booking/biz-1?service_id=svc-cut", {"service_id": "svc-cut"})
    assert url == "/login?redirect=%2Fbooking%2Fbiz-1%3Fservice_id%3Dsvc-cut"
