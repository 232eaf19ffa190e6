from decimal import Decimal

from stilo.domain.entities.business import Business
from stilo.domain.entities.operating_hours import OperatingHours
from stilo.domain.entities.service import Service
from stilo.domain.entities.staff import StaffMember

DEMO_BUSINESS_ID = "stilo-demo"

DEMO_BUSINESS = Business(
    id=DEMO_BUSINESS_ID,
    name="Stilo Studio",
    services=(
        Service(id="svc-haircut", name="Haircut", duration_minutes=30, price=Decimal("35.00")),
        Service(id="svc-blowout", name="Blowout", duration_minutes=45, price=Decimal("45.00")),
        Service(id="svc-color", name="Full Color", duration_minutes=90, price=Decimal("120.00")),
    ),
    staff=(
        StaffMember(id="stf-ana", name="Ana"),
        StaffMember(id="stf-bruno", name="Bruno"),
    ),
    hours=(
        OperatingHours(day_of_week=0, is_closed=True),
        OperatingHours(day_of_week=1, open_time="09:00", close_time="18:00"),
        OperatingHours(day_of_week=2, open_time="09:00", close_time="18:00"),
        OperatingHours(day_of_week=3, open_time="09:00", close_time="18:00"),
        OperatingHours(day_of_week=4, open_time="09:00", close_time="20:00"),
        OperatingHours(day_of_week=5, open_time="09:00", close_time="20:00"),
        OperatingHours(day_of_week=6, open_time="10:00", close_time="16:00"),
    ),
)

SEED_BUSINESSES: dict[str, Business] = {DEMO_BUSINESS_ID: DEMO_BUSINESS}
