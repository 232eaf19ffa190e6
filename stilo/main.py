import logging

from fastapi import FastAPI

from stilo.api.v1.availability import router as availability_router
from stilo.api.v1.booking import router as booking_router
from stilo.core.config import settings

class ContextFormatter(logging.Formatter):
    CONTEXT_KEYS = (
        "business_id",
        "step",
        "service_id",
        "staff_id",
        "date",
        "reservation_id",
        "slot_count",
        "service_count",
        "staff_count",
        "start",
        "end",
        "path",
        "status",
        "return_path",
        "reason",
        "error",
    )

    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in self.CONTEXT_KEYS:
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)

app = FastAPI(title="Stilo Booking", version="1.0.0")

app.include_router(availability_router, tags=["availability"])
app.include_router(booking_router, tags=["booking"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
