import logging

from fastapi import FastAPI

from offerflow.api.v1.offers import router as offers_router
from offerflow.core.config import settings

class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in ("offer_id", "scope_id", "option_id", "item_id", "status", "total_net", "total_gross", "error"):
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

app = FastAPI(title="Offer Selection & Pricing", version="1.0.0")

app.include_router(offers_router, prefix="/api/v1", tags=["offers"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
