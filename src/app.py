"""OrderFlow FastAPI application.

Serves the order lifecycle: order creation, payment-triggered transitions,
and read access to orders, shipments and documents.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from lifecycle.api import order_router, snapshot_router
from lifecycle.domain import get_lifecycle
from lifecycle.utils.logging import configure_logging

configure_logging()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="OrderFlow API",
    description="Order lifecycle: orders, shipments and documents",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(order_router)
app.include_router(snapshot_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
def health():
    lifecycle = get_lifecycle()
    violations = lifecycle.check_invariants()
    return JSONResponse(
        status_code=200 if not violations else 503,
        content={
            "status": "ok" if not violations else "inconsistent",
            "env": lifecycle.settings.env,
            "carrier": type(lifecycle.carrier).__name__,
            "violations": violations,
        },
    )
