"""Runtime configuration for the lifecycle engine.

Settings are read from environment variables. ``ORDERFLOW_ENV`` selects the
environment:

    - "test"        → quiet logging, deterministic fake carrier
    - "development" → console logging
    - "production"  → JSON logging
"""

import os

from pydantic import BaseModel, Field

_TRUTHY = {"1", "true", "yes", "on"}


class Settings(BaseModel):
    env: str = "development"
    carrier_adapter: str = "fake"
    default_carrier: str = Field(default="FedEx", min_length=1)
    origin_location: str = Field(default="Mumbai, India", min_length=1)
    document_base_url: str = "https://documents.orderflow.example.com/orders_docs"
    lock_mode: str = Field(default="per_order", pattern="^(per_order|global)$")
    trigger_timeout_seconds: float = Field(default=10.0, gt=0)
    snapshot_path: str | None = None
    seed_demo_data: bool = False

    @classmethod
    def from_env(cls, environ=None) -> "Settings":
        """Build settings from ``environ`` (defaults to ``os.environ``)."""
        environ = os.environ if environ is None else environ
        values = {}
        mapping = {
            "ORDERFLOW_ENV": "env",
            "CARRIER_ADAPTER": "carrier_adapter",
            "DEFAULT_CARRIER": "default_carrier",
            "ORIGIN_LOCATION": "origin_location",
            "DOCUMENT_BASE_URL": "document_base_url",
            "LOCK_MODE": "lock_mode",
            "TRIGGER_TIMEOUT_SECONDS": "trigger_timeout_seconds",
            "SNAPSHOT_PATH": "snapshot_path",
        }
        for variable, field in mapping.items():
            if environ.get(variable):
                values[field] = environ[variable]
        if "SEED_DEMO_DATA" in environ:
            values["seed_demo_data"] = environ["SEED_DEMO_DATA"].strip().lower() in _TRUTHY
        return cls(**values)

    @property
    def is_production(self) -> bool:
        return self.env.lower() == "production"
