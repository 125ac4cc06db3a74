"""Runtime configuration loaded from the environment."""

import os
from typing import Optional

from pydantic import BaseModel, Field

DEFAULT_BACKEND_URL = "https://mcab.onrender.com"


class Settings(BaseModel):
    """Settings for the MCA Shop client."""

    backend_url: str = Field(default=DEFAULT_BACKEND_URL, description="Backend base URL")
    timeout: float = Field(default=30.0, description="HTTP timeout in seconds")
    log_level: str = Field(default="INFO", description="Root log level")

    @classmethod
    def from_env(cls, backend_url: Optional[str] = None) -> "Settings":
        """
        Build settings from environment variables.

        Args:
            backend_url: Explicit backend URL that overrides MCA_BACKEND_URL
        """
        return cls(
            backend_url=backend_url or os.environ.get("MCA_BACKEND_URL", DEFAULT_BACKEND_URL),
            timeout=float(os.environ.get("MCA_TIMEOUT", "30")),
            log_level=os.environ.get("MCA_LOG_LEVEL", "INFO").upper(),
        )
