"""App-wide configuration and environment settings."""

import os
from dotenv import load_dotenv

load_dotenv()  # Load from .env file


def get_secret(key, default=None):
    """Read a setting from the environment, treating blank values as unset."""
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    return value


# Business registry API
REGISTRY_API_URL = get_secret("REGISTRY_API_URL", "http://localhost:5000/api").rstrip("/")
REGISTRY_API_TOKEN = get_secret("REGISTRY_API_TOKEN", "")
REGISTRY_TIMEOUT = float(get_secret("REGISTRY_TIMEOUT", "30"))

# Wizard
TOTAL_WIZARD_STEPS = 4
WAIVER_TYPE = get_secret("WAIVER_TYPE", "Business Permit")
LGU_NAME = get_secret("LGU_NAME", "Iloilo")
LGU_PROVINCE = get_secret("LGU_PROVINCE", "Iloilo")

# LangSmith
LANGSMITH_TRACING = os.getenv("LANGSMITH_TRACING", "false").lower() in ("true", "1")
LANGSMITH_PROJECT = os.getenv("LANGSMITH_PROJECT", "permit-wizard")

# Server
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))
