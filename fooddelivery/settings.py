# fooddelivery/settings.py
import os
from pathlib import Path

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parents[1]
load_dotenv(PROJECT_ROOT / ".env")

# Data store; point at a copy of production when running the repair job.
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./fooddelivery.sqlite3")

# Static bearer credential for write endpoints
API_TOKEN = os.getenv("API_TOKEN", "dev-token")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Combos read per batch by the repair job
REPAIR_BATCH_SIZE = int(os.getenv("REPAIR_BATCH_SIZE", "500"))

# Used by the smoke test and the dashboard
API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")
