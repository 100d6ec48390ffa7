"""Manual smoke test against a running API: liveness, then a combo create."""
import logging
from typing import Any, Dict, Optional

import requests
from pydantic import BaseModel

from fooddelivery.settings import API_BASE_URL, API_TOKEN

log = logging.getLogger(__name__)

SAMPLE_COMBO: Dict[str, Any] = {
    "name": "Test Combo",
    "description": "A test combo for debugging",
    "restaurantId": "507f1f77bcf86cd799439011",  # expect 404 unless this restaurant exists
    "items": "1x Test Item, 1x Another Item",
    "comboPrice": 299,
    "category": "special",
    "tags": ["test", "debug"],
    "isFeatured": False,
    "isActive": True,
}


class SmokeResult(BaseModel):
    reachable: bool
    liveness_status: Optional[int] = None
    create_status: Optional[int] = None
    create_body: Optional[str] = None
    error: Optional[str] = None


def run_smoke_test(
    base_url: str = API_BASE_URL,
    token: str = API_TOKEN,
    payload: Optional[Dict[str, Any]] = None,
    session: Optional[requests.Session] = None,
    timeout: float = 10,
) -> SmokeResult:
    """
    GET /api/restaurants, then POST /api/combos with a bearer token.
    Never raises for HTTP errors; the statuses are the result.
    """
    s = session or requests.Session()
    api = base_url.rstrip("/")
    try:
        log.info("testing server connection: %s", api)
        r = s.get(f"{api}/api/restaurants", timeout=timeout)
        log.info("server is running, status: %s", r.status_code)

        body = payload or SAMPLE_COMBO
        log.info("testing combo creation with data: %s", body)
        r2 = s.post(
            f"{api}/api/combos",
            json=body,
            headers={"Authorization": f"Bearer {token}"},
            timeout=timeout,
        )
        log.info("response status: %s body: %s", r2.status_code, r2.text)
        return SmokeResult(
            reachable=True,
            liveness_status=r.status_code,
            create_status=r2.status_code,
            create_body=r2.text,
        )
    except requests.RequestException as e:
        log.error("smoke test failed: %s", e)
        return SmokeResult(reachable=False, error=str(e))
