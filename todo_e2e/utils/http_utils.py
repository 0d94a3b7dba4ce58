# utils/http_utils.py
import logging
from typing import List, Optional

import requests

logger = logging.getLogger(__name__)


def get_status_chain(url: str, timeout: float = 5) -> Optional[List[int]]:
    """Status codes of every hop while following redirects, or None if unreachable."""
    try:
        response = requests.get(url, allow_redirects=True, timeout=timeout)
        return [r.status_code for r in response.history] + [response.status_code]
    except requests.RequestException as e:
        logger.warning(f"Could not reach {url}: {e}")
        return None


def is_reachable(url: str, timeout: float = 5) -> bool:
    chain = get_status_chain(url, timeout=timeout)
    if not chain:
        return False
    return chain[-1] < 500
