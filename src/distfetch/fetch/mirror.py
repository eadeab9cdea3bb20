import logging
import httpx
from typing import Optional

from ..config import MIRROR_ENDPOINT
from ..domain.errors import MirrorResolutionError

logger = logging.getLogger(__name__)

class MirrorResolver:
    """asks apache's closer.lua for the preferred download mirror."""

    def __init__(self, endpoint: str = MIRROR_ENDPOINT, client: Optional[httpx.Client] = None, timeout: float = 10.0):
        self.endpoint = endpoint
        self.client = client or httpx.Client(timeout=timeout, follow_redirects=True)

    def preferred_mirror(self) -> str:
        """return the preferred mirror base url, without a trailing slash."""
        try:
            response = self.client.get(self.endpoint)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise MirrorResolutionError(f"Fail to resolve preferred mirror from {self.endpoint}: {e}") from e

        mirror = response.text.strip().rstrip("/")
        if not mirror:
            raise MirrorResolutionError(f"Empty preferred mirror returned by {self.endpoint}")
        logger.debug(f"preferred mirror: {mirror}")
        return mirror
