import logging
from datetime import datetime, timezone
from typing import Optional

import requests

from floodguard_config import SIREN_SOUND_URL, SIREN_TIMEOUT_SECONDS, get_siren_webhook

logger = logging.getLogger(__name__)


class Siren:
    """
    One-shot warning siren. Playback happens on whatever listens at the
    webhook (a speaker box, the client push channel). Without a webhook the
    trigger is only logged. Failures are dropped and never retried.
    """

    def __init__(self, webhook_url: Optional[str] = None, sound_url: str = SIREN_SOUND_URL,
                 timeout: float = SIREN_TIMEOUT_SECONDS, session=None):
        self.webhook_url = webhook_url if webhook_url is not None else get_siren_webhook()
        self.sound_url = sound_url
        self.timeout = timeout
        self.http = session or requests
        self.last_played_at: Optional[datetime] = None

    def play(self, reason: str = "") -> bool:
        self.last_played_at = datetime.now(timezone.utc)
        if not self.webhook_url:
            logger.warning(f"🚨 SIREN: {reason or 'rising flood nearby'}")
            return False
        try:
            resp = self.http.post(
                self.webhook_url,
                json={"sound_url": self.sound_url, "volume": 0.5, "reason": reason},
                timeout=self.timeout,
            )
            resp.raise_for_status()
            return True
        except Exception as e:
            logger.debug(f"Siren play blocked: {e}")
            return False
