import logging
import re
import uuid
from pathlib import Path

import requests

from iara_relay.core.config import Settings
from iara_relay.core.errors import MediaFetchError

logger = logging.getLogger("iara_relay.media")

TWILIO_MEDIA_URL = re.compile(r"^https://api\.twilio\.com/")
CHUNK_SIZE = 64 * 1024


class MediaFetcher:
    """Downloads inbound media into the temp directory, one uniquely named file per call."""

    def __init__(self, settings: Settings, session: requests.Session | None = None):
        self.settings = settings
        self.session = session or requests.Session()

    def close(self) -> None:
        self.session.close()

    def _auth_for(self, url: str):
        if TWILIO_MEDIA_URL.match(url):
            return self.settings.twilio_auth
        return None

    def fetch(self, url: str) -> Path:
        if not url:
            raise MediaFetchError("No media URL in message")

        tmp_dir = Path(self.settings.tmp_dir)
        path = tmp_dir / f"{uuid.uuid4()}.jpg"

        try:
            tmp_dir.mkdir(parents=True, exist_ok=True)
            with self.session.get(url, auth=self._auth_for(url), stream=True) as res:
                res.raise_for_status()
                with open(path, "wb") as fh:
                    for chunk in res.iter_content(chunk_size=CHUNK_SIZE):
                        if chunk:
                            fh.write(chunk)
        except (requests.RequestException, OSError) as e:
            self.discard(path)
            raise MediaFetchError(f"Could not download {url}: {e}") from e

        logger.debug("Downloaded %s to %s", url, path)
        return path

    def discard(self, path: Path | None) -> None:
        """Delete a temp file once. Failures are logged and otherwise ignored."""
        if path is None:
            return
        try:
            Path(path).unlink(missing_ok=True)
        except OSError as e:
            logger.debug("Could not remove temp file %s: %s", path, e)
