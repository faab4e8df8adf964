import logging
from pathlib import Path
from typing import List, Optional

import requests

from iara_relay.core.config import Settings
from iara_relay.core.errors import RegistrationError
from iara_relay.schemas.identify import Candidate, NotRegistered, Registered, RegistrationOutcome
from iara_relay.schemas.inbound import GeoPoint
from iara_relay.services.timezones import get_timezone_name

logger = logging.getLogger("iara_relay.inaturalist")


def _error_detail(e: Exception):
    # iNaturalist puts useful details in the JSON body of failed requests
    res = getattr(e, "response", None)
    if res is not None:
        try:
            return res.json()
        except ValueError:
            return res.text
    return str(e)


class INaturalistClient:
    """
    Computer-vision suggestions and observation creation against the iNaturalist API.
    """

    def __init__(self, settings: Settings, session: requests.Session | None = None):
        self.settings = settings
        self.session = session or requests.Session()

    def close(self) -> None:
        self.session.close()

    def _auth_headers(self) -> dict:
        if self.settings.inat_token:
            return {"Authorization": f"Bearer {self.settings.inat_token}"}
        return {}

    # -------------------------------
    # Candidate ranking
    # -------------------------------
    def rank(
        self,
        image_path: Path,
        location: Optional[GeoPoint] = None,
        observed_on: Optional[str] = None,
        locale: Optional[str] = None,
    ) -> List[Candidate]:
        """
        Score an image and return candidates sorted by score, highest first.
        Any failure yields an empty list: the caller treats it as "could not identify".
        """
        url = f"{self.settings.inat_base}/computervision/score_image"
        data = {}
        if location is not None:
            data["lat"] = str(location.lat)
            data["lng"] = str(location.lng)
        if observed_on:
            data["observed_on"] = observed_on
        locale = locale or self.settings.locale
        if locale:
            data["locale"] = locale

        try:
            with open(image_path, "rb") as fh:
                r = self.session.post(
                    url,
                    data=data,
                    files={"image": (Path(image_path).name, fh, "image/jpeg")},
                    headers=self._auth_headers(),
                    timeout=self.settings.recognition_timeout,
                )
            r.raise_for_status()
            payload = r.json()
            results = payload.get("results") if isinstance(payload, dict) else None
            if not isinstance(results, list):
                results = []
        except (requests.RequestException, OSError, ValueError) as e:
            logger.error("iNat CV error: %s", _error_detail(e))
            return []

        candidates = []
        for res in results:
            if not isinstance(res, dict):
                continue
            try:
                candidates.append(Candidate.from_result(res))
            except ValueError as e:
                # one malformed entry must not hide the others
                logger.warning("Skipping iNat CV result %r: %s", res, e)

        # sorted() is stable, equal scores keep the service's order
        return sorted(candidates, key=lambda c: c.score, reverse=True)

    # -------------------------------
    # Observation registration
    # -------------------------------
    def create_observation(
        self,
        taxon_id: int,
        location: Optional[GeoPoint],
        observed_on: str,
    ) -> int:
        lat = location.lat if location else None
        lng = location.lng if location else None
        payload = {
            "observation": {
                "taxon_id": taxon_id,
                "latitude": lat,
                "longitude": lng,
                "observed_on_string": observed_on,
                "timezone": get_timezone_name(lat, lng, self.settings.default_timezone),
            }
        }
        try:
            r = self.session.post(
                f"{self.settings.inat_base}/observations",
                json=payload,
                headers=self._auth_headers(),
            )
            r.raise_for_status()
            data = r.json()
        except (requests.RequestException, ValueError) as e:
            raise RegistrationError(f"Failed to create observation: {_error_detail(e)}") from e

        # the API usually answers {"results": [...]}, older versions return the object itself
        if isinstance(data, dict) and isinstance(data.get("results"), list) and data["results"]:
            data = data["results"][0]
        raw_id = data.get("id") if isinstance(data, dict) else None
        if not raw_id:
            raise RegistrationError("Failed to create observation: no id in response")
        try:
            return int(raw_id)
        except (TypeError, ValueError):
            raise RegistrationError(f"Failed to create observation: unexpected id {raw_id!r}") from None

    def attach_photo(self, observation_id: int, image_path: Path) -> None:
        try:
            with open(image_path, "rb") as fh:
                r = self.session.post(
                    f"{self.settings.inat_base}/observation_photos",
                    data={"observation_photo[observation_id]": str(observation_id)},
                    files={"file": (Path(image_path).name, fh, "image/jpeg")},
                    headers=self._auth_headers(),
                )
            r.raise_for_status()
        except (requests.RequestException, OSError) as e:
            raise RegistrationError(
                f"Failed to attach photo: {_error_detail(e)}",
                observation_id=observation_id,
            ) from e

    def register(
        self,
        taxon_id: int,
        image_path: Path,
        observed_on: str,
        location: Optional[GeoPoint] = None,
    ) -> RegistrationOutcome:
        """
        Create an observation, then attach the photo to it.
        A failed photo upload leaves the observation in place; it is reported, not rolled back.
        """
        if not self.settings.inat_token:
            return NotRegistered(reason="missing iNaturalist token")

        try:
            observation_id = self.create_observation(taxon_id, location, observed_on)
            self.attach_photo(observation_id, image_path)
            return Registered(
                observation_id=observation_id,
                url=f"{self.settings.inat_web_base}/observations/{observation_id}",
            )
        except RegistrationError as e:
            if e.observation_id is not None:
                logger.warning("Observation %s created without photo: %s", e.observation_id, e)
            else:
                logger.warning("Create observation skipped/failed: %s", e)
            return NotRegistered(reason=str(e), observation_id=e.observation_id)
