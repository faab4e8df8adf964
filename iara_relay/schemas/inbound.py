from pydantic import BaseModel
from typing import Mapping, Optional

# Twilio sends Latitude/Longitude for location messages; other clients use short keys
LAT_KEYS = ("Latitude", "lat", "Lat")
LNG_KEYS = ("Longitude", "lng", "Lon", "long")


class GeoPoint(BaseModel):
    lat: float
    lng: float


class InboundMessage(BaseModel):
    sender: str = ""
    body: str = ""
    num_media: int = 0
    media_url: Optional[str] = None
    media_content_type: str = ""
    location: Optional[GeoPoint] = None

    @property
    def has_attachment(self) -> bool:
        return self.num_media > 0

    @property
    def is_image(self) -> bool:
        return self.has_attachment and self.media_content_type.startswith("image/")

    @property
    def caption(self) -> Optional[str]:
        return self.body or None

    @classmethod
    def from_twilio_form(cls, form: Mapping[str, str]) -> "InboundMessage":
        lat = _first_coordinate(form, LAT_KEYS)
        lng = _first_coordinate(form, LNG_KEYS)
        location = GeoPoint(lat=lat, lng=lng) if lat is not None and lng is not None else None

        try:
            num_media = int(form.get("NumMedia") or 0)
        except ValueError:
            num_media = 0

        return cls(
            sender=form.get("From") or "",
            body=(form.get("Body") or "").strip(),
            num_media=num_media,
            media_url=form.get("MediaUrl0") or None,
            media_content_type=form.get("MediaContentType0") or "",
            location=location,
        )


def _first_coordinate(form: Mapping[str, str], keys) -> Optional[float]:
    # first non-empty key wins, even when its value does not parse
    for key in keys:
        value = form.get(key)
        if value is None or value == "":
            continue
        try:
            return float(value)
        except ValueError:
            return None
    return None
