from pydantic import BaseModel, Field
from typing import Optional


class Candidate(BaseModel):
    taxon_id: Optional[int] = None
    scientific_name: str = ""
    common_name: Optional[str] = None
    score: float = Field(0.0, ge=0.0, le=1.0)

    @property
    def label(self) -> str:
        """'Common name (Scientific name)', or the scientific name alone."""
        if self.common_name:
            return f"{self.common_name} ({self.scientific_name})"
        return self.scientific_name

    @classmethod
    def from_result(cls, result: dict) -> "Candidate":
        taxon = result.get("taxon")
        if not isinstance(taxon, dict):
            taxon = {}
        # Preferred common name depends on the locale sent with the request
        common = (
            taxon.get("preferred_common_name")
            or taxon.get("english_common_name")
            or taxon.get("preferred_common_name_localized")
            or None
        )
        return cls(
            taxon_id=taxon.get("id"),
            scientific_name=taxon.get("name") or "",
            common_name=common,
            score=_coerce_score(result.get("score")),
        )


def _coerce_score(value) -> float:
    try:
        score = float(value)
    except (TypeError, ValueError):
        return 0.0
    if score != score:  # NaN
        return 0.0
    return min(max(score, 0.0), 1.0)


class Registered(BaseModel):
    observation_id: int
    url: str


class NotRegistered(BaseModel):
    reason: str
    # set when the observation was created but the photo upload failed
    observation_id: Optional[int] = None


RegistrationOutcome = Registered | NotRegistered
