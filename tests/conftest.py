from unittest.mock import MagicMock

import pytest

from iara_relay.core.config import Settings
from iara_relay.schemas.identify import Candidate


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        twilio_account_sid="AC123",
        twilio_auth_token="secret",
        inat_token="inat-token",
        openai_api_key=None,
        high_confidence=0.85,
        tmp_dir=tmp_path / "tmp",
    )


@pytest.fixture
def image_file(tmp_path):
    path = tmp_path / "photo.jpg"
    path.write_bytes(b"\xff\xd8\xff fake jpeg")
    return path


@pytest.fixture
def two_candidates():
    return [
        Candidate(taxon_id=12345, scientific_name="Ramphastos toco", common_name="Tucano-toco", score=0.91),
        Candidate(taxon_id=678, scientific_name="Pteroglossus aracari", common_name=None, score=0.60),
    ]


@pytest.fixture
def json_response():
    """Factory for requests.Response stand-ins returning `payload` from .json()."""
    def _make(payload, status_code=200):
        res = MagicMock()
        res.status_code = status_code
        res.json.return_value = payload
        res.raise_for_status.return_value = None
        return res
    return _make
