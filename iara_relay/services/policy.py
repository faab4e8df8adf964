from typing import Sequence

from iara_relay.schemas.identify import Candidate


def should_register(candidates: Sequence[Candidate], threshold: float) -> bool:
    """True when the top candidate is confident enough and has a taxon to register."""
    if not candidates:
        return False
    top = candidates[0]
    return top.score >= threshold and top.taxon_id is not None
