"""
Catalog matching schemas.
"""

from typing import List, Dict
from pydantic import BaseModel, Field


class MatchCandidate(BaseModel):
    """A catalog name proposed as equivalent to an extracted name."""
    match: str
    score: float = 0.0  # 0-100


class MatchResponse(BaseModel):
    """Ranked candidates per query name, as returned by the matching service."""
    results: Dict[str, List[MatchCandidate]] = Field(default_factory=dict)

    def default_selections(self) -> Dict[str, str]:
        """First candidate of each query; queries without candidates are skipped."""
        return {
            query: candidates[0].match
            for query, candidates in self.results.items()
            if candidates
        }
