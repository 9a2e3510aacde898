from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class MovieRow:
    movie_id: int
    title: str
    genres: List[str] = field(default_factory=list)
    line_no: int = 0

    def params(self) -> Dict[str, Any]:
        return {"movieId": self.movie_id, "title": self.title}


@dataclass
class RatingRow:
    user_id: int
    movie_id: int
    rating: float
    timestamp: int
    line_no: int = 0

    def params(self) -> Dict[str, Any]:
        return {
            "userId": self.user_id,
            "movieId": self.movie_id,
            "rating": self.rating,
            "timestamp": self.timestamp,
        }
