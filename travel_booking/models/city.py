# models/city.py
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict


@dataclass
class CityQuery:
    query: str
    limit: int = 5


@dataclass
class CityOption:
    code: str  # IATA airport or city code
    name: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, str]) -> "CityOption":
        return cls(code=str(data.get("code", "")), name=str(data.get("name", "")))
