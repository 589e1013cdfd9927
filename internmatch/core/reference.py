"""Reference data: city coordinates, curated tiers and skill aliases.

Scoring code talks to a ReferenceRepository, never to the tables directly,
so curated lists can be swapped (YAML file, test fixture) without touching
the engine.
"""

import re
from abc import ABC, abstractmethod
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

from internmatch.core.schemas import CityRef, CompanyTier, Location, SectorTier

_SKILL_SEPARATORS = re.compile(r"[\s.\-_/]+")
_WHITESPACE = re.compile(r"\s+")

REMOTE_CITY = "remote"


class ReferenceRepository(ABC):
    """Lookup service for everything the scorer treats as curated knowledge."""

    @abstractmethod
    def canonical_city(self, location: Location | None) -> str:
        """Canonical lower-case city key, "" when unknown or absent."""

    @abstractmethod
    def city_coordinates(self, city: str) -> tuple[float, float] | None:
        """(latitude, longitude) for a canonical city key."""

    @abstractmethod
    def canonical_skill(self, skill: str) -> str:
        """Normalized skill key used for every skill comparison."""

    @abstractmethod
    def company_tier(self, company: str) -> CompanyTier:
        """Reputation tier of an employer."""

    @abstractmethod
    def sector_tier(self, sectors: Iterable[str]) -> SectorTier:
        """Best desirability tier among a posting's sector tags."""


class ReferenceData(BaseModel):
    """Plain data behind StaticReferenceRepository, loadable from YAML."""

    city_coordinates: dict[str, tuple[float, float]] = Field(default_factory=dict)
    city_aliases: dict[str, str] = Field(default_factory=dict)
    skill_aliases: dict[str, str] = Field(default_factory=dict)
    top_companies: list[str] = Field(default_factory=list)
    mid_companies: list[str] = Field(default_factory=list)
    recognizable_companies: list[str] = Field(default_factory=list)
    high_demand_sectors: list[str] = Field(default_factory=list)
    moderate_sectors: list[str] = Field(default_factory=list)

    @field_validator("city_coordinates", "city_aliases", "skill_aliases", mode="before")
    @classmethod
    def lower_keys(cls, v: Any) -> Any:
        if isinstance(v, dict):
            return {str(k).strip().lower(): val for k, val in v.items()}
        return v

    @classmethod
    def from_yaml(cls, path: str | Path) -> "ReferenceData":
        """Load reference data from YAML on top of the built-in defaults.

        Mapping sections (coordinates, aliases) are merged entry by entry;
        list sections (tier lists) replace the default list.
        """
        path = Path(path)
        if not path.exists():
            msg = f"Reference data file not found: {path}"
            raise FileNotFoundError(msg)
        raw: dict[str, Any] = yaml.safe_load(path.read_text()) or {}
        merged = DEFAULT_REFERENCE_DATA.model_dump()
        for key, value in raw.items():
            current = merged.get(key)
            if isinstance(value, dict) and isinstance(current, dict):
                merged[key] = {**current, **{str(k).strip().lower(): v for k, v in value.items()}}
            else:
                merged[key] = value
        return cls.model_validate(merged)


class StaticReferenceRepository(ReferenceRepository):
    """In-memory repository over a ReferenceData value."""

    def __init__(self, data: "ReferenceData | None" = None) -> None:
        self._data = data if data is not None else DEFAULT_REFERENCE_DATA
        self._skill_aliases = {
            _skill_key(alias): _skill_key(target)
            for alias, target in self._data.skill_aliases.items()
        }
        self._company_tiers: dict[str, CompanyTier] = {}
        for tier, names in (
            (CompanyTier.RECOGNIZABLE, self._data.recognizable_companies),
            (CompanyTier.MID, self._data.mid_companies),
            (CompanyTier.TOP, self._data.top_companies),
        ):
            for name in names:
                self._company_tiers[_company_key(name)] = tier
        self._sector_tiers: dict[str, SectorTier] = {}
        for sector in self._data.moderate_sectors:
            self._sector_tiers[sector.strip().lower()] = SectorTier.MODERATE
        for sector in self._data.high_demand_sectors:
            self._sector_tiers[sector.strip().lower()] = SectorTier.HIGH_DEMAND

    @property
    def data(self) -> "ReferenceData":
        return self._data

    def canonical_city(self, location: Location | None) -> str:
        if location is None:
            return ""
        name = location.city if isinstance(location, CityRef) else location
        city = _WHITESPACE.sub(" ", name.split(",")[0].strip().lower())
        return self._data.city_aliases.get(city, city)

    def city_coordinates(self, city: str) -> tuple[float, float] | None:
        return self._data.city_coordinates.get(city)

    def canonical_skill(self, skill: str) -> str:
        key = _skill_key(skill)
        return self._skill_aliases.get(key, key)

    def company_tier(self, company: str) -> CompanyTier:
        return self._company_tiers.get(_company_key(company), CompanyTier.DEFAULT)

    def sector_tier(self, sectors: Iterable[str]) -> SectorTier:
        best = SectorTier.DEFAULT
        for sector in sectors:
            tier = self._sector_tiers.get(sector.strip().lower(), SectorTier.DEFAULT)
            best = max(best, tier)
        return best


def _skill_key(skill: str) -> str:
    """Case-fold and drop separators: "Node.js" → "nodejs", "Machine Learning" → "machinelearning"."""
    return _SKILL_SEPARATORS.sub("", skill.strip().lower())


def _company_key(company: str) -> str:
    return _WHITESPACE.sub(" ", company.strip().lower())


DEFAULT_REFERENCE_DATA = ReferenceData(
    city_coordinates={
        "delhi": (28.6139, 77.2090),
        "noida": (28.5355, 77.3910),
        "gurugram": (28.4595, 77.0266),
        "faridabad": (28.4089, 77.3178),
        "ghaziabad": (28.6692, 77.4538),
        "mumbai": (19.0760, 72.8777),
        "navi mumbai": (19.0330, 73.0297),
        "thane": (19.2183, 72.9781),
        "pune": (18.5204, 73.8567),
        "bengaluru": (12.9716, 77.5946),
        "mysuru": (12.2958, 76.6394),
        "chennai": (13.0827, 80.2707),
        "hyderabad": (17.3850, 78.4867),
        "kolkata": (22.5726, 88.3639),
        "ahmedabad": (23.0225, 72.5714),
        "jaipur": (26.9124, 75.7873),
        "chandigarh": (30.7333, 76.7794),
        "lucknow": (26.8467, 80.9462),
        "indore": (22.7196, 75.8577),
        "bhopal": (23.2599, 77.4126),
        "kochi": (9.9312, 76.2673),
        "coimbatore": (11.0168, 76.9558),
        "nagpur": (21.1458, 79.0882),
        "bhubaneswar": (20.2961, 85.8245),
        "patna": (25.5941, 85.1376),
        "surat": (21.1702, 72.8311),
        "vadodara": (22.3072, 73.1812),
        "visakhapatnam": (17.6868, 83.2185),
        "thiruvananthapuram": (8.5241, 76.9366),
        "guwahati": (26.1445, 91.7362),
        "dehradun": (30.3165, 78.0322),
    },
    city_aliases={
        "new delhi": "delhi",
        "delhi ncr": "delhi",
        "ncr": "delhi",
        "gurgaon": "gurugram",
        "bangalore": "bengaluru",
        "bengaluru urban": "bengaluru",
        "bombay": "mumbai",
        "madras": "chennai",
        "calcutta": "kolkata",
        "mysore": "mysuru",
        "cochin": "kochi",
        "vizag": "visakhapatnam",
        "trivandrum": "thiruvananthapuram",
        "poona": "pune",
        "work from home": REMOTE_CITY,
        "wfh": REMOTE_CITY,
        "anywhere": REMOTE_CITY,
        "online": REMOTE_CITY,
    },
    skill_aliases={
        "js": "javascript",
        "es6": "javascript",
        "ts": "typescript",
        "py": "python",
        "python3": "python",
        "reactjs": "react",
        "react.js": "react",
        "node": "nodejs",
        "node.js": "nodejs",
        "vue": "vuejs",
        "vue.js": "vuejs",
        "angularjs": "angular",
        "express": "expressjs",
        "express.js": "expressjs",
        "ml": "machine learning",
        "ai": "artificial intelligence",
        "dl": "deep learning",
        "nlp": "natural language processing",
        "cv": "computer vision",
        "golang": "go",
        "postgres": "postgresql",
        "mongo": "mongodb",
        "k8s": "kubernetes",
        "amazon web services": "aws",
        "gcp": "google cloud",
        "ms excel": "excel",
        "microsoft excel": "excel",
        "ppt": "powerpoint",
        "ui/ux": "ux design",
        "ux": "ux design",
        "seo optimization": "seo",
    },
    top_companies=[
        "Google", "Microsoft", "Amazon", "Apple", "Meta", "Netflix", "Adobe",
        "Salesforce", "Goldman Sachs", "JP Morgan", "McKinsey", "Nvidia",
    ],
    mid_companies=[
        "Flipkart", "Infosys", "TCS", "Wipro", "Accenture", "Deloitte",
        "IBM", "Oracle", "Intel", "Samsung", "Zomato", "Swiggy", "Paytm",
        "Razorpay", "Ola", "Uber", "PhonePe", "Reliance",
    ],
    recognizable_companies=[
        "HCL", "Tech Mahindra", "Capgemini", "Cognizant", "Mindtree",
        "L&T", "Byju's", "Unacademy", "Zoho", "Freshworks", "Nykaa",
        "Meesho", "CRED", "Dream11", "Tata Motors", "Mahindra",
    ],
    high_demand_sectors=[
        "Technology", "Data Science", "Artificial Intelligence", "Finance",
        "Fintech", "Cybersecurity", "Software Development",
    ],
    moderate_sectors=[
        "Marketing", "Healthcare", "Consulting", "E-commerce", "Design",
        "Education", "Media", "Operations", "Sales",
    ],
)
