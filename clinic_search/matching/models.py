from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple


def _pick(mapping: Mapping[str, Any], *keys: str) -> Any:
    # First key present with a non-None value wins
    for key in keys:
        value = mapping.get(key)
        if value is not None:
            return value
    return None


def _text(value: Any) -> Optional[str]:
    # JSON exports may carry numbers where text is expected (e.g. phone numbers)
    return None if value is None else str(value)


def _blank_to_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value)
    return value if value else None


@dataclass(frozen=True)
class SearchableDentist:
    name: str
    email: Optional[str] = None
    phone_number: Optional[str] = None
    id: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SearchableDentist":
        return cls(
            name=_text(_pick(data, "name", "Name")),
            email=_text(_pick(data, "email", "Email")),
            phone_number=_text(_pick(data, "phone_number", "phoneNumber", "PhoneNumber")),
            id=_pick(data, "id", "Id"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phoneNumber": self.phone_number,
        }


@dataclass(frozen=True)
class SearchableClinic:
    name: str
    address: str
    email: Optional[str] = None
    phone_number: Optional[str] = None
    description: Optional[str] = None
    website: Optional[str] = None
    dentists: Tuple[SearchableDentist, ...] = field(default_factory=tuple)
    # Display and proximity only, never matched or scored
    id: Optional[int] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    image_path: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SearchableClinic":
        """Build a clinic from a snake_case or camelCase mapping (e.g. a JSON export)."""
        dentists = _pick(data, "dentists", "Dentists") or []
        return cls(
            name=_text(_pick(data, "name", "Name")),
            address=_text(_pick(data, "address", "Address")),
            email=_text(_pick(data, "email", "Email")),
            phone_number=_text(_pick(data, "phone_number", "phoneNumber", "PhoneNumber")),
            description=_text(_pick(data, "description", "Description")),
            website=_text(_pick(data, "website", "Website")),
            dentists=tuple(
                d if isinstance(d, SearchableDentist) else SearchableDentist.from_dict(d)
                for d in dentists
            ),
            id=_pick(data, "id", "Id"),
            latitude=_pick(data, "latitude", "Latitude"),
            longitude=_pick(data, "longitude", "Longitude"),
            image_path=_text(_pick(data, "image_path", "imagePath", "ImagePath")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "address": self.address,
            "email": self.email,
            "phoneNumber": self.phone_number,
            "description": self.description,
            "website": self.website,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "imagePath": self.image_path,
            "dentists": [dentist.to_dict() for dentist in self.dentists],
        }

    def text_field(self, field_name: str) -> Optional[str]:
        return getattr(self, field_name)


# Query-string parameter names accepted for each SearchQuery attribute
_QUERY_PARAM_ALIASES = {
    "general_search": ("general_search", "generalSearch"),
    "name": ("name",),
    "email": ("email",),
    "phone_number": ("phone_number", "phoneNumber"),
    "address": ("address",),
    "description": ("description",),
    "website": ("website",),
}


@dataclass(frozen=True)
class SearchQuery:
    general_search: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None
    address: Optional[str] = None
    description: Optional[str] = None
    website: Optional[str] = None

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "SearchQuery":
        """Parse query-string style parameters; empty strings count as absent."""
        values = {
            attr: _blank_to_none(_pick(params, *aliases))
            for attr, aliases in _QUERY_PARAM_ALIASES.items()
        }
        return cls(**values)

    def field_term(self, field_name: str) -> Optional[str]:
        return getattr(self, field_name) or None

    def active_terms(self) -> Dict[str, str]:
        """Supplied terms keyed by attribute name, general search included."""
        return {
            attr: getattr(self, attr)
            for attr in _QUERY_PARAM_ALIASES
            if getattr(self, attr)
        }

    def has_terms(self) -> bool:
        return bool(self.active_terms())


@dataclass
class ProximityMatch:
    clinic: SearchableClinic
    distance: float

    def to_dict(self) -> Dict[str, Any]:
        return {**self.clinic.to_dict(), "distance": self.distance}
