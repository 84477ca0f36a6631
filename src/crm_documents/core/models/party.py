from dataclasses import dataclass
from typing import Mapping


@dataclass
class Party:
    """Company or contact person shown in the Fra/Til blocks."""

    name: str = ""
    address: str = ""
    postal_code: str = ""
    city: str = ""
    email: str = ""
    phone: str = ""
    vat: str = ""
    logo_url: str = ""

    @classmethod
    def from_record(cls, record: Mapping | None, default_name: str = "") -> "Party":
        r = record or {}

        def text(key: str) -> str:
            return str(r.get(key) or "").strip()

        return cls(
            name=text("name") or default_name,
            address=text("address"),
            postal_code=text("postal_code"),
            city=text("city"),
            email=text("email"),
            phone=text("phone"),
            vat=text("vat") or text("vat_number") or text("cvr"),
            logo_url=text("logo_url"),
        )

    @property
    def postal_line(self) -> str:
        return f"{self.postal_code} {self.city}".strip()
