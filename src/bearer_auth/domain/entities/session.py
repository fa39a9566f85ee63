from dataclasses import dataclass
from datetime import datetime, timezone


@dataclass
class Session:
    """Domain entity for a login session shared by an access/refresh token pair"""

    sid: str
    subject: str
    issued_at: datetime
    device: str = "default"

    def to_hash(self) -> dict[str, str]:
        """Serialize to store hash fields"""
        return {
            "sub": self.subject,
            "device": self.device,
            "issued_at": self.issued_at.isoformat(),
        }

    @classmethod
    def from_hash(cls, sid: str, fields: dict[str, str]) -> "Session":
        """Deserialize from store hash fields"""
        issued_at = fields.get("issued_at")
        return cls(
            sid=sid,
            subject=fields["sub"],
            device=fields.get("device", "default"),
            issued_at=datetime.fromisoformat(issued_at) if issued_at else datetime.now(timezone.utc),
        )
