"""Authenticated caller identity decoded from a bearer token."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Identity:
    """
    Decoded identity of an authenticated caller.

    uid is the identity provider's stable user id; the remaining fields are
    the optional profile claims carried by the token.
    """

    uid: str
    email: Optional[str] = None
    name: Optional[str] = None
    picture: Optional[str] = None
    claims: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_claims(cls, claims: Dict[str, Any]) -> "Identity":
        uid = claims.get("user_id") or claims.get("sub") or ""
        return cls(
            uid=str(uid),
            email=claims.get("email"),
            name=claims.get("name"),
            picture=claims.get("picture"),
            claims=dict(claims),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "uid": self.uid,
            "email": self.email,
            "name": self.name,
            "picture": self.picture,
        }
