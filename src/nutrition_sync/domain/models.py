"""Identity models for the sync layer."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Session:
    """Identifies the signed-in user."""

    uid: str
    email: str


@dataclass(frozen=True)
class LocalCredential:
    """Credential stored on-device for local sign-in.

    ``password`` is only set on legacy records that predate hashing.
    """

    uid: str
    email: str
    password_hash: str | None = None
    salt: str | None = None
    password: str | None = None

    @property
    def is_legacy(self) -> bool:
        return self.password_hash is None or self.salt is None


def parse_session(row: object) -> Session | None:
    """Parse a session payload, returning None for anything unusable."""
    if not isinstance(row, dict):
        return None
    uid = row.get("uid")
    if not uid:
        return None
    return Session(uid=str(uid), email=str(row.get("email") or ""))


def dump_session(session: Session) -> dict[str, str]:
    return {"uid": session.uid, "email": session.email}


def parse_credential(row: dict[str, object]) -> LocalCredential:
    """Parse a stored local user record."""
    return LocalCredential(
        uid=str(row.get("uid", "")),
        email=str(row.get("email", "")),
        password_hash=row.get("passwordHash"),
        salt=row.get("salt"),
        password=row.get("password"),
    )


def dump_credential(credential: LocalCredential) -> dict[str, object]:
    """Serialize a local user record, omitting fields that are unset."""
    payload: dict[str, object] = {"uid": credential.uid, "email": credential.email}
    if credential.password_hash is not None:
        payload["passwordHash"] = credential.password_hash
    if credential.salt is not None:
        payload["salt"] = credential.salt
    if credential.password is not None:
        payload["password"] = credential.password
    return payload
