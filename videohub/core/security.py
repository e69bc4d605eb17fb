"""JWT helpers and the caller identity resolved from a bearer token."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, FrozenSet, Iterable, Optional

from jose import JWTError, jwt

from videohub.core.config import settings
from videohub.models.user import UserRole


@dataclass(frozen=True)
class Identity:
    """Authenticated caller: user id plus the roles granted by the token."""

    id: int
    roles: FrozenSet[UserRole] = field(default_factory=frozenset)

    def has_role(self, role: UserRole) -> bool:
        return role in self.roles

    @property
    def is_admin(self) -> bool:
        return self.has_role(UserRole.admin)


def create_access_token(
    user_id: int,
    roles: Iterable[UserRole] = (UserRole.user,),
    expires_delta: Optional[timedelta] = None,
) -> str:
    expire = datetime.utcnow() + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode: dict[str, Any] = {
        "sub": str(user_id),
        "roles": [UserRole(role).value for role in roles],
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Optional[Identity]:
    """Decode a JWT into an Identity; None when the token is invalid or expired."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None

    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        return None

    roles = set()
    for name in payload.get("roles") or []:
        try:
            roles.add(UserRole(name))
        except ValueError:
            # unknown roles grant nothing
            continue
    return Identity(id=user_id, roles=frozenset(roles))
