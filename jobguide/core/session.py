from dataclasses import dataclass

from jobguide.errors import PermissionDeniedError
from jobguide.models.enums import UserRole


@dataclass(frozen=True)
class UserSession:
    """Signed-in user, built per request from the bearer token.

    Stores receive it in their constructor; there is no app-wide current user.
    """

    user_id: str
    role: UserRole = UserRole.STUDENT
    email: str | None = None

    @property
    def is_instructor(self) -> bool:
        return self.role == UserRole.INSTRUCTOR

    def require_instructor(self) -> None:
        if not self.is_instructor:
            raise PermissionDeniedError("指導者のみが実行できる操作です")
