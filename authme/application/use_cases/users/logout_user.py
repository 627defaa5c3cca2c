"""Use-case for ending a session.

Session tokens are stateless, so logging out only means the caller drops the
``token`` cookie; there is nothing to revoke server-side.
"""

from __future__ import annotations

from authme.domain.users.entities import PublicUser
from authme.shared.logging import logger


class LogoutUserUseCase:
    def execute(self, user: PublicUser | None = None) -> None:
        if user is not None:
            logger.info(f"auth.logout: user_id={user.id}")
        else:
            logger.debug("auth.logout: anonymous caller")
