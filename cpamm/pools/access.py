"""Administrative capabilities composed into a pool."""

import structlog

from cpamm.errors import PoolPaused, Unauthorized

logger = structlog.get_logger()


class AdminGate:
    """Single administrator allowed to run admin-only operations."""

    def __init__(self, admin: str) -> None:
        self._admin = admin

    @property
    def admin(self) -> str:
        return self._admin

    def require(self, caller: str) -> None:
        """Raise Unauthorized unless ``caller`` is the administrator."""
        if caller != self._admin:
            logger.warning("unauthorized_admin_call", caller=caller)
            raise Unauthorized(f"{caller} is not the pool administrator")

    def transfer(self, caller: str, new_admin: str) -> None:
        self.require(caller)
        logger.info("admin_transferred", previous=self._admin, admin=new_admin)
        self._admin = new_admin


class PauseState:
    """Emergency-stop flag checked at the top of every mutating operation."""

    def __init__(self, paused: bool = False) -> None:
        self._paused = paused

    @property
    def paused(self) -> bool:
        return self._paused

    def check(self) -> None:
        if self._paused:
            raise PoolPaused("Pool is paused")

    def set(self, paused: bool) -> None:
        self._paused = paused
