"""Device token registration and lifecycle."""

import logging

from ..clock import Clock, utc_now
from ..errors import Err, ForbiddenError, Ok, Result
from .models import DeviceToken
from .stores import DeviceTokenStore

logger = logging.getLogger(__name__)


class DeviceRegistry:
    """Owns the push tokens each user has registered."""

    def __init__(self, store: DeviceTokenStore, clock: Clock = utc_now):
        self.store = store
        self.clock = clock

    async def register_device(
        self,
        user_id: int,
        token: str,
        platform: str,
        device_name: str | None = None,
    ) -> DeviceToken:
        """
        Register a token for a user, or refresh it if already registered.

        Keyed on (user_id, token), so registering twice leaves one active row.
        The platform is stored lowercased.
        """
        platform = platform.lower()
        device = await self.store.upsert(
            user_id, token, platform, device_name, self.clock()
        )
        logger.info(f"Device registered for user {user_id} on platform {platform}")
        return device

    async def get_active_devices(self, user_id: int) -> list[DeviceToken]:
        return await self.store.get_active_by_user(user_id)

    async def deactivate_by_id(self, user_id: int, device_token_id: int) -> Result:
        """
        Deactivate one of the caller's devices.

        Ownership comes from the stored row, never from the request.
        """
        device = await self.store.get_by_id(device_token_id)
        if device is None or device.user_id != user_id:
            return Err(ForbiddenError("Device not found or does not belong to user."))

        await self.store.deactivate(device_token_id, self.clock(), modified_by=user_id)
        logger.info(f"Device {device_token_id} unregistered for user {user_id}")
        return Ok(None)

    async def deactivate_by_token(self, token: str) -> None:
        """
        Deactivate whatever device holds this token (logout flow).

        Holding the token is the proof of ownership. Unknown tokens are ignored.
        """
        count = await self.store.deactivate_by_token(token, self.clock())
        if count:
            logger.info(f"Deactivated {count} device(s) by token")

    async def mark_used(self, device_token_id: int) -> None:
        await self.store.update_last_used(device_token_id, self.clock())

    async def deactivate_invalid(self, device: DeviceToken) -> None:
        """Deactivate a device whose token the push provider rejected."""
        await self.store.deactivate(device.device_token_id, self.clock())
        logger.info(
            f"Deactivated device {device.device_token_id} of user {device.user_id} "
            f"after provider rejected its token"
        )
