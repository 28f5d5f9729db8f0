"""
TrackOrb BLE Link
Thin bleak adapter: finds the ball, subscribes to its IMU characteristic and
forwards every notification payload into a RecordingCoordinator.

The link is an explicit handle owned by the caller; nothing here is global.

Usage:
    coordinator = RecordingCoordinator(store, OrbConfig.for_ble())
    async with OrbLink(coordinator) as link:
        session = await link.record(duration=30.0)
"""

import asyncio
import logging
from typing import Optional, TYPE_CHECKING

from bleak import BleakClient, BleakScanner
from bleak.exc import BleakError

from ...errors import LinkError
from ...models import Session
from .config import OrbConfig

if TYPE_CHECKING:
    from ...coordinator import RecordingCoordinator

logger = logging.getLogger(__name__)


class OrbLink:
    """BLE connection to one TrackOrb ball."""

    def __init__(self, coordinator: 'RecordingCoordinator', config: Optional[OrbConfig] = None):
        """
        Args:
            coordinator: Receives payloads and link-loss events
            config: BLE settings; defaults to the coordinator's config
        """
        self.coordinator = coordinator
        self.config = config if config else coordinator.config
        self.client: Optional[BleakClient] = None
        self.notification_count = 0

    @property
    def is_connected(self) -> bool:
        return self.client is not None and self.client.is_connected

    async def connect(self):
        """
        Scan for the ball by name, connect and subscribe to notifications

        Raises:
            LinkError if the device is not found or the connection fails
        """
        logger.info(f"Scanning for '{self.config.device_name}' ({self.config.scan_timeout}s)...")
        device = await BleakScanner.find_device_by_name(
            self.config.device_name, timeout=self.config.scan_timeout
        )
        if device is None:
            raise LinkError(f"Device '{self.config.device_name}' not found")

        logger.info(f"Found device: {device.name}, {device.address}. Connecting...")
        self.client = BleakClient(device, disconnected_callback=self._on_disconnect)
        try:
            await self.client.connect()
            await self.client.start_notify(self.config.characteristic_uuid, self._on_notify)
        except BleakError as e:
            logger.error(f"✗ Failed to connect to {device.address}: {e}")
            self.client = None
            raise LinkError(str(e)) from e

        logger.info(f"✓ Connected, subscribed to {self.config.characteristic_uuid}")

    async def disconnect(self):
        """Stop notifications and drop the connection."""
        if self.client is None:
            return
        try:
            if self.client.is_connected:
                await self.client.stop_notify(self.config.characteristic_uuid)
                await self.client.disconnect()
        except BleakError as e:
            logger.warning(f"⚠ Error while disconnecting: {e}")
        finally:
            self.client = None
        logger.info("Disconnected")

    async def record(self, duration: float) -> Session:
        """
        Record one session of the given length over this link

        A disconnect during the session ends intake early; whatever was
        received is still persisted.

        Returns:
            The stopped Session
        """
        self.coordinator.start_session()
        try:
            await asyncio.sleep(duration)
        finally:
            # Joining the consumer thread blocks, keep it off the event loop
            session = await asyncio.to_thread(self.coordinator.stop_session)
        return session

    # -----------------------------------------------------------------------
    # bleak callbacks
    # -----------------------------------------------------------------------

    def _on_notify(self, sender, data: bytearray):
        self.notification_count += 1
        self.coordinator.submit(bytes(data))

    def _on_disconnect(self, client: BleakClient):
        logger.warning("⚠ Ball disconnected")
        self.coordinator.link_lost()

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.disconnect()

    def __repr__(self):
        status = "connected" if self.is_connected else "disconnected"
        return f"<OrbLink(device={self.config.device_name}, status={status})>"
