"""
TrackOrb Sensor Configuration
BLE link, notification channel and offline processing parameters
"""

from dataclasses import dataclass
from pathlib import Path


@dataclass
class OrbConfig:
    """TrackOrb sensor ball configuration parameters"""

    # Operating mode
    mode: str = 'session'  # 'session' or 'ble'

    # BLE settings (ESP32 + BNO08x peripheral)
    device_name: str = 'ESP32_BNO08x_Mock'
    service_uuid: str = '4fafc201-1fb5-459e-8fcc-c5c9c331914b'
    characteristic_uuid: str = 'beb5483e-36e1-4688-b7f5-ea07361b26a8'
    scan_timeout: float = 10.0  # seconds

    # Notification payloads: 'base64' (encoded CSV text) or 'text' (raw CSV bytes)
    payload_encoding: str = 'base64'

    # Message channel between the link and the recorder
    channel_capacity: int = 10000  # payloads; further submits are dropped
    poll_interval: float = 0.05  # seconds the consumer waits per channel read
    drain_timeout: float = 5.0  # seconds to wait for the consumer on stop

    # Calibration settings
    calibration_window: int = 1000  # leading samples averaged into the offset

    # Signal conditioning
    lowpass_alpha: float = 0.1  # exponential smoothing factor

    # Kinematic integration
    velocity_damping: float = 0.9  # applied to the whole accumulated velocity

    # Storage
    data_dir: Path = Path('data')

    @classmethod
    def for_session(cls, data_dir: Path = Path('data')) -> 'OrbConfig':
        """
        Create a configuration for programmatic sessions.

        Payloads arrive base64 encoded, as delivered by mobile BLE stacks.

        Returns:
            OrbConfig with mode='session' and payload_encoding='base64'.
        """
        return cls(
            mode='session',
            payload_encoding='base64',
            data_dir=Path(data_dir),
        )

    @classmethod
    def for_ble(cls, data_dir: Path = Path('data')) -> 'OrbConfig':
        """
        Create a configuration for a direct bleak connection.

        bleak hands over characteristic values as raw bytes, so payloads are
        the CSV text itself.

        Returns:
            OrbConfig with mode='ble' and payload_encoding='text'.
        """
        return cls(
            mode='ble',
            payload_encoding='text',
            data_dir=Path(data_dir),
        )
