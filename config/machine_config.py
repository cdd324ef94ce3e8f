"""
Machine configuration for dual-turret program analysis.
Simple, clean configuration system for different Integrex models.
"""
from dataclasses import dataclass, asdict
import json
import logging

logger = logging.getLogger(__name__)


@dataclass
class MachineConfig:
    """Configuration for a dual-turret multi-tasking machine."""
    name: str
    dialect: str = "mazak_integrex"

    # Validation limits
    max_spindle_speed: int = 5000
    min_feed_rate: float = 0.0001
    max_block_length: int = 128

    # Lines after M563 searched for the slave release wait code
    release_lookahead_lines: int = 4


class ConfigManager:
    """Manages machine configurations with simple presets."""

    DEFAULT = "integrex_100_iv_st"

    @staticmethod
    def integrex_100_iv_st() -> MachineConfig:
        """Integrex 100-IV ST with MATRIX control."""
        return MachineConfig(name="Mazak Integrex 100-IV ST")

    @staticmethod
    def integrex_i_200() -> MachineConfig:
        """Integrex i-200 ST; faster milling spindle."""
        return MachineConfig(
            name="Mazak Integrex i-200 ST",
            max_spindle_speed=12000,
        )

    @staticmethod
    def presets() -> dict:
        return {
            "integrex_100_iv_st": ConfigManager.integrex_100_iv_st,
            "integrex_i_200": ConfigManager.integrex_i_200,
        }

    @staticmethod
    def get_config(machine_type: str = DEFAULT) -> MachineConfig:
        """Get configuration by preset name, falling back to the default."""
        factory = ConfigManager.presets().get(machine_type.lower())
        if factory is None:
            logger.warning("Unknown machine preset %r, using %s",
                           machine_type, ConfigManager.DEFAULT)
            factory = ConfigManager.integrex_100_iv_st
        return factory()

    @staticmethod
    def save_config(config: MachineConfig, filepath: str):
        """Save configuration to JSON file."""
        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(asdict(config), f, indent=2)

    @staticmethod
    def load_config(filepath: str) -> MachineConfig:
        """Load configuration from JSON file, or the default preset if unreadable."""
        try:
            with open(filepath, 'r', encoding='utf-8') as f:
                data = json.load(f)
            return MachineConfig(**data)
        except (OSError, ValueError, TypeError) as e:
            logger.warning("Could not load machine config %s: %s", filepath, e)
            return ConfigManager.integrex_100_iv_st()
