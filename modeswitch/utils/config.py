from modeswitch.utils.logger import get_logger
from modeswitch.core.models import OutputMode, ReconnectPolicy
from pathlib import Path
from typing import Dict
import copy
import yaml

logger = get_logger("config")

DEFAULT_CONFIG_PATH = "modeswitch_config.yaml"

DEFAULT_CONFIG = {
    'engine': {
        'library_path': None,
        'strip_index': 3
    },
    'output': {
        'default_mode': 'A',
        'auto_connect': True
    },
    'reconnect': {
        'enabled': True,
        'probe_interval': 5.0,
        'retry_interval': 3.0,
        'max_attempts': 0
    },
    'scheduler': {
        'tick_interval': 0.5
    },
    'logging': {
        'level': 'INFO',
        'history_size': 1000
    },
    'api': {
        'host': '127.0.0.1',
        'port': 8080
    }
}

class ConfigManager:
    """Loads the YAML configuration and builds typed settings from it"""

    def __init__(self, config_path: str = DEFAULT_CONFIG_PATH):
        self.config_path = Path(config_path)
        self.config = self._load_default_config()

    def _load_default_config(self) -> Dict:
        return copy.deepcopy(DEFAULT_CONFIG)

    def load_config(self) -> Dict:
        """Load configuration from file, merged section by section over the defaults"""
        try:
            if self.config_path.exists():
                with open(self.config_path, 'r') as f:
                    loaded_config = yaml.safe_load(f) or {}
                self._merge(loaded_config)
                logger.info(f"Loaded configuration from {self.config_path}")
        except Exception as e:
            logger.error(f"Failed to load config: {e}")
        return self.config

    def _merge(self, loaded_config: Dict):
        for section, values in loaded_config.items():
            if isinstance(values, dict) and isinstance(self.config.get(section), dict):
                self.config[section].update(values)
            else:
                self.config[section] = values

    def reconnect_policy(self) -> ReconnectPolicy:
        section = self.config['reconnect']
        return ReconnectPolicy(
            probe_interval=float(section['probe_interval']),
            retry_interval=float(section['retry_interval']),
            max_attempts=int(section['max_attempts']),
            auto_reconnect=bool(section['enabled'])
        )

    def default_mode(self) -> OutputMode:
        return OutputMode.parse(self.config['output']['default_mode'])

    def strip_index(self) -> int:
        return int(self.config['engine']['strip_index'])

    def tick_interval(self) -> float:
        interval = float(self.config['scheduler']['tick_interval'])
        if interval <= 0:
            raise ValueError(f"scheduler.tick_interval must be positive, got {interval}")
        return interval
