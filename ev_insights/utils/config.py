# ========================
# ev_insights/utils/config.py
# ========================

"""
Configuration Management

Centralized configuration for the EV insights pipeline with environment support.
"""

import json
import os
from pathlib import Path
from typing import Dict, Any, Optional


class Config:
    """
    Configuration class for the EV insights pipeline.
    Supports environment variables and default values.
    """

    def __init__(self, config_dict: Optional[Dict[str, Any]] = None):
        """
        Initialize configuration.

        Args:
            config_dict (dict): Optional configuration overrides
        """
        # File Paths
        self.DEFAULT_INPUT_FILE = os.getenv('EV_INPUT_FILE', 'data/raw/ev_population.csv')
        self.LOGS_DIR = os.getenv('EV_LOGS_DIR', 'logs')

        # Data Generation Settings
        self.DEFAULT_SAMPLE_ROWS = int(os.getenv('SAMPLE_ROWS', '20000'))
        self.LARGE_DATASET_ROWS = int(os.getenv('LARGE_DATASET_ROWS', '1000000'))
        self.SAMPLE_ERROR_RATE = float(os.getenv('SAMPLE_ERROR_RATE', '0.05'))

        # View Limits
        self.TOP_MANUFACTURERS_LIMIT = int(os.getenv('TOP_MANUFACTURERS_LIMIT', '8'))
        self.TOP_STATES_LIMIT = int(os.getenv('TOP_STATES_LIMIT', '8'))
        self.TOP_CITIES_LIMIT = int(os.getenv('TOP_CITIES_LIMIT', '8'))
        self.TOP_MODELS_LIMIT = int(os.getenv('TOP_MODELS_LIMIT', '15'))

        # Performance Settings
        self.VIEW_CACHE_SIZE = int(os.getenv('VIEW_CACHE_SIZE', '32'))

        # API Settings
        self.API_HOST = os.getenv('API_HOST', '0.0.0.0')
        self.API_PORT = int(os.getenv('API_PORT', '8000'))

        # Logging Configuration
        self.LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

        # Override with provided config
        if config_dict:
            self._update_from_dict(config_dict)

    def _update_from_dict(self, config_dict: Dict[str, Any]) -> None:
        """Update configuration from dictionary."""
        for key, value in config_dict.items():
            if hasattr(self, key.upper()):
                setattr(self, key.upper(), value)

    def get_data_paths(self) -> Dict[str, Path]:
        """Get all configured data paths as Path objects."""
        input_file = Path(self.DEFAULT_INPUT_FILE)
        return {
            'input_file': input_file,
            'raw_data_dir': input_file.parent,
            'logs_dir': Path(self.LOGS_DIR)
        }

    def ensure_directories(self) -> None:
        """Create necessary directories if they don't exist."""
        paths = self.get_data_paths()
        for path_name, path in paths.items():
            if path_name.endswith('_dir'):
                path.mkdir(parents=True, exist_ok=True)

    def validate_config(self) -> Dict[str, bool]:
        """
        Validate configuration values.

        Returns:
            dict: Validation results for each setting
        """
        validations = {}

        validations['sample_rows'] = self.DEFAULT_SAMPLE_ROWS > 0
        validations['error_rate'] = 0.0 <= self.SAMPLE_ERROR_RATE <= 1.0
        validations['top_manufacturers_limit'] = self.TOP_MANUFACTURERS_LIMIT > 0
        validations['top_states_limit'] = self.TOP_STATES_LIMIT > 0
        validations['top_cities_limit'] = self.TOP_CITIES_LIMIT > 0
        validations['top_models_limit'] = self.TOP_MODELS_LIMIT > 0
        validations['view_cache_size'] = self.VIEW_CACHE_SIZE >= 0
        validations['api_port'] = 1000 <= self.API_PORT <= 65535

        valid_log_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        validations['log_level'] = self.LOG_LEVEL.upper() in valid_log_levels

        return validations

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            attr: getattr(self, attr)
            for attr in dir(self)
            if not attr.startswith('_') and not callable(getattr(self, attr))
        }

    def save_to_file(self, file_path: str) -> None:
        """Save configuration to JSON file."""
        with open(file_path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2, default=str)

    @classmethod
    def load_from_file(cls, file_path: str) -> 'Config':
        """Load configuration from JSON file."""
        with open(file_path, 'r') as f:
            config_dict = json.load(f)
        return cls(config_dict)
