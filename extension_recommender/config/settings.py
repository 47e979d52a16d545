# extension_recommender/config/settings.py

import copy
import os
import shutil
import yaml
from pathlib import Path
from typing import Dict, Any, Optional


class Config:
    """Configuration management for the extension recommender"""

    DEFAULT_CONFIG_DIR = Path.home() / ".extension-recommender"
    HOME_ENV_VAR = "EXTENSION_RECOMMENDER_HOME"

    DEFAULT_CONFIG = {
        'model': {
            'directory': None,  # None -> <config_dir>/models
            'model_file': 'model.onnx',
            'encoding_file': 'feature_encoding.json',
            'entity_category': 'Extension',
            'input_name': None,  # None -> model's first declared input
            'output_name': 'output_1',
            'execution_providers': ['CPUExecutionProvider'],
            'intra_op_num_threads': 1,
        },
        'inference': {
            'confidence_pass': 0.6,
            'scratch_pool_size': 4,
        },
        'server': {
            'host': '127.0.0.1',
            'port': 8000,
        },
    }

    def __init__(self, config_dir: Optional[Path] = None):
        env_dir = os.environ.get(self.HOME_ENV_VAR)
        self.config_dir = Path(config_dir or env_dir or self.DEFAULT_CONFIG_DIR).expanduser()
        self.models_dir = self.config_dir / "models"
        self.logs_dir = self.config_dir / "logs"
        self.global_config_path = self.config_dir / "config.yaml"

        self._ensure_directories()

    def _ensure_directories(self):
        """Ensure configuration directories exist"""
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.models_dir.mkdir(parents=True, exist_ok=True)
        self.logs_dir.mkdir(parents=True, exist_ok=True)

    def _load_yaml(self, path: Path) -> Dict[str, Any]:
        """Load YAML file"""
        if not path.exists():
            return {}
        with open(path, 'r') as f:
            return yaml.safe_load(f) or {}

    def _save_yaml(self, path: Path, data: Dict[str, Any]):
        """Save YAML file"""
        with open(path, 'w') as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

    # Global config methods

    def load_global_config(self) -> Dict[str, Any]:
        """Load configuration, file values merged over the defaults"""
        config = copy.deepcopy(self.DEFAULT_CONFIG)
        for section, values in self._load_yaml(self.global_config_path).items():
            if isinstance(values, dict) and section in config:
                config[section].update(values)
            else:
                config[section] = values
        return config

    def save_global_config(self, config: Dict[str, Any]):
        """Save global configuration"""
        self._save_yaml(self.global_config_path, config)

    def get_section(self, section: str) -> Dict[str, Any]:
        """Get one configuration section"""
        return self.load_global_config().get(section, {})

    def get(self, section: str, key: str, default: Any = None) -> Any:
        """Get a single configuration value"""
        return self.get_section(section).get(key, default)

    def set(self, section: str, key: str, value: Any):
        """
        Persist a single configuration value

        Raises:
            ValueError: If the section or key is unknown
        """
        if section not in self.DEFAULT_CONFIG or key not in self.DEFAULT_CONFIG[section]:
            raise ValueError(f"Unknown configuration key: {section}.{key}")

        # Only overrides are written; defaults stay in code
        config = self._load_yaml(self.global_config_path)
        config.setdefault(section, {})[key] = value
        self.save_global_config(config)

    # Model artifact paths

    @property
    def model_dir(self) -> Path:
        """Directory holding model.onnx and feature_encoding.json"""
        directory = self.get('model', 'directory')
        return Path(directory).expanduser() if directory else self.models_dir

    @property
    def model_path(self) -> Path:
        return self.model_dir / self.get('model', 'model_file')

    @property
    def encoding_path(self) -> Path:
        return self.model_dir / self.get('model', 'encoding_file')

    def install_model(self, source_dir: str) -> Path:
        """
        Copy model artifacts into the models directory.

        Args:
            source_dir: Directory containing the model and encoding files

        Returns:
            Path to the models directory the artifacts were copied to

        Raises:
            ValueError: If source_dir doesn't exist or lacks an artifact
        """
        source_path = Path(source_dir).expanduser().resolve()

        if not source_path.exists():
            raise ValueError(f"Model path does not exist: {source_path}")

        if not source_path.is_dir():
            raise ValueError(f"Model path is not a directory: {source_path}")

        model = self.get_section('model')
        files = [model['model_file'], model['encoding_file']]
        missing = [name for name in files if not (source_path / name).is_file()]
        if missing:
            raise ValueError(f"Missing model artifact(s) in {source_path}: {', '.join(missing)}")

        for name in files:
            shutil.copy2(source_path / name, self.models_dir / name)

        # Installed artifacts win over any previously configured directory
        if self.get('model', 'directory'):
            self.set('model', 'directory', None)

        return self.models_dir
