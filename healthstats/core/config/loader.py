"""
Configuration loaders for different file formats.

This module provides loaders for JSON and YAML configuration files. Both
return plain dictionaries; conversion to :class:`EngineConfig` happens in
:mod:`healthstats.core.config.settings`.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Union, List
import json
import logging

import yaml

from ..base.exceptions import ConfigurationError


logger = logging.getLogger(__name__)


class ConfigLoader(ABC):
    """Abstract base class for configuration loaders."""

    @abstractmethod
    def load(self, path: Union[str, Path]) -> Dict[str, Any]:
        """Load configuration from file.

        Parameters
        ----------
        path : str or Path
            Path to configuration file

        Returns
        -------
        dict
            Configuration data

        Raises
        ------
        ConfigurationError
            If loading fails
        """
        pass

    @abstractmethod
    def save(self, data: Dict[str, Any], path: Union[str, Path]) -> None:
        """Save configuration to file.

        Raises
        ------
        ConfigurationError
            If saving fails
        """
        pass

    @property
    @abstractmethod
    def supported_extensions(self) -> List[str]:
        """List of supported file extensions, including the dot."""
        pass

    @property
    @abstractmethod
    def format_name(self) -> str:
        pass

    def preprocess_data(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Convert Path objects to strings before saving."""
        def convert_paths(obj):
            if isinstance(obj, Path):
                return str(obj)
            elif isinstance(obj, dict):
                return {k: convert_paths(v) for k, v in obj.items()}
            elif isinstance(obj, (list, tuple)):
                return [convert_paths(item) for item in obj]
            return obj

        return convert_paths(data)

    def _read(self, path: Path, parse) -> Dict[str, Any]:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = parse(f)
        except FileNotFoundError as e:
            raise ConfigurationError(f"Configuration file not found: {path}",
                                     config_file=str(path)) from e
        except PermissionError as e:
            raise ConfigurationError(f"Permission denied reading {path}",
                                     config_file=str(path)) from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"{self.format_name} file must contain a mapping, got {type(data).__name__}",
                config_file=str(path),
            )

        logger.debug("Loaded %s config from %s", self.format_name, path)
        return data

    def _write(self, data: Dict[str, Any], path: Path, dump) -> None:
        if not isinstance(data, dict):
            raise ConfigurationError(f"Data must be a dictionary for {self.format_name} format")

        processed_data = self.preprocess_data(data)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, 'w', encoding='utf-8') as f:
                dump(processed_data, f)
        except PermissionError as e:
            raise ConfigurationError(f"Permission denied writing to {path}",
                                     config_file=str(path)) from e

        logger.debug("Saved %s config to %s", self.format_name, path)


class JSONConfigLoader(ConfigLoader):
    """JSON configuration loader."""

    @property
    def supported_extensions(self) -> List[str]:
        return ['.json']

    @property
    def format_name(self) -> str:
        return "JSON"

    def load(self, path: Union[str, Path]) -> Dict[str, Any]:
        path = Path(path)
        try:
            return self._read(path, json.load)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in {path}: {e}",
                                     config_file=str(path)) from e

    def save(self, data: Dict[str, Any], path: Union[str, Path]) -> None:
        self._write(data, Path(path),
                    lambda obj, f: json.dump(obj, f, indent=2, ensure_ascii=False, sort_keys=True))


class YAMLConfigLoader(ConfigLoader):
    """YAML configuration loader backed by PyYAML."""

    @property
    def supported_extensions(self) -> List[str]:
        return ['.yaml', '.yml']

    @property
    def format_name(self) -> str:
        return "YAML"

    def load(self, path: Union[str, Path]) -> Dict[str, Any]:
        path = Path(path)
        try:
            return self._read(path, yaml.safe_load)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}",
                                     config_file=str(path)) from e

    def save(self, data: Dict[str, Any], path: Union[str, Path]) -> None:
        self._write(data, Path(path),
                    lambda obj, f: yaml.safe_dump(obj, f, default_flow_style=False,
                                                  allow_unicode=True, sort_keys=True))


_LOADERS = {
    '.json': JSONConfigLoader,
    '.yaml': YAMLConfigLoader,
    '.yml': YAMLConfigLoader,
}


def get_config_loader(file_path: Union[str, Path]) -> ConfigLoader:
    """Get appropriate config loader for file extension.

    Raises
    ------
    ConfigurationError
        If the file format is not supported
    """
    suffix = Path(file_path).suffix.lower()
    if suffix not in _LOADERS:
        raise ConfigurationError(
            f"Unsupported configuration file format: {suffix}. Available: {list(_LOADERS)}",
            config_file=str(file_path),
        )
    return _LOADERS[suffix]()
