"""
Configuration management for robustpca.

This module provides functionality for managing configuration,
including loading from environment variables, files and default values.
"""

import os
import json
import logging
import threading
from copy import deepcopy
from typing import Any, Dict, List, Optional

import yaml

logger = logging.getLogger(__name__)


def to_int(value: Any) -> Optional[int]:
    """
    Convert a value to an integer.
    
    Args:
        value: Value to convert
        
    Returns:
        Integer value, or None if conversion failed
    """
    if value is None:
        return None
    
    try:
        return int(value)
    except (ValueError, TypeError):
        return None


def to_float(value: Any) -> Optional[float]:
    """
    Convert a value to a float.
    
    Args:
        value: Value to convert
        
    Returns:
        Float value, or None if conversion failed
    """
    if value is None:
        return None
    
    try:
        return float(value)
    except (ValueError, TypeError):
        return None


def to_bool(value: Any) -> Optional[bool]:
    """
    Convert a value to a boolean.
    
    Args:
        value: Value to convert
        
    Returns:
        Boolean value, or None if conversion failed
    """
    if value is None:
        return None
    
    if isinstance(value, bool):
        return value
    
    if isinstance(value, (int, float)):
        return bool(value)
    
    if isinstance(value, str):
        value = value.lower().strip()
        if value in ('true', 'yes', 'y', '1', 't'):
            return True
        if value in ('false', 'no', 'n', '0', 'f'):
            return False
    
    return None


def to_int_list(value: Any, separator: str = ',') -> Optional[List[int]]:
    """
    Convert a value to a list of integers.

    Strings are split on ``separator``; lists are converted element-wise.
    
    Args:
        value: Value to convert
        separator: Separator for string values
        
    Returns:
        List of integers, or None if conversion failed
    """
    if value is None:
        return None

    if isinstance(value, str):
        items = [item.strip() for item in value.split(separator) if item.strip()]
    elif isinstance(value, (list, tuple)):
        items = list(value)
    else:
        return None
    
    try:
        return [int(item) for item in items]
    except (ValueError, TypeError):
        return None


class Config:
    """
    Configuration for robustpca runs.

    Values come, in increasing priority, from built-in defaults,
    ``ROBUSTPCA_*`` and ``LOG_LEVEL`` environment variables, an optional
    configuration file and explicit overrides.
    """
    
    def __init__(self, overrides: Optional[Dict[str, Any]] = None):
        """
        Initialize configuration.
        
        Args:
            overrides: Optional configuration overrides
        """
        self._lock = threading.RLock()
        self._config = {}
        self._initialized = False
        
        self.load_config(overrides)
    
    def load_config(self, overrides: Optional[Dict[str, Any]] = None) -> None:
        """
        Load configuration from all sources.
        
        Args:
            overrides: Optional configuration overrides
        """
        with self._lock:
            config = self._get_defaults()
            config = self._apply_env_vars(config)
            
            if overrides:
                config = self._apply_overrides(config, overrides)
            
            self._config = config
            self._initialized = True
            
            logger.info("Configuration loaded")
    
    def _get_defaults(self) -> Dict[str, Any]:
        return {
            'pca': {
                'standardize': True,
                'num-components': None,  # None selects the 0.95^v rule
                'bdp': None,
                'bsb': None,             # 0-based row indices
                'random-state': 0        # MCD seed
            },
            
            'output': {
                'format': 'json',
                'report': False
            },
            
            'logging': {
                'level': 'warn'
            }
        }
    
    def _apply_env_vars(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """
        Apply environment variables to configuration.

        Unset or unparseable variables leave the current value in place.
        
        Args:
            config: Current configuration
            
        Returns:
            Updated configuration
        """
        config = deepcopy(config)
        pca = config['pca']
        
        standardize = to_bool(os.environ.get('ROBUSTPCA_STANDARDIZE'))
        if standardize is not None:
            pca['standardize'] = standardize
        
        num_components = to_int(os.environ.get('ROBUSTPCA_NUM_COMPONENTS'))
        if num_components is not None:
            pca['num-components'] = num_components
        
        bdp = to_float(os.environ.get('ROBUSTPCA_BDP'))
        if bdp is not None:
            pca['bdp'] = bdp
        
        bsb = to_int_list(os.environ.get('ROBUSTPCA_BSB'))
        if bsb:
            pca['bsb'] = bsb
        
        random_state = to_int(os.environ.get('ROBUSTPCA_RANDOM_STATE'))
        if random_state is not None:
            pca['random-state'] = random_state
        
        config['output']['format'] = os.environ.get('ROBUSTPCA_OUTPUT_FORMAT', config['output']['format']).lower()
        config['logging']['level'] = os.environ.get('LOG_LEVEL', config['logging']['level']).lower()
        
        return config
    
    def _apply_overrides(self, config: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
        config = deepcopy(config)
        
        def deep_update(d, u):
            for k, v in u.items():
                if isinstance(v, dict) and k in d and isinstance(d[k], dict):
                    d[k] = deep_update(d[k], v)
                else:
                    d[k] = v
            return d
        
        return deep_update(config, overrides)
    
    def get(self, path: str, default: Any = None) -> Any:
        """
        Get a configuration value.
        
        Args:
            path: Configuration path (dot-separated)
            default: Default value if not found
            
        Returns:
            Configuration value, or default if not found
        """
        if not self._initialized:
            self.load_config()
        
        value = self._config
        for component in path.split('.'):
            if isinstance(value, dict) and component in value:
                value = value[component]
            else:
                return default
        
        return value
    
    def pca_options(self) -> Dict[str, Any]:
        """
        Collect the PCA options held in this configuration.

        Options left at None are omitted so that ``bdp`` and ``bsb``
        only appear when one of them was actually configured.
        
        Returns:
            Dictionary suitable for ``parse_options``
        """
        pca = self.get('pca', {})
        options = {
            'standardize': pca.get('standardize', True),
            'num_components': pca.get('num-components'),
            'bdp': pca.get('bdp'),
            'bsb': pca.get('bsb'),
            'random_state': pca.get('random-state'),
        }
        return {name: value for name, value in options.items() if value is not None}
    
    def load_from_file(self, filepath: str, overrides: Optional[Dict[str, Any]] = None) -> None:
        """
        Load configuration from a file.

        File values take priority over environment variables and defaults;
        ``overrides`` take priority over the file.
        
        Args:
            filepath: Path to load configuration from
            overrides: Optional overrides layered over the file contents
        """
        if filepath.endswith('.json'):
            with open(filepath, 'r') as f:
                file_config = json.load(f)
        elif filepath.endswith('.yaml') or filepath.endswith('.yml'):
            with open(filepath, 'r') as f:
                file_config = yaml.safe_load(f) or {}
        else:
            raise ValueError(f"Unsupported file format: {filepath}")
        
        if not isinstance(file_config, dict):
            raise ValueError(f"Configuration file must hold a mapping: {filepath}")
        
        if overrides:
            file_config = self._apply_overrides(file_config, overrides)
        self.load_config(file_config)


class ConfigManager:
    """
    Singleton manager for configuration.
    """
    
    _instance = None
    _lock = threading.RLock()
    
    @classmethod
    def get_config(cls, overrides: Optional[Dict[str, Any]] = None) -> Config:
        """
        Get the configuration instance.
        
        Args:
            overrides: Optional configuration overrides
            
        Returns:
            Config instance
        """
        with cls._lock:
            if cls._instance is None:
                cls._instance = Config(overrides)
            elif overrides:
                cls._instance.load_config(overrides)
            
            return cls._instance
    
    @classmethod
    def reset(cls) -> None:
        """Drop the shared configuration instance."""
        with cls._lock:
            cls._instance = None
