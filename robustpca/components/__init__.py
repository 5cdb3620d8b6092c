"""
Option and configuration components for robustpca.
"""

from robustpca.components.config import Config, ConfigManager
from robustpca.components.options import PCAOptions, parse_options
