"""
Config Loader Module
Locates, reads and validates the structural-compare configuration file.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import ValidationError

from structural_compare.config.schema import (
    StructuralCompareConfig, format_validation_errors,
)
from structural_compare.exceptions import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAMES = [
    '.structural-comparerc.json',
    '.structural-comparerc',
    'structural-compare.config.json',
]

MAX_SEARCH_DEPTH = 5


def find_config_file(start_dir: Union[str, Path, None] = None) -> Optional[Path]:
    """Search `start_dir` and up to four parent directories for a config file."""
    current = Path(start_dir or Path.cwd()).resolve()
    for _ in range(MAX_SEARCH_DEPTH):
        for file_name in CONFIG_FILE_NAMES:
            candidate = current / file_name
            if candidate.is_file():
                logger.debug("Found config file %s", candidate)
                return candidate
        if current.parent == current:
            break
        current = current.parent
    return None


def load_config_file(config_path: Union[str, Path]) -> StructuralCompareConfig:
    config_path = Path(config_path)
    if not config_path.is_file():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        raw = json.loads(config_path.read_text(encoding='utf-8'))
    except json.JSONDecodeError as e:
        raise ConfigError(f"Configuration file is not valid JSON: {config_path}: {e}") from e

    try:
        return StructuralCompareConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration file: {config_path}", format_validation_errors(e)) from e


def load_config(config_path: Union[str, Path, None] = None) -> StructuralCompareConfig:
    """Load the given config file, or the nearest one found from the working directory."""
    path = Path(config_path) if config_path else find_config_file()
    if path is None:
        raise ConfigError(
            "No configuration file found. Create .structural-comparerc.json "
            "or pass --config."
        )
    config = load_config_file(path)
    logger.info("Loaded configuration from %s (%d screens)", path, len(config.screens))
    return config


def validate_config(data: Any) -> Tuple[bool, List[str]]:
    try:
        StructuralCompareConfig.model_validate(data)
    except ValidationError as e:
        return False, format_validation_errors(e)
    return True, []


def get_example_config() -> Dict[str, Any]:
    """Starter config written by `structural-compare init`."""
    return {
        'designFile': 'data/design/screens.design.json',
        'outputDir': 'docs/structural-comparison',
        'screens': [
            {
                'id': 'home',
                'name': 'HomeView',
                'frameId': 'home-frame',
                'tsxFile': 'src/components/views/HomeView.tsx',
                'cssFile': 'src/components/views/HomeView.module.css',
            },
        ],
        'options': {
            'tolerance': 1,
            'colorTolerance': 10,
            'severity': 'normal',
            'ignoreProperties': [
                'display',
                'flexDirection',
                'justifyContent',
                'alignItems',
                'width',
                'height',
                'margin',
                'fontFamily',
                'lineHeight',
                'cursor',
                'transition',
            ],
        },
        'nameMapping': {
            'designToCode': {'settingsButton': 'SettingsDropdown'},
            'codeClassToDesign': {'welcomeMessage': 'welcomeMsg'},
            'independentComponents': {'settingsButton': 'SettingsDropdown'},
        },
    }
