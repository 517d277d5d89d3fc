# utils.py - Shared utilities for LaneKan

import logging
import uuid
from pathlib import Path
from typing import Optional, Dict, Any

import yaml
import yamale

logger = logging.getLogger(__name__)

# Schema file paths
SCHEMA_DIR = Path(__file__).parent / "schemas"
SEED_SCHEMA = SCHEMA_DIR / "seed_schema.yaml"
SCRIPT_SCHEMA = SCHEMA_DIR / "script_schema.yaml"
SETTINGS_SCHEMA = SCHEMA_DIR / "settings_schema.yaml"


class YAMLError(Exception):
    """Raised when YAML operations fail."""
    pass


class SchemaValidationError(Exception):
    """Raised when schema validation fails."""
    pass


def generate_id() -> str:
    """Generate a fresh opaque identifier for a lane or card."""
    return str(uuid.uuid4())


def validate_schema(data: Dict[str, Any], schema_path: Path, file_path: Optional[Path] = None) -> None:
    """
    Validate data against a yamale schema.
    
    Args:
        data: Data to validate
        schema_path: Path to schema file
        file_path: Path to file being validated (for error messages)
    
    Raises:
        SchemaValidationError: If validation fails
    """
    source = file_path or "<data>"
    schema = yamale.make_schema(str(schema_path))
    # yamale.make_data expects YAML text, not a dict
    yaml_str = yaml.safe_dump(data, default_flow_style=False)
    yaml_data = yamale.make_data(content=yaml_str)
    try:
        yamale.validate(schema, yaml_data)
    except yamale.YamaleError as e:
        error_msg = f"Schema validation failed for {source}: {e}"
        logger.error(error_msg)
        raise SchemaValidationError(error_msg) from e
    logger.debug(f"Schema validation passed for {source}")


def load_yaml(
    path: Path,
    default=None,
    schema_path: Optional[Path] = None,
) -> Optional[Dict[str, Any]]:
    """
    Load a YAML mapping from disk with error handling and optional schema validation.
    
    Args:
        path: Path to YAML file
        default: Value returned if the file doesn't exist or is empty
        schema_path: Optional yamale schema to validate against
    
    Returns:
        Loaded data or default value
    
    Raises:
        YAMLError: If the file cannot be parsed or is not a mapping
        SchemaValidationError: If schema validation fails
    """
    path = Path(path)
    if not path.exists():
        return default

    try:
        with path.open("r", encoding="utf-8") as f:
            content = f.read()
    except OSError as e:
        error_msg = f"Failed to read {path}: {e}"
        logger.error(error_msg)
        raise YAMLError(error_msg) from e

    if not content.strip():
        logger.warning(f"Empty file {path}, returning default")
        return default

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        error_msg = f"YAML parsing error in {path}: {e}"
        logger.error(error_msg)
        raise YAMLError(error_msg) from e

    if data is None:
        logger.warning(f"YAML file {path} parsed to None, returning default")
        return default

    if not isinstance(data, dict):
        error_msg = f"Expected dict in {path}, got {type(data).__name__}"
        logger.error(error_msg)
        raise YAMLError(error_msg)

    if schema_path:
        validate_schema(data, schema_path, path)

    return data


def dump_yaml(data: Dict[str, Any]) -> str:
    """Render data as block-style YAML, keeping key order."""
    return yaml.safe_dump(data, sort_keys=False, default_flow_style=False)
