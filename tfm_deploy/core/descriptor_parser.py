"""Module descriptor parsing from package.json"""

import json
from pathlib import Path
from typing import Tuple, Union

from ..api.exceptions import ParseError
from ..constants import MANIFEST_FILE, NAME_SEPARATOR
from ..models import ModuleDescriptor


def split_package_name(package_name: str) -> Tuple[str, str]:
    """Split a package name into provider and module name

    The first segment is a namespace prefix and is dropped, the second is the
    provider and everything after it is the module name:

        tfm-aws-vpc-endpoints -> ("aws", "vpc-endpoints")

    Args:
        package_name: Hyphen-delimited package name

    Returns:
        Tuple of (provider, name)

    Raises:
        ParseError: If provider or name would be empty
    """
    parts = package_name.split(NAME_SEPARATOR)[1:]
    if len(parts) < 2:
        raise ParseError(
            f"Package name '{package_name}' must look like "
            f"<prefix>-<provider>-<name>"
        )

    provider = parts[0]
    name = NAME_SEPARATOR.join(parts[1:])

    if not provider:
        raise ParseError(f"Package name '{package_name}' has an empty provider")
    if not name.strip(NAME_SEPARATOR):
        raise ParseError(f"Package name '{package_name}' has an empty module name")
    if not parts[1] or not parts[-1]:
        raise ParseError(
            f"Package name '{package_name}' has a module name with an empty segment"
        )

    return provider, name


def read_manifest(directory: Union[str, Path]) -> dict:
    """Load package.json from a module directory

    Raises:
        ParseError: If the file is missing, unreadable or not a JSON object
    """
    manifest_path = Path(directory) / MANIFEST_FILE

    try:
        content = manifest_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ParseError(f"No {MANIFEST_FILE} found in {directory}", str(manifest_path))
    except OSError as e:
        raise ParseError(f"Cannot read {manifest_path}: {e}", str(manifest_path))
    except UnicodeDecodeError as e:
        raise ParseError(f"{manifest_path} is not valid UTF-8: {e}", str(manifest_path))

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON in {manifest_path}: {e}", str(manifest_path))

    if not isinstance(data, dict):
        raise ParseError(f"{manifest_path} must contain a JSON object", str(manifest_path))

    return data


def parse_module_descriptor(directory: Union[str, Path], organization: str) -> ModuleDescriptor:
    """Derive the module descriptor from a module directory

    Args:
        directory: Directory holding package.json
        organization: Registry organization the module belongs to

    Returns:
        ModuleDescriptor for the module

    Raises:
        ParseError: If the manifest is missing or malformed
    """
    data = read_manifest(directory)
    manifest_path = str(Path(directory) / MANIFEST_FILE)

    package_name = data.get("name")
    version = data.get("version")

    if not isinstance(package_name, str) or not package_name:
        raise ParseError(f"{MANIFEST_FILE} has no 'name' field", manifest_path)
    if not isinstance(version, str) or not version.strip():
        raise ParseError(f"{MANIFEST_FILE} has no 'version' field", manifest_path)

    provider, name = split_package_name(package_name)

    return ModuleDescriptor(
        organization=organization,
        provider=provider,
        name=name,
        version=version,
        package_name=package_name,
    )
