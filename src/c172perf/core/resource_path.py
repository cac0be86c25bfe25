"""Resource path resolution for configuration and data files.

Config and data directories sit at the project root, next to src/. Relative
paths given in settings are resolved against that root, absolute paths are
returned unchanged.

Typical usage:
    from c172perf.core.resource_path import get_config_path, get_data_path

    logging_config = get_config_path("logging.yaml")
    table_path = get_data_path("performance/c172m_takeoff.json")
"""

from pathlib import Path


def get_project_root() -> Path:
    """Get the project root directory.

    Returns:
        Path to the directory containing config/, data/ and src/.

    Examples:
        >>> get_project_root()
        PosixPath('/Users/user/dev/c172perf')
    """
    # src/c172perf/core -> project root
    return Path(__file__).resolve().parent.parent.parent.parent


def get_resource_path(relative_path: str | Path) -> Path:
    """Get absolute path to a resource file or directory.

    Args:
        relative_path: Path relative to the project root. Absolute paths are
            returned as-is.

    Returns:
        Absolute path to the resource.

    Examples:
        >>> str(get_resource_path("config/logging.yaml"))
        '/Users/user/dev/c172perf/config/logging.yaml'
    """
    path = Path(relative_path)
    if path.is_absolute():
        return path
    return get_project_root() / path


def get_config_path(config_file: str) -> Path:
    """Get path to a configuration file.

    Args:
        config_file: Config filename (e.g., "logging.yaml").

    Returns:
        Absolute path to the config file.
    """
    return get_resource_path(f"config/{config_file}")


def get_data_path(data_file: str) -> Path:
    """Get path to a data file or directory.

    Args:
        data_file: Data filename or relative path (e.g., "airports/runways.json")

    Returns:
        Absolute path to the data file or directory.
    """
    return get_resource_path(f"data/{data_file}")
