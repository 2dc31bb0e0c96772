from envpreset.config.loader import (
    CONFIG_FILENAME,
    discover_config_path,
    load_options_file,
    merge_options,
)

__all__ = [
    "CONFIG_FILENAME",
    "discover_config_path",
    "load_options_file",
    "merge_options",
]
