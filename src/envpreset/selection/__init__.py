from envpreset.selection.compose import (
    OverrideSet,
    compose_polyfills,
    compose_transformations,
    is_built_in_name,
    partition_overrides,
    select_required,
)

__all__ = [
    "OverrideSet",
    "compose_polyfills",
    "compose_transformations",
    "is_built_in_name",
    "partition_overrides",
    "select_required",
]
