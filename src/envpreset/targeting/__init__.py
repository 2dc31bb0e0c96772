from envpreset.targeting.normalize import (
    TargetNormalizer,
    electron_version_to_chrome_version,
    get_targets,
    parse_target_spec,
)
from envpreset.targeting.releases import current_node_version, explicit_release_resolver
from envpreset.targeting.requirements import is_required
from envpreset.targeting.types import (
    BrowserQuery,
    CanonicalTargets,
    CurrentRuntime,
    ElectronVersion,
    ExplicitVersion,
    ReleaseResolver,
    TargetSpec,
    VersionProvider,
)

__all__ = [
    "BrowserQuery",
    "CanonicalTargets",
    "CurrentRuntime",
    "ElectronVersion",
    "ExplicitVersion",
    "ReleaseResolver",
    "TargetNormalizer",
    "TargetSpec",
    "VersionProvider",
    "current_node_version",
    "electron_version_to_chrome_version",
    "explicit_release_resolver",
    "get_targets",
    "is_required",
    "parse_target_spec",
]
