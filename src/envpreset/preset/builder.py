from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

from envpreset.preset.debug import print_debug_report
from envpreset.preset.interfaces import (
    POLYFILL_REQUIRE_UNIT_ID,
    REGENERATOR_UNIT_ID,
    TransformUnit,
)
from envpreset.preset.options import PresetOptions, normalize_options
from envpreset.preset.session import PresetSession, default_session
from envpreset.selection.compose import (
    compose_polyfills,
    compose_transformations,
    partition_overrides,
    select_required,
)
from envpreset.targeting.types import CanonicalTargets

LOGGER = logging.getLogger(__name__)

ConfiguredUnit = tuple[TransformUnit, dict[str, object]]


@dataclass(slots=True)
class BuiltPreset:
    plugins: list[ConfiguredUnit] = field(default_factory=list)
    targets: CanonicalTargets = field(default_factory=dict)
    module_type: str | None = None
    transformations: list[str] = field(default_factory=list)
    polyfills: list[str] | None = None

    def unit_ids(self) -> list[str]:
        return [unit.unit_id for unit, _ in self.plugins]


def build_preset(
    options: Mapping[str, object] | PresetOptions | None = None,
    *,
    session: PresetSession | None = None,
) -> BuiltPreset:
    active = session or default_session()
    tables = active.tables
    validated = normalize_options(options, known_names=tables.known_names())

    normalizer = active.normalizer()
    targets = normalizer.normalize(validated.targets)
    include = partition_overrides(validated.include)
    exclude = partition_overrides(validated.exclude)
    LOGGER.debug("Canonical targets: %s", targets)

    transformations = compose_transformations(
        select_required(targets, tables.plugins, normalizer=normalizer),
        include=include,
        exclude=exclude,
    )

    polyfills: list[str] | None = None
    if validated.use_built_ins:
        polyfills = compose_polyfills(
            select_required(targets, tables.built_ins, normalizer=normalizer),
            tables.default_include,
            include=include,
            exclude=exclude,
        )

    module_type = validated.module_type.value if validated.module_type is not None else None

    if validated.debug and active.claim_debug_output():
        print_debug_report(
            active.console,
            targets=targets,
            module_type=module_type,
            transformations=transformations,
            polyfills=polyfills,
            plugin_table=tables.plugins,
            built_in_table=tables.built_ins,
        )

    units = active.units()
    plugins: list[ConfiguredUnit] = []
    if module_type is not None:
        module_unit = units.require(tables.module_transformations[module_type])
        plugins.append((module_unit, {"loose": validated.loose}))

    plugins.extend(
        (units.require(name), {"loose": validated.loose}) for name in transformations
    )

    if polyfills is not None:
        plugins.append(
            (
                units.require(POLYFILL_REQUIRE_UNIT_ID),
                {
                    "polyfills": list(polyfills),
                    "regenerator": REGENERATOR_UNIT_ID in transformations,
                },
            )
        )

    LOGGER.info(
        "Resolved %d unit(s) for %d target environment(s)", len(plugins), len(targets)
    )
    return BuiltPreset(
        plugins=plugins,
        targets=targets,
        module_type=module_type,
        transformations=transformations,
        polyfills=polyfills,
    )
