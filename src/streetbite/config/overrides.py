"""
Per-request settings overrides.

Clients of the recommendation endpoint may pass `settings_overrides`, a JSON object
mirroring the `Settings` tree, to try different ranking weights for one request.
Only ranking weights and proximity search knobs are accepted; catalog paths and
app/logging settings are not. The merged result is re-validated, so the ranges
declared on the settings models still hold.
"""

from __future__ import annotations

from typing import Any, Mapping

from streetbite.config.settings import Settings

# True: any key below this node may be overridden. Dict: only the listed children.
ALLOWED_SETTINGS_OVERRIDES_TREE: dict[str, Any] = {
    "ranking": True,
    "proximity": {
        "default_radius_km": True,
        "grid_index_min_catalog_size": True,
        "grid_cell_size_km": True,
    },
}


def _merge_allowed(
    base: Mapping[str, Any],
    overrides: Mapping[str, Any],
    allowed: Mapping[str, Any] | bool,
    path: tuple[str, ...] = (),
) -> dict[str, Any]:
    """Copy `base` with `overrides` laid on top, rejecting keys outside `allowed`."""
    merged = dict(base)
    for key, value in overrides.items():
        dotted = ".".join((*path, key))
        rule = True if allowed is True else allowed.get(key)
        if rule is None:
            raise ValueError(f"settings_overrides contains a disallowed key: '{dotted}'")

        current = merged.get(key)
        if isinstance(value, Mapping) and isinstance(current, Mapping):
            merged[key] = _merge_allowed(current, value, rule, (*path, key))
        elif rule is True:
            merged[key] = value
        else:
            raise ValueError(f"settings_overrides key '{dotted}' must be a mapping")
    return merged


def apply_settings_overrides(settings: Settings, overrides: Mapping[str, Any] | None) -> Settings:
    """Return a new `Settings` with `overrides` applied; `settings` itself is left untouched."""
    if not overrides:
        return settings
    merged = _merge_allowed(settings.model_dump(mode="python"), overrides, ALLOWED_SETTINGS_OVERRIDES_TREE)
    return Settings.model_validate(merged)
