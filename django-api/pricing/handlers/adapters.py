"""Edge adapters for older client field names.

The calculation core only knows the canonical shapes; older registration
clients sent and expected a few alternate names, translated here.
"""

from typing import Any

REQUEST_ALIASES = {
    "registrationType": "categoryKey",
    "workshopSelections": "workshopIds",
}


def apply_request_aliases(data: Any) -> Any:
    """Rename legacy request keys unless the canonical key is present."""
    if not hasattr(data, "items"):
        return data
    renamed = dict(data.items())
    for legacy, canonical in REQUEST_ALIASES.items():
        if legacy in renamed:
            value = renamed.pop(legacy)
            renamed.setdefault(canonical, value)
    return renamed


def with_legacy_aliases(payload: dict[str, Any]) -> dict[str, Any]:
    """Add the alternate breakdown names older clients read."""
    aliased = dict(payload)
    aliased["registrationFee"] = payload["baseAmount"]
    aliased["accompanyingPersons"] = payload["perLine"]["accompanyingPersons"]
    aliased["breakdown"] = payload["perLine"]
    return aliased
