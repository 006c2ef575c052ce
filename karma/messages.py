from typing import Callable, Dict, Tuple


Translator = Callable[..., str]


# key -> (singular, plural). Plural form is chosen on the "count" param.
DEFAULT_TEMPLATES: Dict[str, Tuple[str, str]] = {
    "cooling_down": (
        "You cannot modify {term} for another {ttl} second.",
        "You cannot modify {term} for another {ttl} seconds.",
    ),
    "linked_to": ("linked to", "linked to"),
    "threshold_not_satisfied": (
        "Terms must have at least {threshold} karma (positive or negative) to be linked.",
        "Terms must have at least {threshold} karma (positive or negative) to be linked.",
    ),
    "link_success": (
        "{source} has been linked to {target}.",
        "{source} has been linked to {target}.",
    ),
    "unlink_success": (
        "{source} has been unlinked from {target}.",
        "{source} has been unlinked from {target}.",
    ),
    "delete_success": (
        "{term} has been deleted.",
        "{term} has been deleted.",
    ),
}


def default_translator(key: str, **params) -> str:
    """
    English rendering for the engine's message keys.

    Unknown keys come back unchanged so a missing template is visible
    rather than fatal.
    """
    forms = DEFAULT_TEMPLATES.get(key)
    if forms is None:
        return key

    singular, plural = forms
    template = singular if params.get("count", 1) == 1 else plural
    return template.format(**params)
