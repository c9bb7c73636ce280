"""Multi-persona blending: weight validation, normalization, and store resolution.

Caller order is always preserved. The rendered prompt lists personas in the
order they were supplied, never sorted by weight.
"""
from typing import Sequence, TypeVar

from persona_quill.errors import InvalidWeight, MissingContent, PersonaNotFound
from persona_quill.models import PersonaWeight, WeightedPersonaRef

Weighted = TypeVar("Weighted", WeightedPersonaRef, PersonaWeight)


def _label(ref: WeightedPersonaRef | PersonaWeight) -> str:
    return ref.profile.name if isinstance(ref, PersonaWeight) else ref.name


def validate(refs: Sequence[Weighted], blend: bool = True) -> None:
    """Raise MissingContent for an empty blend and InvalidWeight for any weight <= 0."""
    if blend and not refs:
        raise MissingContent("at least one persona must be selected")
    for ref in refs:
        # `not >` also rejects NaN
        if not ref.weight > 0:
            raise InvalidWeight(f"weight for persona {_label(ref)!r} must be > 0, got {ref.weight}")


def normalize(refs: Sequence[Weighted]) -> list[Weighted]:
    """Rescale weights to sum to 1.0, rounded to 2 decimals. No-op when the total is 0.

    Raises InvalidWeight when a positive weight is too small a share to survive
    the rounding.
    """
    total = sum(ref.weight for ref in refs)
    if total == 0:
        return list(refs)
    normalized = []
    for ref in refs:
        share = round(ref.weight / total, 2)
        if ref.weight > 0 and share <= 0:
            raise InvalidWeight(
                f"weight for persona {_label(ref)!r} rounds to 0.00 when normalized"
            )
        normalized.append(ref.model_copy(update={"weight": share}))
    return normalized


async def resolve(refs: Sequence[WeightedPersonaRef], store) -> list[PersonaWeight]:
    """Look each reference up in ``store``, keeping caller order."""
    resolved = []
    for ref in refs:
        profile = await store.get(ref.name)
        if profile is None:
            raise PersonaNotFound(f"persona {ref.name!r} not found")
        resolved.append(PersonaWeight(profile=profile, weight=ref.weight))
    return resolved
