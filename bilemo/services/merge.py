from __future__ import annotations

from typing import Any, Iterable

from pydantic import BaseModel

PROTECTED_FIELDS = frozenset({"id"})


def merge_partial(
    instance: Any,
    payload: BaseModel,
    *,
    nullable: Iterable[str] = (),
    exclude: Iterable[str] = (),
) -> dict[str, Any]:
    """Aplica num registro já carregado apenas os campos enviados pelo cliente.

    Campos omitidos mantêm o valor persistido e ``id`` nunca é sobrescrito.
    Um ``null`` explícito só é aplicado em campos listados em ``nullable``.
    Relações não são tocadas aqui. Retorna o que foi de fato alterado.
    """
    nullable = set(nullable)
    skipped = PROTECTED_FIELDS | set(exclude)
    changes: dict[str, Any] = {}

    for field, value in payload.model_dump(exclude_unset=True).items():
        if field in skipped:
            continue
        if value is None and field not in nullable:
            continue
        if not hasattr(instance, field):
            continue
        if getattr(instance, field) != value:
            setattr(instance, field, value)
            changes[field] = value
    return changes
