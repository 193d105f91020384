from sqlalchemy import event

from shared.errors import ImmutableRecordError


def _reject_update(mapper, connection, target):
    raise ImmutableRecordError(f"{type(target).__name__} {target.id} is append-only and cannot be modified")


def _reject_delete(mapper, connection, target):
    raise ImmutableRecordError(f"{type(target).__name__} {target.id} is append-only and cannot be deleted")


def register_immutable(model):
    """Block ORM-level UPDATE and DELETE for an append-only model."""
    if not event.contains(model, "before_update", _reject_update):
        event.listen(model, "before_update", _reject_update)
        event.listen(model, "before_delete", _reject_delete)
    return model
