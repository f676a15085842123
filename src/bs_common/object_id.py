"""ObjectId helpers — every collection is keyed by a BSON ObjectId."""

from bson import ObjectId

from src.bs_common.errors import InvalidObjectIdError


def parse_object_id(value: str | ObjectId) -> ObjectId:
    """Convert a 24-char hex string to ObjectId. Raises InvalidObjectIdError."""
    if isinstance(value, ObjectId):
        return value
    # ObjectId(None) generates a fresh id instead of failing
    if value is None or not ObjectId.is_valid(value):
        raise InvalidObjectIdError(value)
    return ObjectId(value)


def parse_object_ids(values: list[str]) -> list[ObjectId]:
    return [parse_object_id(v) for v in values]


def new_object_id() -> str:
    """Generate a new ObjectId hex string."""
    return str(ObjectId())


def id_match(field: str, oids: list[ObjectId]) -> dict[str, object]:
    """Build a filter matching one or many ids.

    A single id uses an exact match, several ids use ``$in``; callers never
    branch on batch size themselves.
    """
    if len(oids) == 1:
        return {field: oids[0]}
    return {field: {"$in": oids}}
