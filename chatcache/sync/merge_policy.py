# =============================================================================
# File: chatcache/sync/merge_policy.py
# Description: Pure merge functions, one per entity kind
# =============================================================================
# Every function here is deterministic and side-effect free: the same
# (existing, incoming) pair always yields the same record, so replaying an
# event converges instead of diverging.
# =============================================================================

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from chatcache.sync.read_models import (
    Chat,
    Contact,
    GroupMetadata,
    GroupUpdateAnnotation,
    ParticipantUpdateAnnotation,
)

# Contact fields that are never cleared by an empty incoming value
CONTACT_NAME_FIELDS = ("name", "verifiedName", "notify")


def _fields(record: Optional[Any]) -> Dict[str, Any]:
    """Explicitly-set fields of a record, keyed by wire alias."""
    if record is None:
        return {}
    return record.model_dump(by_alias=True, exclude_unset=True)


def merge_contact(existing: Optional[Contact], incoming: Contact) -> Contact:
    """Overlay `incoming` on `existing`, keeping name fields the update leaves empty."""
    base = _fields(existing)
    patch = _fields(incoming)

    merged = {**base, **patch}
    for field_name in CONTACT_NAME_FIELDS:
        value = patch.get(field_name) or base.get(field_name)
        if value:
            merged[field_name] = value
        else:
            merged.pop(field_name, None)

    return Contact.model_validate(merged)


def merge_group_metadata(
        existing: Optional[GroupMetadata],
        latest_fetched: Optional[GroupMetadata],
        annotation: Optional[Union[GroupUpdateAnnotation, ParticipantUpdateAnnotation]],
        *,
        group_id: str,
) -> GroupMetadata:
    """
    existing-then-incoming shallow overlay, plus the provenance annotation.

    `latest_fetched` may be a full snapshot fetched from the origin or a
    partial patch; only the fields it carries are applied. The annotation
    is attached under its own attribute and never overlaid by either input.
    """
    merged: Dict[str, Any] = {"id": group_id}
    merged.update(_fields(existing))
    merged.update(_fields(latest_fetched))
    merged["id"] = group_id

    result = GroupMetadata.model_validate(merged)
    if annotation is not None:
        result = result.model_copy(update={annotation.attribute: annotation})
    return result


def merge_conversation_meta(existing: Optional[Chat], incoming: Chat, authoritative: bool) -> Chat:
    """Authoritative writes replace; otherwise any field named by `incoming` wins."""
    if authoritative:
        return Chat.model_validate(_fields(incoming))
    return Chat.model_validate({**_fields(existing), **_fields(incoming)})


# =============================================================================
# Derived group facts
# =============================================================================

def participant_count(meta: Optional[GroupMetadata]) -> int:
    if meta is None or not meta.participants:
        return 0
    return len(meta.participants)


def admin_ids(meta: Optional[GroupMetadata]) -> List[str]:
    if meta is None or not meta.participants:
        return []
    return [p.id for p in meta.participants if p.admin]
