# =============================================================================
# File: tests/fakes/factories.py
# Description: Raw payload builders shaped like the origin client's events
# =============================================================================

from __future__ import annotations

from typing import Any, Dict, Optional

from chatcache.sync.enums import MessageStubType


def message_payload(
        jid: Optional[str],
        msg_id: str,
        text: Optional[str] = "hello",
        timestamp: int = 1700000000,
        from_me: bool = False,
        stub_type: Optional[int] = None,
        **extra: Any,
) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "key": {"id": msg_id, "fromMe": from_me},
        "messageTimestamp": timestamp,
        **extra,
    }
    if jid is not None:
        payload["key"]["remoteJid"] = jid
    if text is not None:
        payload["message"] = {"conversation": text}
    if stub_type is not None:
        payload["messageStubType"] = stub_type
    return payload


def undecryptable_payload(jid: str, msg_id: str) -> Dict[str, Any]:
    return message_payload(jid, msg_id, text=None, stub_type=int(MessageStubType.CIPHERTEXT))


def group_payload(jid: str, subject: str = "Team", admins=("a@s.whatsapp.net",), members=("b@s.whatsapp.net",)):
    participants = [{"id": p, "admin": "admin"} for p in admins]
    participants += [{"id": p} for p in members]
    return {"id": jid, "subject": subject, "owner": admins[0] if admins else None, "participants": participants}
