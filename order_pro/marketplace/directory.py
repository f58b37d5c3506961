from __future__ import annotations

import dataclasses
from threading import RLock
from typing import Dict, Iterable, List

from order_pro.domain.contracts import Actor
from order_pro.errors import ConflictError, NotFoundError, ValidationError
from order_pro.marketplace.sequence import IdSequence
from order_pro.policies import REGISTRABLE_ROLES, ROLE_ADMIN, ROLE_GROCERY, ROLE_MERCHANT, VALID_ROLES


MIN_NAME_LENGTH = 2
MIN_PHONE_LENGTH = 9


DEMO_ACTORS: List[Actor] = [
    Actor(id="1", name="بقالة الأمل", phone="771234567", role=ROLE_GROCERY, address="صنعاء - شارع الزبيري"),
    Actor(id="2", name="تاجر الجملة", phone="772345678", role=ROLE_MERCHANT, address="صنعاء - شارع المطار"),
    Actor(id="3", name="المسؤول", phone="773456789", role=ROLE_ADMIN, address="صنعاء"),
]


def normalize_phone(phone: object) -> str:
    return str(phone or "").strip()


def validate_phone(phone: object) -> str:
    normalized = normalize_phone(phone)
    if len(normalized) < MIN_PHONE_LENGTH:
        raise ValidationError(code="phone_invalid", message_key="phone_invalid")
    return normalized


def validate_name(name: object) -> str:
    normalized = str(name or "").strip()
    if len(normalized) < MIN_NAME_LENGTH:
        raise ValidationError(code="name_invalid", message_key="name_invalid")
    return normalized


class Directory:
    """Registry of marketplace actors keyed by id, unique by phone."""

    def __init__(
        self,
        *,
        lock: RLock | None = None,
        sequence: IdSequence | None = None,
        seed: Iterable[Actor] = (),
    ) -> None:
        self._lock = lock or RLock()
        self._sequence = sequence or IdSequence()
        self._actors: Dict[str, Actor] = {}
        self._ids_by_phone: Dict[str, str] = {}
        for actor in seed:
            self._insert(actor)
            self._sequence.advance_past(actor.id)

    def _insert(self, actor: Actor) -> None:
        if actor.role not in VALID_ROLES:
            raise ValidationError(code="role_invalid", message_key="role_invalid")
        if actor.phone in self._ids_by_phone:
            raise ConflictError(code="phone_already_registered", message_key="phone_already_registered")
        self._actors[actor.id] = actor
        self._ids_by_phone[actor.phone] = actor.id

    def register(self, name: object, phone: object, role: object, address: object = None) -> Actor:
        normalized_name = validate_name(name)
        normalized_phone = validate_phone(phone)
        normalized_role = str(role or "").strip().lower()
        if normalized_role not in REGISTRABLE_ROLES:
            raise ValidationError(code="role_invalid", message_key="role_invalid")

        with self._lock:
            if normalized_phone in self._ids_by_phone:
                raise ConflictError(
                    code="phone_already_registered",
                    message_key="phone_already_registered",
                )
            actor = Actor(
                id=self._sequence.next_id(),
                name=normalized_name,
                phone=normalized_phone,
                role=normalized_role,
                address=str(address or "").strip(),
            )
            self._insert(actor)
            return actor

    def find_by_phone(self, phone: object) -> Actor | None:
        actor_id = self._ids_by_phone.get(normalize_phone(phone))
        if actor_id is None:
            return None
        return self._actors.get(actor_id)

    def find_by_id(self, actor_id: object) -> Actor | None:
        return self._actors.get(str(actor_id or "").strip())

    def list_actors(self) -> List[Actor]:
        with self._lock:
            return list(self._actors.values())

    def update_profile(self, actor_id: str, *, name: object = None, address: object = None) -> Actor:
        with self._lock:
            actor = self.find_by_id(actor_id)
            if actor is None:
                raise NotFoundError(code="actor_not_found", message_key="actor_not_found")
            changes: Dict[str, str] = {}
            if name is not None:
                changes["name"] = validate_name(name)
            if address is not None:
                changes["address"] = str(address).strip()
            if not changes:
                raise ValidationError(code="no_changes", message_key="no_changes")
            updated = dataclasses.replace(actor, **changes)
            self._actors[actor.id] = updated
            return updated

    def count_by_role(self) -> Dict[str, int]:
        with self._lock:
            counts = {role: 0 for role in sorted(VALID_ROLES)}
            for actor in self._actors.values():
                counts[actor.role] = counts.get(actor.role, 0) + 1
            return counts

    def __len__(self) -> int:
        return len(self._actors)
