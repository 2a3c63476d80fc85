"""MemberService — the roster counted by :class:`MemberRoster`.

Authentication is out of scope; members here are only headcount.
"""

from __future__ import annotations

from sqlalchemy import insert, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from coopvote.domain.records import Member
from coopvote.infrastructure.database.schema import MEMBER_EMAIL_CONSTRAINT, members
from coopvote.services._helpers import now_iso
from coopvote.services.base import BaseService, violated_constraint
from coopvote.services.result import ErrorCode, ServiceResult
from coopvote.services.telemetry import traced


class MemberService(BaseService):
    @traced
    def register(self, email: str, display_name: str = "", role: str = "member") -> ServiceResult:
        op = "register_member"
        email = (email or "").strip().lower()
        if not email:
            return ServiceResult.failure(op, ErrorCode.INVALID_INPUT, "email required")
        if not role:
            return ServiceResult.failure(op, ErrorCode.INVALID_INPUT, "role required")

        try:
            with self._ledger.transaction() as conn:
                new_id = conn.execute(
                    insert(members).values(
                        email=email,
                        display_name=display_name or "",
                        role=role,
                        created_at=now_iso(),
                    )
                ).inserted_primary_key[0]
                row = conn.execute(select(members).where(members.c.id == new_id)).one()
        except IntegrityError as exc:
            if violated_constraint(exc, MEMBER_EMAIL_CONSTRAINT, "members.email"):
                return ServiceResult.failure(
                    op,
                    ErrorCode.MEMBER_EXISTS,
                    f"A member with email {email} already exists",
                    email=email,
                )
            return self._storage_failure(op, exc)
        except SQLAlchemyError as exc:
            return self._storage_failure(op, exc)

        return ServiceResult.success(op, Member.from_row(row).to_wire())

    @traced
    def list_members(self) -> ServiceResult:
        op = "list_members"
        try:
            with self._ledger.snapshot() as conn:
                rows = conn.execute(select(members).order_by(members.c.id)).fetchall()
        except SQLAlchemyError as exc:
            return self._storage_failure(op, exc)

        items = [Member.from_row(r).to_wire() for r in rows]
        return ServiceResult.success(op, {"items": items, "count": len(items)})
