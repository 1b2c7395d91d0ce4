import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from app.core.exceptions import CircularReferenceError
from app.models.auth.audit_log import AuditLog
from app.models.shared.enums import AuditAction, AuditStatus, AuditTargetModel
from app.services.audit.audit_service import AuditService


async def count_entries(session_maker) -> int:
    async with session_maker() as session:
        result = await session.execute(select(AuditLog))
        return len(result.scalars().all())


class TestAuditRecord:

    async def test_success_entry_is_persisted(self, db_session, admin):
        """Test a success entry stores every field"""
        audit = AuditService(db_session)
        context = {"ip_address": "10.0.0.1", "user_agent": "pytest", "endpoint": "PATCH /x", "request_id": "r-1"}

        entry = await audit.record(
            actor_id=admin.id,
            action_type=AuditAction.CATEGORY_UPDATE,
            target_model=AuditTargetModel.CATEGORY,
            target_id=7,
            changes={"name": {"oldValue": "Shoes", "newValue": "Footwear"}},
            metadata={"categoryName": "Footwear"},
            request_context=context,
        )

        assert entry is not None
        assert entry.id is not None
        assert entry.action_type == "category.update"
        assert entry.target_model == "Category"
        assert entry.status == AuditStatus.SUCCESS.value
        assert entry.changes == {"name": {"oldValue": "Shoes", "newValue": "Footwear"}}
        assert entry.meta == {"categoryName": "Footwear"}
        assert entry.ip_address == "10.0.0.1"
        assert entry.request_id == "r-1"
        assert entry.error_message is None

    async def test_success_without_target_is_suppressed(self, db_session, session_maker, admin):
        """Test a success entry needs a target"""
        audit = AuditService(db_session)

        entry = await audit.record(admin.id, AuditAction.CATEGORY_CREATE, AuditTargetModel.CATEGORY)

        assert entry is None
        assert await count_entries(session_maker) == 0

    async def test_failure_entry_has_no_target(self, db_session, admin):
        """Test failure entries carry the error, not a target"""
        audit = AuditService(db_session)

        entry = await audit.record_failure(
            admin.id, AuditAction.CATEGORY_UPDATE, AuditTargetModel.CATEGORY,
            CircularReferenceError(), metadata={"categoryId": 3},
        )

        assert entry.status == "failure"
        assert entry.target_id is None
        assert entry.error_message == "Cannot make a subcategory the parent of one of its ancestors"
        assert entry.meta == {"categoryId": 3}

    async def test_storage_failure_is_swallowed(self, db_session, session_maker, admin, monkeypatch):
        """Test a storage error does not propagate"""
        audit = AuditService(db_session)

        async def failing_commit():
            raise OperationalError("INSERT INTO audit_logs", {}, Exception("disk I/O error"))

        monkeypatch.setattr(db_session, "commit", failing_commit)

        entry = await audit.record(
            admin.id, AuditAction.BRAND_DELETE, AuditTargetModel.BRAND, target_id=1,
        )

        assert entry is None
        assert await count_entries(session_maker) == 0

    async def test_plain_strings_are_accepted(self, db_session, admin):
        """Test raw action and model strings are stored"""
        entry = await AuditService(db_session).record(admin.id, "order.status.update", "Order", target_id=12)

        assert entry.action_type == "order.status.update"
        assert entry.target_model == "Order"

    async def test_entries_are_append_only(self, db_session, admin):
        """Test stored entries cannot be edited"""
        entry = await AuditService(db_session).record(
            admin.id, AuditAction.CATEGORY_DELETE, AuditTargetModel.CATEGORY, target_id=5,
        )

        entry.error_message = "rewritten"
        with pytest.raises(ValueError):
            await db_session.commit()


class TestAuditListing:

    @pytest.fixture
    async def entries(self, db_session, admin, viewer):
        audit = AuditService(db_session)
        await audit.record(admin.id, AuditAction.CATEGORY_CREATE, AuditTargetModel.CATEGORY, target_id=1)
        await audit.record(admin.id, AuditAction.CATEGORY_UPDATE, AuditTargetModel.CATEGORY, target_id=1)
        await audit.record(viewer.id, AuditAction.BRAND_CREATE, AuditTargetModel.BRAND, target_id=2)
        await audit.record_failure(viewer.id, AuditAction.BRAND_DELETE, AuditTargetModel.BRAND, "Brand not found")

    async def test_newest_first(self, db_session, entries):
        """Test entries list newest first"""
        result = await AuditService(db_session).list_entries()

        assert [e.action_type for e in result] == [
            "brand.delete", "brand.create", "category.update", "category.create",
        ]

    async def test_filters(self, db_session, admin, entries):
        """Test listing filters"""
        audit = AuditService(db_session)

        assert len(await audit.list_entries(target_model="Category", target_id=1)) == 2
        assert len(await audit.list_entries(target_model="all")) == 4
        assert len(await audit.list_entries(employee_id=admin.id)) == 2
        assert len(await audit.list_entries(status="failure")) == 1
        assert [e.action_type for e in await audit.list_entries(action_type="brand.create")] == ["brand.create"]

    async def test_limit(self, db_session, entries):
        """Test the listing limit"""
        assert len(await AuditService(db_session).list_entries(limit=3)) == 3
