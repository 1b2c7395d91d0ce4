from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from app.api.dependencies import require_permission
from app.core.database import get_async_session
from app.core.exceptions import BaseAppException
from app.core.request_context import get_request_context
from app.models.auth.employee import Employee
from app.models.shared.enums import AuditAction, AuditTargetModel
from app.schemas.catalog.brand import Brand, BrandCreate, BrandUpdate
from app.services.audit.audit_service import AuditService
from app.services.audit.diff_engine import diff_snapshots, snapshot_model
from app.services.catalog.brand_service import BrandService

router = APIRouter()

SNAPSHOT_EXCLUDE = ("created_at", "updated_at", "created_by", "updated_by")


@router.get("/", response_model=List[Brand])
async def get_brands(
    db: AsyncSession = Depends(get_async_session),
    current_employee: Employee = Depends(require_permission("brands", "view"))
):
    """Get all brands ordered for display"""
    service = BrandService(db)
    return await service.list_brands()


@router.post("/", response_model=Brand, status_code=status.HTTP_201_CREATED)
async def create_brand(
    brand_data: BrandCreate,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    current_employee: Employee = Depends(require_permission("brands", "create"))
):
    """Create a new brand"""
    service = BrandService(db)
    audit = AuditService(db)
    context = get_request_context(request)
    actor_id = current_employee.id
    try:
        brand = await service.create_brand(brand_data, actor_id)
    except BaseAppException as e:
        await audit.record_failure(
            actor_id, AuditAction.BRAND_CREATE, AuditTargetModel.BRAND, e,
            metadata={"brandName": brand_data.name}, request_context=context,
        )
        raise

    await audit.record(
        actor_id=actor_id,
        action_type=AuditAction.BRAND_CREATE,
        target_model=AuditTargetModel.BRAND,
        target_id=brand.id,
        changes=diff_snapshots(None, snapshot_model(brand, exclude=SNAPSHOT_EXCLUDE)),
        metadata={"brandName": brand.name},
        request_context=context,
    )
    return brand


@router.patch("/{brand_id}", response_model=Brand)
async def update_brand(
    brand_id: int,
    brand_data: BrandUpdate,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    current_employee: Employee = Depends(require_permission("brands", "edit"))
):
    """Update brand fields; a payload holding only status is logged as a status change"""
    service = BrandService(db)
    audit = AuditService(db)
    context = get_request_context(request)
    actor_id = current_employee.id
    fields = list(brand_data.model_dump(exclude_unset=True).keys())
    action = AuditAction.BRAND_STATUS_UPDATE if fields == ["status"] else AuditAction.BRAND_UPDATE

    try:
        before = snapshot_model(await service.get_brand_or_404(brand_id), exclude=SNAPSHOT_EXCLUDE)
        brand = await service.update_brand(brand_id, brand_data, actor_id)
    except BaseAppException as e:
        await audit.record_failure(
            actor_id, action, AuditTargetModel.BRAND, e,
            metadata={"brandId": brand_id}, request_context=context,
        )
        raise

    changes = diff_snapshots(before, snapshot_model(brand, exclude=SNAPSHOT_EXCLUDE), fields)
    await audit.record(
        actor_id=actor_id,
        action_type=action,
        target_model=AuditTargetModel.BRAND,
        target_id=brand.id,
        changes=changes,
        metadata={"brandName": brand.name, "updatedFields": list(changes.keys())},
        request_context=context,
    )
    return brand


@router.delete("/{brand_id}")
async def delete_brand(
    brand_id: int,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    current_employee: Employee = Depends(require_permission("brands", "delete"))
):
    """Delete brand"""
    service = BrandService(db)
    audit = AuditService(db)
    context = get_request_context(request)
    actor_id = current_employee.id
    try:
        before = snapshot_model(await service.get_brand_or_404(brand_id), exclude=SNAPSHOT_EXCLUDE)
        await service.delete_brand(brand_id, actor_id)
    except BaseAppException as e:
        await audit.record_failure(
            actor_id, AuditAction.BRAND_DELETE, AuditTargetModel.BRAND, e,
            metadata={"brandId": brand_id}, request_context=context,
        )
        raise

    await audit.record(
        actor_id=actor_id,
        action_type=AuditAction.BRAND_DELETE,
        target_model=AuditTargetModel.BRAND,
        target_id=brand_id,
        changes=diff_snapshots(before, None),
        metadata={"brandName": before.get("name")},
        request_context=context,
    )
    return {"message": "Brand deleted successfully"}
