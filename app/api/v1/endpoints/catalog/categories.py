from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Union
from app.api.dependencies import require_permission
from app.core.database import get_async_session
from app.core.exceptions import BaseAppException
from app.core.request_context import get_request_context
from app.models.auth.employee import Employee
from app.models.shared.enums import AuditAction, AuditTargetModel
from app.schemas.catalog.category import (
    Category,
    CategoryCreate,
    CategoryDeleteResponse,
    CategoryTableRow,
    CategoryTree,
    CategoryUpdate,
    HierarchyIntegrityReport,
    HierarchyRepairResult,
)
from app.schemas.common.pagination import PaginatedResponse
from app.services.audit.audit_service import AuditService
from app.services.audit.diff_engine import diff_snapshots, snapshot_model
from app.services.catalog.category_service import CategoryService

router = APIRouter()

# Bookkeeping columns never show up in an audit change set
SNAPSHOT_EXCLUDE = ("created_at", "updated_at", "created_by", "updated_by", "version")


@router.post("/", response_model=Category, status_code=status.HTTP_201_CREATED)
async def create_category(
    category_data: CategoryCreate,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    current_employee: Employee = Depends(require_permission("categories", "create"))
):
    """Create a new category"""
    service = CategoryService(db)
    audit = AuditService(db)
    context = get_request_context(request)
    actor_id = current_employee.id
    try:
        category = await service.create_category(category_data, actor_id)
    except BaseAppException as e:
        await audit.record_failure(
            actor_id, AuditAction.CATEGORY_CREATE, AuditTargetModel.CATEGORY, e,
            metadata={"categoryName": category_data.name}, request_context=context,
        )
        raise

    after = snapshot_model(category, exclude=SNAPSHOT_EXCLUDE)
    await audit.record(
        actor_id=actor_id,
        action_type=AuditAction.CATEGORY_CREATE,
        target_model=AuditTargetModel.CATEGORY,
        target_id=category.id,
        changes=diff_snapshots(None, after),
        metadata={"categoryName": category.name, "isMainCategory": category.parent_id is None},
        request_context=context,
    )
    return category


@router.get("/", response_model=Union[PaginatedResponse[CategoryTableRow], CategoryTree])
async def get_categories(
    view: str = Query("table", pattern="^(table|tree)$"),
    page_index: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=1000),
    db: AsyncSession = Depends(get_async_session),
    current_employee: Employee = Depends(require_permission("categories", "view"))
):
    """Flat table page annotated with child counts, or every category for tree rendering"""
    service = CategoryService(db)
    return await service.list_categories(view=view, page_index=page_index, page_size=page_size)


@router.get("/integrity", response_model=HierarchyIntegrityReport)
async def check_category_integrity(
    db: AsyncSession = Depends(get_async_session),
    current_employee: Employee = Depends(require_permission("categories", "edit"))
):
    """Report children lists that disagree with parent pointers"""
    service = CategoryService(db)
    return await service.check_integrity()


@router.post("/integrity/repair", response_model=HierarchyRepairResult)
async def repair_category_integrity(
    db: AsyncSession = Depends(get_async_session),
    current_employee: Employee = Depends(require_permission("categories", "edit"))
):
    """Rebuild children lists from parent pointers"""
    service = CategoryService(db)
    repaired = await service.rebuild_children(current_employee.id)
    report = await service.check_integrity()
    return {"repaired_count": repaired, "report": report}


@router.get("/{category_id}", response_model=Category)
async def get_category(
    category_id: int,
    db: AsyncSession = Depends(get_async_session),
    current_employee: Employee = Depends(require_permission("categories", "view"))
):
    """Get category by ID"""
    service = CategoryService(db)
    return await service.get_category_or_404(category_id)


@router.patch("/{category_id}", response_model=Category)
async def update_category(
    category_id: int,
    category_data: CategoryUpdate,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    current_employee: Employee = Depends(require_permission("categories", "edit"))
):
    """Update category fields, including moving it under another parent"""
    service = CategoryService(db)
    audit = AuditService(db)
    context = get_request_context(request)
    actor_id = current_employee.id
    fields = list(category_data.model_dump(exclude_unset=True).keys())
    action = AuditAction.CATEGORY_STATUS_UPDATE if fields == ["is_active"] else AuditAction.CATEGORY_UPDATE

    try:
        before = snapshot_model(await service.get_category_or_404(category_id), exclude=SNAPSHOT_EXCLUDE)
        category = await service.update_category(category_id, category_data, actor_id)
    except BaseAppException as e:
        await audit.record_failure(
            actor_id, action, AuditTargetModel.CATEGORY, e,
            metadata={"categoryId": category_id, "changedFields": fields}, request_context=context,
        )
        raise

    after = snapshot_model(category, exclude=SNAPSHOT_EXCLUDE)
    await audit.record(
        actor_id=actor_id,
        action_type=action,
        target_model=AuditTargetModel.CATEGORY,
        target_id=category.id,
        changes=diff_snapshots(before, after, fields),
        metadata={"categoryName": category.name, "changedFields": fields},
        request_context=context,
    )
    return category


@router.delete("/{category_id}", response_model=CategoryDeleteResponse)
async def delete_category(
    category_id: int,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    current_employee: Employee = Depends(require_permission("categories", "delete"))
):
    """Delete a category together with all of its subcategories"""
    service = CategoryService(db)
    audit = AuditService(db)
    context = get_request_context(request)
    actor_id = current_employee.id

    try:
        before = snapshot_model(await service.get_category_or_404(category_id), exclude=SNAPSHOT_EXCLUDE)
        result = await service.delete_category(category_id, actor_id)
    except BaseAppException as e:
        await audit.record_failure(
            actor_id, AuditAction.CATEGORY_DELETE, AuditTargetModel.CATEGORY, e,
            metadata={"categoryId": category_id}, request_context=context,
        )
        raise

    changes = diff_snapshots(before, None)
    changes["deletedSubcategories"] = {"oldValue": None, "newValue": result.deleted_count - 1}
    await audit.record(
        actor_id=actor_id,
        action_type=AuditAction.CATEGORY_DELETE,
        target_model=AuditTargetModel.CATEGORY,
        target_id=category_id,
        changes=changes,
        metadata={
            "categoryName": before.get("name"),
            "totalDeleted": result.deleted_count,
            "deletedIds": result.deleted_ids,
            "productsUnassigned": result.unassigned_products,
        },
        request_context=context,
    )
    return {
        "message": "Category and its subcategories deleted successfully",
        "deleted_count": result.deleted_count,
        "deleted_ids": result.deleted_ids,
        "unassigned_products": result.unassigned_products,
    }
