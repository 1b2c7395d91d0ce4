from datetime import datetime
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from app.api.dependencies import require_permission
from app.core.database import get_async_session
from app.models.auth.employee import Employee
from app.schemas.audit.audit_log import AuditLog
from app.services.audit.audit_service import AuditService

router = APIRouter()


@router.get("/", response_model=List[AuditLog])
async def get_audit_logs(
    target_model: Optional[str] = Query(None),
    target_id: Optional[int] = Query(None),
    employee_id: Optional[int] = Query(None),
    action_type: Optional[str] = Query(None),
    status: Optional[str] = Query(None, pattern="^(success|failure)$"),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    limit: int = Query(50, ge=1, le=500),
    db: AsyncSession = Depends(get_async_session),
    current_employee: Employee = Depends(require_permission("audit", "view"))
):
    """Read-only view of the audit trail, newest first"""
    service = AuditService(db)
    return await service.list_entries(
        target_model=target_model,
        target_id=target_id,
        employee_id=employee_id,
        action_type=action_type,
        status=status,
        start_date=start_date,
        end_date=end_date,
        limit=limit,
    )
