import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Union
from fastapi.encoders import jsonable_encoder
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.auth.audit_log import AuditLog
from app.models.shared.enums import AuditAction, AuditStatus, AuditTargetModel

logger = logging.getLogger(__name__)


def _value(item: Union[str, AuditAction, AuditStatus, AuditTargetModel]) -> str:
    return item.value if hasattr(item, "value") else str(item)


class AuditService:
    """Append-only audit trail. Recording never raises into the caller."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def record(
        self,
        actor_id: int,
        action_type: Union[str, AuditAction],
        target_model: Union[str, AuditTargetModel],
        target_id: Optional[int] = None,
        changes: Optional[Dict[str, Any]] = None,
        metadata: Optional[Dict[str, Any]] = None,
        request_context: Optional[Dict[str, Optional[str]]] = None,
        status: Union[str, AuditStatus] = AuditStatus.SUCCESS,
        error_message: Optional[str] = None,
    ) -> Optional[AuditLog]:
        """Persist one audit entry; returns None when suppressed or when the write failed"""
        action = _value(action_type)
        model = _value(target_model)
        status_value = AuditStatus(_value(status)).value

        if status_value == AuditStatus.SUCCESS.value and target_id is None:
            logger.warning(f"Skipping successful {action} audit entry without a target id")
            return None

        context = request_context or {}
        try:
            entry = AuditLog(
                employee_id=actor_id,
                action_type=action,
                target_model=model,
                target_id=target_id if status_value == AuditStatus.SUCCESS.value else None,
                changes=jsonable_encoder(changes or {}),
                meta=jsonable_encoder(metadata or {}),
                ip_address=context.get("ip_address"),
                user_agent=context.get("user_agent"),
                endpoint=context.get("endpoint"),
                request_id=context.get("request_id"),
                status=status_value,
                error_message=error_message if status_value == AuditStatus.FAILURE.value else None,
            )
            self.session.add(entry)
            await self.session.commit()
            logger.info(f"Audit {action} {status_value} by employee {actor_id} on {model} {target_id or ''}")
            return entry
        except Exception as e:
            logger.error(f"Error logging audit event {action}: {str(e)}")
            try:
                await self.session.rollback()
            except SQLAlchemyError as rollback_error:
                logger.error(f"Rollback after failed audit write also failed: {rollback_error}")
            return None

    async def record_failure(
        self,
        actor_id: int,
        action_type: Union[str, AuditAction],
        target_model: Union[str, AuditTargetModel],
        error: Union[Exception, str],
        metadata: Optional[Dict[str, Any]] = None,
        request_context: Optional[Dict[str, Optional[str]]] = None,
    ) -> Optional[AuditLog]:
        return await self.record(
            actor_id=actor_id,
            action_type=action_type,
            target_model=target_model,
            metadata=metadata,
            request_context=request_context,
            status=AuditStatus.FAILURE,
            error_message=str(error),
        )

    async def list_entries(
        self,
        target_model: Optional[str] = None,
        target_id: Optional[int] = None,
        employee_id: Optional[int] = None,
        action_type: Optional[str] = None,
        status: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        limit: int = 50,
    ) -> List[AuditLog]:
        """Newest entries first"""
        query = select(AuditLog)
        if target_model and target_model != "all":
            query = query.where(AuditLog.target_model == target_model)
        if target_id is not None:
            query = query.where(AuditLog.target_id == target_id)
        if employee_id is not None:
            query = query.where(AuditLog.employee_id == employee_id)
        if action_type:
            query = query.where(AuditLog.action_type == action_type)
        if status:
            query = query.where(AuditLog.status == status)
        if start_date:
            query = query.where(AuditLog.timestamp >= start_date)
        if end_date:
            query = query.where(AuditLog.timestamp <= end_date)

        query = query.order_by(AuditLog.timestamp.desc(), AuditLog.id.desc()).limit(limit)
        result = await self.session.execute(query)
        return list(result.scalars().all())
