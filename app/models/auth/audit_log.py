from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON, Index, event
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.models.base import Base

class AuditLog(Base):
    """Append-only record of one mutation attempt. Rows are never edited or deleted."""
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    action_type = Column(String(100), nullable=False, index=True)
    target_model = Column(String(50), nullable=False, index=True)
    target_id = Column(Integer, nullable=True)
    changes = Column(JSON, nullable=False, default=dict)
    # "metadata" is reserved on declarative classes
    meta = Column("metadata", JSON, nullable=False, default=dict)
    ip_address = Column(String(45), nullable=True)
    user_agent = Column(Text, nullable=True)
    endpoint = Column(String(255), nullable=True)
    request_id = Column(String(100), nullable=True)
    status = Column(String(20), nullable=False, index=True)
    error_message = Column(Text, nullable=True)
    timestamp = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    # Relationships
    employee = relationship("Employee")

    __table_args__ = (
        Index("ix_audit_logs_action_timestamp", "action_type", "timestamp"),
        Index("ix_audit_logs_target", "target_model", "target_id"),
    )

    def __repr__(self):
        return f"<AuditLog {self.action_type} on {self.target_model} ({self.status})>"


@event.listens_for(AuditLog, "before_update")
def _reject_audit_update(mapper, connection, target):
    raise ValueError("Audit log entries are append-only")


@event.listens_for(AuditLog, "before_delete")
def _reject_audit_delete(mapper, connection, target):
    raise ValueError("Audit log entries are append-only")
