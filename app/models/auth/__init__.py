# app/models/auth/__init__.py

# Import models in dependency order
from .employee import Employee
from .audit_log import AuditLog

# Make sure all models are available
__all__ = [
    "Employee",
    "AuditLog",
]
