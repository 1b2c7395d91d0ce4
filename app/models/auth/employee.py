from sqlalchemy import Column, String, Boolean, JSON
from app.db.base import BaseModel

class Employee(BaseModel):
    __tablename__ = "employees"

    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    job_title = Column(String(150), nullable=True)
    phone = Column(String(20), nullable=True)
    permissions = Column(JSON, nullable=False, default=list)  # e.g. ["categories.view", "categories.edit"] or ["ALL"]
    is_active = Column(Boolean, default=True, nullable=False)

    def __repr__(self):
        return f"<Employee {self.email}>"
