"""
Admin employee seed (async, idempotent)
- Creates the first employee holding the "ALL" permission
- Prints an access token for dashboard/API bootstrapping
Run:  python scripts/seed/seed_admin.py admin@store.local "Store Admin"
"""

import os, sys
import asyncio
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..")))

from sqlalchemy import select
from app.core.database import async_session_maker, engine
from app.core.security import create_access_token
from app.auth.permissions import ALL_PERMISSIONS
from app.models.base import Base
from app.models.auth.employee import Employee

DEFAULT_EMAIL = "admin@store.local"
DEFAULT_NAME = "Store Admin"


async def seed_admin(email: str, name: str) -> Employee:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session_maker() as session:
        result = await session.execute(select(Employee).where(Employee.email == email))
        employee = result.scalar_one_or_none()
        if employee is None:
            employee = Employee(
                name=name,
                email=email,
                job_title="Administrator",
                permissions=[ALL_PERMISSIONS],
                is_active=True,
            )
            session.add(employee)
            await session.commit()
            await session.refresh(employee)
            print(f"✓ Created admin employee {email} (id={employee.id})")
        else:
            print(f"✓ Admin employee {email} already exists (id={employee.id}) - skipping")
        return employee


if __name__ == "__main__":
    email = sys.argv[1] if len(sys.argv) > 1 else DEFAULT_EMAIL
    name = sys.argv[2] if len(sys.argv) > 2 else DEFAULT_NAME
    admin = asyncio.run(seed_admin(email, name))
    print(f"Access token: {create_access_token(admin.id)}")
