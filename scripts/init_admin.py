"""Script to create default roles and the initial admin account."""
import asyncio
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from timedesk.core.security import ROLE_PERMISSIONS
from timedesk.database import AsyncSessionLocal, Base, engine
from timedesk.services.bootstrap_service import (
    DEFAULT_ADMIN_EMAIL,
    DEFAULT_ADMIN_PASSWORD,
    ensure_default_admin,
    ensure_roles,
)
import timedesk.models  # noqa: F401


async def init_admin():
    """Create tables, roles and the admin user if they don't exist."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as db:
        role_map = await ensure_roles(db, role_names=ROLE_PERMISSIONS.keys())
        print("✓ Roles ready:", ", ".join(sorted(role_map)))

        admin_user = await ensure_default_admin(db, role_map=role_map)
        print(f"✓ Admin user ready: {admin_user.email}")
        if admin_user.email == DEFAULT_ADMIN_EMAIL:
            print(f"  Default password: {DEFAULT_ADMIN_PASSWORD} (change it after first login)")

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(init_admin())
