import asyncio
from sqlalchemy import select
from app.core.db import AsyncSessionLocal, Base, engine
from app.models.auth import SystemAdmin
from app.models.domain import Group, Member, FinancialCategory
from app.models.enums import AdminLevel, CodeNamespace
from app.services.access_codes import AccessCodeGenerator, generate_code
from app.services.store import SQLAlchemyStore


async def seed_database():
    print("🗄️  Creating tables...")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as db:
        print("🌱 Starting database seed...")
        store = SQLAlchemyStore(db)

        print("\n🔐 Creating super admin...")
        result = await db.execute(select(SystemAdmin).where(SystemAdmin.permission_level == AdminLevel.SUPER_ADMIN))
        existing_admin = result.scalars().first()

        if not existing_admin:
            access_code = generate_code()
            super_admin = SystemAdmin(
                name="Super Admin",
                access_code=access_code,
                permission_level=AdminLevel.SUPER_ADMIN,
            )
            db.add(super_admin)
            await db.commit()
            print("  ✅ Created super admin")
            print(f"  🔑 Access code: {access_code}")
        else:
            print("  ⏭️  Super admin already exists")

        print("\n👥 Creating demo group...")
        result = await db.execute(select(Group).where(Group.name == "Demo"))
        if result.scalar_one_or_none():
            print("  ⏭️  Demo group already exists")
        else:
            group_code = await AccessCodeGenerator(store, CodeNamespace.GROUP).generate_unique()
            group = Group(name="Demo", access_code=group_code)
            db.add(group)
            await db.flush()

            member_code = await AccessCodeGenerator(store, CodeNamespace.MEMBER).generate_unique()
            president = Member(name="Demo President", member_code=member_code, group_id=group.id)
            db.add(president)
            await db.flush()

            group.president_id = president.id
            db.add(FinancialCategory(name="Quotas", group_id=group.id))
            await db.commit()

            print(f"  ✅ Created group Demo (access code: {group_code})")
            print(f"  ✅ Created president (member code: {member_code})")
            print("  ✅ Created category Quotas")

        print("\n✨ Database seeding completed!\n")

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(seed_database())
