# reset_db.py
import asyncio

from shared.db import engine, Base
# registers every model
import create_db  # noqa: F401


async def reset_db():
    async with engine.begin() as conn:
        print("🗑️  Dropping tables...")
        await conn.run_sync(Base.metadata.drop_all)
        print("🔧 Creating tables...")
        await conn.run_sync(Base.metadata.create_all)
        print("✅ Database reset.")


if __name__ == "__main__":
    asyncio.run(reset_db())
