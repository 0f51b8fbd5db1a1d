from sqlalchemy import func, select

from app.shopadmin.core.config import Settings, get_settings
from app.shopadmin.core.security import get_password_hash
from app.shopadmin.db.models import Admin


def _get_or_create_superadmin(db, settings: Settings):
    email = settings.SUPERADMIN_EMAIL.strip().lower()
    admin = db.execute(select(Admin).where(func.lower(Admin.email) == email)).scalars().first()
    if admin:
        return admin
    admin = Admin(
        store_id=None,
        name=settings.SUPERADMIN_NAME,
        email=email,
        hashed_password=get_password_hash(settings.SUPERADMIN_PASSWORD),
        role="super_admin",
        status="active",
        permissions=[],
    )
    db.add(admin)
    return admin


def run_seed(db, settings: Settings | None = None):
    admin = _get_or_create_superadmin(db, settings or get_settings())
    db.commit()
    return admin


if __name__ == "__main__":
    from app.shopadmin.db.session import build_engine, build_session_factory

    seed_settings = get_settings()
    engine = build_engine(seed_settings.DATABASE_URL)
    session = build_session_factory(engine)()
    try:
        run_seed(session, seed_settings)
    finally:
        session.close()
        engine.dispose()
