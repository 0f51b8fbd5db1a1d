from app.shopadmin.core.config import Settings
from app.shopadmin.core.error_catalog import AppError, ErrorCatalog
from app.shopadmin.core.security import create_admin_access_token, get_password_hash, verify_password
from app.shopadmin.db.models import utcnow
from app.shopadmin.repos.admins import AdminRepository

MIN_PASSWORD_LENGTH = 6


class AuthService:
    def __init__(self, db, settings: Settings):
        self.db = db
        self.settings = settings
        self.repo = AdminRepository(db)

    def login(self, email: str, password: str):
        admin = self.repo.get_by_email(email)
        # Unknown email and wrong password must be indistinguishable.
        if admin is None or not verify_password(password, admin.hashed_password):
            raise AppError(ErrorCatalog.INVALID_CREDENTIALS)
        if admin.status != "active":
            raise AppError(ErrorCatalog.ACCOUNT_INACTIVE)
        admin.last_login_at = utcnow()
        self.db.commit()
        return admin, create_admin_access_token(admin, self.settings)

    def update_profile(self, admin, *, name: str | None = None, email: str | None = None, avatar: str | None = None):
        if email is not None:
            normalized = email.strip().lower()
            if self.repo.email_taken(normalized, exclude_id=admin.id):
                raise AppError(ErrorCatalog.CONFLICT, details={"field": "email"}, message="Email already in use")
            admin.email = normalized
        if name is not None:
            admin.name = name.strip()
        if avatar is not None:
            admin.avatar = avatar
        self.db.commit()
        return admin

    def change_password(self, admin, current_password: str, new_password: str):
        if not verify_password(current_password, admin.hashed_password):
            raise AppError(ErrorCatalog.CURRENT_PASSWORD_INVALID)
        if len(new_password) < MIN_PASSWORD_LENGTH:
            raise AppError(ErrorCatalog.PASSWORD_TOO_SHORT, details={"min_length": MIN_PASSWORD_LENGTH})
        admin.hashed_password = get_password_hash(new_password)
        self.db.commit()
        return admin
