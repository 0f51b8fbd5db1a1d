from sqlalchemy import func, select

from app.shopadmin.db.models import Admin
from app.shopadmin.repos.base import StoreScopedRepository


class AdminRepository(StoreScopedRepository):
    model = Admin
    search_fields = ("name", "email")
    sort_fields = {"name": Admin.name, "email": Admin.email, "created_at": Admin.created_at}

    def get_by_id(self, admin_id):
        return self.db.get(Admin, admin_id)

    def get_by_email(self, email: str):
        stmt = select(Admin).where(func.lower(Admin.email) == email.strip().lower())
        return self.db.execute(stmt).scalars().first()

    def email_taken(self, email: str, *, exclude_id=None) -> bool:
        stmt = select(func.count()).select_from(Admin).where(func.lower(Admin.email) == email.strip().lower())
        if exclude_id is not None:
            stmt = stmt.where(Admin.id != exclude_id)
        return self.db.execute(stmt).scalar_one() > 0

    @staticmethod
    def filter_clauses(*, status: str | None = None, role: str | None = None):
        clauses = []
        if status:
            clauses.append(func.lower(Admin.status) == status.strip().lower())
        if role:
            clauses.append(func.lower(Admin.role) == role.strip().lower())
        return clauses
