from app.shopadmin.db.models import AuditEvent


class AuditRepository:
    def __init__(self, db):
        self.db = db

    def create(self, event: AuditEvent):
        self.db.add(event)
        self.db.commit()
        return event
