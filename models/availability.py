from datetime import datetime
from models.db import db

class Availability(db.Model):
    __tablename__ = "availabilities"

    id = db.Column(db.Integer, primary_key=True)
    provider_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)

    day_of_week = db.Column(db.Integer, nullable=False)  # 0=Sunday .. 6=Saturday
    start_time = db.Column(db.Time, nullable=False)
    end_time = db.Column(db.Time, nullable=False)
    is_recurring = db.Column(db.Boolean, default=True, nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        db.CheckConstraint("day_of_week >= 0 AND day_of_week <= 6", name="ck_availability_day"),
        db.CheckConstraint("start_time < end_time", name="ck_availability_window"),
        db.Index("ix_availability_provider_day", "provider_id", "day_of_week"),
    )
