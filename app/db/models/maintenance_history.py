from sqlalchemy import Column, DateTime, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import relationship

from app.db.base import Base


class MaintenanceHistory(Base):
    __tablename__ = "maintenance_histories"

    id = Column(String(32), primary_key=True, index=True)
    vehicle_id = Column(String(32), ForeignKey("vehicles.id"), nullable=False, index=True)
    description = Column(String(500), nullable=False)
    cost = Column(Numeric(12, 2), nullable=False)
    type = Column(String(32), nullable=False)
    notes = Column(Text, nullable=True)
    maintenance_date = Column(DateTime(timezone=True), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    actual_cost = Column(Numeric(12, 2), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    vehicle = relationship("Vehicle", backref="maintenance_histories")
