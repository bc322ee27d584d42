"""
Car inventory table. license_plate is unique when present; several
cars may have no plate (SQLite allows repeated NULLs in a UNIQUE column).
"""

from sqlalchemy import Column, Integer, String, DateTime, Float, Text, func
from backoffice.database import Base


class Car(Base):
    __tablename__ = "cars"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    brand = Column(String, nullable=False, index=True)
    model = Column(String, nullable=False)
    year = Column(Integer, nullable=False)
    color = Column(String)
    license_plate = Column(String, unique=True)
    mileage = Column(Integer, server_default="0")
    fuel_type = Column(String, server_default="essence")       # essence | diesel | hybride | electrique | gpl
    transmission = Column(String, server_default="manuelle")   # manuelle | automatique
    price = Column(Float)
    doors = Column(Integer, server_default="4")
    horsepower = Column(Integer)
    description = Column(Text)
    status = Column(String, server_default="disponible")       # disponible | vendu | reserve | maintenance
    created_at = Column(DateTime, server_default=func.current_timestamp(), index=True)
    updated_at = Column(DateTime, server_default=func.current_timestamp())

    def __repr__(self):
        return f"<Car {self.brand} {self.model} plate={self.license_plate}>"
