"""Student records table. email is the unique attribute."""

from sqlalchemy import Column, Integer, String, DateTime, Text, func, text
from backoffice.database import Base


class Student(Base):
    __tablename__ = "students"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False)
    date_of_birth = Column(String)        # ISO date
    gender = Column(String)               # male | female
    phone = Column(String)
    address = Column(Text)
    enrollment_date = Column(String, server_default=text("(date('now'))"))
    program = Column(String, index=True)
    year_level = Column(Integer, server_default="1")
    status = Column(String, server_default="active")   # active | inactive | graduated | suspended
    created_at = Column(DateTime, server_default=func.current_timestamp(), index=True)
    updated_at = Column(DateTime, server_default=func.current_timestamp())

    def __repr__(self):
        return f"<Student {self.first_name} {self.last_name} email={self.email}>"
