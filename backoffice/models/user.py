"""
Accounts allowed to sign in. One default admin row is seeded
by Store.acquire() when the table is empty.
"""

from sqlalchemy import Column, Integer, String, DateTime, func
from backoffice.database import Base


class User(Base):
    __tablename__ = "users"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False, index=True)
    password = Column(String, nullable=False)   # bcrypt hash
    role = Column(String, nullable=False, server_default="admin")
    created_at = Column(DateTime, server_default=func.current_timestamp())
    updated_at = Column(DateTime, server_default=func.current_timestamp())

    def __repr__(self):
        return f"<User {self.email} role={self.role}>"
