"""ORM model for user accounts."""

from sqlalchemy import Column, Integer, String

from app.models.base import Base


class User(Base):
    """
    User account for authentication.

    password_hash always holds a bcrypt hash; plain passwords are never stored.
    role is a free-form string, 'user' unless set otherwise.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default="user", server_default="user")

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r} role={self.role!r}>"
