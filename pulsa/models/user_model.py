from sqlalchemy import Column, Integer, String, TIMESTAMP, Enum as SAEnum, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from pulsa.core.database import Base
from pulsa.models.enums import UserRole

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    firebase_uid = Column(String(255), nullable=False, index=True) # Firebase User ID
    email = Column(String(255), nullable=False, index=True)
    name = Column(String(255), nullable=True)
    # Firebase handles authentication; no password is stored here.

    role = Column(SAEnum(UserRole, name="user_role_enum", values_callable=lambda obj: [e.value for e in obj]), nullable=False, default=UserRole.LEARNER)

    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships to other tables
    progress_entries = relationship("Progress", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    quiz_results = relationship("QuizResult", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    certificates = relationship("Certificate", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    badges = relationship("UserBadge", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)

    __table_args__ = (
        UniqueConstraint('email', name='uq_user_email'),
        UniqueConstraint('firebase_uid', name='uq_user_firebase_uid'),
    )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"
