# backend/app/models/skill.py
"""
Teaching skills offered by a user.

The hourly rate here is what a booking snapshots at creation time; later rate
changes never touch existing bookings.
"""

from decimal import Decimal

from sqlalchemy import CheckConstraint, Column, ForeignKey, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import relationship
import ulid

from ..core.enums import SkillLevel
from ..database import Base


class TeachingSkill(Base):
    __tablename__ = "teaching_skills"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    user_id = Column(String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    skill = Column(String(50), nullable=False)
    level = Column(String(20), nullable=False, default=SkillLevel.INTERMEDIATE.value)
    hourly_rate = Column(Numeric(10, 2), nullable=False)
    sessions = Column(Integer, nullable=False, default=0)
    rating = Column(Numeric(3, 2), nullable=False, default=Decimal("0.00"))

    user = relationship("User", back_populates="skills")

    __table_args__ = (
        UniqueConstraint("user_id", "skill", name="uq_teaching_skills_user_skill"),
        CheckConstraint(
            "level IN ('beginner', 'intermediate', 'advanced', 'expert')",
            name="ck_teaching_skills_level",
        ),
        CheckConstraint("hourly_rate >= 0", name="ck_teaching_skills_rate_non_negative"),
        CheckConstraint("rating >= 0 AND rating <= 5", name="ck_teaching_skills_rating_range"),
    )

    def __repr__(self) -> str:
        return f"<TeachingSkill {self.skill} ({self.level}) rate={self.hourly_rate} user={self.user_id}>"
