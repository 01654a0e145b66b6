from sqlalchemy import Column, Integer, String, Boolean, CheckConstraint
from sqlalchemy.orm import declarative_base

from src import utils_base

Base = declarative_base()

# !Внимание: не забывать про nullable=False при создании новых полей

class ReferralCode(Base):
    __tablename__ = "referral_code"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(100), nullable=False, unique=True, index=True)
    owner_name = Column(String(100), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True, server_default="true", index=True)
    # сколько раз код был применен, только растет
    usage_count = Column(Integer, nullable=False, default=0, server_default="0")
    created_at = Column(Integer, default=utils_base.now_timestamp, nullable=False)
    updated_at = Column(Integer, default=utils_base.now_timestamp, onupdate=utils_base.now_timestamp, nullable=False)

    __table_args__ = (
        CheckConstraint('usage_count >= 0', name='usage_count_nonnegative'),
    )

    def __str__(self) -> str:
        return f"{self.code} ({self.owner_name})"

    def __repr__(self) -> str:
        return f"<ReferralCode(id={self.id}, code='{self.code}', is_active={self.is_active}, usage_count={self.usage_count})>"

    def increment_usage_count(self) -> None:
        self.usage_count = (self.usage_count or 0) + 1
