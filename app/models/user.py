from sqlalchemy import CheckConstraint, Column, Date, ForeignKey, Integer, Table, Text
from app.core.database import Base


class UserRecord(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    email = Column(Text, nullable=False)
    login = Column(Text, nullable=False)
    name = Column(Text)
    birthday = Column(Date)


# Rationale:
# 대칭 관계를 두 개의 방향 행(A→B, B→A)으로 저장합니다.
# "A의 친구" 조회는 user_id = A 조건만으로 끝나고, 추가/삭제는 항상 한 트랜잭션에서 두 행을 함께 다룹니다.
friendship = Table(
    "friendship",
    Base.metadata,
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("friend_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    CheckConstraint("user_id <> friend_id", name="ck_friendship_not_self"),
)
