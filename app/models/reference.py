from sqlalchemy import Column, Integer, String
from app.core.database import Base


class MpaRatingRecord(Base):
    """MPA 등급 참조 테이블 (외부에서 시드, 읽기 전용)"""
    __tablename__ = "mpa_ratings"

    id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String(16), nullable=False, unique=True)
    description = Column(String(255))


class GenreRecord(Base):
    """장르 참조 테이블 (외부에서 시드, 읽기 전용)"""
    __tablename__ = "genres"

    id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String(64), nullable=False, unique=True)
