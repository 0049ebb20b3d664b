from sqlalchemy import Column, Date, ForeignKey, Integer, String, Table, Text
from app.core.database import Base


class FilmRecord(Base):
    """films 테이블 모델입니다.

    genres/likes는 컬럼이 아니라 film_genre, film_likes 조인 테이블에서 읽어옵니다.
    """
    __tablename__ = "films"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(Text, nullable=False)
    description = Column(String(200))
    release_date = Column(Date, nullable=False)
    duration = Column(Integer, nullable=False)
    mpa_rating_id = Column(Integer, ForeignKey("mpa_ratings.id"), nullable=False)


film_genre = Table(
    "film_genre",
    Base.metadata,
    Column("film_id", Integer, ForeignKey("films.id", ondelete="CASCADE"), primary_key=True),
    Column("genre_id", Integer, ForeignKey("genres.id"), primary_key=True),
)

film_likes = Table(
    "film_likes",
    Base.metadata,
    Column("film_id", Integer, ForeignKey("films.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True, index=True),
)
