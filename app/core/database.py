from typing import Optional

from sqlalchemy import create_engine, event, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from app.core.config import DATABASE_URL

Base = declarative_base()


def build_engine(url: str = DATABASE_URL, **kwargs) -> Engine:
    """DATABASE_URL에 맞는 SQLAlchemy 엔진을 생성합니다.

    Rationale:
        FastAPI는 동기 핸들러를 스레드풀에서 실행하므로 SQLite는
        check_same_thread=False가 필요합니다. 또한 SQLite는 기본적으로
        외래키 제약을 검사하지 않으므로 연결마다 PRAGMA를 켜서
        존재하지 않는 genre/mpa 참조가 IntegrityError로 드러나게 합니다.
    """
    is_sqlite = url.startswith("sqlite")
    if is_sqlite:
        connect_args = kwargs.pop("connect_args", {})
        connect_args.setdefault("check_same_thread", False)
        kwargs["connect_args"] = connect_args

    engine = create_engine(url, **kwargs)

    if is_sqlite:
        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


engine = build_engine()

# NOTE: 저장소는 작업 단위마다 독립적인 세션을 연다.
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


def build_session_factory(bind: Engine) -> sessionmaker:
    return sessionmaker(bind=bind, autocommit=False, autoflush=False, expire_on_commit=False)


def init_db(bind: Optional[Engine] = None) -> None:
    """테이블을 생성하고 MPA 등급/장르 참조 데이터를 채웁니다.

    이미 존재하는 id는 건너뛰므로 여러 번 호출해도 안전합니다.
    """
    # 모델 모듈을 임포트해야 Base.metadata에 테이블이 등록된다
    from app.models.reference import GenreRecord, MpaRatingRecord
    from app.models import film, user  # noqa: F401
    from app.repositories.seed import DEFAULT_GENRES, DEFAULT_MPA_RATINGS

    bind = bind or engine
    Base.metadata.create_all(bind=bind)

    factory = build_session_factory(bind)
    with factory.begin() as session:
        known_mpa = set(session.scalars(select(MpaRatingRecord.id)))
        for mpa_id, name, description in DEFAULT_MPA_RATINGS:
            if mpa_id not in known_mpa:
                session.add(MpaRatingRecord(id=mpa_id, name=name, description=description))

        known_genres = set(session.scalars(select(GenreRecord.id)))
        for genre_id, name in DEFAULT_GENRES:
            if genre_id not in known_genres:
                session.add(GenreRecord(id=genre_id, name=name))
