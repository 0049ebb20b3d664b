from app.core.config import DATABASE_URL
from app.core.database import init_db


def main():
    """데이터베이스 테이블을 생성하고 MPA 등급/장르 참조 데이터를 시드합니다.

    Rationale:
        참조 데이터는 애플리케이션 외부에서 채워지는 것이 원칙이므로,
        배포 전 한 번 실행하는 유틸리티 스크립트로 분리했습니다.
        이미 존재하는 행은 건너뛰므로 여러 번 실행해도 안전합니다.
    """
    print(f"Initializing database: {DATABASE_URL}")
    init_db()
    print("Tables created and reference data seeded.")


if __name__ == "__main__":
    # NOTE: 루트 디렉토리에서 'python -m scripts.init_db' 명령어로 실행해야 함
    main()
