# 참조 데이터 기본값 (init_db 스크립트와 메모리 저장소가 공유)

DEFAULT_MPA_RATINGS = [
    (1, "G", "General audiences. All ages admitted."),
    (2, "PG", "Parental guidance suggested."),
    (3, "PG-13", "Parents strongly cautioned. Some material may be inappropriate for children under 13."),
    (4, "R", "Restricted. Under 17 requires accompanying parent or adult guardian."),
    (5, "NC-17", "Adults only. No one 17 and under admitted."),
]

DEFAULT_GENRES = [
    (1, "Comedy"),
    (2, "Drama"),
    (3, "Animation"),
    (4, "Thriller"),
    (5, "Documentary"),
    (6, "Action"),
]
