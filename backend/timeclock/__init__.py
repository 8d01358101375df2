"""출퇴근 기록/보정 서비스 백엔드 패키지입니다."""
