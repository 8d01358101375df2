"""공용 유틸리티 패키지입니다."""
