"""Pydantic 요청/응답 스키마 패키지입니다."""
