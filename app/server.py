"""
Club Governance - FastAPI 웹 서버
클럽 관리 권한 판정 API

실행: uvicorn app.server:app --port 8000
"""
import sys

from fastapi import FastAPI
from loguru import logger
from dotenv import load_dotenv

from app.club import club_router
from app.club.config import get_club_settings

# 환경변수 로드
load_dotenv()

# 로깅 설정
logger.remove()
logger.add(
    sys.stderr,
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
    level="INFO"
)

# FastAPI 앱
app = FastAPI(
    title="Club Governance",
    description="클럽 관리 시스템 권한 및 비즈니스 규칙 판정 API",
    version="1.0.0"
)

# Club 라우터 등록
app.include_router(club_router)


@app.get("/health")
async def health_check():
    """헬스 체크"""
    settings = get_club_settings()
    return {
        "status": "ok",
        "max_page_size": settings.MAX_PAGE_SIZE,
    }
