"""
룰 엔진 설정
"""
from functools import lru_cache
from typing import Literal

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings

load_dotenv()


class RulesSettings(BaseSettings):
    """룰 엔진 설정 (환경변수 SPORT_RULES_* 또는 .env)"""

    # 랭킹 계산
    default_coefficient: Literal["none", "wilks", "dots", "ipf_gl", "sinclair"] = Field(
        default="dots", description="카테고리 규칙이 없을 때 사용할 계수"
    )
    default_equipment: Literal["raw", "equipped"] = Field(
        default="raw", description="IPF GL 계산 기본 장비 구분"
    )
    default_personal_best: float = Field(
        default=100.0, gt=0, description="개인 최고 기록이 없을 때 가정하는 값 (kg)"
    )

    # 로깅
    log_level: str = Field(default="INFO", description="콘솔 로그 레벨")
    log_dir: str = Field(default="", description="파일 로그 디렉토리 (빈 값이면 비활성)")

    # CLI 출력
    ranking_top_n: int = Field(default=20, ge=1, description="출력할 상위 N명")

    class Config:
        env_prefix = "SPORT_RULES_"
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


@lru_cache()
def get_settings() -> RulesSettings:
    return RulesSettings()
