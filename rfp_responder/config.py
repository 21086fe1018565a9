from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """
    애플리케이션의 설정을 관리하는 클래스입니다.
    환경 변수(.env 파일)에서 설정값을 읽어옵니다.
    """

    # 모델 호출 설정: 어떤 백엔드로 생성 모델을 호출할지 결정
    model_backend: str = "cli"  # "cli" (Claude CLI) 또는 "bedrock" (AWS Bedrock)
    claude_cli_path: str = "claude"
    claude_cli_timeout: int = 300  # CLI 프로세스 최대 실행 시간(초)
    bedrock_model_id: str = "anthropic.claude-3-5-sonnet-20240620-v1:0"
    aws_region: str = "us-east-1"

    # 답변 생성 파라미터
    answer_max_tokens: int = 1500
    answer_temperature: float = 0.7
    improve_temperature: float = 0.6
    summary_max_tokens: int = 2000
    top_p: float = 0.9
    generation_timeout: float | None = None  # 모델 호출 1회당 마감 시간(초), None이면 제한 없음

    # 검색 및 신뢰도 정책
    default_top_k: int = 5
    answer_confidence: float = 0.85  # 고정 신뢰도 (모델 logprob 기반 아님)

    # 파이프라인 처리 설정
    bulk_generation_concurrency: int = 1  # 1이면 순차 처리
    enable_ai_question_extraction: bool = False  # 모델 기반 질문 추출 사용 여부

    # 저장소 및 업로드 제한
    storage_path: str = "data"
    max_file_size_mb: int = 10
    max_filename_length: int = 255
    max_document_count: int = 10
    extracted_text_preview_chars: int = 5000

    # 서버 설정: 서버가 실행될 주소와 포트 번호
    host: str = "0.0.0.0"  # 모든 외부 접속 허용
    port: int = 8000
    allowed_origins: list[str] = ["http://localhost:3000"]

    class Config:
        # 설정을 읽어올 파일 지정
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    """
    설정을 가져오는 함수입니다.
    @lru_cache를 사용하여 한 번 읽은 설정은 메모리에 저장해두고 재사용합니다.
    """
    return Settings()
