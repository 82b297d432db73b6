"""
로깅 설정 유틸리티

지표 라이브러리를 사용하는 호스트 프로세스(백테스터, 노트북, 배치 작업)용 공통 로깅 설정.
라이브러리 모듈 자체는 logging.getLogger(__name__)만 사용하고 핸들러를 붙이지 않음.
- 콘솔: INFO 레벨
- 파일: INFO 레벨 (TimedRotatingFileHandler, daily) - log_dir 지정 시에만

사용법:
    from core.logging import setup_logging
    setup_logging("backtest")
    setup_logging("batch", log_dir=Path("logs"))
"""

import logging
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path


# 로그 설정 상수
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_BACKUP_COUNT = 7  # 최대 7일치 파일 유지


def setup_logging(
    process_name: str,
    console_level: int = logging.INFO,
    file_level: int = logging.INFO,
    log_dir: Path | None = None,
) -> logging.Logger:
    """로깅 설정 초기화

    log_dir가 주어지면 해당 디렉토리에 daily 롤링 파일 로그 저장.

    Args:
        process_name: 프로세스 이름 (로그 파일명으로 사용)
        console_level: 콘솔 로그 레벨 (기본: INFO)
        file_level: 파일 로그 레벨 (기본: INFO)
        log_dir: 파일 로그 디렉토리 (None이면 콘솔만)

    Returns:
        설정된 루트 Logger
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # 루트는 DEBUG로 설정 (핸들러에서 필터링)

    # 기존 핸들러 제거 (중복 방지)
    root_logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    # 1. 콘솔 핸들러 (StreamHandler)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # 2. 파일 핸들러 (TimedRotatingFileHandler - daily)
    log_file: Path | None = None
    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f"{process_name}.log"

        file_handler = TimedRotatingFileHandler(
            filename=log_file,
            when="midnight",          # 매일 자정에 롤링
            interval=1,               # 1일 간격
            backupCount=LOG_FILE_BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.suffix = "%Y-%m-%d"  # 백업 파일 형식: backtest.log.2026-02-21
        file_handler.setLevel(file_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    root_logger.info(f"로깅 초기화 완료: {process_name}")
    root_logger.info(f"  - 콘솔: {logging.getLevelName(console_level)}")
    if log_file is not None:
        root_logger.info(f"  - 파일: {log_file} ({logging.getLevelName(file_level)}, daily rotation)")

    return root_logger

