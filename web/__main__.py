"""
Web 진입점 (HTTP API + Accrual 워커)

실행 방법:
    python -m web
    python -m web -a :8000 -d sqlite:///data/loyalty.db -r http://localhost:8080 -e jwt
"""

import argparse
import sys
from pathlib import Path

import uvicorn

from core.config.loader import SettingsLoadError, load_settings
from core.logging import setup_logging
from web.app import create_app


def build_parser() -> argparse.ArgumentParser:
    """CLI 플래그 정의 (지정하지 않은 값은 None → 환경 변수/설정 파일 값 유지)"""
    parser = argparse.ArgumentParser(prog="python -m web", description="LoyaltyEngine 서버")
    parser.add_argument("-c", "--config", type=Path, default=None, help="settings.yaml 경로")
    parser.add_argument("-a", dest="run_address", help="listen 주소 (host:port)")
    parser.add_argument("-d", dest="database_uri", help="저장소 URI (sqlite:///path)")
    parser.add_argument("-r", dest="accrual_address", help="Accrual 시스템 주소")
    parser.add_argument("-e", dest="token_engine", help="토큰 엔진 (jwt, fernet)")
    parser.add_argument("-t", dest="token_ttl", help="토큰 유효 기간 (예: 24h)")
    parser.add_argument("-k", dest="secret_key", help="토큰 서명 키 (32자 이상)")
    parser.add_argument("-l", dest="log_level", help="로그 레벨 (debug, info, warn, error)")
    parser.add_argument("-f", dest="log_format", help="로그 형식 (printf, json)")
    parser.add_argument(
        "-D",
        dest="debug",
        action="store_const",
        const=True,
        default=None,
        help="요청 로그 활성화",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Web 메인 함수"""
    args = build_parser().parse_args(argv)
    overrides = {k: v for k, v in vars(args).items() if k != "config"}

    try:
        settings = load_settings(args.config, overrides=overrides)
    except SettingsLoadError as e:
        print(f"설정 로드 실패: {e}", file=sys.stderr)
        sys.exit(1)

    # 로깅 설정 (콘솔 + 파일)
    setup_logging("web", level=settings.log_level, log_format=settings.log_format)

    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_config=None,
        reload=False,
    )


if __name__ == "__main__":
    main()
