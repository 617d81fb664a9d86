"""
core/logging.py 테스트
"""

import json
import logging
from pathlib import Path

import pytest

from core.logging import JsonFormatter, NOISY_LOGGERS, setup_logging
from core.types import LogFormat


@pytest.fixture
def restore_root_logger():
    """테스트 후 루트 로거 핸들러 복구"""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


class TestSetupLogging:
    """setup_logging 테스트"""

    def test_installs_console_and_file_handlers(self, tmp_path: Path, restore_root_logger) -> None:
        """콘솔 + 파일 핸들러"""
        root = setup_logging("web", level="debug", log_dir=tmp_path)

        assert root.level == logging.DEBUG
        assert len(root.handlers) == 2
        assert (tmp_path / "web.log").exists()

    def test_repeated_setup_does_not_duplicate(self, tmp_path: Path, restore_root_logger) -> None:
        """재호출 시 핸들러 중복 없음"""
        setup_logging("web", log_dir=tmp_path)
        root = setup_logging("web", log_dir=tmp_path)

        assert len(root.handlers) == 2

    def test_warn_alias(self, tmp_path: Path, restore_root_logger) -> None:
        """warn = WARNING"""
        root = setup_logging("web", level="warn", log_dir=tmp_path)

        assert root.level == logging.WARNING

    def test_noisy_loggers_silenced(self, tmp_path: Path, restore_root_logger) -> None:
        """불필요한 로거는 WARNING 이상만"""
        setup_logging("web", level="debug", log_dir=tmp_path)

        for name in NOISY_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING

    def test_unsupported_level(self, tmp_path: Path) -> None:
        """지원하지 않는 레벨"""
        with pytest.raises(ValueError, match="level"):
            setup_logging("web", level="verbose", log_dir=tmp_path)

    def test_unsupported_format(self, tmp_path: Path) -> None:
        """지원하지 않는 형식"""
        with pytest.raises(ValueError, match="format"):
            setup_logging("web", log_format="xml", log_dir=tmp_path)

    def test_json_file_output(self, tmp_path: Path, restore_root_logger) -> None:
        """json 형식 파일 출력"""
        root = setup_logging("web", level="info", log_format=LogFormat.JSON, log_dir=tmp_path)

        logging.getLogger("loyalty.test").info("주문 접수", extra={"order": "18"})
        for handler in root.handlers:
            handler.flush()

        lines = (tmp_path / "web.log").read_text(encoding="utf-8").splitlines()
        records = [json.loads(line) for line in lines]
        record = next(r for r in records if r["logger"] == "loyalty.test")

        assert record["msg"] == "주문 접수"
        assert record["level"] == "info"
        assert record["order"] == "18"


class TestJsonFormatter:
    """JsonFormatter 테스트"""

    def test_extra_fields(self) -> None:
        """extra 필드 포함"""
        record = logging.LogRecord("app", logging.WARNING, __file__, 1, "hello %s", ("x",), None)
        record.order = "79927398713"

        data = json.loads(JsonFormatter().format(record))

        assert data["msg"] == "hello x"
        assert data["level"] == "warning"
        assert data["order"] == "79927398713"
        assert "args" not in data
