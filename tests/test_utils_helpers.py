import re

from loguru import logger

from designmcp.cli.shared.logging_utils import ensure_rotating_log_file, remove_log_sinks
from designmcp.utils.helpers import generate_request_id, utc_now_iso


def test_generate_request_id_format():
    rid = generate_request_id()
    assert re.fullmatch(r"req_\d{13}_[0-9a-z]{7}", rid)
    assert generate_request_id() != rid


def test_utc_now_iso_is_zulu():
    assert utc_now_iso().endswith("Z")


def test_rotating_log_file_is_added_once(tmp_path):
    try:
        path = ensure_rotating_log_file("serve", log_dir=tmp_path)
        assert ensure_rotating_log_file("serve", log_dir=tmp_path) == path
        logger.bind(request_id="req_1_abcdefg").info("hello {}", "world")
        logger.info("no request id")
        logger.complete()
    finally:
        remove_log_sinks()
    text = path.read_text(encoding="utf-8")
    assert "req_1_abcdefg | hello world" in text
    assert "| - | no request id" in text
