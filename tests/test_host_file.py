# tests/test_host_file.py
from __future__ import annotations

import logging

import pytest

from hostspec.adapters.system.file_host_reader import LocalHostFileReader
from hostspec.domain.expansion_service import HostSpecExpander
from hostspec.domain.models import ExpansionResult, HostFileError, HostsUnresolvedError
from tests.fakes import FakeHostFileReader, LowRandom


def make(files, fail_after=None) -> HostSpecExpander:
    return HostSpecExpander(FakeHostFileReader(files, fail_after), LowRandom())


def test_host_port_line_goes_to_bindings_only():
    svc = make({"hosts.txt": ["192.168.1.1:8080"]})
    result = svc.expand("", filename="hosts.txt")
    assert result.port_bindings == ["192.168.1.1:8080"]
    assert result.addresses == []


def test_host_port_line_expands_host_part():
    svc = make({"hosts.txt": ["10.0.0.1-3:443 primary"]})
    result = svc.expand("", filename="hosts.txt")
    assert result.port_bindings == ["10.0.0.1:443", "10.0.0.2:443", "10.0.0.3:443"]


def test_plain_lines_merge_after_inline_hosts():
    svc = make({"hosts.txt": ["  10.0.0.5  ", "", "   ", "10.0.0.1,10.0.0.6", "192.168.0.0/30"]})
    result = svc.expand("10.0.0.1", filename="hosts.txt")
    assert result.addresses == [
        "10.0.0.1",
        "10.0.0.5",
        "10.0.0.6",
        "192.168.0.0",
        "192.168.0.1",
        "192.168.0.2",
        "192.168.0.3",
    ]


def test_invalid_port_line_is_skipped_with_warning(caplog):
    caplog.set_level(logging.INFO)
    svc = make({"hosts.txt": ["10.0.0.1:http", "10.0.0.2:0", "10.0.0.3:70000", "10.0.0.4"]})
    result = svc.expand("", filename="hosts.txt")
    assert result.addresses == ["10.0.0.4"]
    assert result.port_bindings == []
    assert [s.reason for s in result.skipped] == ["invalid port"] * 3
    warnings = [r for r in caplog.records if r.getMessage() == "hostfile.port_invalid"]
    assert len(warnings) == 3 and all(r.levelno == logging.WARNING for r in warnings)


def test_only_bad_lines_raise_unresolved():
    svc = make({"hosts.txt": ["10.0.0.1:http", "999.1.1.1"]})
    with pytest.raises(HostsUnresolvedError):
        svc.expand("", filename="hosts.txt")


def test_missing_file_surfaces_with_inline_hosts():
    svc = make({})
    with pytest.raises(HostFileError) as exc:
        svc.expand("10.0.0.1,10.0.0.1", filename="missing.txt")
    assert exc.value.path == "missing.txt"
    assert isinstance(exc.value.cause, FileNotFoundError)
    assert exc.value.partial.addresses == ["10.0.0.1"]


def test_read_failure_keeps_partial_results():
    lines = ["10.0.0.2", "10.0.0.2", "10.0.0.3:80", "10.0.0.4"]
    svc = make({"hosts.txt": lines}, fail_after={"hosts.txt": 3})
    with pytest.raises(HostFileError) as exc:
        svc.expand("10.0.0.1", filename="hosts.txt")
    partial = exc.value.partial
    assert partial.addresses == ["10.0.0.1", "10.0.0.2"]
    assert partial.port_bindings == ["10.0.0.3:80"]


def test_read_host_file_accumulates_into_result():
    svc = make({"a.txt": ["10.0.0.1"], "b.txt": ["10.0.0.2:25"]})
    result = ExpansionResult()
    svc.read_host_file("a.txt", result)
    svc.read_host_file("b.txt", result)
    assert result.addresses == ["10.0.0.1"]
    assert result.port_bindings == ["10.0.0.2:25"]


def test_local_reader_with_real_file(tmp_path):
    p = tmp_path / "hosts.txt"
    p.write_text("10.1.1.1-2\n\n10.1.1.9:9200\r\nscanme.example.com  \n", encoding="utf-8")
    svc = HostSpecExpander(LocalHostFileReader(), LowRandom())
    result = svc.expand("", filename=str(p))
    assert result.addresses == ["10.1.1.1", "10.1.1.2", "scanme.example.com"]
    assert result.port_bindings == ["10.1.1.9:9200"]


def test_local_reader_missing_file(tmp_path):
    svc = HostSpecExpander(LocalHostFileReader(), LowRandom())
    with pytest.raises(HostFileError):
        svc.expand("", filename=str(tmp_path / "nope.txt"))


def test_local_reader_bad_encoding(tmp_path):
    p = tmp_path / "hosts.txt"
    p.write_bytes(b"10.0.0.1\n\xff\xfe\xfa\n")
    svc = HostSpecExpander(LocalHostFileReader("utf-8"), LowRandom())
    with pytest.raises(HostFileError) as exc:
        svc.expand("", filename=str(p))
    assert isinstance(exc.value.cause, UnicodeDecodeError)


def test_partial_result_honours_exclusion():
    lines = ["10.0.0.2", "10.0.0.3", "10.0.0.4"]
    svc = make({"hosts.txt": lines}, fail_after={"hosts.txt": 2})
    with pytest.raises(HostFileError) as exc:
        svc.expand("10.0.0.1", filename="hosts.txt", exclude="10.0.0.2")
    assert exc.value.partial.addresses == ["10.0.0.1", "10.0.0.3"]
