from pathlib import Path

from vhalclient.status import StatusProber


def test_update_status_writes_line(tmp_path: Path) -> None:
    target = tmp_path / "input-status"
    prober = StatusProber(target)
    assert prober.update_status("connected") is True
    assert target.read_text(encoding="utf-8") == "connected\n"


def test_update_status_replaces_previous_contents(tmp_path: Path) -> None:
    target = tmp_path / "status"
    prober = StatusProber(str(target))
    prober.update_status("connected")
    prober.update_status("disconnected")
    assert target.read_text(encoding="utf-8").splitlines() == ["disconnected"]


def test_update_status_in_missing_directory_reports_failure(tmp_path: Path) -> None:
    target = tmp_path / "absent" / "status"
    prober = StatusProber(target)
    assert prober.update_status("connected") is False
    assert not target.exists()