import pytest

from adbkit.proc_stat import CpuStats, ProcStat, ProcStatError

FIRST = "cpu  100 0 50 850 0 0 0 0 0 0\ncpu0 100 0 50 850 0 0 0 0 0 0\nintr 1 2 3\n"
SECOND = "cpu  110 0 60 930 0 0 0 0 0 0\ncpu0 110 0 60 930 0 0 0 0 0 0\nintr 4 5 6\n"


def make_stat():
    loads, errors = [], []
    stat = ProcStat(on_load=loads.append, on_error=errors.append)
    return stat, loads, errors


def test_first_sample_only_records_stats():
    stat, loads, errors = make_stat()
    stat.parse(FIRST)
    assert loads == []
    assert errors == []
    assert set(stat.stats) == {"cpu", "cpu0"}
    cpu = stat.stats["cpu"]
    assert cpu.user == 100
    assert cpu.total == cpu.user + cpu.system + cpu.idle


def test_second_sample_reports_load():
    stat, loads, _ = make_stat()
    stat.parse(FIRST)
    stat.parse(SECOND)
    assert len(loads) == 1
    load = loads[0]["cpu"]
    assert load.total == 100
    assert (load.user, load.system, load.idle) == (10, 10, 80)
    assert loads[0]["cpu0"] == load


def test_short_lines_are_skipped():
    stat, _, errors = make_stat()
    stat.parse("cpu 1 2 3\n")
    assert stat.stats == {}
    assert errors == []


def test_invalid_number_reports_error_and_keeps_old_stats():
    stat, loads, errors = make_stat()
    stat.parse(FIRST)
    before = dict(stat.stats)
    stat.parse("cpu  1 2 x 4 5 6 7 8 9 10\n")
    assert len(errors) == 1
    assert isinstance(errors[0], ProcStatError)
    assert stat.stats == before
    assert loads == []


def test_unchanged_line_is_ignored_afterwards():
    stat, loads, _ = make_stat()
    stat.parse(FIRST)
    stat.parse(FIRST)
    assert loads == []
    assert "cpu" not in stat.stats
    assert stat.ignore["cpu"] == "cpu  100 0 50 850 0 0 0 0 0 0"
    stat.parse(FIRST)
    assert stat.stats == {}


def test_update_reports_missing_file(tmp_path):
    errors = []
    stat = ProcStat(path=str(tmp_path / "missing"), on_error=errors.append)
    stat.update()
    assert len(errors) == 1
    assert isinstance(errors[0], FileNotFoundError)


def test_update_reads_file(tmp_path):
    path = tmp_path / "stat"
    path.write_text(FIRST)
    stat = ProcStat(path=str(path))
    stat.update()
    assert isinstance(stat.stats["cpu0"], CpuStats)
    assert stat.stats["cpu0"].idle == 850


def test_start_takes_immediate_sample_and_stop_ends(tmp_path):
    path = tmp_path / "stat"
    path.write_text(FIRST)
    stat = ProcStat(interval=0.01, path=str(path))
    stat.start()
    stat.stop()
    assert "cpu" in stat.stats
    assert stat._thread is None


@pytest.mark.parametrize("text", ["", "intr 1 2 3\n"])
def test_no_cpu_lines_gives_no_stats(text):
    stat, loads, _ = make_stat()
    stat.parse(text)
    assert stat.stats == {}
    assert loads == []