import io

import pytest

from slurmgen_core.job_list_builder import (
    JobListBuilder,
    JobRecord,
    assign_job_ids,
    format_record,
    lookup_job,
    parse_record,
    read_job_list,
)

# --- Tests for record helpers ---


def test_assign_job_ids_is_contiguous_from_zero():
    units = [("/d/a.tif", 0), ("/d/a.tif", 1), ("/d/b.tif", 0)]
    records = list(assign_job_ids(units))

    assert [r.job_id for r in records] == [0, 1, 2]
    assert [(r.file_path, r.series_index) for r in records] == units


def test_assign_job_ids_accepts_generators():
    records = list(assign_job_ids((f"/d/{i}.tif", 0) for i in range(5)))
    assert [r.job_id for r in records] == list(range(5))


def test_format_record():
    assert format_record(JobRecord(7, "/data/A/img.tif", 2)) == "7, /data/A/img.tif, 2\n"


@pytest.mark.parametrize(
    "line, expected",
    [
        ("0, /data/A/img.tif, 0\n", JobRecord(0, "/data/A/img.tif", 0)),
        ("12, /data/B/x.lsm, 3", JobRecord(12, "/data/B/x.lsm", 3)),
        ("1, /data/with, comma.tif, 4\n", JobRecord(1, "/data/with, comma.tif", 4)),
        ("2, /data/with space/y.tif, 0\n", JobRecord(2, "/data/with space/y.tif", 0)),
    ],
)
def test_parse_record(line, expected):
    assert parse_record(line) == expected


@pytest.mark.parametrize(
    "line",
    ["", "0, /only/two", "zero, /a.tif, 0", "0, /a.tif, one", "0,/a.tif,0"],
)
def test_parse_record_rejects_malformed_lines(line):
    with pytest.raises(ValueError):
        parse_record(line)


# --- Tests for JobListBuilder.write ---


def test_write_records_and_returns_count():
    handle = io.StringIO()
    units = [("/d/A/a.tif", 0), ("/d/A/a.tif", 1), ("/d/B/b.tif", 0)]

    count = JobListBuilder().write(iter(units), handle)

    assert count == 3
    assert handle.getvalue() == (
        "0, /d/A/a.tif, 0\n" "1, /d/A/a.tif, 1\n" "2, /d/B/b.tif, 0\n"
    )


def test_write_empty_sequence():
    handle = io.StringIO()
    assert JobListBuilder().write([], handle) == 0
    assert handle.getvalue() == ""


def test_write_round_trips_through_parse():
    units = [(f"/data/dir{i % 3}/img_{i}.ome.tif", i % 4) for i in range(20)]
    handle = io.StringIO()
    JobListBuilder().write(units, handle)

    parsed = [parse_record(line) for line in handle.getvalue().splitlines()]

    assert parsed == list(assign_job_ids(units))


def test_write_logs_job_count(caplog):
    with caplog.at_level("INFO"):
        JobListBuilder().write([("/d/a.tif", 0)], io.StringIO())
    assert "Wrote 1 jobs to the job list." in caplog.text


def test_write_uses_injected_logger(mocker):
    logger = mocker.MagicMock()
    JobListBuilder(logger=logger).write([], io.StringIO())
    logger.info.assert_called_once_with("Wrote 0 jobs to the job list.")


def test_write_progress_bar_disabled_by_default(mocker):
    mock_tqdm = mocker.patch(
        "slurmgen_core.job_list_builder.tqdm", side_effect=lambda it, **kw: it
    )
    JobListBuilder().write([("/d/a.tif", 0)], io.StringIO())

    _, kwargs = mock_tqdm.call_args
    assert kwargs["disable"] is True
    assert kwargs["unit"] == "job"


# --- Tests for reading job lists ---


@pytest.fixture
def job_list_file(tmp_path):
    path = tmp_path / "Giani_Job_List.txt"
    path.write_text(
        "0, /data/A/a.tif, 0\n1, /data/A/a.tif, 1\n2, /data/B/b.tif, 0\n",
        encoding="ISO-8859-1",
    )
    return path


def test_read_job_list(job_list_file):
    df = read_job_list(job_list_file)

    assert list(df.columns) == ["job_id", "file_path", "series_index"]
    assert df["job_id"].tolist() == [0, 1, 2]
    assert df["file_path"].tolist() == [
        "/data/A/a.tif",
        "/data/A/a.tif",
        "/data/B/b.tif",
    ]
    assert df["series_index"].tolist() == [0, 1, 0]


def test_read_empty_job_list(tmp_path):
    path = tmp_path / "empty.txt"
    path.write_text("")

    df = read_job_list(path)

    assert df.empty
    assert list(df.columns) == ["job_id", "file_path", "series_index"]


def test_lookup_job(job_list_file):
    assert lookup_job(job_list_file, 1) == JobRecord(1, "/data/A/a.tif", 1)
    assert lookup_job(job_list_file, "2") == JobRecord(2, "/data/B/b.tif", 0)


def test_lookup_job_unknown_id(job_list_file):
    with pytest.raises(KeyError):
        lookup_job(job_list_file, 3)
