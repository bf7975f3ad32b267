import logging
from collections import namedtuple

import pandas as pd
from tqdm import tqdm

from .file_transactor import ENCODING

JobRecord = namedtuple("JobRecord", ["job_id", "file_path", "series_index"])

JOB_LIST_COLUMNS = ["job_id", "file_path", "series_index"]
RECORD_SEPARATOR = ", "


def assign_job_ids(work_units, start=0):
    """
    Number work units with contiguous job ids.

    Parameters
    ----------
    work_units : iterable of (str, int)
        (file path, series index) pairs in emission order.
    start : int, optional
        The first job id. Default is 0.

    Yields
    ------
    JobRecord
        One record per work unit. Ids increase by one with no gaps.
    """
    for job_id, (file_path, series_index) in enumerate(work_units, start):
        yield JobRecord(job_id, file_path, series_index)


def format_record(record):
    """Render a JobRecord as a job-list line, newline included."""
    return (
        f"{record.job_id}{RECORD_SEPARATOR}{record.file_path}"
        f"{RECORD_SEPARATOR}{record.series_index}\n"
    )


def parse_record(line):
    """
    Parse one job-list line back into a JobRecord.

    The path is everything between the first and the last separator,
    so paths containing ", " still parse. Paths with embedded newlines
    cannot be represented.

    Parameters
    ----------
    line : str
        A line of the form "<job_id>, <file_path>, <series_index>".

    Returns
    -------
    JobRecord

    Raises
    ------
    ValueError
        If the line does not have three fields or the ids are not
        integers.
    """
    stripped = line.rstrip("\n")
    head, sep, rest = stripped.partition(RECORD_SEPARATOR)
    file_path, sep2, tail = rest.rpartition(RECORD_SEPARATOR)
    if not sep or not sep2:
        raise ValueError(f"Malformed job-list line: {line!r}")
    return JobRecord(int(head), file_path, int(tail))


class JobListBuilder:
    """
    Writes the job list for a sequence of work units.

    Each work unit gets the next job id, starting at zero, and is
    written as one "<job_id>, <file_path>, <series_index>" line.

    Parameters
    ----------
    logger : logging.Logger, optional
        Destination for diagnostic messages.
    show_progress : bool, optional
        Display a tqdm progress bar while writing. Default is False.

    """

    def __init__(self, logger=None, show_progress=False):
        self.logger = logger or logging.getLogger(__name__)
        self.show_progress = show_progress

    def write(self, work_units, handle):
        """
        Write one record per work unit to an open text handle.

        Work units are consumed lazily, so traversal and writing are
        interleaved.

        Parameters
        ----------
        work_units : iterable of (str, int)
            (file path, series index) pairs.
        handle : io.TextIOBase
            A writable text stream.

        Returns
        -------
        int
            The number of records written, i.e. the job count.
        """
        job_count = 0
        records = tqdm(
            assign_job_ids(work_units),
            desc="Writing job list...",
            unit="job",
            disable=not self.show_progress,
        )
        for record in records:
            handle.write(format_record(record))
            job_count += 1

        self.logger.info(f"Wrote {job_count} jobs to the job list.")
        return job_count


def read_job_list(job_list_path):
    """
    Load a job list into a DataFrame.

    Parameters
    ----------
    job_list_path : str or os.PathLike
        Path to a job list written by JobListBuilder.

    Returns
    -------
    pandas.DataFrame
        Columns 'job_id', 'file_path' and 'series_index', one row per
        record, in file order.
    """
    with open(job_list_path, "r", encoding=ENCODING) as f:
        records = [parse_record(line) for line in f if line.strip()]

    df = pd.DataFrame(records, columns=JOB_LIST_COLUMNS)
    return df.astype({"job_id": "int64", "series_index": "int64"})


def lookup_job(job_list_path, job_id):
    """
    Find the record for one array task.

    Parameters
    ----------
    job_list_path : str or os.PathLike
        Path to a job list written by JobListBuilder.
    job_id : int
        The array task index, usually $SLURM_ARRAY_TASK_ID.

    Returns
    -------
    JobRecord

    Raises
    ------
    KeyError
        If no record has this id.
    """
    df = read_job_list(job_list_path)
    match = df[df["job_id"] == int(job_id)]
    if match.empty:
        raise KeyError(f"Job {job_id} not found in {job_list_path}")

    row = match.iloc[0]
    return JobRecord(int(row["job_id"]), row["file_path"], int(row["series_index"]))
