import argparse
import logging
import os
import sys

from slurmgen_core.job_list_builder import lookup_job


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Print the file and series assigned to one array task."
    )
    parser.add_argument(
        "--job_list",
        type=str,
        required=True,
        help="Path to the job list written by run_generate_slurm_script.py.",
    )
    parser.add_argument(
        "--job_id",
        type=int,
        default=None,
        help="Job id to look up. (Default: $SLURM_ARRAY_TASK_ID)",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="[%(asctime)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )
    logger = logging.getLogger(__name__)

    job_id = args.job_id
    if job_id is None:
        task_id = os.environ.get("SLURM_ARRAY_TASK_ID")
        if task_id is None:
            parser.error("--job_id not given and SLURM_ARRAY_TASK_ID is unset")
        job_id = int(task_id)

    try:
        record = lookup_job(args.job_list, job_id)
    except (OSError, KeyError, ValueError) as e:
        logger.error(f"Could not read job {job_id}: {e}")
        return 1

    # Tab separated so shell wrappers can `read` the two fields.
    print(f"{record.file_path}\t{record.series_index}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
