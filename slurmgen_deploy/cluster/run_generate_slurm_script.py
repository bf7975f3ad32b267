import argparse
import logging
import sys

import slurmgen_core
import slurmgen_utils
from slurmgen_core.script_composer import (
    DEFAULT_CPUS_PER_TASK,
    DEFAULT_JOB_NAME,
    DEFAULT_LAUNCHER,
    DEFAULT_MODULE_LOAD,
    DEFAULT_TIME_LIMIT,
)


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Build a job list and SLURM array script for a directory of images."
    )

    # --- Path Arguments ---
    parser.add_argument(
        "--input_dir",
        type=str,
        required=True,
        help="Root directory. Images in its subdirectories become jobs.",
    )
    parser.add_argument(
        "--output_dir",
        type=str,
        required=True,
        help="Directory the array tasks write their logs to.",
    )
    parser.add_argument(
        "--worker",
        type=str,
        required=True,
        help="Path to the worker executable (e.g. the analysis .jar).",
    )
    parser.add_argument(
        "--properties",
        type=str,
        required=True,
        help="Path to the properties file passed to the worker.",
    )
    parser.add_argument(
        "--script_dir",
        type=str,
        default=None,
        help="Where to write the job list and script. (Default: --input_dir)",
    )

    # --- Script Template Arguments ---
    parser.add_argument(
        "--job_name", type=str, default=DEFAULT_JOB_NAME, help="SLURM job name."
    )
    parser.add_argument(
        "--time", type=str, default=DEFAULT_TIME_LIMIT, help="Wall-clock limit per task."
    )
    parser.add_argument(
        "--cpus", type=int, default=DEFAULT_CPUS_PER_TASK, help="CPUs per array task."
    )
    parser.add_argument(
        "--module",
        type=str,
        default=DEFAULT_MODULE_LOAD,
        help="Module load line. Pass an empty string to omit it.",
    )
    parser.add_argument(
        "--launcher",
        type=str,
        default=DEFAULT_LAUNCHER,
        help="Command placed before the worker path on the srun line.",
    )

    # --- Output Arguments ---
    parser.add_argument(
        "--progress", action="store_true", help="Show a progress bar."
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Log each scanned directory."
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(asctime)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
    )
    logger = logging.getLogger(__name__)

    collaborator = slurmgen_utils.TiffImageCollaborator(logger=logger)
    generator = slurmgen_core.SlurmScriptGenerator(
        input_location=args.input_dir,
        output_location=args.output_dir,
        worker_location=args.worker,
        properties_location=args.properties,
        collaborator=collaborator,
        script_dir=args.script_dir,
        logger=logger,
        show_progress=args.progress,
        job_name=args.job_name,
        time_limit=args.time,
        cpus_per_task=args.cpus,
        module_load=args.module,
        launcher=args.launcher,
    )
    generator.run()


if __name__ == "__main__":
    main()
