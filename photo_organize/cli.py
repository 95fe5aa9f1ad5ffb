"""CLI interface module - command-line arguments and user interaction."""

import sys
from collections import Counter
from functools import partial
from pathlib import Path
from typing import List, Optional
import logging
from multiprocessing import cpu_count
from multiprocessing.pool import ThreadPool

import click
from tqdm import tqdm
from tqdm.contrib.logging import logging_redirect_tqdm

from photo_organize import __version__
from photo_organize.config import DEFAULT_OUTPUT_DIR, LAYOUT_MONTH, LAYOUTS, OrganizeOptions
from photo_organize.models import Outcome, PhotoFile, PhotoStatus, PlacementDecision
from photo_organize.organizer import process_photo
from photo_organize.scanner import scan_folder

logger = logging.getLogger(__name__)


def _process_photo_wrapper(file_path: Path, output_root: Path, options: OrganizeOptions) -> PlacementDecision:
    """
    Wrapper for process_photo used by the worker pool.

    Anything process_photo did not anticipate is logged and recorded as a failed
    decision so one bad file cannot stop the run.
    """
    try:
        return process_photo(file_path, output_root, options)
    except Exception as e:
        logger.error(f"Failed to process {file_path}: {e}", exc_info=True)
        photo = PhotoFile(file_path)
        photo.status = PhotoStatus.FAILED
        return PlacementDecision(photo, None, None, Outcome.FAILED, error=str(e), operation=options.operation)


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def prepare_output_root(output_root: Path, dry_run: bool):
    """
    Make sure the output root is usable.

    In dry-run mode nothing is created; the path only has to not be a file.

    Raises:
        NotADirectoryError: If output_root exists and is not a directory
        OSError: If output_root cannot be created
    """
    if output_root.exists() and not output_root.is_dir():
        raise NotADirectoryError(f"Output path is not a directory: {output_root}")
    if not dry_run:
        output_root.mkdir(parents=True, exist_ok=True)


def organize(source: Path, destination: Path, options: OrganizeOptions) -> List[PlacementDecision]:
    """
    Scan source and place every supported photo under destination.

    Returns one PlacementDecision per photo found, in completion order.
    """
    source = source.resolve()
    destination = destination.resolve()

    image_files = scan_folder(source, recursive=options.recursive, exclude=destination)
    if not image_files:
        return []

    workers = options.workers or cpu_count()
    worker = partial(_process_photo_wrapper, output_root=destination, options=options)
    if options.dry_run:
        desc = "Planning"
    else:
        desc = "Moving" if options.move else "Copying"

    with logging_redirect_tqdm():
        # Only use a pool for larger batches
        if workers > 1 and len(image_files) > 10:
            logger.debug(f"Using {workers} parallel workers")
            with ThreadPool(processes=workers) as pool:
                decisions = list(tqdm(
                    pool.imap_unordered(worker, image_files),
                    total=len(image_files),
                    desc=desc,
                    unit="photo"
                ))
        else:
            decisions = [worker(file_path) for file_path in tqdm(image_files, desc=desc, unit="photo")]

    return decisions


def print_summary(decisions: List[PlacementDecision], dry_run: bool):
    """Print counts of each outcome."""
    counts = Counter(decision.outcome for decision in decisions)
    resolved = [d.photo.captured for d in decisions if d.photo.captured is not None]
    from_exif = sum(1 for captured in resolved if not captured.is_fallback)

    print("\n" + "="*60)
    print("SUMMARY (DRY-RUN)" if dry_run else "SUMMARY")
    print("="*60)
    print(f"Photos processed:         {len(decisions):,}")
    print(f"Dated from EXIF:          {from_exif:,}")
    print(f"Dated from file mtime:    {len(resolved) - from_exif:,}")
    if dry_run:
        print(f"Would copy:               {counts[Outcome.WOULD_COPY]:,}")
        print(f"Would move:               {counts[Outcome.WOULD_MOVE]:,}")
    else:
        print(f"Copied:                   {counts[Outcome.COPIED]:,}")
        print(f"Moved:                    {counts[Outcome.MOVED]:,}")
    print(f"Skipped (already exists): {counts[Outcome.SKIPPED_COLLISION]:,}")
    print(f"Failed:                   {counts[Outcome.FAILED]:,}")
    print("="*60 + "\n")


@click.command()
@click.argument(
    'input_dir',
    required=False,
    default='.',
    type=click.Path(exists=True, file_okay=False, dir_okay=True, path_type=Path),
)
@click.argument(
    'output_dir',
    required=False,
    default=DEFAULT_OUTPUT_DIR,
    type=click.Path(file_okay=False, dir_okay=True, path_type=Path),
)
@click.option(
    '--dry',
    '-d',
    'dry_run',
    is_flag=True,
    default=False,
    help='Do not move or copy files, but show result'
)
@click.option(
    '--move',
    '-m',
    is_flag=True,
    default=False,
    help='Move, instead of copy, the files'
)
@click.option(
    '--recursive',
    '-r',
    is_flag=True,
    default=False,
    help='Include photos in subdirectories of INPUT_DIR'
)
@click.option(
    '--verbose',
    '-v',
    is_flag=True,
    default=False,
    help='Increase chattiness'
)
@click.option(
    '--layout',
    '-l',
    type=click.Choice(LAYOUTS),
    default=LAYOUT_MONTH,
    show_default=True,
    help='Destination folder naming: month = YYYY/M - Month, day = YYYY_MM_DD'
)
@click.option(
    '--day-start',
    'day_start_hour',
    type=click.IntRange(0, 23),
    default=0,
    show_default=True,
    help='Hour at which a new day begins; earlier photos are filed under the previous day'
)
@click.option(
    '--workers',
    '-w',
    type=click.IntRange(min=1),
    default=None,
    help='Number of parallel workers (default: number of CPU cores)'
)
@click.version_option(__version__)
def main(
    input_dir: Path,
    output_dir: Path,
    dry_run: bool,
    move: bool,
    recursive: bool,
    verbose: bool,
    layout: str,
    day_start_hour: int,
    workers: Optional[int]
):
    """
    Organize photos into folders named after the date they were taken.

    INPUT_DIR defaults to the current directory, OUTPUT_DIR to "out". The date
    comes from the EXIF capture time when present, otherwise from the file
    modification time. Existing files are never overwritten.
    """
    setup_logging(verbose)

    options = OrganizeOptions(
        dry_run=dry_run,
        move=move,
        recursive=recursive,
        layout=layout,
        day_start_hour=day_start_hour,
        workers=workers,
    )

    logger.info(f"Processing directory '{input_dir}'")
    if dry_run:
        logger.info("Dry option specified. Files will not be output.")

    try:
        prepare_output_root(output_dir, dry_run)
    except OSError as e:
        logger.error(f"'{output_dir}' is not valid : {e}")
        sys.exit(1)

    try:
        decisions = organize(input_dir, output_dir, options)
    except KeyboardInterrupt:
        print("\n\nOperation cancelled by user.")
        sys.exit(1)
    except OSError as e:
        logger.error(f"'{input_dir}' is not valid : {e}")
        sys.exit(1)

    if not decisions:
        print("No image files found.")
        return

    print_summary(decisions, dry_run)


if __name__ == '__main__':
    main()
