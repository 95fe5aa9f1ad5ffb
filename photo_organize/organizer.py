"""Date organizer module - plans and performs the copy/move of each photo into a date-named folder."""

import calendar
from datetime import datetime, timedelta
from pathlib import Path
import logging
import os
import shutil

from photo_organize.analyzer import resolve_date
from photo_organize.config import LAYOUT_DAY, LAYOUT_MONTH, OrganizeOptions
from photo_organize.models import Outcome, PhotoFile, PhotoStatus, PlacementDecision, ResolvedDate

logger = logging.getLogger(__name__)


def get_date_folder(date: datetime, layout: str = LAYOUT_MONTH, day_start_hour: int = 0) -> Path:
    """
    Generate the folder path for a date.

    Layouts:
        month: YYYY/M - MonthName (e.g. 2021/3 - March)
        day:   YYYY_MM_DD (e.g. 2021_03_15)

    Args:
        date: datetime object
        layout: One of the layouts above
        day_start_hour: Hour at which a new day begins; earlier times count as the previous day

    Returns:
        Relative Path object representing the folder
    """
    if day_start_hour:
        try:
            date = date - timedelta(hours=day_start_hour)
        except OverflowError:
            logger.debug(f"Cannot shift {date} by {day_start_hour}h, keeping its own day")

    if layout == LAYOUT_MONTH:
        return Path(f"{date.year:04d}") / f"{date.month} - {calendar.month_name[date.month]}"
    if layout == LAYOUT_DAY:
        return Path(f"{date.year:04d}_{date.month:02d}_{date.day:02d}")
    raise ValueError(f"Unknown layout: {layout}")


def plan_placement(
    photo: PhotoFile,
    resolved: ResolvedDate,
    output_root: Path,
    options: OrganizeOptions
) -> PlacementDecision:
    """
    Work out where a photo goes without touching the filesystem.

    The filename is kept as-is; only the containing folder depends on the date.
    An existing entry at the destination makes the decision a collision skip.
    """
    destination_dir = output_root / get_date_folder(resolved.value, options.layout, options.day_start_hour)
    destination = destination_dir / photo.source.name

    if os.path.lexists(destination):
        outcome = Outcome.SKIPPED_COLLISION
        photo.status = PhotoStatus.SKIPPED
    else:
        outcome = Outcome.WOULD_MOVE if options.move else Outcome.WOULD_COPY

    return PlacementDecision(
        photo=photo,
        destination_dir=destination_dir,
        destination=destination,
        outcome=outcome,
        operation=options.operation,
    )


def copy_file(source: Path, destination: Path):
    """
    Copy a file without ever overwriting the destination.

    Raises:
        FileExistsError: If the destination already exists
        OSError: On any other I/O failure (a partially written destination is removed)
    """
    with open(source, 'rb') as fsrc:
        fdst = open(destination, 'xb')
        try:
            with fdst:
                shutil.copyfileobj(fsrc, fdst)
        except OSError:
            destination.unlink(missing_ok=True)
            raise
    shutil.copystat(source, destination)


def move_file(source: Path, destination: Path):
    """
    Move a file without ever overwriting the destination.

    Hard-links then unlinks the source; falls back to copy + unlink when linking
    is not possible (different filesystems, no hard link support).

    Raises:
        FileExistsError: If the destination already exists
        OSError: On any other I/O failure
    """
    try:
        os.link(source, destination)
    except FileExistsError:
        raise
    except OSError as e:
        logger.debug(f"Hard link {source} -> {destination} not possible ({e}), copying instead")
        copy_file(source, destination)

    try:
        os.unlink(source)
    except OSError:
        # Source must stay the only copy
        os.unlink(destination)
        raise


def execute_placement(decision: PlacementDecision, options: OrganizeOptions) -> PlacementDecision:
    """
    Perform a planned copy or move.

    Decisions that are not planned actions (collisions, failures) are returned untouched.
    Errors are contained to this photo: they turn the decision into FAILED.
    """
    if not decision.outcome.is_planned:
        return decision

    photo = decision.photo
    try:
        decision.destination_dir.mkdir(parents=True, exist_ok=True)
        if options.move:
            move_file(photo.source, decision.destination)
            decision.outcome = Outcome.MOVED
        else:
            copy_file(photo.source, decision.destination)
            decision.outcome = Outcome.COPIED
        photo.status = PhotoStatus.COMPLETED
    except FileExistsError:
        decision.outcome = Outcome.SKIPPED_COLLISION
        photo.status = PhotoStatus.SKIPPED
    except OSError as e:
        decision.outcome = Outcome.FAILED
        decision.error = str(e)
        photo.status = PhotoStatus.FAILED

    return decision


def log_decision(decision: PlacementDecision):
    """Write the action line for a decision at a level matching its outcome."""
    message = decision.describe()
    if decision.outcome is Outcome.SKIPPED_COLLISION:
        logger.warning(message)
    elif decision.outcome is Outcome.FAILED:
        logger.error(message)
    else:
        logger.info(message)


def process_photo(file_path: Path, output_root: Path, options: OrganizeOptions) -> PlacementDecision:
    """
    Resolve, plan and (unless dry-run) execute the placement of a single photo.

    Always returns exactly one decision; per-file errors never propagate.
    """
    photo = PhotoFile(file_path)

    try:
        photo.captured = resolve_date(photo.source)
    except OSError as e:
        photo.status = PhotoStatus.FAILED
        decision = PlacementDecision(
            photo=photo,
            destination_dir=None,
            destination=None,
            outcome=Outcome.FAILED,
            error=str(e),
            operation=options.operation,
        )
        log_decision(decision)
        return decision

    logger.debug(
        f"{photo.source.name}: {photo.captured.value} from {photo.captured.source.value}"
        + (f" ({photo.captured.reason})" if photo.captured.reason else "")
    )

    decision = plan_placement(photo, photo.captured, output_root, options)
    if not options.dry_run:
        decision = execute_placement(decision, options)

    log_decision(decision)
    return decision
