"""Project completion derived from task states."""

from decimal import ROUND_HALF_UP, Decimal

from .ledger_utils import entry_value

TODO = "To Do"
IN_PROGRESS = "In Progress"
DONE = "Done"


def derive_progress(tasks):
    """
    Completion percentage of a task list, rounded half-up.

    Returns None for an empty list: progress is then admin-set and the
    derivation does not apply.
    """
    statuses = [entry_value(task, "status") for task in tasks]
    if not statuses:
        return None

    done = sum(1 for status in statuses if status == DONE)
    ratio = Decimal(100 * done) / Decimal(len(statuses))
    progress = int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    # Only a fully completed list reports 100
    if progress == 100 and done < len(statuses):
        return 99
    return progress


def toggled_status(status):
    # Done flips back to In Progress; everything else completes
    return IN_PROGRESS if status == DONE else DONE
