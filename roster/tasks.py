"""Celery background tasks for the monthly volunteer pipeline."""

from celery import shared_task

from roster.period import run_monthly_process


@shared_task
def run_monthly_report(force: bool = False) -> dict:
    """Run the monthly reset/report pipeline.

    Args:
        force: Run even if this month's run already happened.

    Returns:
        A dict summarising the run.
    """
    run = run_monthly_process(force=force)
    return {
        "skipped": run.skipped,
        "reset": run.reset is not None,
        "inactivated": [v.handle for v in run.reset.inactivated] if run.reset else [],
        "total": run.report.total if run.report else 0,
    }
