"""View functions for health checks and admin read-only reports."""

import logging

from django.http import JsonResponse
from rest_framework.decorators import api_view
from rest_framework.response import Response

from roster import lifecycle
from roster.outcomes import Failure
from roster.promotion import evaluate_probation

logger = logging.getLogger("roster.views")


def _check_admin(request):
    """Return an error Response unless the shared admin secret is presented."""
    secret = request.headers.get("X-Admin-Secret", "")
    if not lifecycle.check_admin_secret(secret):
        logger.warning("Rejected report request without a valid admin secret")
        return Response({"error": "Missing or invalid admin secret"}, status=401)
    return None


def _volunteer_payload(volunteer) -> dict:
    return {
        "id": volunteer.pk,
        "name": volunteer.name,
        "handle": volunteer.handle,
        "status": volunteer.status,
        "commitments": volunteer.commitments,
        "period_start": volunteer.period_start.isoformat() if volunteer.period_start else None,
        "period_end": volunteer.period_end.isoformat() if volunteer.period_end else None,
    }


def health_check(request):
    """Return a simple health-check response."""
    return JsonResponse({"status": "ok"})


@api_view(["GET"])
def status_report(request):
    """Return every volunteer grouped by status."""
    err = _check_admin(request)
    if err is not None:
        return err

    report = lifecycle.status_report()
    return Response({
        "total": report.total,
        "counts": report.counts,
        "groups": {
            status: [_volunteer_payload(v) for v in members]
            for status, members in report.groups.items()
        },
    })


@api_view(["GET"])
def volunteer_detail(request, handle):
    """Return one volunteer with their probation progress."""
    err = _check_admin(request)
    if err is not None:
        return err

    outcome = lifecycle.get_volunteer_by_handle(handle)
    if not outcome.ok:
        status = 400 if outcome.failure is Failure.VALIDATION else 404
        return Response({"error": outcome.reason}, status=status)

    volunteer = outcome.value
    evaluation = evaluate_probation(volunteer)
    return Response({
        "volunteer": _volunteer_payload(volunteer),
        "probation": {
            "eligible": evaluation.eligible,
            "days_remaining": evaluation.days_remaining,
            "commitments_needed": evaluation.commitments_needed,
        },
    })
