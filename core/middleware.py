import logging

from django.conf import settings
from django.db import DatabaseError
from django.utils import timezone

from .services import record_visit

logger = logging.getLogger(__name__)

SESSION_VISIT_KEY = 'visit_date'
SKIPPED_PREFIXES = ('/static/', '/admin/')


class VisitTrackingMiddleware:
    """
    Counts the first request of each session per day into ``DailyVisit``.

    A visit is counted only once the client sends the session cookie back,
    so cookie-less API clients are never counted. Must sit after
    ``SessionMiddleware``.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if not request.path.startswith(SKIPPED_PREFIXES):
            self.track(request)
        return self.get_response(request)

    def track(self, request):
        today = timezone.localdate()
        session = getattr(request, 'session', None)
        if session is None or session.get(SESSION_VISIT_KEY) == today.isoformat():
            return

        if settings.SESSION_COOKIE_NAME not in request.COOKIES:
            # Issue the cookie; the visit counts when it comes back
            session.setdefault(SESSION_VISIT_KEY, None)
            return

        session[SESSION_VISIT_KEY] = today.isoformat()
        try:
            record_visit(today)
        except DatabaseError as e:
            logger.error(f"Could not record visit for {today}: {e}", exc_info=True)
