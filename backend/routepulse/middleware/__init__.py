from routepulse.middleware.request_tracking import UNMATCHED_ROUTE, PulseTrackingMiddleware, route_key

__all__ = ["UNMATCHED_ROUTE", "PulseTrackingMiddleware", "route_key"]
