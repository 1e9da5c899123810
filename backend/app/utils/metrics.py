"""
Prometheus metrics definitions for the API.
All metrics are registered here and can be imported by other modules.
"""
from prometheus_client import Counter, Histogram

# HTTP request metrics
http_requests_total = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'path', 'status']
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'path'],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0]
)

# Error metrics
errors_total = Counter(
    'errors_total',
    'Total errors',
    ['error_type']
)

# Account metrics
signups_total = Counter(
    'signups_total',
    'Total completed signups'
)

logins_total = Counter(
    'logins_total',
    'Total login attempts',
    ['outcome']  # success, invalid_credentials
)

auth_rejections_total = Counter(
    'auth_rejections_total',
    'Requests rejected by the auth gateway',
    ['reason']  # missing_header, malformed_header, invalid_token
)

# Upload metrics
upload_files_initiated_total = Counter(
    'upload_files_initiated_total',
    'Total files for which an upload URL was issued'
)

# Compensation metrics
compensations_total = Counter(
    'compensations_total',
    'Undo actions run after a partial failure',
    ['outcome']  # succeeded, failed
)
