"""
Prometheus collectors shared by the app and the routers
"""

from prometheus_client import Counter, Gauge, Histogram

REQUEST_COUNT = Counter('http_requests_total', 'Total HTTP requests', ['method', 'endpoint', 'status'])
REQUEST_DURATION = Histogram('http_request_duration_seconds', 'HTTP request duration', ['method', 'endpoint'])
ACTIVE_CONNECTIONS = Gauge('http_active_connections', 'Number of active HTTP connections')
INGEST_COUNT = Counter('snapshot_ingest_total', 'Total relay snapshots received', ['status'])
VOTE_COUNT = Counter('votes_total', 'Total vote attempts', ['outcome'])
