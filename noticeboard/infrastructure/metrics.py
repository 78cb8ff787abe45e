from prometheus_client import Counter, Histogram, generate_latest
from fastapi import Response

# Метрики для HTTP запросов
http_requests_total = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'status']
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint']
)

# Метрики для кэша
cache_hits_total = Counter('cache_hits_total', 'Total cache hits')
cache_misses_total = Counter('cache_misses_total', 'Total cache misses')

# Метрики для БД
db_queries_total = Counter('db_queries_total', 'Total database queries')

# Доменные события
notices_created_total = Counter('notices_created_total', 'Notices created', ['role'])
notices_deleted_total = Counter('notices_deleted_total', 'Notices deleted', ['role'])
notices_purged_total = Counter('notices_purged_total', 'Notices removed by retention purge')
authz_denials_total = Counter('authz_denials_total', 'Rejected by role or ownership checks')

def metrics_endpoint():
    """Endpoint для Prometheus метрик"""
    return Response(content=generate_latest(), media_type="text/plain")
