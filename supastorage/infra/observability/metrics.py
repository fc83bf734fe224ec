from prometheus_client import Counter, Histogram

# Labels carry the operation name, never the object path, to keep cardinality low
REQUESTS = Counter(
    "storage_client_requests_total",
    "Total storage API requests issued by the client",
    ["operation", "method", "status"],
)

LATENCY = Histogram(
    "storage_client_request_duration_seconds",
    "Storage API request latency in seconds",
    ["operation", "method"],
)
