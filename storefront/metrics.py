from prometheus_client import Counter, Histogram

REQS = Counter("http_requests_total", "Total HTTP requests", ["service", "path", "method", "status"])
LAT = Histogram("http_request_duration_seconds", "Request latency", ["service", "path", "method"])
ORDERS_SUBMITTED = Counter("orders_submitted_total", "Orders accepted by the webhook")
ORDERS_FAILED = Counter("order_submit_failures_total", "Order submit failures", ["reason"])
FETCH_FAILED = Counter("order_fetch_failures_total", "Admin order fetch failures", ["reason"])
