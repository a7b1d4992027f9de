import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=DATE_FORMAT)


class RequestLogger(logging.LoggerAdapter):
    """Prefix every message with the request and tenant ids."""

    def process(self, msg, kwargs):
        return f"[request_id={self.extra['request_id']} tenant_id={self.extra['tenant_id']}] {msg}", kwargs


def request_logger(request_id: str, tenant_id: str | None = None, name: str = "ace") -> RequestLogger:
    return RequestLogger(logging.getLogger(name), {"request_id": request_id, "tenant_id": tenant_id or "unknown"})
