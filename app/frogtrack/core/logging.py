import logging
from pythonjsonlogger import jsonlogger


class ServiceContextFilter(logging.Filter):
    """Stamps every record with the service name and environment."""

    def __init__(self, service: str, environment: str) -> None:
        super().__init__()
        self.service = service
        self.environment = environment

    def filter(self, record: logging.LogRecord) -> bool:
        record.service = self.service
        record.environment = self.environment
        return True


def configure_logging(level: str = "INFO", service: str = "frogtrack", environment: str = "production") -> None:
    root_logger = logging.getLogger()
    if any(isinstance(f, ServiceContextFilter) for h in root_logger.handlers for f in h.filters):
        return
    handler = logging.StreamHandler()
    handler.addFilter(ServiceContextFilter(service, environment))
    handler.setFormatter(
        jsonlogger.JsonFormatter(
            "%(asctime)s %(levelname)s %(name)s %(service)s %(environment)s %(message)s",
            rename_fields={"levelname": "level", "name": "logger"},
        )
    )
    root_logger.addHandler(handler)
    root_logger.setLevel(level.upper())
