from pythonjsonlogger import jsonlogger

# record attribute -> output key
RENAMED_FIELDS = {
    "asctime": "time",
    "levelname": "severity",
    "name": "source",
}
# request attributes attached by the gateway client, grouped under "request"
REQUEST_FIELDS = ("method", "uri", "status", "elapsed_ms")


class JsonFormatter(jsonlogger.JsonFormatter):
    def add_fields(self, log_record, record, message_dict):
        """Rename standard fields and nest gateway request details."""
        super(JsonFormatter, self).add_fields(log_record, record, message_dict)
        for field, key in RENAMED_FIELDS.items():
            if field in log_record:
                log_record.setdefault(key, log_record.pop(field))
        log_record.setdefault("severity", record.levelname)
        log_record.setdefault("source", record.name)

        request = {}
        for field in REQUEST_FIELDS:
            if field in log_record:
                request[field] = log_record.pop(field)
        if request:
            log_record["request"] = request
