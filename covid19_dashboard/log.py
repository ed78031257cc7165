import json
import logging


class JsonFormatter(logging.Formatter):
  def format(self, record: logging.LogRecord) -> str:
    payload = {
      'level': record.levelname,
      'time': self.formatTime(record, '%Y-%m-%dT%H:%M:%SZ'),
      'message': record.getMessage(),
      'name': record.name,
    }
    if record.exc_info:
      payload['exc_info'] = self.formatException(record.exc_info)
    return json.dumps(payload)


def configure_logging(level: str, json_lines: bool = False) -> None:
  log_level = getattr(logging, level.upper(), logging.INFO)
  handler = logging.StreamHandler()
  if json_lines:
    handler.setFormatter(JsonFormatter())
  else:
    handler.setFormatter(logging.Formatter('%(asctime)s %(levelname)s %(name)s: %(message)s'))
  # streamlit reruns the script on every interaction
  logging.basicConfig(level=log_level, handlers=[handler], force=True)
