class DashboardError(Exception):
  """Base class for dashboard errors."""


class DataLoadError(DashboardError):
  def __init__(self, name: str, url: str, reason: str):
    self.name = name
    self.url = url
    self.reason = reason
    super().__init__(f"could not load {name} from {url}: {reason}")
