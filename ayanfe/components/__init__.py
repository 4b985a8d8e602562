from .charts import ChartBuilder
from .panels import PanelBuilder

__all__ = [
    'ChartBuilder',
    'PanelBuilder',
]
