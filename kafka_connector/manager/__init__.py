"""
Connector service and HTTP API.
"""

from .connector import KafkaConnector
from .models import FilterResponse, GetResourceResponse, OpExecOutcome

__all__ = ["FilterResponse", "GetResourceResponse", "KafkaConnector", "OpExecOutcome"]
