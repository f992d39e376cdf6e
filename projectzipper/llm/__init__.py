"""Model service adapters."""

from .gateway import AssistGateway, SchemaDescriptor, get_gateway
from .runner import LLMRunner, LLMServiceError

__all__ = ["AssistGateway", "LLMRunner", "LLMServiceError", "SchemaDescriptor", "get_gateway"]
