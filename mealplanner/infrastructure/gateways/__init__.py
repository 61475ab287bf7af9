"""External Service Gateways"""
from .bedrock import BedrockConverseGateway

__all__ = ["BedrockConverseGateway"]
