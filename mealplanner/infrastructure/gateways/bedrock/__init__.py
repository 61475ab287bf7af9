"""Bedrock Gateways"""
from .bedrock_converse_gateway import BedrockConverseGateway

__all__ = ["BedrockConverseGateway"]
