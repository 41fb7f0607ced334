"""
Order submission pipeline: local validation, single send, server-authoritative result.
"""

from execution.pipeline import OrderSubmitter, estimated_total, validate_trade_request

__all__ = ["OrderSubmitter", "estimated_total", "validate_trade_request"]
