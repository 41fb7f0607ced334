"""
JSON Schemas for venue responses.

Only required fields and their basic types are enforced here; optional
fields may be absent or null. Semantic checks (FILLED needs an execution
price, LIMIT needs a limit price) live in venue.payloads.
"""

_NUMBER = {"type": "number"}
_OPT_NUMBER = {"type": ["number", "null"]}
_OPT_STRING = {"type": ["string", "null"]}
_ID = {"type": ["integer", "string"]}
_OPT_ID = {"type": ["integer", "string", "null"]}

ORDER_LEVEL_SCHEMA = {
    "type": "object",
    "required": ["price", "size"],
    "properties": {
        "side": {"enum": ["BID", "ASK"]},
        "price": {"type": "number", "exclusiveMinimum": 0},
        "size": {"type": "number", "minimum": 0},
    },
}

ORDER_BOOK_SCHEMA = {
    "type": "object",
    "required": ["symbol", "mid"],
    "properties": {
        "symbol": {"type": "string", "minLength": 1},
        "mid": _NUMBER,
        "bids": {"type": ["array", "null"], "items": ORDER_LEVEL_SCHEMA},
        "asks": {"type": ["array", "null"], "items": ORDER_LEVEL_SCHEMA},
    },
}

EXECUTION_SCHEMA = {
    "type": "object",
    "properties": {
        "exec_id": _OPT_ID,
        "exec_price": _OPT_NUMBER,
        "exec_qty": _OPT_NUMBER,
        "slippage_bps": _OPT_NUMBER,
        "exec_created_at": _OPT_STRING,
    },
}

ORDER_RECORD_SCHEMA = {
    "type": "object",
    "required": ["order_id", "symbol", "side", "type", "quantity", "status"],
    "properties": {
        "order_id": _ID,
        "symbol": {"type": "string", "minLength": 1},
        "side": {"enum": ["BUY", "SELL"]},
        "type": {"enum": ["MARKET", "LIMIT"]},
        "quantity": _NUMBER,
        "limit_price": _OPT_NUMBER,
        "status": {"enum": ["PENDING", "FILLED"]},
        "arrival_mid": _OPT_NUMBER,
        "created_at": _OPT_STRING,
        "updated_at": _OPT_STRING,
        "execution": {"anyOf": [EXECUTION_SCHEMA, {"type": "null"}]},
        **EXECUTION_SCHEMA["properties"],
    },
}

ORDER_HISTORY_SCHEMA = {
    "type": ["array", "null"],
    "items": ORDER_RECORD_SCHEMA,
}

SYMBOL_STATS_SCHEMA = {
    "type": "object",
    "required": ["symbol", "trades"],
    "properties": {
        "symbol": {"type": "string"},
        "trades": {"type": "integer", "minimum": 0},
        "total_qty": _OPT_NUMBER,
        "buy_qty": _OPT_NUMBER,
        "sell_qty": _OPT_NUMBER,
        "net_qty": _OPT_NUMBER,
        "avg_exec_price": _OPT_NUMBER,
        "avg_slippage_usd": _OPT_NUMBER,
        "avg_slippage_bps": _OPT_NUMBER,
    },
}

DASHBOARD_STATS_SCHEMA = {
    "type": "object",
    "required": ["open_orders", "portfolio_value"],
    "properties": {
        "open_orders": {"type": "integer", "minimum": 0},
        "portfolio_value": _NUMBER,
    },
}
