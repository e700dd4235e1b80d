"""chainQL parsing layer: Python expression → ordered call chain."""
from chainql.parse.chain import (
    INDEX_CALL_NAME,
    Call,
    CallChain,
    CallChainParser,
    parse_call_chain,
    parse_source,
)
from chainql.parse.expression import Expression, Position, synthesize_subtraction

__all__ = [
    "INDEX_CALL_NAME",
    "Call",
    "CallChain",
    "CallChainParser",
    "parse_call_chain",
    "parse_source",
    "Expression",
    "Position",
    "synthesize_subtraction",
]
