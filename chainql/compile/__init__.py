"""chainQL compilation layer: query AST → parameters and result shape."""
from chainql.compile.arguments import Arg, ArgumentCollector, ArgumentExtractor, extract_arguments
from chainql.compile.prepare import PreparedQuery, QueryPreparer, prepare_query

__all__ = [
    "Arg",
    "ArgumentCollector",
    "ArgumentExtractor",
    "extract_arguments",
    "PreparedQuery",
    "QueryPreparer",
    "prepare_query",
]
