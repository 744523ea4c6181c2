from mscri.mscri_runtime import ScriptRunner, ExecutionResult, StdLib
from mscri.mscri_config import MscriConfig, ConfigError, load_config
from mscri.mscri_datatypes import Environment, Token, TokenType
from mscri.mscri_tokenizer import Lexer, TokenCursor, tokenize

__all__ = [
    "ScriptRunner",
    "ExecutionResult",
    "StdLib",
    "MscriConfig",
    "ConfigError",
    "load_config",
    "Environment",
    "Token",
    "TokenType",
    "Lexer",
    "TokenCursor",
    "tokenize",
]
