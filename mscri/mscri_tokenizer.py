"""
The Mscri tokenizer.

Tokens are produced on demand: the dispatcher and the expression parser
share a single-token look-ahead (`TokenCursor`) and pull the next token
from the `Lexer` only when they consume the current one. The lexer never
reports errors; unknown characters are skipped and unterminated strings
or block comments simply end at end of input.
"""

import string
from typing import List, Optional

from mscri.mscri_datatypes import Token, TokenType

KEYWORDS = frozenset({
    "let", "if", "then", "else", "endif", "while", "do", "endwhile",
    "for", "to", "step", "endfor", "function", "endfunction", "return",
    "print", "and", "or", "not", "true", "false",
})

DOUBLE_CHAR_OPS = frozenset({"==", "!=", "<=", ">="})
SINGLE_CHAR_OPS = frozenset("+-*/%^=<>")
DELIMITERS = frozenset("(),")

ESCAPES = {'n': '\n', 't': '\t', '\\': '\\'}

DEFAULT_MAX_LEXEME_LENGTH = 255

_DIGITS = frozenset(string.digits)
_IDENT_START = frozenset(string.ascii_letters + "_")
_IDENT_CHARS = _IDENT_START | _DIGITS
_BLANKS = frozenset(" \t\r")


class Lexer:
    """Turns source text into tokens, one `next_token()` call at a time."""

    def __init__(self, source: str, max_lexeme_length: int = DEFAULT_MAX_LEXEME_LENGTH):
        if max_lexeme_length < 1:
            raise ValueError("max_lexeme_length must be positive")
        self.source = source
        self.max_lexeme_length = max_lexeme_length
        self.pos = 0
        self.line = 1
        self.col = 1

    # --- Character access ---

    def _current(self) -> str:
        if self.pos < len(self.source):
            return self.source[self.pos]
        return ''

    def _peek(self) -> str:
        if self.pos + 1 < len(self.source):
            return self.source[self.pos + 1]
        return ''

    def _advance(self):
        if self.pos < len(self.source):
            if self.source[self.pos] == '\n':
                self.line += 1
                self.col = 1
            else:
                self.col += 1
            self.pos += 1

    def at_end(self) -> bool:
        return self.pos >= len(self.source)

    # --- Skipping ---

    def _skip_blanks(self):
        while self._current() in _BLANKS:
            self._advance()

    def _skip_comment(self):
        if self._peek() == '/':
            while not self.at_end() and self._current() != '\n':
                self._advance()
            return
        # Block comment; unterminated runs to end of input.
        self._advance()
        self._advance()
        while not self.at_end() and not (self._current() == '*' and self._peek() == '/'):
            self._advance()
        if not self.at_end():
            self._advance()
            self._advance()

    # --- Lexemes ---

    def _clip(self, chars: List[str]) -> str:
        return ''.join(chars[:self.max_lexeme_length])

    def _read_string(self) -> str:
        quote = self._current()
        self._advance()
        chars: List[str] = []
        while not self.at_end() and self._current() != quote:
            ch = self._current()
            if ch == '\\':
                self._advance()
                if self.at_end():
                    break
                escaped = self._current()
                ch = ESCAPES.get(escaped, escaped)
            chars.append(ch)
            self._advance()
        if not self.at_end():
            self._advance()  # closing quote
        return self._clip(chars)

    def _read_number(self) -> str:
        chars: List[str] = []
        has_dot = False
        while not self.at_end():
            ch = self._current()
            if ch == '.' and not has_dot:
                has_dot = True
            elif ch not in _DIGITS:
                break
            chars.append(ch)
            self._advance()
        return self._clip(chars)

    def _read_identifier(self) -> str:
        chars: List[str] = []
        while not self.at_end() and self._current() in _IDENT_CHARS:
            chars.append(self._current())
            self._advance()
        return self._clip(chars)

    def next_token(self) -> Token:
        """Produces the next token and advances past it."""
        while not self.at_end():
            self._skip_blanks()
            if self.at_end():
                break

            c = self._current()
            if c == '/' and self._peek() in ('/', '*'):
                self._skip_comment()
                continue

            line, col = self.line, self.col

            if c == '\n':
                self._advance()
                return Token(TokenType.NEWLINE, "\\n", line=line, col=col)

            if c in ('"', "'"):
                return Token(TokenType.STRING, self._read_string(), line=line, col=col)

            if c in _DIGITS:
                text = self._read_number()
                return Token(TokenType.NUMBER, text, float(text), line=line, col=col)

            if c in _IDENT_START:
                text = self._read_identifier()
                kind = TokenType.KEYWORD if text in KEYWORDS else TokenType.IDENTIFIER
                return Token(kind, text, line=line, col=col)

            pair = c + self._peek()
            if pair in DOUBLE_CHAR_OPS:
                self._advance()
                self._advance()
                return Token(TokenType.OPERATOR, pair, line=line, col=col)

            if c in SINGLE_CHAR_OPS:
                self._advance()
                return Token(TokenType.OPERATOR, c, line=line, col=col)

            if c in DELIMITERS:
                self._advance()
                return Token(TokenType.DELIMITER, c, line=line, col=col)

            # Unknown character
            self._advance()

        return Token(TokenType.EOF, "EOF", line=self.line, col=self.col)


class TokenCursor:
    """Single-token look-ahead over a `Lexer`.

    `current` is the next token to be consumed; `advance()` replaces it by
    asking the lexer for another one. Both the dispatcher and the
    expression parser operate on the same cursor.
    """

    def __init__(self, lexer: Lexer):
        self.lexer = lexer
        self.current: Token = lexer.next_token()

    @classmethod
    def from_source(cls, source: str, max_lexeme_length: int = DEFAULT_MAX_LEXEME_LENGTH) -> 'TokenCursor':
        return cls(Lexer(source, max_lexeme_length))

    def advance(self) -> Token:
        """Consumes the current token and returns it."""
        consumed = self.current
        self.current = self.lexer.next_token()
        return consumed

    def at_end(self) -> bool:
        return self.current.type is TokenType.EOF

    def check(self, type_: TokenType, text: Optional[str] = None) -> bool:
        if self.current.type is not type_:
            return False
        return text is None or self.current.text == text

    def skip_newlines(self):
        while self.current.type is TokenType.NEWLINE:
            self.advance()


def tokenize(source: str, max_lexeme_length: int = DEFAULT_MAX_LEXEME_LENGTH) -> List[Token]:
    """Returns every token of `source`, ending with the EOF token."""
    lexer = Lexer(source, max_lexeme_length)
    tokens = []
    while True:
        tok = lexer.next_token()
        tokens.append(tok)
        if tok.type is TokenType.EOF:
            return tokens
