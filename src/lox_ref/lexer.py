"""
Lexer for the Lox expression core

Tokenizes source text into the token stream the parser consumes.

Features:
- Single-pass tokenization
- Line tracking (strings may span lines)
- Longest-match operators (!=, ==, <=, >=)
- Errors go to the reporter and scanning continues, so one pass finds them all
"""

from typing import List, Optional

from .errors import ErrorReporter
from .token_types import TT, Token

# ============================================================================
# Lexer Implementation
# ============================================================================

def _is_digit(ch: str) -> bool:
    # ASCII digits only
    return '0' <= ch <= '9'

def _is_alpha(ch: str) -> bool:
    return ('a' <= ch <= 'z') or ('A' <= ch <= 'Z') or ch == '_'

def _is_alnum(ch: str) -> bool:
    return _is_alpha(ch) or _is_digit(ch)

class Lexer:
    """Lox scanner: keywords, literals, one/two character operators."""

    # Keyword mapping
    KEYWORDS = {
        'and': TT.AND,
        'class': TT.CLASS,
        'else': TT.ELSE,
        'false': TT.FALSE,
        'for': TT.FOR,
        'fun': TT.FUN,
        'if': TT.IF,
        'nil': TT.NIL,
        'or': TT.OR,
        'print': TT.PRINT,
        'return': TT.RETURN,
        'super': TT.SUPER,
        'this': TT.THIS,
        'true': TT.TRUE,
        'var': TT.VAR,
        'while': TT.WHILE,
    }

    # Operator mapping: longest matches first to handle prefixes correctly
    OPERATORS = [
        # Two-character operators
        ('!=', TT.BANG_EQUAL),
        ('==', TT.EQUAL_EQUAL),
        ('<=', TT.LESS_EQUAL),
        ('>=', TT.GREATER_EQUAL),

        # Single-character operators
        ('(', TT.LEFT_PAREN),
        (')', TT.RIGHT_PAREN),
        ('{', TT.LEFT_BRACE),
        ('}', TT.RIGHT_BRACE),
        (',', TT.COMMA),
        ('.', TT.DOT),
        ('-', TT.MINUS),
        ('+', TT.PLUS),
        (';', TT.SEMICOLON),
        ('/', TT.SLASH),
        ('*', TT.STAR),
        ('?', TT.QUESTION),
        (':', TT.COLON),
        ('!', TT.BANG),
        ('=', TT.EQUAL),
        ('<', TT.LESS),
        ('>', TT.GREATER),
    ]

    def __init__(self, source: str, reporter: Optional[ErrorReporter] = None):
        self.source = source
        self.reporter = reporter if reporter is not None else ErrorReporter()
        self.pos = 0
        self.start = 0
        self.line = 1
        self.tokens: List[Token] = []

    # ========================================================================
    # Main Tokenization
    # ========================================================================

    def tokenize(self) -> List[Token]:
        """Tokenize entire source, return token list"""
        while self.pos < len(self.source):
            self.start = self.pos
            self.scan_token()

        self.tokens.append(Token(TT.EOF, '', None, self.line))
        return self.tokens

    def scan_token(self):
        """Scan next token"""
        ch = self.peek()

        # Skip whitespace
        if ch in (' ', '\t', '\r'):
            self.advance()
            return

        if ch == '\n':
            self.advance()
            self.line += 1
            return

        # Comments
        if ch == '/' and self.peek(1) == '/':
            self.skip_comment()
            return

        if ch == '"':
            self.scan_string()
            return

        if _is_digit(ch):
            self.scan_number()
            return

        if _is_alpha(ch):
            self.scan_identifier()
            return

        self.scan_operator()

    # ========================================================================
    # Token Scanners
    # ========================================================================

    def scan_string(self):
        """Scan string literal: "..." (no escapes, may span lines)"""
        start_line = self.line
        self.advance()  # opening quote

        while self.pos < len(self.source) and self.peek() != '"':
            if self.peek() == '\n':
                self.line += 1
            self.advance()

        if self.pos >= len(self.source):
            self.reporter.error(start_line, "Unterminated string.")
            return

        self.advance()  # closing quote
        self.emit(TT.STRING, self.source[self.start + 1:self.pos - 1])

    def scan_number(self):
        """Scan number literal"""
        while _is_digit(self.peek()):
            self.advance()

        # A trailing '.' without digits stays a separate DOT token
        if self.peek() == '.' and _is_digit(self.peek(1)):
            self.advance()
            while _is_digit(self.peek()):
                self.advance()

        self.emit(TT.NUMBER, float(self.source[self.start:self.pos]))

    def scan_identifier(self):
        """Scan identifier or keyword"""
        while _is_alnum(self.peek()):
            self.advance()

        text = self.source[self.start:self.pos]
        self.emit(self.KEYWORDS.get(text, TT.IDENTIFIER))

    def scan_operator(self):
        """Scan operators and punctuation"""
        for op_str, op_type in self.OPERATORS:
            if self.source.startswith(op_str, self.pos):
                self.advance(len(op_str))
                self.emit(op_type)
                return

        self.advance()
        self.reporter.error(self.line, "Unexpected character.")

    # ========================================================================
    # Utilities
    # ========================================================================

    def peek(self, offset: int = 0) -> str:
        """Look ahead at character"""
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return '\0'

    def advance(self, n: int = 1) -> str:
        """Consume n characters and return them as a string"""
        result = self.source[self.pos:self.pos + n]
        self.pos += n
        return result

    def skip_comment(self):
        """Skip comment until end of line"""
        while self.pos < len(self.source) and self.peek() != '\n':
            self.advance()

    def emit(self, token_type: TT, literal=None):
        """Emit a token spanning start..pos"""
        self.tokens.append(Token(
            type=token_type,
            lexeme=self.source[self.start:self.pos],
            literal=literal,
            line=self.line,
        ))


def tokenize(source: str, reporter: Optional[ErrorReporter] = None) -> List[Token]:
    """Convenience function to tokenize source"""
    return Lexer(source, reporter).tokenize()
