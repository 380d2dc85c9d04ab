"""Shell tokenizer — single forward pass over a script fragment.

There is no grammar here.  The only state besides the cursor is
``command_position``: whether the next bare word starts a new command
(COMMAND / BUILTIN) or is an argument to the current one.  It is set at the
start of input and after newlines, comments, ``; | || & &&`` and the
keywords ``then do else { (``.

Unrecognised characters are skipped one at a time; the tokenizer never
raises.
"""

from __future__ import annotations

import string

from cibash.models import BashToken, TokenType

BASH_BUILTINS = frozenset({
    "echo", "cd", "pwd", "export", "unset", "source", "alias", "unalias", "exit",
    "return", "read", "declare", "local", "readonly", "typeset", "eval", "exec",
    "set", "shift", "trap", "wait", "bg", "fg", "jobs", "kill", "test", "true",
    "false", "printf", "let", "getopts", "ulimit", "umask", "pushd", "popd", "dirs",
    "builtin", "command", "type", "hash", "help", "logout", "times", "bind",
    "complete", "compgen", "compopt", "mapfile", "readarray", "shopt", "enable",
    "suspend", "disown", "caller", "cat", "mkdir", "chmod", "sleep",
})

BASH_KEYWORDS = frozenset({
    "if", "then", "else", "elif", "fi", "case", "esac", "for", "while", "until",
    "do", "done", "in", "function", "select", "time", "coproc", "[[", "]]", "{", "}", "!",
})

# Keywords after which a new command begins.
_OPENING_KEYWORDS = frozenset({"then", "do", "else", "{", "("})

_SPECIAL_VARS = frozenset("?!$@*#-0123456789")
_IDENT_START = frozenset(string.ascii_letters + "_")
_IDENT_CHARS = frozenset(string.ascii_letters + string.digits + "_")
_WORD_CHARS = frozenset(string.ascii_letters + string.digits + "_-.")
_WORD_EXTRA = frozenset("/~.=:+")
_WORD_START = _WORD_CHARS | frozenset("/~.")
_BLANKS = frozenset(" \t")


def _match_depth(content: str, pos: int, opening: str, closing: str) -> int:
    """Scan past a bracketed body whose opener sits just before *pos*."""
    depth = 1
    n = len(content)
    while pos < n and depth > 0:
        ch = content[pos]
        if ch == opening:
            depth += 1
        elif ch == closing:
            depth -= 1
            if depth == 0:
                return pos + 1
        pos += 1
    return pos


def tokenize(content: str) -> list[BashToken]:
    """Split *content* into classified :class:`BashToken` objects."""
    tokens: list[BashToken] = []
    n = len(content)
    pos = 0
    command_position = True

    def emit(kind: TokenType, start: int, end: int) -> None:
        end = min(end, n)
        if end > start:
            tokens.append(BashToken(kind, content[start:end], start, end - start))

    while pos < n:
        ch = content[pos]
        nxt = content[pos + 1] if pos + 1 < n else ""

        # ${{ github.expression }}
        if ch == "$" and content.startswith("{{", pos + 1):
            start = pos
            end = content.find("}}", pos + 3)
            pos = n if end == -1 else end + 2
            emit(TokenType.GITHUB_EXPRESSION, start, pos)
            command_position = False
            continue

        if ch == "$":
            start = pos
            pos += 1
            if nxt in _SPECIAL_VARS:
                pos += 1
                emit(TokenType.VARIABLE_SPECIAL, start, pos)
                continue
            if nxt == "{":
                pos = _match_depth(content, pos + 1, "{", "}")
                emit(TokenType.VARIABLE, start, pos)
                continue
            if nxt == "(":
                pos = _match_depth(content, pos + 1, "(", ")")
                emit(TokenType.SUBSHELL, start, pos)
                command_position = False
                continue
            if nxt in _IDENT_START:
                while pos < n and content[pos] in _IDENT_CHARS:
                    pos += 1
                emit(TokenType.VARIABLE, start, pos)
                continue
            emit(TokenType.TEXT, start, pos)
            continue

        if ch == "#":
            start = pos
            end = content.find("\n", pos)
            pos = n if end == -1 else end
            emit(TokenType.COMMENT, start, pos)
            command_position = True
            continue

        if ch == "'":
            start = pos
            end = content.find("'", pos + 1)
            pos = n if end == -1 else end + 1
            emit(TokenType.STRING_SINGLE, start, pos)
            command_position = False
            continue

        if ch == '"':
            start = pos
            pos += 1
            while pos < n:
                if content[pos] == "\\" and pos + 1 < n:
                    pos += 2
                    continue
                if content[pos] == '"':
                    pos += 1
                    break
                pos += 1
            emit(TokenType.STRING_DOUBLE, start, pos)
            command_position = False
            continue

        if ch == "`":
            start = pos
            pos += 1
            while pos < n and content[pos] != "`":
                if content[pos] == "\\":
                    pos += 1
                pos += 1
            pos = pos + 1 if pos < n else n
            emit(TokenType.SUBSHELL, start, pos)
            command_position = False
            continue

        # | || & && ;
        if ch in "|&":
            width = 2 if nxt == ch else 1
            emit(TokenType.OPERATOR, pos, pos + width)
            pos += width
            command_position = True
            continue
        if ch == ";":
            emit(TokenType.OPERATOR, pos, pos + 1)
            pos += 1
            command_position = True
            continue

        if ch in "><":
            start = pos
            pos += 1
            if nxt in (">", "&"):
                pos += 1
            emit(TokenType.REDIRECT, start, pos)
            command_position = False
            continue

        if ch == "\n":
            pos += 1
            command_position = True
            continue

        if ch in _BLANKS:
            while pos < n and content[pos] in _BLANKS:
                pos += 1
            continue

        # -f / --flag / --flag=
        if ch == "-" and (nxt == "-" or (nxt and nxt in string.ascii_letters)):
            start = pos
            pos += 1
            if content[pos] == "-":
                pos += 1
            while pos < n and content[pos] in _WORD_CHARS:
                pos += 1
            if pos < n and content[pos] == "=":
                pos += 1
            emit(TokenType.OPTION, start, pos)
            command_position = False
            continue

        if ch in _WORD_START:
            start = pos
            while pos < n and (content[pos] in _WORD_CHARS or content[pos] in _WORD_EXTRA):
                pos += 1
            word = content[start:pos]

            if word in BASH_KEYWORDS:
                emit(TokenType.KEYWORD, start, pos)
                if word in _OPENING_KEYWORDS:
                    command_position = True
            elif command_position:
                kind = TokenType.BUILTIN if word in BASH_BUILTINS else TokenType.COMMAND
                emit(kind, start, pos)
                command_position = False
            else:
                emit(TokenType.ARGUMENT, start, pos)
            continue

        if ch in "*?":
            emit(TokenType.GLOB, pos, pos + 1)
            pos += 1
            command_position = False
            continue
        if ch == "[":
            start = pos
            end = content.find("]", pos + 1)
            pos = n if end == -1 else end + 1
            emit(TokenType.GLOB, start, pos)
            command_position = False
            continue

        if ch in "(){}":
            emit(TokenType.KEYWORD, pos, pos + 1)
            pos += 1
            if ch in "({":
                command_position = True
            continue

        pos += 1

    return tokens
