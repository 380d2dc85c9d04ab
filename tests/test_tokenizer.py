"""Tests for the shell tokenizer."""

import pytest

from cibash.models import TokenType as T
from cibash.scanner.tokenizer import BASH_BUILTINS, BASH_KEYWORDS, tokenize


def kinds(content: str) -> list[T]:
    return [t.type for t in tokenize(content)]


def pairs(content: str) -> list[tuple[T, str]]:
    return [(t.type, t.value) for t in tokenize(content)]


class TestCommandPosition:
    def test_pipeline_example(self):
        assert pairs('echo "hello $NAME" && ls -la') == [
            (T.BUILTIN, "echo"),
            (T.STRING_DOUBLE, '"hello $NAME"'),
            (T.OPERATOR, "&&"),
            (T.COMMAND, "ls"),
            (T.OPTION, "-la"),
        ]

    def test_arguments_after_command(self):
        assert pairs("make build test") == [
            (T.COMMAND, "make"), (T.ARGUMENT, "build"), (T.ARGUMENT, "test"),
        ]

    @pytest.mark.parametrize("sep", ["|", "||", "&", "&&", ";", "\n"])
    def test_separators_reset(self, sep):
        assert kinds(f"a x{sep}b y")[-2:] == [T.COMMAND, T.ARGUMENT]

    def test_operator_tokens(self):
        assert pairs("a || b | c & d; e") == [
            (T.COMMAND, "a"), (T.OPERATOR, "||"), (T.COMMAND, "b"),
            (T.OPERATOR, "|"), (T.COMMAND, "c"), (T.OPERATOR, "&"),
            (T.COMMAND, "d"), (T.OPERATOR, ";"), (T.COMMAND, "e"),
        ]

    def test_comment_resets(self):
        assert pairs("ls # list files\npwd") == [
            (T.COMMAND, "ls"), (T.COMMENT, "# list files"), (T.BUILTIN, "pwd"),
        ]

    def test_if_then_fi(self):
        assert pairs("if true; then echo yes; fi") == [
            (T.KEYWORD, "if"), (T.BUILTIN, "true"), (T.OPERATOR, ";"),
            (T.KEYWORD, "then"), (T.BUILTIN, "echo"), (T.ARGUMENT, "yes"),
            (T.OPERATOR, ";"), (T.KEYWORD, "fi"),
        ]

    def test_do_reopens_command_position(self):
        assert kinds("while true; do make; done") == [
            T.KEYWORD, T.BUILTIN, T.OPERATOR, T.KEYWORD, T.COMMAND, T.OPERATOR, T.KEYWORD,
        ]

    def test_else_reopens_command_position(self):
        assert pairs("x else y")[1:] == [(T.KEYWORD, "else"), (T.COMMAND, "y")]

    def test_brackets(self):
        assert pairs("( cd dir )") == [
            (T.KEYWORD, "("), (T.BUILTIN, "cd"), (T.ARGUMENT, "dir"), (T.KEYWORD, ")"),
        ]
        assert pairs("{ make; }")[:2] == [(T.KEYWORD, "{"), (T.COMMAND, "make")]

    def test_redirect_does_not_reset(self):
        assert pairs("make > out.log 2>&1") == [
            (T.COMMAND, "make"), (T.REDIRECT, ">"), (T.ARGUMENT, "out.log"),
            (T.ARGUMENT, "2"), (T.REDIRECT, ">&"), (T.ARGUMENT, "1"),
        ]

    def test_append_redirect(self):
        assert pairs("echo x >> log")[2] == (T.REDIRECT, ">>")

    def test_paths_are_words(self):
        assert pairs("./configure --prefix=/usr/local ~/bin") == [
            (T.COMMAND, "./configure"), (T.OPTION, "--prefix="),
            (T.ARGUMENT, "/usr/local"), (T.ARGUMENT, "~/bin"),
        ]


class TestExpansions:
    def test_github_expression_whole_input(self):
        tokens = tokenize("${{ github.sha }}")
        assert len(tokens) == 1
        assert tokens[0].type is T.GITHUB_EXPRESSION
        assert tokens[0].offset == 0
        assert tokens[0].length == len("${{ github.sha }}")

    def test_github_expression_unterminated(self):
        assert pairs("echo ${{ github.ref") == [
            (T.BUILTIN, "echo"), (T.GITHUB_EXPRESSION, "${{ github.ref"),
        ]

    @pytest.mark.parametrize("var", ["$?", "$!", "$$", "$@", "$*", "$#", "$-", "$0", "$9"])
    def test_special_variables(self, var):
        assert pairs(f"echo {var}")[1] == (T.VARIABLE_SPECIAL, var)

    def test_braced_variable_nested(self):
        assert pairs("echo ${FOO:-${BAR}}x")[1] == (T.VARIABLE, "${FOO:-${BAR}}")

    def test_named_variable(self):
        assert pairs("echo $HOME/bin")[1:] == [(T.VARIABLE, "$HOME"), (T.ARGUMENT, "/bin")]

    def test_command_substitution(self):
        assert pairs("echo $(date +%s) $(a $(b))")[1:] == [
            (T.SUBSHELL, "$(date +%s)"), (T.SUBSHELL, "$(a $(b))"),
        ]

    def test_backtick_substitution(self):
        assert pairs("echo `date \\` x`")[1] == (T.SUBSHELL, "`date \\` x`")

    def test_lone_dollar(self):
        assert pairs("echo $ x")[1] == (T.TEXT, "$")


class TestStrings:
    def test_single_quotes_are_literal(self):
        assert pairs("echo 'a $b \\' c")[1] == (T.STRING_SINGLE, "'a $b \\'")

    def test_double_quote_escapes(self):
        assert pairs('echo "a \\" b" c')[1:] == [(T.STRING_DOUBLE, '"a \\" b"'), (T.ARGUMENT, "c")]

    def test_unterminated_double_quote(self):
        assert pairs('echo "abc')[1] == (T.STRING_DOUBLE, '"abc')

    def test_string_clears_command_position(self):
        assert kinds("'cmd' arg") == [T.STRING_SINGLE, T.ARGUMENT]


class TestGlobsAndOptions:
    def test_globs(self):
        assert pairs("ls *.py [abc] ?") == [
            (T.COMMAND, "ls"), (T.GLOB, "*"), (T.ARGUMENT, ".py"),
            (T.GLOB, "[abc]"), (T.GLOB, "?"),
        ]

    def test_options(self):
        assert pairs("git log --oneline -n 5 --format=%H") == [
            (T.COMMAND, "git"), (T.ARGUMENT, "log"), (T.OPTION, "--oneline"),
            (T.OPTION, "-n"), (T.ARGUMENT, "5"), (T.OPTION, "--format="),
            (T.ARGUMENT, "H"),
        ]

    def test_negative_number_is_an_argument(self):
        assert pairs("head -1")[1] == (T.ARGUMENT, "-1")


class TestRobustness:
    @pytest.mark.parametrize(
        "content",
        ["", "$", "-", "[", "${", "$(", "`\\", '"\\', "${{", "@@@ %%% ^^^", "\t \n\n"],
    )
    def test_never_raises_and_never_empty(self, content):
        for token in tokenize(content):
            assert token.length > 0
            assert content[token.offset:token.end] == token.value

    def test_unknown_characters_are_skipped(self):
        assert pairs("echo @ x") == [(T.BUILTIN, "echo"), (T.ARGUMENT, "x")]

    def test_offsets_are_ordered_and_consistent(self):
        content = 'set -e\nfor f in *.txt; do\n  cat "$f" | wc -l  # count\ndone\n'
        tokens = tokenize(content)
        assert [t.offset for t in tokens] == sorted(t.offset for t in tokens)
        for token in tokens:
            assert content[token.offset:token.end] == token.value

    def test_reserved_types_never_emitted(self):
        content = "echo a\\ b\t c"
        assert not {T.ESCAPE, T.WHITESPACE} & set(kinds(content))


class TestVocabulary:
    def test_sets_are_immutable(self):
        assert isinstance(BASH_BUILTINS, frozenset)
        assert isinstance(BASH_KEYWORDS, frozenset)

    def test_membership(self):
        assert "echo" in BASH_BUILTINS
        assert "then" in BASH_KEYWORDS
        assert "ls" not in BASH_BUILTINS
