"""Unit tests for slash command parsing, tokenizing and registry."""

import pytest

from wadjet.exceptions import (
    ArgumentParseError,
    CommandUsageError,
    HelpRequested,
    InvalidSlashRequestError,
    UnrecognizedCommandError,
)
from wadjet.slash_commands.flags import CommandArgumentParser
from wadjet.slash_commands.parser import parse_slash_command
from wadjet.slash_commands.registry import CommandRegistry, default_registry, normalize_name
from wadjet.slash_commands.tokenizer import split_arguments


class TestParseSlashCommand:
    """Tests for parse_slash_command."""

    def test_parse_full_payload(self):
        """Test parsing a typical Slack payload."""
        body = (
            b"token=abc&team_id=T1&team_domain=acme&channel_id=C1&channel_name=general&"
            b"user_id=U1&user_name=alice&command=%2Ftest&text=hello+%22big+world%22&"
            b"response_url=https%3A%2F%2Fhooks.slack.com%2Fcommands%2F1&trigger_id=42"
        )

        cmd = parse_slash_command(body)

        assert cmd.command == "/test"
        assert cmd.name == "test"
        assert cmd.text == 'hello "big world"'
        assert cmd.user_name == "alice"
        assert cmd.channel_id == "C1"
        assert cmd.response_url == "https://hooks.slack.com/commands/1"

    def test_parse_minimal_payload(self):
        """Test that only the command field is required."""
        cmd = parse_slash_command(b"command=%2Ftest")

        assert cmd.command == "/test"
        assert cmd.text == ""
        assert cmd.user_id == ""

    def test_parse_ignores_unknown_fields(self):
        """Test that extra platform fields are ignored."""
        cmd = parse_slash_command(b"command=%2Ftest&is_enterprise_install=false")

        assert cmd.command == "/test"

    def test_parse_blank_text(self):
        """Test that an empty text field is kept."""
        cmd = parse_slash_command(b"command=%2Ftest&text=")

        assert cmd.text == ""

    def test_parsed_command_is_read_only(self):
        """Test that the parsed command cannot be modified."""
        cmd = parse_slash_command(b"command=%2Ftest")

        with pytest.raises(Exception):
            cmd.command = "/other"

    @pytest.mark.parametrize(
        "body",
        [
            b"",
            b"text=hello",
            b"command=&text=hello",
            b"command=%2Ftest&&text=x",
            b"command=%2Ftest&orphan",
            b"command=%FF",
            b"\xff\xfe",
            b'{"command": "/test"}',
        ],
    )
    def test_parse_invalid_body(self, body):
        """Test that malformed or incomplete bodies are rejected."""
        with pytest.raises(InvalidSlashRequestError) as exc_info:
            parse_slash_command(body)

        assert exc_info.value.code == 400
        assert exc_info.value.message == "invalid slash request"


class TestSplitArguments:
    """Tests for split_arguments."""

    def test_empty_text(self):
        assert split_arguments("") == []

    def test_none_text(self):
        assert split_arguments(None) == []

    def test_whitespace_only(self):
        assert split_arguments("   \t ") == []

    def test_double_quotes(self):
        assert split_arguments('a "b c" d') == ["a", "b c", "d"]

    def test_single_quotes(self):
        assert split_arguments("say 'it\"s fine'") == ["say", 'it"s fine']

    def test_backslash_escape(self):
        assert split_arguments(r"one\ word two") == ["one word", "two"]

    def test_flags_preserved(self):
        assert split_arguments("--in-channel -c x") == ["--in-channel", "-c", "x"]

    def test_hash_is_not_a_comment(self):
        assert split_arguments("deploy #general") == ["deploy", "#general"]

    def test_unbalanced_quote(self):
        """Test that an unclosed quote is a parse error."""
        with pytest.raises(ArgumentParseError) as exc_info:
            split_arguments('a "b')

        assert exc_info.value.code == 400
        assert "unable to parse command arguments" in exc_info.value.message

    def test_dangling_escape(self):
        with pytest.raises(ArgumentParseError):
            split_arguments("a \\")


class TestCommandArgumentParser:
    """Tests for CommandArgumentParser."""

    def test_parse_args(self):
        parser = CommandArgumentParser(prog="/test")
        parser.add_argument("-n", type=int, default=1)
        parser.add_argument("words", nargs="*")

        parsed = parser.parse_args(["-n", "3", "a", "b"])

        assert parsed.n == 3
        assert parsed.words == ["a", "b"]
        assert parser.getvalue() == ""

    def test_help_raises_help_requested(self):
        """Test that --help writes usage to the buffer instead of exiting."""
        parser = CommandArgumentParser(prog="/test", description="Test command.")

        with pytest.raises(HelpRequested):
            parser.parse_args(["--help"])

        output = parser.getvalue()
        assert "usage: /test" in output
        assert "Test command." in output

    def test_error_raises_usage_error(self):
        """Test that bad arguments are reported instead of exiting."""
        parser = CommandArgumentParser(prog="/test")

        with pytest.raises(CommandUsageError) as exc_info:
            parser.parse_args(["--bogus"])

        assert exc_info.value.status == 2
        assert "unrecognized arguments: --bogus" in str(exc_info.value)
        assert "usage: /test" in parser.getvalue()

    def test_output_is_per_instance(self):
        """Test that two parsers never share an output buffer."""
        first = CommandArgumentParser(prog="/test")
        second = CommandArgumentParser(prog="/test")

        first.output.write("first")

        assert first.output is not second.output
        assert second.getvalue() == ""

    def test_custom_output(self, capsys):
        """Test that nothing reaches stdout or stderr."""
        import io

        buf = io.StringIO()
        parser = CommandArgumentParser(prog="/test", output=buf)

        with pytest.raises(HelpRequested):
            parser.parse_args(["-h"])

        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == ""
        assert "usage: /test" in buf.getvalue()


async def _noop(ctx, parser, args):
    return None


class TestCommandRegistry:
    """Tests for CommandRegistry."""

    def test_lookup(self):
        registry = CommandRegistry({"test": _noop})

        assert registry.lookup("test") is _noop

    def test_lookup_normalizes_name(self):
        """Test that lookup strips the slash and lower-cases."""
        registry = CommandRegistry({"test": _noop})

        assert registry.lookup("/test") is _noop
        assert registry.lookup("/TEST") is _noop

    def test_registration_normalizes_name(self):
        registry = CommandRegistry({"/Deploy": _noop})

        assert registry.names() == ["deploy"]
        assert "deploy" in registry

    def test_lookup_unknown(self):
        registry = CommandRegistry({"test": _noop})

        with pytest.raises(UnrecognizedCommandError) as exc_info:
            registry.lookup("/nope")

        assert exc_info.value.code == 400
        assert exc_info.value.name == "nope"
        assert "nope" in exc_info.value.message

    def test_duplicate_after_normalization(self):
        with pytest.raises(ValueError, match="Duplicate"):
            CommandRegistry({"test": _noop, "/TEST": _noop})

    def test_empty_name_rejected(self):
        with pytest.raises(ValueError):
            CommandRegistry({"/": _noop})

    def test_non_callable_rejected(self):
        with pytest.raises(ValueError):
            CommandRegistry({"test": "not a handler"})

    def test_registry_is_immutable(self):
        """Test that the registry cannot be changed after construction."""
        source = {"test": _noop}
        registry = CommandRegistry(source)

        with pytest.raises(TypeError):
            registry.commands["other"] = _noop
        source["other"] = _noop

        assert "other" not in registry
        assert len(registry) == 1

    def test_contains_non_string(self):
        registry = CommandRegistry({"test": _noop})

        assert 42 not in registry

    def test_default_registry(self):
        registry = default_registry()

        assert "test" in registry
        assert "echo" in registry
        assert normalize_name(" /Echo ") == "echo"
