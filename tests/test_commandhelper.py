from manaflow.commandhelper import CommandHelper
from manaflow.commands import FunctionCommand


def test_execute_passes_arguments_case_insensitively():
    helper = CommandHelper()
    helper.add_command(FunctionCommand("Say", function=lambda args: args))
    assert helper.execute("SAY hello world") == ["hello", "world"]


def test_unknown_command_returns_none():
    helper = CommandHelper()
    assert helper.execute("missing arg") is None


def test_newest_command_wins_and_falls_back():
    helper = CommandHelper()
    helper.add_command(FunctionCommand("go", function=lambda args: "old"))
    helper.add_command(FunctionCommand("go", function=lambda args: "new"))
    assert helper.execute("go") == "new"

    fallback = CommandHelper()
    fallback.add_command(FunctionCommand("go", function=lambda args: "old"))
    fallback.add_command(FunctionCommand("go"))
    assert fallback.execute("go") == "old"


def test_commands_by_name():
    helper = CommandHelper()
    first = FunctionCommand("Kick")
    second = FunctionCommand("kick")
    helper.add_command(first)
    helper.add_command(second)
    assert helper.commands_by_name("KICK") == [second, first]
    assert helper.commands_by_name("ban") == []


def test_sorted_commands_tracks_additions():
    helper = CommandHelper()
    helper.add_command(FunctionCommand("zeta"))
    helper.add_command(FunctionCommand("alpha"))
    assert [c.name for c in helper.sorted_commands()] == ["alpha", "zeta"]
    helper.add_command(FunctionCommand("mid"))
    assert [c.name for c in helper.sorted_commands()] == ["alpha", "mid", "zeta"]


def test_add_none_is_ignored():
    helper = CommandHelper()
    helper.add_command(None)
    assert helper.sorted_commands() == ()


def test_help_is_registered():
    helper = CommandHelper()
    helper.add_help()
    assert helper.execute("help").startswith("--- Help [1/1] ---")
    assert helper.execute("help help").startswith("Command by name [help]")