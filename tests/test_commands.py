import pytest

from manaflow.commands import Command, FunctionCommand, ObjectCommand


def test_command_is_abstract():
    with pytest.raises(TypeError):
        Command("x")


def test_object_command_calls_executor_with_object_and_args():
    cmd = ObjectCommand("say")
    cmd.set_executor(lambda obj, args: (obj, list(args)), "target")
    assert cmd.parse("say", ["a", "b"]) == ("target", ["a", "b"])


def test_parse_with_other_name_returns_false():
    cmd = ObjectCommand("say")
    cmd.set_executor(lambda obj, args: "ran", None)
    assert cmd.parse("kick", []) is False


def test_parse_compares_with_lowercased_name():
    cmd = ObjectCommand("Say")
    cmd.set_executor(lambda obj, args: "ran", None)
    assert cmd.parse("say", []) == "ran"
    assert cmd.parse("Say", []) is False


def test_object_command_without_executor_raises():
    cmd = ObjectCommand("say")
    with pytest.raises(RuntimeError):
        cmd.execute([])


def test_function_command_passes_argument_list():
    cmd = FunctionCommand("echo", function=lambda args: " ".join(args))
    assert cmd.parse("echo", ("hello", "world")) == "hello world"


def test_function_command_without_function_returns_none():
    cmd = FunctionCommand("echo")
    assert cmd.execute(["x"]) is None


def test_name_and_description_are_kept():
    cmd = FunctionCommand("echo", "Repeat text")
    assert (cmd.name, cmd.description) == ("echo", "Repeat text")