"""Line-oriented operator prompts.

Each prompt reads one line, parses it and validates it. There is no
re-prompt loop: a bad answer ends the run.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

from ec2login.exceptions import SelectionError
from ec2login.models import InstanceDescriptor

INCLUDE_STOPPED_PROMPT = "Include stopped instances? (yes/no): "
SEARCH_BY_ID_PROMPT = "Search by Instance ID? (yes/no): "
SEARCH_TERM_PROMPT = "Enter the search term (ID or name): "
SELECTION_PROMPT = "Enter the number of the instance to log into: "
USE_SECRETS_PROMPT = "Fetch SSH key from AWS Secrets Manager? (yes/no): "

YES_ANSWERS = ("yes", "y")


def parse_yes_no(answer: str) -> bool:
    """Return True only for an explicit yes; anything else means no."""
    return answer.strip().lower() in YES_ANSWERS


def parse_selection(answer: str, count: int) -> int:
    """Parse a 1-based menu selection.

    Parameters
    ----------
    answer : str
        Raw operator input
    count : int
        Number of menu entries

    Returns
    -------
    int
        Zero-based index of the chosen entry

    Raises
    ------
    SelectionError
        If the answer is not an integer between 1 and ``count``
    """
    try:
        number = int(answer.strip())
    except ValueError:
        raise SelectionError("Invalid selection.") from None

    if number < 1 or number > count:
        raise SelectionError("Invalid selection.")

    return number - 1


def format_menu_entry(number: int, instance: InstanceDescriptor) -> str:
    """Format one numbered menu line."""
    return (
        f"{number}) Name: {instance.name}, "
        f"Instance ID: {instance.instance_id}, State: {instance.state}"
    )


class Prompter:
    """Ask the operator questions on stdin/stdout.

    Parameters
    ----------
    input_func : Callable[[str], str] | None
        Function reading one line after showing a prompt, defaults to input
    output_func : Callable[[str], None] | None
        Function writing one line, defaults to print
    """

    def __init__(
        self,
        input_func: Callable[[str], str] | None = None,
        output_func: Callable[[str], None] | None = None,
    ) -> None:
        self.input_func = input_func or input
        self.output_func = output_func or print

    def ask(self, prompt: str) -> str:
        """Read one line; end of input counts as an empty answer."""
        try:
            return self.input_func(prompt).strip()
        except EOFError:
            return ""

    def confirm(self, prompt: str) -> bool:
        return parse_yes_no(self.ask(prompt))

    def choose_instance(
        self, instances: Sequence[InstanceDescriptor]
    ) -> InstanceDescriptor:
        """Print the numbered menu and return the chosen instance.

        Raises
        ------
        SelectionError
            If the answer is malformed or out of range
        """
        for number, instance in enumerate(instances, start=1):
            self.output_func(format_menu_entry(number, instance))

        index = parse_selection(self.ask(SELECTION_PROMPT), len(instances))
        return instances[index]
