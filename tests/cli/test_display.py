"""Tests for console rendering of plans."""

import io
from pathlib import Path

from rich.console import Console

from tidyfolder.cli.display import describe_action, plan_table
from tidyfolder.core.types import Action

UNDECODABLE = Path("/d/bad\udcff.pdf")


def undecodable_action() -> Action:
    return Action(
        from_path=UNDECODABLE,
        to_path=Path("/d/Documents") / UNDECODABLE.name,
        reason="Documents",
    )


class TestPlanRendering:
    """Test plan rendering with names that are not valid UTF-8."""

    def test_describe_action(self):
        """Test the one-line description is encodable."""
        text = describe_action(undecodable_action(), Path("/d"))

        text.encode("utf-8")
        assert text.startswith("Move 'bad")
        assert "Documents" in text

    def test_plan_table_renders(self):
        """Test the plan table prints to a UTF-8 stream."""
        out = io.StringIO()
        console = Console(file=out, width=120)

        console.print(plan_table([undecodable_action()], Path("/d"), [True]))

        out.getvalue().encode("utf-8")
        assert "bad" in out.getvalue()
