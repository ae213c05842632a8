"""Tests for the interactive menu: the pure transition table and the prompt loop."""

from __future__ import annotations

import pandas as pd
import pytest

from conftest import FakeRegionClient, FakeRules
from ifsccheck.cache import ResultCache
from ifsccheck.console import Console, Effect, State, transition
from ifsccheck.errors import RegionSearchError
from ifsccheck.sink import ResultSink


def scripted(*answers):
    """input() replacement that replays answers, then signals end of input."""
    it = iter(answers)

    def _input(prompt: str) -> str:
        try:
            return next(it)
        except StopIteration:
            raise EOFError from None

    return _input


def make_console(cache, sink, region_client, *answers, **kwargs):
    output: list[str] = []
    console = Console(
        cache,
        sink,
        region_client,
        input_fn=scripted(*answers),
        output_fn=lambda *args: output.append(" ".join(str(a) for a in args)),
        **kwargs,
    )
    return console, output


# ── Transition table ──────────────────────────────────────────────────────

class TestTransition:
    @pytest.mark.parametrize(
        "choice, state",
        [("1", State.MANUAL_ENTRY), ("2", State.REGION_SEARCH), (" 3 ", State.VIEW_HISTORY)],
    )
    def test_menu_choices(self, choice: str, state: State) -> None:
        assert transition(State.MENU, choice).next_state is state

    @pytest.mark.parametrize("choice", ["4", "q", "EXIT"])
    def test_exit_choices(self, choice: str) -> None:
        step = transition(State.MENU, choice)
        assert step.next_state is State.EXIT
        assert step.effect is Effect.GOODBYE

    def test_unknown_choice_stays_in_menu(self) -> None:
        step = transition(State.MENU, "9")
        assert (step.next_state, step.effect) == (State.MENU, Effect.INVALID_CHOICE)

    def test_manual_entry_checks_code(self) -> None:
        step = transition(State.MANUAL_ENTRY, " sbin0000001 ")
        assert (step.next_state, step.effect, step.value) == (State.MENU, Effect.CHECK_CODE, "sbin0000001")

    def test_blank_region_reprompts(self) -> None:
        step = transition(State.REGION_SEARCH, "   ")
        assert (step.next_state, step.effect) == (State.REGION_SEARCH, Effect.BLANK_REGION)

    def test_region_is_lowercased(self) -> None:
        step = transition(State.REGION_SEARCH, " Tamil Nadu ")
        assert (step.next_state, step.effect, step.value) == (State.MENU, Effect.SEARCH_REGION, "tamil nadu")

    def test_view_history_returns_to_menu(self) -> None:
        step = transition(State.VIEW_HISTORY, "")
        assert (step.next_state, step.effect) == (State.MENU, Effect.SHOW_HISTORY)


# ── Prompt loop ───────────────────────────────────────────────────────────

class TestManualEntry:
    def test_invalid_code_leaves_sink_unchanged(self, cache, sink: ResultSink, region_client, rules: FakeRules) -> None:
        console, output = make_console(cache, sink, region_client, "1", "INVALID000", "4")
        assert console.run() is State.EXIT

        assert "Invalid IFSC code." in output
        assert len(sink) == 0
        assert not sink.path.exists()
        assert rules.fetch_calls == []
        # Menu shown again after the invalid entry
        assert sum("Select an option:" in line for line in output) == 2

    def test_valid_code_is_appended(self, cache, sink: ResultSink, region_client) -> None:
        console, output = make_console(cache, sink, region_client, "1", "hdfc0cagsbk", "4")
        console.run()

        assert sink.read_all() == [
            {"IFSC": "HDFC0CAGSBK", "BANK": "HDFC Bank", "BRANCH": "THE AGS EMPLOYEES COOP BANK LTD", "STATUS": "VALID"}
        ]
        assert "IFSC details added to output.xlsx." in output

    def test_unknown_code_is_reported_not_appended(self, cache, sink: ResultSink, region_client, caplog) -> None:
        console, output = make_console(cache, sink, region_client, "1", "ABCD0123456", "4")
        console.run()

        assert len(sink) == 0
        assert "not found" in caplog.text


class TestRegionSearch:
    def test_blank_region_prompts_again(self, cache, sink, region_client: FakeRegionClient) -> None:
        console, output = make_console(cache, sink, region_client, "2", "  ", "", "Pune", "4")
        console.run()

        assert output.count("No region provided. Please try again.") == 2
        assert region_client.queries == ["pune"]
        assert "\nBanks in pune:" in output
        assert any(line.startswith("\nName: HDFC Bank") for line in output)
        assert "Address: FC Road, Pune, Maharashtra, India" in output

    def test_no_results(self, cache, sink) -> None:
        console, output = make_console(cache, sink, FakeRegionClient([]), "2", "nowhere", "4")
        console.run()
        assert "No banks found for nowhere." in output

    def test_search_error_returns_to_menu(self, cache, sink, caplog) -> None:
        client = FakeRegionClient(error=RegionSearchError("pune", "Region search failed (503)"))
        console, output = make_console(cache, sink, client, "2", "pune", "4")
        assert console.run() is State.EXIT
        assert "Region search failed (503)" in caplog.text

    def test_results_saved_to_region_file(self, cache, sink, region_client, tmp_path) -> None:
        region_file = tmp_path / "regions.xlsx"
        console, _ = make_console(cache, sink, region_client, "2", "pune", "4", region_file=region_file)
        console.run()

        df = pd.read_excel(region_file)
        assert list(df.columns) == ["NAME", "ADDRESS"]
        assert len(df) == 2


class TestViewHistory:
    def test_empty_history(self, cache, sink, region_client) -> None:
        console, output = make_console(cache, sink, region_client, "3", "4")
        console.run()
        assert "\nNo history yet." in output

    def test_history_in_order(self, cache, sink, region_client) -> None:
        console, output = make_console(
            cache, sink, region_client, "1", "SBIN0000001", "1", "HDFC0CAGSBK", "3", "4"
        )
        console.run()

        rows = [line for line in output if line.startswith("Row ")]
        assert rows == [
            "Row 1: IFSC=SBIN0000001, Bank=State Bank of India, Branch=KOLKATA MAIN, Status=VALID",
            "Row 2: IFSC=HDFC0CAGSBK, Bank=HDFC Bank, Branch=THE AGS EMPLOYEES COOP BANK LTD, Status=VALID",
        ]


class TestLoop:
    def test_end_of_input_exits(self, cache, sink, region_client) -> None:
        console, _ = make_console(cache, sink, region_client)
        assert console.run() is State.EXIT

    def test_invalid_choice_message(self, cache, sink, region_client) -> None:
        console, output = make_console(cache, sink, region_client, "7", "q")
        console.run()
        assert "Invalid choice. Please try again." in output
        assert output[-1] == "Goodbye."

    def test_cache_shared_across_entries(self, sink, region_client) -> None:
        rules = FakeRules()
        console, _ = make_console(
            ResultCache(rules), sink, region_client, "1", "SBIN0000001", "1", "SBIN0000001", "4"
        )
        console.run()
        assert rules.fetch_calls == ["SBIN0000001"]
        assert len(sink) == 2


class TestSinkFailure:
    def test_write_failure_keeps_menu_running(self, cache, sink: ResultSink, region_client, monkeypatch, caplog) -> None:
        def locked(rows):
            raise PermissionError("output.xlsx is open in another program")

        monkeypatch.setattr(sink, "_save", locked)
        console, output = make_console(cache, sink, region_client, "1", "SBIN0000001", "3", "4")

        assert console.run() is State.EXIT
        assert "Error saving IFSC details to output.xlsx" in caplog.text
        assert not any("IFSC details added" in line for line in output)
        assert "\nNo history yet." in output
        assert output[-1] == "Goodbye."
        assert len(sink) == 0
