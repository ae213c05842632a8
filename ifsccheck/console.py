"""
console.py - Interactive Menu
=============================
A prompt loop over a small state machine:

    MENU --1--> MANUAL_ENTRY  --code-->   MENU
         --2--> REGION_SEARCH --region--> MENU   (blank region: ask again)
         --3--> VIEW_HISTORY  ----------> MENU
         --4--> EXIT

transition() is pure: (state, text) -> (next state, effect). Console.run()
reads input, asks transition() what to do, and performs the effect.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Dict

from .cache import ResultCache
from .errors import InputFailure, LookupFailure
from .models import CodeRecord, Status
from .region import RegionSearchClient, filter_by_region, write_region_results
from .sink import ResultSink
from .validator import normalize_code


logger = logging.getLogger(__name__)


class State(Enum):
    MENU = "menu"
    MANUAL_ENTRY = "manual_entry"
    REGION_SEARCH = "region_search"
    VIEW_HISTORY = "view_history"
    EXIT = "exit"


class Effect(Enum):
    NONE = "none"
    INVALID_CHOICE = "invalid_choice"
    CHECK_CODE = "check_code"
    BLANK_REGION = "blank_region"
    SEARCH_REGION = "search_region"
    SHOW_HISTORY = "show_history"
    GOODBYE = "goodbye"


@dataclass(frozen=True)
class Transition:
    next_state: State
    effect: Effect = Effect.NONE
    value: str = ""


MENU_TEXT = """
Select an option:
1. Manually enter an IFSC code and add details to {output}
2. Enter region name to fetch bank details
3. View history from {output}
4. Exit"""

# None = the state takes no input
PROMPTS: Dict[State, str | None] = {
    State.MENU: "Enter your choice (1/2/3/4): ",
    State.MANUAL_ENTRY: "\nEnter the IFSC code to validate: ",
    State.REGION_SEARCH: "\nEnter the region name (state) to fetch bank details: ",
    State.VIEW_HISTORY: None,
}

MENU_CHOICES = {
    "1": State.MANUAL_ENTRY,
    "2": State.REGION_SEARCH,
    "3": State.VIEW_HISTORY,
}

EXIT_CHOICES = {"4", "q", "quit", "exit"}


def transition(state: State, text: str | None) -> Transition:
    text = (text or "").strip()

    if state is State.MENU:
        if text in MENU_CHOICES:
            return Transition(MENU_CHOICES[text])
        if text.lower() in EXIT_CHOICES:
            return Transition(State.EXIT, Effect.GOODBYE)
        return Transition(State.MENU, Effect.INVALID_CHOICE)

    if state is State.MANUAL_ENTRY:
        return Transition(State.MENU, Effect.CHECK_CODE, text)

    if state is State.REGION_SEARCH:
        if not text:
            return Transition(State.REGION_SEARCH, Effect.BLANK_REGION)
        return Transition(State.MENU, Effect.SEARCH_REGION, text.lower())

    if state is State.VIEW_HISTORY:
        return Transition(State.MENU, Effect.SHOW_HISTORY)

    return Transition(State.EXIT)


class Console:
    """
    Usage:
        Console(cache, sink, region_client).run()

    input_fn/output_fn default to input()/print() and are swapped out in tests.
    """

    def __init__(
        self,
        cache: ResultCache,
        sink: ResultSink,
        region_client: RegionSearchClient,
        input_fn: Callable[[str], str] | None = None,
        output_fn: Callable[..., None] | None = None,
        region_file: Path | None = None,
    ):
        self.cache = cache
        self.sink = sink
        self.region_client = region_client
        self.input_fn = input_fn or input
        self.output_fn = output_fn or print
        self.region_file = region_file

        self._handlers = {
            Effect.NONE: lambda value: None,
            Effect.INVALID_CHOICE: lambda value: self.output_fn("Invalid choice. Please try again."),
            Effect.CHECK_CODE: self.check_code,
            Effect.BLANK_REGION: lambda value: self.output_fn("No region provided. Please try again."),
            Effect.SEARCH_REGION: self.search_region,
            Effect.SHOW_HISTORY: lambda value: self.show_history(),
            Effect.GOODBYE: lambda value: self.output_fn("Goodbye."),
        }

    def run(self, state: State = State.MENU) -> State:
        while state is not State.EXIT:
            if state is State.MENU:
                self.output_fn(MENU_TEXT.format(output=self.sink.path.name))

            prompt = PROMPTS[state]
            text = ""
            if prompt is not None:
                try:
                    text = self.input_fn(prompt)
                except (EOFError, KeyboardInterrupt):
                    self.output_fn("")
                    return State.EXIT

            step = transition(state, text)
            self._handlers[step.effect](step.value)
            state = step.next_state
        return state

    # -------------------------------------------------------------------------
    # EFFECTS
    # -------------------------------------------------------------------------

    def check_code(self, raw: str) -> CodeRecord | None:
        """Validate one code; append it to the sink only if it is valid and found."""
        code = normalize_code(raw)
        if not self.cache.get_or_validate(code):
            self.output_fn("Invalid IFSC code.")
            return None

        try:
            details = self.cache.get_or_fetch(code)
        except LookupFailure as e:
            logger.error(f"Error fetching details for the IFSC code: {e}")
            return None

        record = CodeRecord(code, details.bank, details.branch, Status.VALID)
        try:
            self.sink.append(record)
        except OSError as e:
            logger.error(f"Error saving IFSC details to {self.sink.path.name}: {e}")
            return None
        self.output_fn(f"{code}: {details.bank}, {details.branch}")
        self.output_fn(f"IFSC details added to {self.sink.path.name}.")
        return record

    def search_region(self, region: str):
        try:
            results = self.region_client.search(region)
        except (InputFailure, LookupFailure) as e:
            logger.error(f"Error fetching bank details: {e}")
            return

        if not results:
            self.output_fn(f"No banks found for {region}.")
            return

        self.output_fn(f"\nBanks in {region}:")
        for place in results:
            self.output_fn(f"\nName: {place.name}")
            self.output_fn(f"Address: {place.address}")
            self.output_fn("----------------------")

        if self.region_file is not None:
            matching = filter_by_region(results, region)
            try:
                write_region_results(matching, self.region_file)
            except OSError as e:
                logger.error(f"Error saving region results: {e}")

    def show_history(self):
        try:
            rows = self.sink.read_all()
        except (OSError, ValueError) as e:
            logger.error(f"Error reading history from {self.sink.path.name}: {e}")
            return

        if not rows:
            self.output_fn("\nNo history yet.")
            return

        self.output_fn("\nIFSC Code History:")
        for n, row in enumerate(rows, start=1):
            self.output_fn(
                f"Row {n}: IFSC={row['IFSC']}, Bank={row['BANK']}, "
                f"Branch={row['BRANCH']}, Status={row['STATUS']}"
            )
