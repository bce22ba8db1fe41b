"""Interactive confirmation gate.

The gate is a two-state machine. It starts in ``AWAITING_INPUT`` and moves to
``DECIDED`` with an ``APPROVED`` or ``DECLINED`` decision. Unrecognised
answers leave it waiting; a closed or failing input stream declines.
"""

from __future__ import annotations

import logging
import sys
from enum import Enum
from typing import Optional, TextIO, cast

from .errors import ConfirmationReadError

logger = logging.getLogger(__name__)

DEFAULT_PROMPT = "Do you want to proceed?"

_APPROVE_TOKENS = frozenset({"y", "yes"})
_DECLINE_TOKENS = frozenset({"n", "no"})


class GateState(str, Enum):
    """States of the confirmation gate."""

    AWAITING_INPUT = "awaiting_input"
    DECIDED = "decided"


class Decision(str, Enum):
    """Terminal decision of the confirmation gate."""

    APPROVED = "approved"
    DECLINED = "declined"


class ConfirmationGate:
    """Yes/no approval before submission.

    Parameters
    ----------
    input_stream: Optional[TextIO]
        Stream answers are read from. Defaults to ``sys.stdin`` at read time.
    output_stream: Optional[TextIO]
        Stream prompts are written to. Defaults to ``sys.stdout`` at write time.
    non_interactive: bool
        Approve immediately without reading any input.

    Attributes
    ----------
    state: GateState
        Current state.
    decision: Optional[Decision]
        Decision once ``state`` is ``DECIDED``, otherwise None.
    read_error: Optional[ConfirmationReadError]
        Failure that forced a decline, if any.
    """

    def __init__(
        self,
        input_stream: Optional[TextIO] = None,
        output_stream: Optional[TextIO] = None,
        *,
        non_interactive: bool = False,
    ) -> None:
        self._input = input_stream
        self._output = output_stream
        self.non_interactive = non_interactive
        self.state = GateState.AWAITING_INPUT
        self.decision: Optional[Decision] = None
        self.read_error: Optional[ConfirmationReadError] = None

    @property
    def approved(self) -> bool:
        return self.decision is Decision.APPROVED

    def _write(self, text: str) -> None:
        out = self._output if self._output is not None else sys.stdout
        out.write(text)
        out.flush()

    def _settle(self, decision: Decision) -> None:
        self.state = GateState.DECIDED
        self.decision = decision
        logger.info("confirm.decided", extra={"decision": decision.value})

    def _fail(self, error: ConfirmationReadError) -> None:
        self.read_error = error
        logger.warning("confirm.read_failed: %s", error)
        self._write(f"{error}\n")
        self._settle(Decision.DECLINED)

    def step(self, line: Optional[str]) -> GateState:
        """Consume one answer; ``None`` means the input stream is closed."""
        if self.state is GateState.DECIDED:
            return self.state
        if line is None:
            self._fail(ConfirmationReadError("Error reading input: input closed"))
            return self.state

        answer = line.strip().lower()
        if answer in _APPROVE_TOKENS:
            self._settle(Decision.APPROVED)
        elif answer in _DECLINE_TOKENS:
            self._settle(Decision.DECLINED)
        else:
            self._write("Invalid input. Please enter 'y' or 'n'.\n")
        return self.state

    def decide(self, prompt: str = DEFAULT_PROMPT) -> Decision:
        """Run the gate until it is decided and return the decision.

        Blocks on the input stream with no timeout. Read failures decline
        and are logged as warnings; they are never raised.
        """
        if self.state is GateState.DECIDED:
            return cast(Decision, self.decision)

        if self.non_interactive:
            self._settle(Decision.APPROVED)
            return Decision.APPROVED

        stream = self._input if self._input is not None else sys.stdin
        if stream is None:
            # interpreter started with stdin closed
            self._fail(ConfirmationReadError("Error reading input: no input stream"))
        while self.state is GateState.AWAITING_INPUT:
            self._write(f"{prompt} [y/n]: ")
            try:
                line = stream.readline()
            except (OSError, ValueError) as exc:
                self._fail(ConfirmationReadError(f"Error reading input: {exc}"))
                break
            # readline returns "" only at end of stream
            self.step(line if line else None)

        return cast(Decision, self.decision)
