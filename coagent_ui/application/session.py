from __future__ import annotations

import logging

from coagent_ui.domain.feedback import FeedbackCallback, FeedbackLedger, FeedbackOutcome
from coagent_ui.domain.models import AgentState, Response, ResponseStatus
from coagent_ui.interface.contracts import ResponseRendererConfig, StateRendererConfig
from coagent_ui.interface.parsers import parse_agent_state, parse_response, parse_status
from coagent_ui.interface.protocol import RenderUpdate
from coagent_ui.interface.response_renderer import ResponseRenderer
from coagent_ui.interface.state_renderer import StateRenderer
from coagent_ui.interface.view_tree import ViewNode
from coagent_ui.shared.kernel.contracts import (
    COMPONENT_CONVERSATION,
    UPDATE_STATE_SNAPSHOT,
)
from coagent_ui.shared.kernel.tools.logger import get_logger, log_context, log_event

logger = get_logger(__name__)


class AgentViewSession:
    """
    Latest view of one conversation thread.

    The session borrows whatever the agent sent last: every snapshot replaces
    the previous one wholesale. Feedback outcomes are keyed by response id in a
    single ledger, so they survive unrelated state updates.
    """

    def __init__(
        self,
        *,
        thread_id: str = "",
        state_config: StateRendererConfig | None = None,
        response_config: ResponseRendererConfig | None = None,
    ):
        self.thread_id = thread_id
        self.ledger = FeedbackLedger()
        self.state_renderer = StateRenderer(state_config)
        self.response_renderer = ResponseRenderer(response_config, ledger=self.ledger)
        self.state: AgentState | None = None
        self.response: Response | None = None
        self.status = ResponseStatus.IN_PROGRESS
        self.on_feedback: FeedbackCallback | None = None

    def apply(
        self, update: RenderUpdate, on_feedback: FeedbackCallback | None = None
    ) -> None:
        """Replace the snapshot or the response carried by ``update``.

        ``on_feedback`` is bound to the response of a ``response.ready`` update.
        """
        if update.type == UPDATE_STATE_SNAPSHOT:
            self.state = update.state
        else:
            self.response = update.response
            self.on_feedback = on_feedback
        self.status = update.status
        log_event(
            logger,
            event="render_update_applied",
            message="applied render update",
            level=logging.DEBUG,
            fields={
                "thread_id": self.thread_id,
                "update_type": update.type,
                "seq_id": update.seq_id,
                "status": update.status.value,
            },
        )

    def update_state(self, raw_state: object, status: object) -> None:
        # Parse everything first; a rejected input leaves the session untouched.
        state = parse_agent_state(raw_state)
        parsed_status = parse_status(status)
        self.state, self.status = state, parsed_status

    def set_response(
        self,
        raw_response: object,
        status: object,
        on_feedback: FeedbackCallback | None = None,
    ) -> None:
        response = parse_response(raw_response)
        parsed_status = parse_status(status)
        self.response, self.status, self.on_feedback = response, parsed_status, on_feedback

    def render(self) -> ViewNode:
        with log_context(thread_id=self.thread_id or None, component="session"):
            children = [self.state_renderer.render(self.state, self.status)]
            if self.response is not None:
                children.append(
                    self.response_renderer.render(
                        self.response, self.status, self.on_feedback
                    )
                )
        return ViewNode(
            component=COMPONENT_CONVERSATION,
            props={"thread_id": self.thread_id, "status": self.status.value},
            children=tuple(children),
        )

    def _pending(self) -> tuple[Response, FeedbackCallback]:
        if self.response is None:
            raise RuntimeError("no response to give feedback on")
        if self.on_feedback is None:
            raise RuntimeError(f"response {self.response.id!r} has no feedback callback")
        return self.response, self.on_feedback

    def approve(self) -> FeedbackOutcome:
        response, callback = self._pending()
        return self.response_renderer.approve(response, self.status, callback)

    def reject(self) -> FeedbackOutcome:
        response, callback = self._pending()
        return self.response_renderer.reject(response, self.status, callback)

    def submit_text(self, text: str) -> FeedbackOutcome:
        response, callback = self._pending()
        return self.response_renderer.submit_text(response, self.status, text, callback)
