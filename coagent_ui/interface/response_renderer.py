"""
Response view with optional one-shot feedback.

    response
    ├── content             always, via the content sub-renderer
    └── feedback_controls   approve / reject buttons and a free-text input,
        or feedback_complete  once feedback was given for this response id

Controls are offered only while the status still accepts feedback and the host
supplied a callback. After the callback fires, the completed-feedback display
replaces the controls on every later render of the same response.
"""

from __future__ import annotations

from coagent_ui.domain.feedback import (
    FeedbackCallback,
    FeedbackDecision,
    FeedbackLedger,
    FeedbackOutcome,
)
from coagent_ui.domain.models import Response, ResponseStatus
from coagent_ui.interface.contracts import (
    CompletedFeedbackRenderer,
    ContentRenderer,
    FeedbackButtonRenderer,
    ResponseRenderContext,
    ResponseRendererConfig,
)
from coagent_ui.interface.view_tree import ViewNode
from coagent_ui.shared.kernel.contracts import (
    COMPONENT_CONTENT,
    COMPONENT_FEEDBACK_BUTTON,
    COMPONENT_FEEDBACK_COMPLETE,
    COMPONENT_FEEDBACK_CONTROLS,
    COMPONENT_FEEDBACK_INPUT,
    COMPONENT_RESPONSE,
)
from coagent_ui.shared.kernel.tools.logger import log_context


def render_default_content(response: Response, context: ResponseRenderContext) -> ViewNode:
    return ViewNode(
        component=COMPONENT_CONTENT,
        props={"format": "plain", "class_name": context.styles.content},
        text=response.content,
    )


def render_default_feedback_button(
    decision: FeedbackDecision, context: ResponseRenderContext
) -> ViewNode:
    if decision is FeedbackDecision.APPROVE:
        label, icon = context.labels.approve, context.icons.approve
    else:
        label, icon = context.labels.reject, context.icons.reject
    return ViewNode(
        component=COMPONENT_FEEDBACK_BUTTON,
        props={
            "action": decision.value,
            "response_id": context.response_id,
            "icon": icon,
            "class_name": context.styles.feedback_button,
        },
        text=label,
    )


def render_default_completed_feedback(
    outcome: FeedbackOutcome, context: ResponseRenderContext
) -> ViewNode:
    if outcome.decision is FeedbackDecision.APPROVE:
        message, icon = context.labels.approved, context.icons.approved
    elif outcome.decision is FeedbackDecision.REJECT:
        message, icon = context.labels.rejected, context.icons.rejected
    else:
        message, icon = context.labels.submitted, context.icons.submitted
    return ViewNode(
        component=COMPONENT_FEEDBACK_COMPLETE,
        props={
            "decision": outcome.decision.value,
            "icon": icon,
            "class_name": context.styles.feedback_complete,
        },
        text=message,
    )


class ResponseRenderer:
    def __init__(
        self,
        config: ResponseRendererConfig | None = None,
        ledger: FeedbackLedger | None = None,
    ):
        self.config = config or ResponseRendererConfig()
        self.ledger = ledger if ledger is not None else FeedbackLedger()

    @property
    def content_renderer(self) -> ContentRenderer:
        return self.config.content_renderer or render_default_content

    @property
    def feedback_button_renderer(self) -> FeedbackButtonRenderer:
        return self.config.feedback_button_renderer or render_default_feedback_button

    @property
    def completed_feedback_renderer(self) -> CompletedFeedbackRenderer:
        return (
            self.config.completed_feedback_renderer
            or render_default_completed_feedback
        )

    def _context(self, response: Response, status: ResponseStatus) -> ResponseRenderContext:
        return ResponseRenderContext(
            status=status,
            labels=self.config.labels,
            icons=self.config.icons,
            styles=self.config.styles,
            response_id=response.id,
        )

    def render(
        self,
        response: Response,
        status: ResponseStatus,
        on_feedback: FeedbackCallback | None = None,
    ) -> ViewNode:
        context = self._context(response, status)
        children = [self.content_renderer(response, context)]

        outcome = self.ledger.outcome_for(response.id)
        if outcome is not None:
            children.append(self.completed_feedback_renderer(outcome, context))
        elif status.accepts_feedback and on_feedback is not None:
            children.append(self._render_controls(context))

        return ViewNode(
            component=COMPONENT_RESPONSE,
            props={
                "response_id": response.id,
                "status": status.value,
                "feedback_phase": self.ledger.phase(response.id).value,
                "collapsed": self.config.default_collapsed,
                "max_height": self.config.max_height,
                "class_name": self.config.styles.container,
            },
            children=tuple(children),
        )

    def _render_controls(self, context: ResponseRenderContext) -> ViewNode:
        return ViewNode(
            component=COMPONENT_FEEDBACK_CONTROLS,
            props={
                "response_id": context.response_id,
                "class_name": context.styles.feedback_controls,
            },
            children=(
                self.feedback_button_renderer(FeedbackDecision.APPROVE, context),
                self.feedback_button_renderer(FeedbackDecision.REJECT, context),
                ViewNode(
                    component=COMPONENT_FEEDBACK_INPUT,
                    props={
                        "action": FeedbackDecision.TEXT.value,
                        "response_id": context.response_id,
                        "placeholder": context.labels.feedback_prompt,
                    },
                ),
            ),
        )

    def approve(
        self, response: Response, status: ResponseStatus, on_feedback: FeedbackCallback
    ) -> FeedbackOutcome:
        with log_context(response_id=response.id, component="response_renderer"):
            return self.ledger.submit(
                response.id, FeedbackDecision.APPROVE, on_feedback, status=status
            )

    def reject(
        self, response: Response, status: ResponseStatus, on_feedback: FeedbackCallback
    ) -> FeedbackOutcome:
        with log_context(response_id=response.id, component="response_renderer"):
            return self.ledger.submit(
                response.id, FeedbackDecision.REJECT, on_feedback, status=status
            )

    def submit_text(
        self,
        response: Response,
        status: ResponseStatus,
        text: str,
        on_feedback: FeedbackCallback,
    ) -> FeedbackOutcome:
        with log_context(response_id=response.id, component="response_renderer"):
            return self.ledger.submit(
                response.id, FeedbackDecision.TEXT, on_feedback, status=status, text=text
            )
