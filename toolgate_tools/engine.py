"""Tool execution engine.

Runs one tool invocation through a strictly linear pipeline:

    VALIDATING -> CHECKING_PREREQUISITES -> BUILDING_AND_EXECUTING -> DONE

Any stage may jump straight to DONE with an Error or SetupNeeded outcome.
There are no retries and no stage is entered twice.
"""

import time
from enum import Enum
from typing import Any

from opentelemetry import trace

from toolgate_obs import metrics
from toolgate_obs.logging import get_logger
from toolgate_tools.authorization import AuthorizationResolver
from toolgate_tools.base import HttpTransport, OAuthBackend, SecretStore
from toolgate_tools.exceptions import ToolEngineError
from toolgate_tools.executor import execute_api_call
from toolgate_tools.outcomes import (
    NO_CALL_REQUIRED_MESSAGE,
    ErrorOutcome,
    ExecutionOutcome,
    SuccessOutcome,
)
from toolgate_tools.prerequisites import PrerequisiteChecker
from toolgate_tools.request_builder import build_request
from toolgate_tools.schemas import ToolConfig
from toolgate_tools.secret_resolver import SecretResolver
from toolgate_tools.validation import validate_input_parameters

logger = get_logger(__name__)
tracer = trace.get_tracer(__name__)

DEFAULT_HTTP_TIMEOUT_SECONDS = 120.0


class ExecutionStage(str, Enum):
    """Pipeline stages of one invocation."""

    VALIDATING = "validating"
    CHECKING_PREREQUISITES = "checking_prerequisites"
    BUILDING_AND_EXECUTING = "building_and_executing"
    DONE = "done"


class ToolExecutionEngine:
    """Executes declaratively configured tools.

    The engine holds no per-invocation state; concurrent ``execute`` calls
    are independent of each other.

    Example:
        >>> engine = ToolExecutionEngine(secret_store, oauth_backend, HttpxTransport())
        >>> outcome = await engine.execute(tool_config, "user-1", {"to": "a@b.com"})
        >>> outcome.status
        'success'
    """

    def __init__(
        self,
        secret_store: SecretStore,
        oauth_backend: OAuthBackend,
        transport: HttpTransport,
        http_timeout: float = DEFAULT_HTTP_TIMEOUT_SECONDS,
    ):
        self.prerequisites = PrerequisiteChecker(
            SecretResolver(secret_store),
            AuthorizationResolver(oauth_backend),
        )
        self.transport = transport
        self.http_timeout = http_timeout

    async def execute(
        self,
        tool_config: ToolConfig,
        user_id: str,
        raw_params: dict[str, Any] | None,
    ) -> ExecutionOutcome:
        """Run a tool for a user.

        Never raises: every failure is returned as an ErrorOutcome.

        Args:
            tool_config: The tool to run
            user_id: The calling user
            raw_params: Caller-supplied parameters, unvalidated

        Returns:
            SuccessOutcome, SetupNeededOutcome or ErrorOutcome
        """
        log = logger.bind(tool_id=tool_config.id, user_id=user_id)
        start_time = time.perf_counter()

        with tracer.start_as_current_span("tool.execute") as span:
            span.set_attribute("tool.id", tool_config.id)
            try:
                outcome = await self._run(tool_config, user_id, raw_params, log)
            except ToolEngineError as e:
                log.warning(
                    "tool_execution_failed",
                    kind=e.kind.value,
                    error=e.message,
                )
                outcome = ErrorOutcome.from_exception(e)
            except Exception as e:
                log.exception("tool_execution_unexpected_error", error_type=type(e).__name__)
                outcome = ErrorOutcome.internal(e)
            span.set_attribute("tool.outcome", outcome.status)

        self._record(tool_config.id, outcome, time.perf_counter() - start_time)
        log.info("tool_execution_done", stage=ExecutionStage.DONE.value, outcome=outcome.status)
        return outcome

    async def _run(
        self,
        tool_config: ToolConfig,
        user_id: str,
        raw_params: dict[str, Any] | None,
        log: Any,
    ) -> ExecutionOutcome:
        log.debug("tool_execution_stage", stage=ExecutionStage.VALIDATING.value)
        validated_params = validate_input_parameters(tool_config.input_schema, raw_params)

        log.debug("tool_execution_stage", stage=ExecutionStage.CHECKING_PREREQUISITES.value)
        prerequisites = await self.prerequisites.check(tool_config, user_id)
        if not prerequisites.met:
            return prerequisites.setup_needed

        if tool_config.api_details is None:
            log.info("no_api_call_required")
            return SuccessOutcome(data={"message": NO_CALL_REQUIRED_MESSAGE})

        log.debug("tool_execution_stage", stage=ExecutionStage.BUILDING_AND_EXECUTING.value)
        request = build_request(tool_config, validated_params, prerequisites.credentials)
        data = await execute_api_call(
            self.transport, request, self.http_timeout, tool_id=tool_config.id
        )
        return SuccessOutcome(data=data)

    @staticmethod
    def _record(tool_id: str, outcome: ExecutionOutcome, duration: float) -> None:
        metrics.tool_executions_total.labels(tool_id=tool_id, outcome=outcome.status).inc()
        metrics.tool_execution_duration.labels(tool_id=tool_id).observe(duration)
        if isinstance(outcome, ErrorOutcome):
            metrics.tool_execution_errors_total.labels(
                tool_id=tool_id, kind=outcome.kind.value
            ).inc()
