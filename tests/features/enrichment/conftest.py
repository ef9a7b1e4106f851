"""Step definitions for the carrier enrichment features."""

import io
from dataclasses import dataclass, field

import pytest
from pytest_bdd import given, parsers, then, when

from logctx.adapters.sinks import SinkOptions, TextSink
from logctx.core.carrier import Context
from logctx.core.enrichment import add_attributes, set_minimum_level
from logctx.core.handler import wrap_sink
from logctx.core.levels import parse_level
from logctx.core.ports import Carrier
from logctx.logger import Logger
from tests.helpers import drop_time


@dataclass
class EnrichmentScenarioContext:
    """Shared state between steps in an enrichment scenario."""

    buffer: io.StringIO = field(default_factory=io.StringIO)
    sink: TextSink | None = None
    logger: Logger | None = None
    carrier: Carrier = field(default_factory=Context.background)


@pytest.fixture
def ctx() -> EnrichmentScenarioContext:
    """Fresh scenario context for each test."""
    return EnrichmentScenarioContext()


# === Background Steps ===
@given(parsers.parse("a text sink at threshold {level:w}"))
def step_text_sink(ctx: EnrichmentScenarioContext, level: str) -> None:
    ctx.sink = TextSink(
        ctx.buffer, SinkOptions(level=parse_level(level), replace_attr=drop_time)
    )


@given("a logger that honors the carrier")
def step_wrapped_logger(ctx: EnrichmentScenarioContext) -> None:
    assert ctx.sink is not None
    ctx.logger = Logger(wrap_sink(ctx.sink))


@given("a logger that ignores the carrier")
def step_plain_logger(ctx: EnrichmentScenarioContext) -> None:
    assert ctx.sink is not None
    ctx.logger = Logger(ctx.sink)


# === Carrier Steps ===
@given(parsers.parse('the carrier has attribute "{key}" set to {value:d}'))
def step_carrier_attribute(ctx: EnrichmentScenarioContext, key: str, value: int) -> None:
    ctx.carrier = add_attributes(ctx.carrier, key, value)


@given(parsers.parse('the carrier is enriched with the lone key "{key}"'))
def step_carrier_lone_key(ctx: EnrichmentScenarioContext, key: str) -> None:
    ctx.carrier = add_attributes(ctx.carrier, key)


@given(parsers.parse("the carrier minimum level is {level:w}"))
def step_carrier_level(ctx: EnrichmentScenarioContext, level: str) -> None:
    ctx.carrier = set_minimum_level(ctx.carrier, parse_level(level))


@given(parsers.parse('the logger has group "{name}" with attribute "{key}" set to {value:d}'))
def step_logger_group(
    ctx: EnrichmentScenarioContext, name: str, key: str, value: int
) -> None:
    assert ctx.logger is not None
    ctx.logger = ctx.logger.with_group(name).with_(key, value)


# === Logging Steps ===
@when(parsers.parse('"{msg}" is logged at {level:w}'))
def step_log(ctx: EnrichmentScenarioContext, msg: str, level: str) -> None:
    assert ctx.logger is not None
    ctx.logger.log(ctx.carrier, parse_level(level), msg)


@when(parsers.parse('"{msg}" is logged at {level:w} with "{key}" set to {value:d}'))
def step_log_with_arg(
    ctx: EnrichmentScenarioContext, msg: str, level: str, key: str, value: int
) -> None:
    assert ctx.logger is not None
    ctx.logger.log(ctx.carrier, parse_level(level), msg, key, value)


@when(
    parsers.parse(
        'an error "{msg}" is logged with "{key}" set to "{value}" and cause "{cause}"'
    )
)
def step_log_error(
    ctx: EnrichmentScenarioContext, msg: str, key: str, value: str, cause: str
) -> None:
    assert ctx.logger is not None
    ctx.logger.error(ctx.carrier, msg, OSError(cause), key, value)


@when(parsers.parse('an error "{msg}" is logged without a cause'))
def step_log_error_without_cause(ctx: EnrichmentScenarioContext, msg: str) -> None:
    assert ctx.logger is not None
    ctx.logger.error(ctx.carrier, msg, None)


# === Assertion Steps ===
@then("nothing is written")
def step_nothing_written(ctx: EnrichmentScenarioContext) -> None:
    assert ctx.buffer.getvalue() == ""


@then(parsers.parse("the output is '{line}'"))
def step_output_is(ctx: EnrichmentScenarioContext, line: str) -> None:
    assert ctx.buffer.getvalue() == line + "\n"


@then(parsers.parse("the logger is enabled at {level:w}"))
def step_enabled(ctx: EnrichmentScenarioContext, level: str) -> None:
    assert ctx.logger is not None
    assert ctx.logger.enabled(ctx.carrier, parse_level(level))


@then(parsers.parse("the logger is not enabled at {level:w}"))
def step_not_enabled(ctx: EnrichmentScenarioContext, level: str) -> None:
    assert ctx.logger is not None
    assert not ctx.logger.enabled(ctx.carrier, parse_level(level))
