"""BDD step definitions for scrape features."""

import pytest
from pytest_bdd import given, parsers, then, when
from tests.features.scrape.steps_helpers import (
    ScrapeScenarioContext,
    UnreachableSource,
    find_samples,
)


def _ints(text: str) -> list[int]:
    return [int(v) for v in text.split(",")]


@pytest.fixture
def ctx() -> ScrapeScenarioContext:
    """Fresh scenario context for each test."""
    return ScrapeScenarioContext()


# === Given ===


@given(parsers.parse('a pool "{pool}" with a "{kind}" vdev at index {index:d}'))
def given_pool_with_vdev(
    ctx: ScrapeScenarioContext, pool: str, kind: str, index: int
) -> None:
    ctx.pool = pool
    ctx.kind = kind
    ctx.index = index


@given(
    parsers.parse(
        "the vdev reports state {state:d} with {allocated:d} allocated bytes "
        "and operations {ops}"
    )
)
def given_vdev_stats(
    ctx: ScrapeScenarioContext, state: int, allocated: int, ops: str
) -> None:
    """Fill the record up to and including the ops counters."""
    # timestamp, state, aux state, allocated, capacity, deflated, 2 devsize
    ctx.stats = [0, state, 0, allocated, 0, 0, 0, 0, *_ints(ops)]


@given(parsers.parse('the vdev reports extended stat "{key}" as increments {values}'))
def given_extended_histogram(ctx: ScrapeScenarioContext, key: str, values: str) -> None:
    ctx.stats_ex[key] = _ints(values)


@given(parsers.parse('the vdev reports extended stat "{key}" as the text "{text}"'))
def given_extended_text(ctx: ScrapeScenarioContext, key: str, text: str) -> None:
    ctx.stats_ex[key] = text


@given(
    parsers.parse('the vdev reports extended stat "{key}" with {buckets:d} buckets')
)
def given_extended_buckets(ctx: ScrapeScenarioContext, key: str, buckets: int) -> None:
    ctx.stats_ex[key] = [1] * buckets


@given("a source that cannot list pools")
def given_unreachable_source(ctx: ScrapeScenarioContext) -> None:
    ctx.source = UnreachableSource()


# === When ===


@when("the exporter is scraped")
def when_scraped(ctx: ScrapeScenarioContext) -> None:
    ctx.scrape()


# === Then ===


@then("the scrape succeeds")
def then_scrape_succeeds(ctx: ScrapeScenarioContext) -> None:
    assert ctx.error is None
    assert ctx.samples is not None


@then(parsers.parse("the scrape fails with {error}"))
def then_scrape_fails(ctx: ScrapeScenarioContext, error: str) -> None:
    assert type(ctx.error).__name__ == error


@then("no samples are returned")
def then_no_samples(ctx: ScrapeScenarioContext) -> None:
    assert ctx.samples is None


@then(parsers.parse('no sample has the label "{label}"'))
def then_no_sample_with_label(ctx: ScrapeScenarioContext, label: str) -> None:
    assert ctx.samples is not None
    assert all(label not in s.labels for s in ctx.samples)


@then(
    parsers.parse(
        'sample "{name}" of vdev "{vdev}" in pool "{pool}" is {value:g}'
    )
)
def then_sample_value(
    ctx: ScrapeScenarioContext, name: str, vdev: str, pool: str, value: float
) -> None:
    (sample,) = find_samples(ctx, name, vdev, pool)
    assert sample.value == value


@then(
    parsers.parse(
        '"{name}" of vdev "{vdev}" in pool "{pool}" is {values} for types {types}'
    )
)
def then_variant_values(
    ctx: ScrapeScenarioContext,
    name: str,
    vdev: str,
    pool: str,
    values: str,
    types: str,
) -> None:
    samples = find_samples(ctx, name, vdev, pool)
    expected = list(zip(types.split(","), map(float, _ints(values))))
    assert [(s.labels["type"], s.value) for s in samples] == expected


@then(parsers.parse('histogram "{name}" has a highest bound of {bound:g}'))
def then_histogram_bound(ctx: ScrapeScenarioContext, name: str, bound: float) -> None:
    assert ctx.samples is not None
    (sample,) = [s for s in ctx.samples if s.name == name]
    assert sample.histogram is not None
    assert sample.histogram.buckets[-1][0] == bound
