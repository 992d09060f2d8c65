import sys
from random import Random
from typing import List, NamedTuple

from hypothesis import given, register_random, settings
from hypothesis import strategies as st

from positional_parse import (
    DEFAULT_REGISTRY,
    Argument,
    Error,
    MissingArgsStrategy,
    MissingArgumentsError,
    Value,
    arrange,
    parse,
)

MAX_ARGUMENTS = 5
MAX_POSITION = 20


class StOutput(NamedTuple):
    arguments: List[Argument]
    content: str


st_kind = st.sampled_from(sorted(DEFAULT_REGISTRY))
st_strategy = st.sampled_from(list(MissingArgsStrategy))
st_word = st.sampled_from(
    ["123", "-7", "1.5", "true", "false", "'x'", '"quoted words"', '""', "word", "nan"]
)
st_content = st.lists(st_word, max_size=MAX_ARGUMENTS).map(" ".join) | st.text()


@st.composite
def st_argument(draw, required=st.booleans()) -> Argument:
    return Argument(
        name=str(draw(st.integers(min_value=0, max_value=MAX_POSITION))),
        type=draw(st_kind),
        required=draw(required),
    )


@st.composite
def st_arguments_with_content(draw, required=st.booleans()) -> StOutput:
    arguments = draw(st.lists(st_argument(required), max_size=MAX_ARGUMENTS))
    return StOutput(arguments=arguments, content=draw(st_content))


@given(st_kind, st.text())
def test_extract_is_total(kind, text):
    type_ = DEFAULT_REGISTRY[kind]
    candidate = type_.extract(text)
    assert isinstance(candidate, str)
    if candidate:
        assert candidate in text
        assert type_.validate(candidate)


@settings(deadline=500)
@given(st_arguments_with_content(), st_strategy)
def test_parse_is_deterministic(arguments_with_content, strategy):
    arguments, content = arguments_with_content
    first = parse(arguments, content, strategy)
    second = parse(arguments, content, strategy)
    assert repr(first) == repr(second)


@given(
    st.lists(st_argument(), max_size=MAX_ARGUMENTS, unique_by=lambda a: a.name),
    st_content,
    st.randoms(),
)
def test_caller_order_is_irrelevant(arguments, content, random):
    shuffled = list(arguments)
    random.shuffle(shuffled)
    assert repr(parse(arguments, content)) == repr(parse(shuffled, content))


@given(st_arguments_with_content(required=st.just(False)), st_strategy)
def test_optional_misses_never_fail(arguments_with_content, strategy):
    arguments, content = arguments_with_content
    result = parse(arguments, content, strategy)
    assert isinstance(result, Value), result
    names = iter([a.name for a in arrange(arguments)])
    assert all(key in names for key in result.get.keys())


@given(st.lists(st_argument(required=st.just(True)), min_size=1, max_size=MAX_ARGUMENTS))
def test_quick_reports_first_miss(arguments):
    result = parse(arguments, "", MissingArgsStrategy.QUICK)
    assert isinstance(result, Error)
    assert isinstance(result.cause, MissingArgumentsError)
    assert result.cause.missing == arrange(arguments)[:1]


@given(st.lists(st_argument(), min_size=1, max_size=MAX_ARGUMENTS))
def test_thorough_reports_every_miss(arguments):
    result = parse(arguments, "", MissingArgsStrategy.THOROUGH)
    required = [a for a in arrange(arguments) if a.required]
    if required:
        assert isinstance(result, Error)
        assert isinstance(result.cause, MissingArgumentsError)
        assert result.cause.missing == required
    else:
        assert isinstance(result, Value)
        assert len(result.get) == 0


if __name__ == "__main__":
    register_random(Random(0))

    test_extract_is_total()
    test_parse_is_deterministic()
    test_caller_order_is_irrelevant()
    test_optional_misses_never_fail()
    test_quick_reports_first_miss()
    test_thorough_reports_every_miss()
    sys.exit(0)
