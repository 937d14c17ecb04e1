import pytest
from hypothesis import given
from hypothesis import strategies as st
from hypothesis.strategies import composite
from pydantic import ValidationError

from debfacts.errors import DependencyParseError, InvalidConstraintError, UnknownComparatorError
from debfacts.models import Comparator, Dependency, VersionConstraint
from debfacts.relations import parse_alternative, parse_relationship


def test_and_or_groups_with_constraints():
    deps = parse_relationship("libc6 (>= 2.29), libqt5gui5 (>= 5.5) | libqt5gui5-gles (>= 5.5)")

    assert deps == [
        Dependency(
            alternatives=["libc6"],
            constraints=[VersionConstraint(comparator=Comparator.LATER_OR_EQUAL, version="2.29")],
        ),
        Dependency(
            alternatives=["libqt5gui5", "libqt5gui5-gles"],
            constraints=[
                VersionConstraint(comparator=Comparator.LATER_OR_EQUAL, version="5.5"),
                VersionConstraint(comparator=Comparator.LATER_OR_EQUAL, version="5.5"),
            ],
        ),
    ]


def test_unconstrained_groups():
    deps = parse_relationship("foo, bar")

    assert [d.alternatives for d in deps] == [("foo",), ("bar",)]
    assert [d.constraints for d in deps] == [(None,), (None,)]


@pytest.mark.parametrize(
    "token, comparator",
    [
        ("<<", Comparator.STRICTLY_EARLIER),
        ("<=", Comparator.EARLIER_OR_EQUAL),
        ("=", Comparator.EXACTLY_EQUAL),
        (">=", Comparator.LATER_OR_EQUAL),
        (">>", Comparator.STRICTLY_LATER),
    ],
)
def test_every_comparator(token, comparator):
    (dep,) = parse_relationship(f"foo ({token} 1:2.3~rc1-0ubuntu1)")

    assert dep.constraints == (VersionConstraint(comparator=comparator, version="1:2.3~rc1-0ubuntu1"),)


def test_missing_space_is_invalid_constraint():
    with pytest.raises(InvalidConstraintError) as excinfo:
        parse_relationship("foo (>=2.29)")
    assert excinfo.value.text == ">=2.29"


def test_unknown_comparator():
    with pytest.raises(UnknownComparatorError) as excinfo:
        parse_relationship("foo (~> 2.29)")
    assert excinfo.value.token == "~>"


@pytest.mark.parametrize("token", ["<", ">", "==", "!=", "=>"])
def test_comparators_are_never_coerced(token):
    with pytest.raises(UnknownComparatorError):
        parse_relationship(f"bar, foo ({token} 1.0)")


def test_empty_parentheses_are_invalid():
    with pytest.raises(InvalidConstraintError):
        parse_relationship("foo ()")


def test_whitespace_around_tokens_is_ignored():
    name, constraint = parse_alternative("  foo   (  >=   2.29 )  ")

    assert name == "foo"
    assert constraint == VersionConstraint(comparator=Comparator.LATER_OR_EQUAL, version="2.29")


def test_multiline_field():
    deps = parse_relationship("libc6 (>= 2.34),\n libssl3 (>= 3.0.0),\n zlib1g (>= 1:1.1.4)")

    assert [d.alternatives[0] for d in deps] == ["libc6", "libssl3", "zlib1g"]
    assert deps[2].constraints[0].version == "1:1.1.4"


def test_empty_groups_are_skipped():
    assert parse_relationship("") == []
    assert [d.alternatives for d in parse_relationship("foo,, bar,")] == [("foo",), ("bar",)]


def test_architecture_qualified_names_are_kept():
    (dep,) = parse_relationship("python3:any (>= 3.9~) | python3-minimal:any")

    assert dep.alternatives == ("python3:any", "python3-minimal:any")
    assert dep.constraints[1] is None


@pytest.mark.parametrize(
    "text",
    [
        "a",
        "a | b | c",
        "a (= 1), b | c (<< 2) | d, e (>> 0.1~beta)",
        "debconf (>= 0.5) | debconf-2.0, adduser",
        "libgcc-s1 (>= 3.0), libstdc++6 (>= 5.2) | libstdc++6-compat",
    ],
)
def test_groups_keep_parallel_lists(text):
    for dep in parse_relationship(text):
        assert len(dep.alternatives) == len(dep.constraints)
        assert all(alternative for alternative in dep.alternatives)


def test_alternative_order_is_preserved():
    (dep,) = parse_relationship("default-mta | mail-transport-agent | postfix (>= 3)")

    assert dep.alternatives == ("default-mta", "mail-transport-agent", "postfix")


def test_dependency_rejects_mismatched_lists():
    with pytest.raises(ValidationError):
        Dependency(alternatives=["a", "b"], constraints=[None])


names = st.from_regex(r"[a-z0-9][a-z0-9+.\-]{1,20}(:any)?", fullmatch=True)
versions = st.from_regex(r"[0-9][A-Za-z0-9.+~:\-]{0,15}", fullmatch=True)
constraints = st.none() | st.builds(VersionConstraint, comparator=st.sampled_from(Comparator), version=versions)


@composite
def relationship_fields(draw):
    """A Depends value together with the groups it was built from."""
    groups = draw(st.lists(st.lists(st.tuples(names, constraints), min_size=1, max_size=4), max_size=6))
    texts = []
    for group in groups:
        alternatives = []
        for name, constraint in group:
            if constraint is None:
                alternatives.append(name)
            else:
                alternatives.append(f"{name} ({constraint.comparator.value} {constraint.version})")
        texts.append(" | ".join(alternatives))
    return ", ".join(texts), groups


@given(relationship_fields())
def test_generated_fields_parse_back_to_their_groups(field):
    text, groups = field

    deps = parse_relationship(text)

    assert len(deps) == len(groups)
    for dep, group in zip(deps, groups):
        assert dep.alternatives == tuple(name for name, _ in group)
        assert dep.constraints == tuple(constraint for _, constraint in group)
        assert len(dep.alternatives) == len(dep.constraints)


@given(st.text())
def test_arbitrary_text_only_raises_dependency_errors(text):
    try:
        deps = parse_relationship(text)
    except DependencyParseError:
        return

    assert all(isinstance(dep, Dependency) for dep in deps)
