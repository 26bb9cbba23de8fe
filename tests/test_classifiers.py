import pytest

from animlib.capabilities import Capability, Module, qualified_name
from animlib.classifiers import (
    RegisteredSource,
    classify_controllers,
    classify_managers,
    classify_source,
    classify_sources,
    classify_units,
    derive_resource_path,
)
from animlib.exceptions import LoadCancelledError
from animlib.results import NOT_APPLICABLE, Error, ErrorKind, Found
from animlib.scanner import scan
from tests.stubs import (
    StubController,
    StubDash,
    StubDecliningSource,
    StubExplodingSource,
    StubHalfSizedSource,
    StubJump,
    StubListTracksSource,
    StubManager,
    StubNarrowSource,
    StubOtherController,
    StubOtherManager,
    StubRenamedSource,
    StubSource,
    StubStringSizeSource,
    StubTracklessSource,
    StubUntexturedSource,
    StubZeroSizeSource,
    texture_path,
)


def _candidate(cls, module="alpha"):
    return scan(Module(module, (cls,))).candidates[0]


@pytest.mark.parametrize(
    "name, expected",
    [
        ("Foo.Bar.Baz", "Foo/Bar/Baz"),
        ("Single", "Single"),
        ("", ""),
        ("a..b", "a//b"),
    ],
)
def test_derive_resource_path_is_pure(name, expected):
    assert derive_resource_path(name) == expected


def test_derive_resource_path_custom_separator():
    assert derive_resource_path("Foo.Bar.Baz", separator="\\") == "Foo\\Bar\\Baz"


def test_classify_source_registers_valid_candidate(textures):
    outcome = classify_source(_candidate(StubSource), textures.resolve)

    assert isinstance(outcome, Found)
    record = outcome.value
    assert isinstance(record, RegisteredSource)
    assert record.module == "alpha"
    assert record.path == texture_path(StubSource)
    assert record.sprite_size == (16, 16)
    assert set(record.tracks) == {"Idle", "Walk"}
    assert record.track("Walk").ping_pong
    assert record.texture is textures.resolve(record.path)
    assert isinstance(record.instance, StubSource)


def test_classify_source_honours_rewritten_path(textures):
    outcome = classify_source(_candidate(StubRenamedSource), textures.resolve)
    assert outcome.value.path == "Shared/Sprites/Player"


def test_classify_source_opt_out_is_not_an_error(textures):
    assert classify_source(_candidate(StubDecliningSource), textures.resolve) is NOT_APPLICABLE


@pytest.mark.parametrize(
    "cls",
    [
        StubZeroSizeSource,
        StubNarrowSource,
        StubTracklessSource,
        StubStringSizeSource,
        StubHalfSizedSource,
        StubListTracksSource,
    ],
)
def test_classify_source_rejects_invalid_sources(textures, cls):
    outcome = classify_source(_candidate(cls), textures.resolve)

    assert isinstance(outcome, Error)
    assert outcome.kind is ErrorKind.INVALID_SOURCE
    assert not outcome.fatal
    assert outcome.candidate == qualified_name(cls)


def test_classify_source_missing_texture(textures):
    outcome = classify_source(_candidate(StubUntexturedSource), textures.resolve)

    assert outcome.kind is ErrorKind.MISSING_RESOURCE
    assert outcome.fatal
    assert texture_path(StubUntexturedSource) in outcome.detail


def test_classify_source_contains_constructor_failures(textures):
    outcome = classify_source(_candidate(StubExplodingSource), textures.resolve)

    assert outcome.kind is ErrorKind.CONSTRUCTION_FAILED
    assert "boom" in outcome.detail


def test_classify_source_contains_asset_lookup_failures():
    def resolve(path):
        raise OSError("disk unplugged")

    outcome = classify_source(_candidate(StubSource), resolve)

    assert outcome.kind is ErrorKind.MISSING_RESOURCE
    assert outcome.candidate == qualified_name(StubSource)
    assert "disk unplugged" in outcome.detail


def test_classify_source_lets_cancellation_through():
    def resolve(path):
        raise LoadCancelledError("host is shutting down")

    with pytest.raises(LoadCancelledError):
        classify_source(_candidate(StubSource), resolve)


def test_classify_sources_keeps_going_after_rejections(textures):
    candidates = scan(
        Module("delta", (StubZeroSizeSource, StubSource, StubUntexturedSource, StubDecliningSource))
    ).candidates
    seen = []

    classification = classify_sources(
        candidates, textures.resolve, on_outcome=lambda candidate, outcome: seen.append(outcome)
    )

    assert [record.qualified_name for record in classification.registrations] == [qualified_name(StubSource)]
    assert [error.kind for error in classification.diagnostics] == [
        ErrorKind.INVALID_SOURCE,
        ErrorKind.MISSING_RESOURCE,
    ]
    assert len(seen) == 4
    assert seen[-1] is NOT_APPLICABLE


def test_single_valued_families_register_one_candidate():
    controllers = classify_controllers(scan(Module("alpha", (StubController,))).candidates)
    assert controllers.capability is Capability.CONTROLLER
    assert [record.factory for record in controllers.registrations] == [StubController]
    assert controllers.diagnostics == ()


def test_single_valued_families_without_candidates_are_empty():
    managers = classify_managers(())
    assert not managers
    assert managers.diagnostics == ()


@pytest.mark.parametrize(
    "classify, first, second",
    [
        (classify_controllers, StubController, StubOtherController),
        (classify_managers, StubManager, StubOtherManager),
    ],
)
def test_duplicate_declaration_leaves_family_empty(classify, first, second):
    classification = classify(scan(Module("beta", (first, second))).candidates)

    assert classification.registrations == ()
    assert len(classification.diagnostics) == 1
    error = classification.diagnostics[0]
    assert error.kind is ErrorKind.DUPLICATE_DECLARATION
    assert error.module == "beta"
    assert qualified_name(first) in error.detail
    assert qualified_name(second) in error.detail


def test_units_are_collected_in_declaration_order():
    classification = classify_units(scan(Module("alpha", (StubDash, StubJump))).candidates)

    assert [record.factory for record in classification.registrations] == [StubDash, StubJump]
    assert [record.index for record in classification.registrations] == [0, 1]
