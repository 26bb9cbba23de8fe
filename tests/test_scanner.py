from animlib.capabilities import (
    AnimationSource,
    Capability,
    Module,
    qualified_name,
    source_descriptor,
    unit_descriptor,
)
from animlib.results import ErrorKind
from animlib.scanner import has_candidates, scan
from tests.stubs import (
    StubAbstractSource,
    StubBoundAbility,
    StubController,
    StubDash,
    StubGenericAbility,
    StubHybrid,
    StubManager,
    StubSource,
    StubUnrelated,
)


def test_scan_tags_each_type_with_its_family():
    module = Module("alpha", (StubSource, StubController, StubManager, StubDash))
    result = scan(module)

    assert [candidate.capability for candidate in result.candidates] == [
        Capability.SOURCE,
        Capability.CONTROLLER,
        Capability.MANAGER,
        Capability.UNIT,
    ]
    assert result.candidates[0].qualified_name == qualified_name(StubSource)
    assert result.candidates[0].factory is StubSource
    assert result.of(Capability.UNIT)[0].module == "alpha"
    assert result.diagnostics == ()


def test_scan_drops_abstract_generic_base_and_unrelated_types():
    module = Module(
        "noise",
        (AnimationSource, StubAbstractSource, StubGenericAbility, StubUnrelated, "not a type"),
    )
    result = scan(module)

    assert result.candidates == ()
    assert not has_candidates(module)


def test_scan_keeps_concrete_subclass_of_generic_base():
    result = scan(Module("bound", (StubBoundAbility,)))
    assert [candidate.factory for candidate in result.candidates] == [StubBoundAbility]


def test_scan_reports_types_claiming_two_families():
    result = scan(Module("hybrid", (StubHybrid, StubSource)))

    assert [candidate.factory for candidate in result.candidates] == [StubSource]
    assert len(result.diagnostics) == 1
    assert result.diagnostics[0].kind is ErrorKind.AMBIGUOUS_CAPABILITY
    assert result.diagnostics[0].candidate == qualified_name(StubHybrid)


def test_scan_passes_descriptors_through_without_calling_them():
    calls = []

    def factory():
        calls.append("called")
        return StubSource()

    module = Module(
        "explicit",
        (source_descriptor(factory, "explicit.sprites.Player"), unit_descriptor(StubDash)),
    )
    result = scan(module)

    assert [candidate.qualified_name for candidate in result.candidates] == [
        "explicit.sprites.Player",
        qualified_name(StubDash),
    ]
    assert calls == []
