from __future__ import annotations

import importlib.util
import sys
from pathlib import Path
from types import ModuleType
from typing import Any

import pytest

from errors import AmbiguousCandidateIndex, InvalidArgument, NotFound
from locate.locator import SourceLocator, declaration_pattern, scan_backward
from locate.models import MethodRef, SourceSpan
from locate.modules import ModuleRecord
from locate.sources import code_from_module

FIXTURES = Path(__file__).parent / "fixtures" / "shapes"


def _load_fixture(
    monkeypatch: pytest.MonkeyPatch, module_name: str, filename: str
) -> ModuleType:
    spec = importlib.util.spec_from_file_location(module_name, FIXTURES / filename)
    assert spec is not None
    assert spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    monkeypatch.setitem(sys.modules, module_name, module)
    spec.loader.exec_module(module)
    return module


def _line_of(path: Path, text: str) -> int:
    for number, line in enumerate(path.read_text(encoding="utf-8").splitlines(), 1):
        if line.strip() == text:
            return number
    raise AssertionError(f"{text!r} not in {path}")


class _FakeIntrospector:
    """Introspector returning canned method refs for any target."""

    def __init__(self, methods: list[MethodRef]) -> None:
        self.methods = methods
        self.calls = 0

    def name_of(self, target: Any) -> str | None:
        return target.__name__

    def ancestors_of(self, target: Any) -> tuple[Any, ...]:
        return (target,)

    def list_declared_methods(
        self, target: Any, include_singleton: bool = True
    ) -> list[MethodRef]:
        self.calls += 1
        return self.methods


class Widget:
    pass


def _ref(path: Path | None, line: int = 1, *, alias: bool = False) -> MethodRef:
    span = SourceSpan(file=str(path), start_line=line) if path else None
    return MethodRef(owner=Widget, name="m", span=span, is_alias=alias)


def _reopened_files(tmp_path: Path) -> tuple[Path, Path]:
    first = tmp_path / "widget.py"
    first.write_text(
        "import os\n"
        "\n"
        "class Widget(Base):\n"
        "    def draw(self):\n"
        "        pass\n",
        encoding="utf-8",
    )
    second = tmp_path / "widget_ext.py"
    second.write_text(
        "class Other:\n"
        "    pass\n"
        "\n"
        "\n"
        "class Widget:\n"
        "    x = 1\n"
        "\n"
        "    def resize(self):\n"
        "        pass\n",
        encoding="utf-8",
    )
    return first, second


def test_reopened_class_candidates_point_at_declarations(tmp_path: Path) -> None:
    first, second = _reopened_files(tmp_path)
    introspector = _FakeIntrospector([_ref(first, 4), _ref(second, 8)])
    locator = SourceLocator(introspector=introspector)
    record = ModuleRecord(Widget, locator=locator)

    assert locator.resolve(record, 0) == SourceSpan(file=str(first), start_line=3)
    assert locator.resolve(record, 1) == SourceSpan(file=str(second), start_line=5)
    assert [c.file for c in record.candidates()] == [str(first), str(second)]


def test_candidates_skip_native_and_alias_methods(tmp_path: Path) -> None:
    first, second = _reopened_files(tmp_path)
    introspector = _FakeIntrospector(
        [_ref(None), _ref(first, 4, alias=True), _ref(second, 8), _ref(first, 4)]
    )
    locator = SourceLocator(introspector=introspector)
    record = ModuleRecord(Widget, locator=locator)

    candidates = locator.candidates(record)

    assert [c.file for c in candidates] == [str(second), str(first)]
    assert locator.resolve(record).start_line == 5


def test_rank_out_of_range_is_ambiguous(tmp_path: Path) -> None:
    first, _ = _reopened_files(tmp_path)
    locator = SourceLocator(introspector=_FakeIntrospector([_ref(first, 4)]))
    record = ModuleRecord(Widget, locator=locator)

    with pytest.raises(AmbiguousCandidateIndex):
        locator.resolve(record, 1)


def test_no_locatable_methods_is_not_found() -> None:
    locator = SourceLocator(introspector=_FakeIntrospector([_ref(None)]))
    record = ModuleRecord(Widget, locator=locator)

    with pytest.raises(NotFound):
        locator.resolve(record)


def test_no_declaration_above_anchor_is_not_found(tmp_path: Path) -> None:
    path = tmp_path / "loose.py"
    path.write_text("def draw(self):\n    pass\n", encoding="utf-8")
    locator = SourceLocator(introspector=_FakeIntrospector([_ref(path, 1)]))

    with pytest.raises(NotFound):
        locator.resolve(ModuleRecord(Widget, locator=locator))


def test_resolved_span_is_cached_until_refresh(tmp_path: Path) -> None:
    first, _ = _reopened_files(tmp_path)
    introspector = _FakeIntrospector([_ref(first, 4)])
    locator = SourceLocator(introspector=introspector)
    record = ModuleRecord(Widget, locator=locator)

    span = record.resolved_span
    first.write_text("\n\n\n\nclass Widget:\n    def draw(self):\n        pass\n")

    assert record.resolved_span == span
    assert introspector.calls == 1

    record.refresh()
    introspector.methods = [_ref(first, 6)]
    assert record.resolved_span.start_line == 5


def test_textual_fallback_for_non_python_files(tmp_path: Path) -> None:
    path = tmp_path / "widget.rb"
    path.write_text(
        "class Widget < Base\n"
        "  def a; end\n"
        "end\n"
        "class Gadgets::Widget\n"
        "  def b; end\n"
        "end\n",
        encoding="utf-8",
    )
    locator = SourceLocator(introspector=_FakeIntrospector([_ref(path, 5)]))

    assert locator.resolve(ModuleRecord(Widget, locator=locator)).start_line == 4


def test_declaration_pattern_matches_reopening_and_namespaces() -> None:
    pattern = declaration_pattern("Widget")

    assert pattern.search("class Widget:")
    assert pattern.search("    class Widget(Base):")
    assert pattern.search("class ui.Widget")
    assert pattern.search("class Gadgets::Widget")
    assert not pattern.search("class WidgetFactory:")
    assert not pattern.search("# class Widget")


def test_scan_backward_returns_closest_preceding_match() -> None:
    lines = ["class A:", "  pass", "class A:", "  def x(self):", "    pass"]

    assert scan_backward(lines, declaration_pattern("A"), 4) == 3
    assert scan_backward(lines, declaration_pattern("A"), 3) == 1
    assert scan_backward(lines, declaration_pattern("B"), 5) is None


def test_live_class_reopened_from_second_file(monkeypatch: pytest.MonkeyPatch) -> None:
    geometry = _load_fixture(monkeypatch, "shapes_geometry", "geometry.py")
    _load_fixture(monkeypatch, "shapes_extensions", "extensions.py")
    record = ModuleRecord(geometry.Point)

    primary = record.candidate(0)
    reopened = record.candidate(1)

    assert primary.file == str(FIXTURES / "geometry.py")
    assert primary.line == _line_of(FIXTURES / "geometry.py", "class Point:")
    assert reopened.file == str(FIXTURES / "extensions.py")
    assert reopened.line == _line_of(FIXTURES / "extensions.py", "class Point:")
    assert len(record.candidates()) == 2


def test_nested_class_resolves_to_enclosing_declaration(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    geometry = _load_fixture(monkeypatch, "shapes_geometry", "geometry.py")

    span = ModuleRecord(geometry.Circle.Label).resolved_span

    assert span.start_line == _line_of(FIXTURES / "geometry.py", "class Label:")


def test_decorated_class_source_and_doc(monkeypatch: pytest.MonkeyPatch) -> None:
    geometry = _load_fixture(monkeypatch, "shapes_geometry", "geometry.py")
    record = ModuleRecord(geometry.Square)

    assert record.source == "class Square:\n    def side(self) -> float:\n        return 1.0\n"
    assert record.doc == "Unit square.\n"


def test_module_source_is_unindented_expression(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    geometry = _load_fixture(monkeypatch, "shapes_geometry", "geometry.py")

    code = code_from_module(geometry.Circle.Label)

    assert code.raw_text() == (
        "class Label:\n"
        "    def text(self) -> str:\n"
        '        return "circle"\n'
    )
    assert code.line_numbers[0] == _line_of(FIXTURES / "geometry.py", "class Label:")


def test_class_without_methods_is_not_found(monkeypatch: pytest.MonkeyPatch) -> None:
    geometry = _load_fixture(monkeypatch, "shapes_geometry", "geometry.py")

    with pytest.raises(NotFound):
        ModuleRecord(geometry.Empty).resolved_span


def test_singleton_resolves_through_instance_class(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    geometry = _load_fixture(monkeypatch, "shapes_geometry", "geometry.py")
    record = ModuleRecord.for_instance(geometry.Circle(2.0))

    assert record.is_singleton
    assert record.method_prefix == "self."
    assert record.resolved_span.start_line == _line_of(
        FIXTURES / "geometry.py", "class Circle:"
    )


def test_module_object_resolves_to_first_line(monkeypatch: pytest.MonkeyPatch) -> None:
    geometry = _load_fixture(monkeypatch, "shapes_geometry", "geometry.py")
    record = ModuleRecord(geometry)

    assert record.kind == "module"
    assert record.resolved_span == SourceSpan(
        file=str(FIXTURES / "geometry.py"), start_line=1
    )
    assert record.source.startswith('"""Shapes used to exercise declaration lookup."""')


def test_non_class_values_are_rejected_immediately() -> None:
    with pytest.raises(InvalidArgument):
        ModuleRecord(42)
    with pytest.raises(InvalidArgument):
        ModuleRecord.for_instance(Widget)


def test_from_name_returns_none_for_unknown_names() -> None:
    assert ModuleRecord.from_name("no_such_module_for_srclens.Thing") is None
    record = ModuleRecord.from_name("json.decoder.JSONDecoder")
    assert record is not None
    assert record.qualified_name == "json.decoder.JSONDecoder"
