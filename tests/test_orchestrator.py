"""
End-to-end tests for causelint.orchestrator.

Covers the reference scenarios, the whole-unit properties
(no-parameter, self-rethrow, idempotence, branch independence) and
file/directory handling.
"""
import sys
import tempfile
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from causelint.config import AnalyzerConfig
from causelint.orchestrator import (
    analyze_file,
    analyze_paths,
    analyze_source,
    analyze_unit,
    discover_files,
    fix_source,
)
from causelint.parsing import parse_source

# ---------------------------------------------------------------------------
# Reference scenarios
# ---------------------------------------------------------------------------

class TestScenarios:

    def test_a_missing_options(self):
        code = 'try { f(); } catch (e) { throw new Error("x"); }'
        assert len(analyze_source(code)) == 1
        result = fix_source(code)
        assert result.source == 'try { f(); } catch (e) { throw new Error("x", { cause: e }); }'
        assert result.applied == 1
        assert result.remaining == []

    def test_b_literal_cause_value(self):
        code = 'try { f(); } catch (e) { throw new Error("x", { cause: "y" }); }'
        assert len(analyze_source(code)) == 1
        assert fix_source(code).source == 'try { f(); } catch (e) { throw new Error("x", { cause: e }); }'

    def test_c_no_bound_value(self):
        assert analyze_source('try { f(); } catch { throw new Error("x"); }') == []

    def test_d_switch_first_branch_only(self):
        code = """
        try { f(); } catch (e) {
            switch (c) {
                case 1: throw new Error("a");
                case 2: throw new Error("b", { cause: e });
            }
        }
        """
        findings = analyze_source(code)
        assert len(findings) == 1
        assert 'new Error("a")' in code[findings[0].location.start_byte:findings[0].location.end_byte]

    def test_e_self_rethrow(self):
        assert analyze_source("try { f(); } catch (e) { throw e; }") == []

    def test_f_misspelled_key(self):
        code = 'try { f(); } catch (e) { throw new Error("x", { cuse: e }); }'
        assert len(analyze_source(code)) == 1
        assert fix_source(code).source == 'try { f(); } catch (e) { throw new Error("x", { cause: e }); }'


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------

NO_PARAMETER_BODIES = [
    'throw new Error("x");',
    'throw new Error("x", { cause: "y" });',
    'throw new Error("x", opts);',
    'if (a) { throw new Error("x"); } else { throw Error("y"); }',
    'switch (k) { case 1: throw new Error("a"); default: throw new Error("b", {}); }',
]


@pytest.mark.parametrize("body", NO_PARAMETER_BODIES)
def test_no_parameter_invariance(body):
    assert analyze_source(f"try {{ f(); }} catch {{ {body} }}") == []


@pytest.mark.parametrize("name", ["e", "err", "error", "cause"])
def test_self_rethrow_invariance(name):
    code = f"try {{ f(); }} catch ({name}) {{ if (x) {{ throw {name}; }} throw {name}; }}"
    assert analyze_source(code) == []


def test_extra_property_tolerance():
    code = 'try {} catch (err) { throw new Error("Failed", { cause: err, extra: 42, code: "E_IO" }); }'
    assert analyze_source(code) == []


IDEMPOTENCE_CASES = [
    'try {} catch (err) { throw new Error("Something failed"); }',
    'try {} catch (err) { const unrelated = new Error("other"); throw new Error("f", { cause: unrelated }); }',
    'try {} catch (error) { throw new Error("f", { cause: "notTheError" }); }',
    'try {} catch (error) { throw new Error("f", { cuse: error }); }',
    'try {} catch (err) { const e = err; throw new Error("f", { cause: e }); }',
    'try {} catch (error) { throw new Error("f", { cause: error.message }); }',
    'try {} catch (error) { throw new Error("f", { cause: 123 }); }',
    'try {} catch (error) { throw new Error("f", { cause: getError() }); }',
    'try {} catch (error) { throw new Error("f", {}); }',
]


@pytest.mark.parametrize("code", IDEMPOTENCE_CASES)
def test_fix_idempotence(code):
    findings = analyze_source(code)
    assert len(findings) == 1
    assert findings[0].fix is not None

    result = fix_source(code)
    assert result.remaining == []
    assert analyze_source(result.source) == []
    assert fix_source(result.source).source == result.source


def test_alias_is_rewritten_to_parameter():
    code = 'try {} catch (err) { const e = err; throw new Error("f", { cause: e }); }'
    assert fix_source(code).source == 'try {} catch (err) { const e = err; throw new Error("f", { cause: err }); }'


def test_branch_independence():
    code = """
    try { f(); } catch (error) {
        if (a) {
            if (b) {
                throw new Error("1");
            } else {
                throw new Error("2", { cause: error });
            }
        } else if (c) {
            switch (error.code) {
                case "A": throw new Error("3");
                case "B": throw new Error("4", { cause: error });
                default:
                    for (;;) { throw new Error("5", { cause: 1 }); }
            }
        } else {
            throw new Error("6", { cause: error });
        }
    }
    """
    assert len(analyze_source(code)) == 3

    result = fix_source(code)
    assert result.applied == 3
    assert result.remaining == []


def test_heavily_nested_fix():
    code = """
      try {
        doSomething();
      } catch (error) {
        if (shouldThrow) {
          while (true) {
            if (Math.random() > 0.5) {
              throw new Error("Failed without cause");
            }
          }
        }
      }
    """
    expected = code.replace('"Failed without cause")', '"Failed without cause", { cause: error })')
    assert fix_source(code).source == expected


def test_non_literal_options_remain_after_fix():
    code = 'try {} catch (e) { throw new Error("a"); throw new Error("b", opts); }'
    result = fix_source(code)
    assert result.applied == 1
    assert len(result.remaining) == 1
    assert result.remaining[0].fix is None


def test_closure_throws_ignored():
    code = 'try {} catch (e) { promise.then(() => { throw new Error("later"); }); }'
    assert analyze_source(code) == []


def test_nested_handlers_each_use_own_parameter():
    code = """
    try { a(); } catch (outer) {
        try { b(); } catch (inner) {
            throw new Error("inner");
        }
        throw new Error("outer");
    }
    """
    result = fix_source(code)
    assert 'new Error("inner", { cause: inner })' in result.source
    assert 'new Error("outer", { cause: outer })' in result.source


def test_nested_handler_without_parameter_is_unattachable():
    code = """
    try { a(); } catch (outer) {
        try { b(); } catch {
            throw new Error("inner");
        }
    }
    """
    assert analyze_source(code) == []


def test_configured_subclass_names():
    code = 'try {} catch (e) { throw new HttpError("x"); }'
    assert analyze_source(code) == []

    config = AnalyzerConfig().with_error_constructors(["HttpError"])
    assert len(analyze_source(code, config=config)) == 1


def test_typescript_source():
    code = 'try { f(); } catch (e: unknown) { throw new Error(`failed: ${String(e)}`); }'
    result = fix_source(code, suffix=".ts")
    assert result.source == 'try { f(); } catch (e: unknown) { throw new Error(`failed: ${String(e)}`, { cause: e }); }'


def test_tsx_source():
    code = 'try { f(); } catch (e) { throw new Error("x"); }\nconst el = <div className="x" />;'
    assert len(analyze_source(code, suffix=".tsx")) == 1


def test_analyze_unit_reports_per_handler():
    code = """
    try { a(); } catch (first) { throw new Error("1"); }
    try { b(); } catch { throw new Error("2"); }
    try { c(); } catch (third) { throw new Error("3", { cause: third }); }
    """
    reports = analyze_unit(parse_source(code))
    assert [r.binding.parameter_name for r in reports] == ["first", None, "third"]
    assert [len(r.findings) for r in reports] == [1, 0, 0]


def test_malformed_throw_fails_open():
    code = 'try { a(); } catch (e) { throw new Error("x"); }\ntry { b(); } catch (f) { throw; }\n'
    findings = analyze_source(code)
    assert len(findings) == 1
    assert findings[0].parameter_name == "e"


def test_unsupported_suffix():
    with pytest.raises(ValueError):
        analyze_source("x = 1", suffix=".py")


# ---------------------------------------------------------------------------
# Files and directories
# ---------------------------------------------------------------------------

SWALLOWING = 'try { f(); } catch (e) { throw new Error("x"); }\n'


class TestFiles:

    def test_analyze_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "app.js"
            path.write_text(SWALLOWING)

            report = analyze_file(path)
            assert report is not None
            assert len(report.findings) == 1
            assert report.explanations[0].path == str(path)
            assert path.read_text() == SWALLOWING

    def test_analyze_file_with_fix_rewrites(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "app.ts"
            path.write_text(SWALLOWING)

            report = analyze_file(path, fix=True)
            assert report.fixed == 1
            assert report.findings == []
            assert "{ cause: e }" in path.read_text()

    def test_undecodable_file_skipped(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "bad.js"
            path.write_bytes(b"\xff\xfe\x00throw")
            assert analyze_file(path) is None

    def test_discover_skips_hidden_and_excluded(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            (root / "src").mkdir()
            (root / "src" / "a.js").write_text(SWALLOWING)
            (root / "src" / "b.tsx").write_text("")
            (root / "src" / "notes.md").write_text("")
            (root / ".cache").mkdir()
            (root / ".cache" / "c.js").write_text(SWALLOWING)
            (root / "node_modules" / "pkg").mkdir(parents=True)
            (root / "node_modules" / "pkg" / "d.js").write_text(SWALLOWING)

            files = discover_files([root], AnalyzerConfig())
            names = [f.name for f in files]
            assert names == ["a.js", "b.tsx"]

    def test_explicit_file_kept(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            (root / "node_modules").mkdir()
            target = root / "node_modules" / "d.js"
            target.write_text(SWALLOWING)

            assert discover_files([target], AnalyzerConfig()) == [target.resolve()]

    def test_analyze_paths(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            (root / "a.js").write_text(SWALLOWING)
            (root / "b.js").write_text("try { f(); } catch (e) { throw e; }\n")

            reports = analyze_paths([root])
            assert [r.path.name for r in reports] == ["a.js", "b.js"]
            assert [len(r.findings) for r in reports] == [1, 0]

    def test_missing_path_raises(self):
        with pytest.raises(ValueError):
            analyze_paths([Path("/nonexistent/path")])


def test_analysis_writes_nothing_to_stdout(capsys):
    findings = analyze_source('try {} catch (e) { throw new Error(); throw new Error("x"); }')
    assert len(findings) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
