"""Tests for the code health analyzer and its dimension scorers."""

import textwrap

from codeaudit.health import analyze_health, build_summary, overall_score
from codeaudit.health.base import Scorecard
from codeaudit.health.bug_risk import score_bug_risk
from codeaudit.health.complexity import extract_function_body, score_complexity
from codeaudit.health.performance import score_performance
from codeaudit.health.practices import MAX_PRACTICES, detect_best_practices
from codeaudit.health.readability import score_readability
from codeaudit.health.security import score_security
from codeaudit.health.style import check_android, check_idioms, check_smells, is_inside_block
from codeaudit.metrics import decision_points, function_spans, nesting_peak
from codeaudit.models import HealthIssue, Severity
from codeaudit.text import split_lines

MESSY_KOTLIN = textwrap.dedent("""\
    class Repo {
        lateinit var db: Database
        fun load(id: String?): Int {
            val n = id!!.length
            val s = cache[key]
            GlobalScope.launch { work() }
            Thread.sleep(1000)
            try {
                read()
            } catch (e: Exception) {}
            for (i in 0 until n) {
                for (j in 0 until n) {
                    total += "x" + i
                }
            }
            Log.d(TAG, "token=" + token)
            return total / n
        }
    }
""")


def _score(scorer, code):
    code = textwrap.dedent(code)
    return scorer(split_lines(code), code)


class TestAnalyzeHealth:
    def test_empty_input(self):
        health = analyze_health("")
        assert health.issues == ()
        assert health.summary == "✅ Excellent! No issues detected."
        assert health.readability == 9
        assert health.complexity == 10
        assert health.overall_score == 98

    def test_bounds(self):
        health = analyze_health(MESSY_KOTLIN)
        for score in health.dimensions.values():
            assert 1 <= score <= 10
        assert 0 <= health.overall_score <= 100
        assert len(health.issues) <= 15
        assert len(health.best_practices) <= MAX_PRACTICES

    def test_issues_sorted_by_severity(self):
        ordinals = [i.severity.ordinal for i in analyze_health(MESSY_KOTLIN).issues]
        assert ordinals == sorted(ordinals)

    def test_deterministic(self):
        assert analyze_health(MESSY_KOTLIN) == analyze_health(MESSY_KOTLIN)

    def test_messy_code_scores_lower(self, clean_kotlin):
        assert analyze_health(MESSY_KOTLIN).overall_score < analyze_health(clean_kotlin).overall_score

    def test_very_long_function(self):
        code = "\n".join(["fun process() {"] + ["    step()"] * 65 + ["}"])
        health = analyze_health(code)
        long_fn = [i for i in health.issues if i.title == "Very Long Function"]
        assert len(long_fn) == 1
        assert long_fn[0].severity == Severity.HIGH
        assert "'process' at line 1 is 67 lines" in long_fn[0].description
        assert health.readability < 7

    def test_metrics_attached(self, clean_kotlin):
        health = analyze_health(clean_kotlin)
        assert health.metrics.function_count == 1


class TestOverallAndSummary:
    def test_weights(self):
        names = ("bug_risk", "security", "performance", "readability", "complexity")
        assert overall_score(dict.fromkeys(names, 10)) == 100
        assert overall_score(dict.fromkeys(names, 1)) == 10

    def test_summary_buckets(self):
        low = [HealthIssue(Severity.LOW, "t", "d")]
        assert build_summary(90, low).startswith("👍 1 minor issues")
        assert build_summary(65, low).startswith("📋 1 issues found")
        assert build_summary(45, low).startswith("⚡ 1 issues")
        assert build_summary(20, low).startswith("🔧 1 issues")
        high = [HealthIssue(Severity.HIGH, "t", "d")]
        assert build_summary(90, high).startswith("⚠️ 1 issues (1 high priority)")


class TestScorecard:
    def test_cap_keeps_first_issues(self):
        card = Scorecard(cap=2)
        for n in range(3):
            card.report(1, Severity.LOW, f"Issue {n}", "d")
        score, issues = card.result()
        assert score == 7
        assert [i.title for i in issues] == ["Issue 0", "Issue 1"]

    def test_clamped_to_one(self):
        card = Scorecard()
        card.deduct(50)
        assert card.result()[0] == 1


class TestBugRisk:
    def test_force_unwrap(self):
        score, issues = _score(score_bug_risk, "val n = user!!.name\n")
        assert score == 9
        assert [(i.title, i.severity) for i in issues] == [("Force Unwrap (!!)", Severity.HIGH)]

    def test_force_unwrap_deduction_capped_per_line(self):
        score, _ = _score(score_bug_risk, "val n = a!!.x + b!!.y + c!!.z\n")
        assert score == 8

    def test_empty_catch(self):
        _, issues = _score(score_bug_risk, "try { read() } catch (e: IOException) {}\n")
        assert "Empty Catch Block" in [i.title for i in issues]

    def test_global_scope(self):
        score, issues = _score(score_bug_risk, "GlobalScope.launch { work() }\n")
        assert score == 8
        assert issues[0].title == "GlobalScope Usage"


class TestPerformance:
    def test_thread_sleep(self):
        score, issues = _score(score_performance, "Thread.sleep(1000)\n")
        assert score == 8
        assert [i.title for i in issues] == ["Thread.sleep() Blocks Thread"]

    def test_commented_out_code_ignored(self):
        score, issues = _score(score_performance, """\
            fun a() {
                // never call Thread.sleep(100) here
                // val s = ArrayList<String>()
                val x = 1
            }
        """)
        assert (score, issues) == (10, [])

    def test_commented_sleep_not_reported(self):
        health = analyze_health("fun a() {\n    // never call Thread.sleep(100) here\n    val x = 1\n}\n")
        assert health.performance == 10
        assert "Thread.sleep() Blocks Thread" not in [i.title for i in health.issues]

    def test_nested_loop(self):
        score, issues = _score(score_performance, """\
            for (a in xs) {
                for (b in ys) {
                    use(a, b)
                }
            }
        """)
        assert score == 8
        assert [i.title for i in issues] == ["Nested Loop (O(n²))"]


class TestSecurityDimension:
    def test_clean(self, clean_kotlin):
        assert score_security(split_lines(clean_kotlin), clean_kotlin) == (10, [])

    def test_hardcoded_secret(self):
        score, issues = _score(score_security, 'val apiKey = "abcdef12345"\n')
        assert score == 7
        assert issues[0].severity == Severity.CRITICAL

    def test_weak_crypto_names_algorithm(self):
        _, issues = _score(score_security, 'val md = MessageDigest.getInstance("md5")\n')
        assert [i.title for i in issues] == ["Weak Crypto: MD5"]


class TestComplexity:
    def test_nesting_peak(self):
        assert nesting_peak(["a {", "b {", "}", "}"]) == (2, 2)
        assert nesting_peak(["// {{{", "a {", "}"]) == (1, 2)

    def test_decisions_ignore_when_arrows(self):
        lines = ["if (a && b) {", "// if (c)", "    x -> y", "}"]
        assert decision_points(lines, count_arrows=False) == 2

    def test_commented_braces_do_not_nest(self):
        assert _score(score_complexity, "// {{{{{{{\nval a = 1\n") == (10, [])

    def test_extract_function_body(self):
        body = extract_function_body("fun f(x: Int) { if (x > 0) { g() } }", "f")
        assert "g()" in body
        assert extract_function_body("fun f(x: Int) { open", "f") is None
        assert extract_function_body("val x = 1", "f") is None

    def test_recursion_with_base_case(self):
        score, issues = _score(score_complexity, """\
            fun fact(n: Int): Int {
                if (n <= 1) return 1
                return n * fact(n - 1)
            }
        """)
        assert [(i.title, i.severity) for i in issues] == [("Recursion: fact()", Severity.LOW)]
        assert score == 9

    def test_flat_small_file_gets_bonus(self):
        assert _score(score_complexity, "val a = 1\n")[0] == 10


class TestReadability:
    def test_function_spans(self):
        lines = ["fun a() {", "    b()", "}", "", "fun c() {", "}"]
        assert function_spans(lines) == [(1, 3, "a"), (5, 2, "c")]

    def test_long_function_names_span(self):
        code = "\n".join(["fun work() {"] + ["    step()"] * 43 + ["}"])
        _, issues = score_readability(split_lines(code), code)
        long_fn = [i for i in issues if i.title == "Long Function"]
        assert len(long_fn) == 1
        assert long_fn[0].severity == Severity.MEDIUM
        assert "'work' at line 1 is 45 lines" in long_fn[0].description


class TestStyle:
    def test_is_inside_block(self):
        lines = ["companion object {", "    val ctx: Context? = null", "}", "val other: Context"]
        assert is_inside_block(lines, 1, "companion object")
        assert not is_inside_block(lines, 3, "companion object")

    def test_null_check(self):
        lines = ["if (user != null) {", "}"]
        assert [i.title for i in check_idioms(lines, "\n".join(lines))] == ["Non-Idiomatic Null Check"]

    def test_context_leak(self):
        lines = [
            "class Screen {",
            "    companion object {",
            "        var activity: Activity? = null",
            "    }",
            "}",
        ]
        issues = check_android(lines, "\n".join(lines))
        assert [(i.title, i.severity) for i in issues] == [("Context Leak Risk", Severity.HIGH)]

    def test_pass_capped_at_three(self):
        lines = ["// set a"] * 5
        assert len(check_smells(lines, "\n".join(lines))) == 3


class TestBestPractices:
    def test_clean_sample(self, clean_kotlin):
        practices = detect_best_practices(split_lines(clean_kotlin), clean_kotlin)
        assert practices == [
            "Good immutability: 2/2 declarations use val",
            "Uses data classes for value objects",
            "Good function length (avg 3 lines)",
        ]

    def test_empty_input(self):
        assert detect_best_practices([""], "") == []
