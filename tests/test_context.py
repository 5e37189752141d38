"""Tests for the lexical data-flow context."""

from codeaudit.context import build_context


class TestBuildContext:
    def test_kotlin_typed_parameters(self):
        ctx = build_context(["fun load(userId: String, limit: Int) {", "}"])
        assert ctx.function_params == {"userId", "limit"}

    def test_python_parameters_skip_self(self):
        ctx = build_context(["def fetch(self, query, page=1):", "    pass"])
        assert ctx.function_params == {"query", "page"}

    def test_intent_extra_is_user_input(self):
        ctx = build_context(['val nickname = intent.getStringExtra("nick")'])
        assert "nickname" in ctx.user_input_vars

    def test_database_call_arguments(self):
        ctx = build_context(["db.rawQuery(sql, args)"])
        assert "args" in ctx.database_vars

    def test_file_call_arguments(self):
        ctx = build_context(["val f = File(baseDir, fileName)"])
        assert "fileName" in ctx.file_vars

    def test_is_tainted(self):
        ctx = build_context(["fun find(userId: String) {", "}"])
        assert ctx.is_tainted('query("SELECT " + userId)')
        assert not ctx.is_tainted('query("SELECT 1")')

    def test_empty_context(self):
        ctx = build_context([""])
        assert not ctx.function_params
        assert not ctx.is_tainted("anything")
