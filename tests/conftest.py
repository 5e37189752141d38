"""Shared test fixtures for codeaudit."""

import textwrap

import pytest

# Avoids every compliance trigger word (e.g. "age" inside "package").
CLEAN_KOTLIN = """\
    import kotlin.math.max

    data class Order(val id: Long, val total: Int)

    fun totalOf(orders: List<Order>): Int {
        return orders.sumOf { it.total }
    }
"""


@pytest.fixture
def source():
    """Dedent an inline code sample."""
    def _dedent(code):
        return textwrap.dedent(code)
    return _dedent


@pytest.fixture
def clean_kotlin():
    return textwrap.dedent(CLEAN_KOTLIN)


@pytest.fixture
def tmp_kotlin_file(tmp_path):
    """Create a temporary Kotlin file with given content."""
    def _create(content, name="Main.kt"):
        f = tmp_path / name
        f.write_text(textwrap.dedent(content))
        return f
    return _create
