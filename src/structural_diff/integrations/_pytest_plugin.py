"""pytest plugin for structural-diff.

Auto-discovered by pytest via the pytest11 entry point declared in pyproject.toml.
When the package is installed (even in editable mode), pytest discovers this plugin
automatically -- no conftest.py changes are needed.

Source: https://docs.pytest.org/en/stable/how-to/writing_plugins.html
"""

from __future__ import annotations

from typing import Any

import pytest

from structural_diff import ComparatorConfig, compare, summarize


@pytest.fixture(scope="session")
def assert_structurally_equal() -> Any:
    """Fixture that returns a callable structural equality asserter.

    The fixture is session-scoped because the returned callable is stateless
    (delegates to compare() which creates a fresh Comparator per call).

    Usage in tests::

        def test_roundtrip(assert_structurally_equal):
            assert_structurally_equal(load(dump(config)), config)

        def test_detects_change(assert_structurally_equal):
            with pytest.raises(AssertionError, match=r"changed="):
                assert_structurally_equal({"a": 1}, {"a": 2})

    Returns:
        A callable ``_assert(actual, expected, config=None) -> None`` that
        raises ``AssertionError`` when the diff tree contains any change.
    """

    def _assert(
        actual: Any,
        expected: Any,
        config: ComparatorConfig | None = None,
    ) -> None:
        """Assert that two values are structurally identical.

        ``expected`` is the old side and ``actual`` the new side, so a key
        present only in ``actual`` is reported as created.

        Args:
            actual:   The value produced by the code under test.
            expected: The reference value.
            config:   Optional ComparatorConfig for custom tags or alignment.

        Raises:
            AssertionError: When any leaf differs, with a message listing the
                counts and the changed paths.
        """
        summary = summarize(compare(expected, actual, config=config))
        if not summary.is_equal:
            raise AssertionError(
                f"values not structurally equal: changed={summary.total} "
                f"(created={summary.created}, deleted={summary.deleted}, "
                f"modified={summary.modified})\n"
                f"  actual:   {actual!r}\n"
                f"  expected: {expected!r}\n"
                f"  changed_paths: {summary.changed_paths}"
            )

    return _assert
