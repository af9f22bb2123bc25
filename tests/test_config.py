"""Tests for querycodec.config -- QueryConfig and StringifyOptions frozen dataclasses."""

import pytest

from querycodec.config import QueryConfig, StringifyOptions


class TestStringifyOptions:
    def test_defaults(self) -> None:
        opts = StringifyOptions()

        assert opts.sort is True
        assert opts.skip_none is False
        assert opts.skip_empty_string is False
        assert opts.transform_search_string is None

    def test_override(self) -> None:
        opts = StringifyOptions(sort=False, transform_search_string=str.upper)

        assert opts.sort is False
        assert opts.transform_search_string is str.upper

    def test_frozen(self) -> None:
        opts = StringifyOptions()

        with pytest.raises(AttributeError):
            opts.sort = False  # type: ignore[misc]


class TestQueryConfig:
    def test_defaults(self) -> None:
        cfg = QueryConfig()

        assert cfg.debug is False
        assert cfg.stringify == StringifyOptions()

    def test_override(self) -> None:
        cfg = QueryConfig(debug=True, stringify=StringifyOptions(skip_none=True))

        assert cfg.debug is True
        assert cfg.stringify.skip_none is True

    def test_frozen(self) -> None:
        cfg = QueryConfig()

        with pytest.raises(AttributeError):
            cfg.debug = True  # type: ignore[misc]
