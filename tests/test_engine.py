"""Tests for querycodec.engine -- bulk encode/decode through a param config map."""

import logging
from datetime import date

import pytest

from querycodec._internal.types import UNDEFINED
from querycodec.config import QueryConfig, StringifyOptions
from querycodec.engine import (
    ParamConfigMap,
    decode_query_params,
    encode_query_params,
    log_diagnostic,
)
from querycodec.errors import ConfigurationError
from querycodec.location import Location
from querycodec.params import (
    DATE,
    DELIMITED_ARRAY,
    NUMBER,
    STRING,
    with_default,
)
from querycodec.serialize import decode_number


class TestEncodeQueryParams:
    def test_configured_keys(self) -> None:
        config = {"page": NUMBER, "since": DATE}
        encoded = encode_query_params(config, {"page": 2, "since": date(2015, 10, 1)})
        assert encoded == {"page": "2", "since": "2015-10-01"}

    def test_only_supplied_keys(self) -> None:
        config = {"page": NUMBER, "q": STRING}
        assert encode_query_params(config, {"q": "owl"}) == {"q": "owl"}

    def test_unconfigured_key_falls_back_to_text(self) -> None:
        assert encode_query_params({}, {"x": "hello"}) == {"x": "hello"}
        assert encode_query_params({}, {"n": 3, "flag": True}) == {"n": "3", "flag": "true"}

    def test_unconfigured_absent_values_pass_through(self) -> None:
        encoded = encode_query_params({}, {"a": None, "b": UNDEFINED})
        assert encoded["a"] is None
        assert encoded["b"] is UNDEFINED

    def test_unconfigured_key_reports_diagnostic(self) -> None:
        messages: list[str] = []
        encode_query_params({}, {"x": "hello"}, warn=messages.append)
        assert messages == ["Encoding parameter x as string since it was not configured."]

    def test_configured_key_reports_nothing(self) -> None:
        messages: list[str] = []
        encode_query_params({"x": STRING}, {"x": "hello"}, warn=messages.append)
        assert messages == []

    def test_failing_sink_does_not_interrupt(self, caplog: pytest.LogCaptureFixture) -> None:
        def broken(message: str) -> None:
            raise RuntimeError("sink is down")

        with caplog.at_level(logging.ERROR, logger="querycodec.engine"):
            encoded = encode_query_params({"b": NUMBER}, {"a": 1, "b": 2}, warn=broken)

        assert encoded == {"a": "1", "b": "2"}
        assert "Diagnostic sink raised" in caplog.text

    def test_input_not_mutated(self) -> None:
        query = {"page": 2}
        encode_query_params({"page": NUMBER}, query)
        assert query == {"page": 2}


class TestDecodeQueryParams:
    def test_configured_keys(self) -> None:
        config = {"page": NUMBER, "tags": DELIMITED_ARRAY}
        decoded = decode_query_params(config, {"page": "2", "tags": "a_b"})
        assert decoded == {"page": 2, "tags": ["a", "b"]}

    def test_configured_key_missing_from_input(self) -> None:
        decoded = decode_query_params({"foo": NUMBER}, {})
        assert decoded == {"foo": decode_number(UNDEFINED)}
        assert decoded["foo"] is UNDEFINED

    def test_configured_key_with_default(self) -> None:
        decoded = decode_query_params({"page": with_default(NUMBER, 1)}, {})
        assert decoded == {"page": 1}

    def test_unconfigured_key_passes_through(self) -> None:
        assert decode_query_params({}, {"bar": "1"}) == {"bar": "1"}

    def test_unconfigured_list_passes_through(self) -> None:
        values = ["1", "2"]
        assert decode_query_params({}, {"bar": values})["bar"] is values

    def test_key_order(self) -> None:
        config = {"b": NUMBER, "a": NUMBER}
        decoded = decode_query_params(config, {"z": "1", "a": "2"})
        assert list(decoded) == ["b", "a", "z"]

    def test_unconfigured_key_reports_diagnostic(self) -> None:
        messages: list[str] = []
        decode_query_params({"page": NUMBER}, {"bar": "1"}, warn=messages.append)
        assert messages == ["Passing through parameter bar during decoding since it was not configured."]

    def test_explicit_none_is_not_undefined(self) -> None:
        decoded = decode_query_params({"flag": STRING}, {"flag": None})
        assert decoded["flag"] is None

    def test_round_trip(self) -> None:
        config = {"page": NUMBER, "tags": DELIMITED_ARRAY, "since": DATE, "q": STRING}
        values = {"page": 4, "tags": ["x", "y"], "since": date(2020, 1, 31), "q": ""}
        assert decode_query_params(config, encode_query_params(config, values)) == values


class TestLogDiagnostic:
    def test_logs_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="querycodec.engine"):
            log_diagnostic("something odd")
        assert caplog.records[0].levelno == logging.WARNING
        assert caplog.records[0].getMessage() == "something odd"


class TestParamConfigMap:
    def test_mapping_interface(self) -> None:
        params = ParamConfigMap(page=NUMBER, q=STRING)
        assert params["page"] is NUMBER
        assert set(params) == {"page", "q"}
        assert len(params) == 2
        assert "q" in params

    def test_codec_names_resolve(self) -> None:
        params = ParamConfigMap({"page": "number", "tags": "delimited_array"})
        assert params["page"] is NUMBER
        assert params["tags"] is DELIMITED_ARRAY

    def test_unknown_name_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="Unknown codec"):
            ParamConfigMap(page="integer")

    def test_invalid_value_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="'page' must map to a Codec"):
            ParamConfigMap(page=42)  # type: ignore[arg-type]

    def test_keywords_override_mapping(self) -> None:
        params = ParamConfigMap({"page": STRING}, page=NUMBER)
        assert params["page"] is NUMBER

    def test_param_named_config(self) -> None:
        params = ParamConfigMap({"config": STRING})
        assert params["config"] is STRING
        assert params.config == QueryConfig()

    def test_immutable(self) -> None:
        params = ParamConfigMap(page=NUMBER)
        with pytest.raises(TypeError):
            params["q"] = STRING  # type: ignore[index]

    def test_source_mapping_copied(self) -> None:
        source = {"page": NUMBER}
        params = ParamConfigMap(source)
        source["q"] = STRING
        assert "q" not in params

    def test_merge(self) -> None:
        params = ParamConfigMap(page=NUMBER)
        merged = params.merge({"q": "string"})
        assert set(merged) == {"page", "q"}
        assert set(params) == {"page"}

    def test_with_config(self) -> None:
        params = ParamConfigMap(page=NUMBER).with_config(QueryConfig(debug=True))
        assert params.config.debug is True
        assert params["page"] is NUMBER

    def test_repr(self) -> None:
        assert repr(ParamConfigMap(page=NUMBER)) == "ParamConfigMap({'page': Codec('number')})"

    def test_encode_decode(self) -> None:
        params = ParamConfigMap(page=NUMBER, tags=DELIMITED_ARRAY)
        assert params.encode({"page": 3}) == {"page": "3"}
        assert params.decode({"page": "2", "tags": "a_b"}) == {"page": 2, "tags": ["a", "b"]}

    def test_quiet_by_default(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="querycodec.engine"):
            ParamConfigMap().encode({"x": "hello"})
        assert caplog.records == []

    def test_debug_logs_unconfigured_keys(self, caplog: pytest.LogCaptureFixture) -> None:
        params = ParamConfigMap(config=QueryConfig(debug=True))
        with caplog.at_level(logging.WARNING, logger="querycodec.engine"):
            assert params.encode({"x": "hello"}) == {"x": "hello"}
            assert params.decode({"y": "1"}) == {"y": "1"}
        assert [r.getMessage() for r in caplog.records] == [
            "Encoding parameter x as string since it was not configured.",
            "Passing through parameter y during decoding since it was not configured.",
        ]


class TestParamConfigMapLocation:
    def test_update_location_encodes_through_codecs(self) -> None:
        params = ParamConfigMap(page=NUMBER, tags=DELIMITED_ARRAY)
        loc = Location.from_url("https://example.com/items?q=owl")
        updated = params.update_location({"page": 3, "tags": ["a", "b"]}, loc)
        assert updated.href == "https://example.com/items?page=3&tags=a_b"
        assert updated.query == {"page": "3", "tags": "a_b"}

    def test_update_in_location_keeps_existing(self) -> None:
        params = ParamConfigMap(page=NUMBER)
        loc = Location.from_url("/items?q=owl&page=1")
        updated = params.update_in_location({"page": 2}, loc)
        assert updated.search == "?page=2&q=owl"

    def test_uses_configured_stringify_options(self) -> None:
        config = QueryConfig(stringify=StringifyOptions(sort=False, skip_none=True))
        params = ParamConfigMap(page=NUMBER, day=DATE, config=config)
        loc = Location.from_url("/items")
        updated = params.update_location({"page": 2, "day": None, "q": "owl"}, loc)
        assert updated.search == "?page=2&q=owl"
