"""Tests for specir.parser.loader."""

from __future__ import annotations

import io
import json
import textwrap
from pathlib import Path
from unittest.mock import patch

import httpx
import pytest

from specir.exceptions import SpecParseError
from specir.parser.loader import (
    _load_from_file,
    _load_from_stdin,
    _load_from_url,
    _parse_content,
    load_document,
    load_spec,
    validate_openapi_version,
)

FIXTURES_DIR = Path(__file__).parent.parent / "fixtures"


def _response(status: int, url: str, **kwargs) -> httpx.Response:
    return httpx.Response(status_code=status, request=httpx.Request("GET", url), **kwargs)


# ---------------------------------------------------------------------------
# load_spec dispatch
# ---------------------------------------------------------------------------


class TestLoadSpec:
    """load_spec routes each kind of source to the right reader."""

    def test_loads_json_file(self) -> None:
        result = load_spec(str(FIXTURES_DIR / "petstore.json"))
        assert result["openapi"] == "3.0.3"
        assert result["info"]["title"] == "Petstore"

    def test_loads_yaml_file(self, tmp_path: Path) -> None:
        spec_file = tmp_path / "spec.yaml"
        spec_file.write_text(
            textwrap.dedent("""\
                openapi: "3.0.3"
                info:
                  title: YAML Test
                  version: "1.0.0"
                paths: {}
            """),
            encoding="utf-8",
        )
        result = load_spec(str(spec_file))
        assert result["info"]["title"] == "YAML Test"

    def test_sniffs_yaml_without_extension(self, tmp_path: Path) -> None:
        spec_file = tmp_path / "openapi"
        spec_file.write_text("openapi: '3.1.0'\ninfo: {title: T, version: '1'}\n", encoding="utf-8")
        assert load_spec(str(spec_file))["openapi"] == "3.1.0"

    def test_dash_reads_stdin(self) -> None:
        payload = json.dumps({"openapi": "3.0.3", "info": {"title": "stdin", "version": "1"}})
        with patch("specir.parser.loader.sys") as mock_sys:
            mock_sys.stdin = io.StringIO(payload)
            result = load_spec("-")
        assert result["info"]["title"] == "stdin"

    def test_url_is_fetched_with_httpx(self) -> None:
        url = "https://example.com/openapi.json"
        spec = {"openapi": "3.0.3", "info": {"title": "Remote", "version": "1"}}
        with patch(
            "specir.parser.loader.httpx.get", return_value=_response(200, url, json=spec)
        ) as mock_get:
            result = load_spec(url)
        assert result["info"]["title"] == "Remote"
        mock_get.assert_called_once()
        assert mock_get.call_args.kwargs["follow_redirects"] is True


class TestLoadDocument:
    """load_document returns the document together with its version."""

    def test_returns_version(self) -> None:
        document, version = load_document(str(FIXTURES_DIR / "petstore.json"))
        assert version == "3.0.3"
        assert "components" in document

    def test_rejects_swagger(self, tmp_path: Path) -> None:
        spec_file = tmp_path / "swagger.json"
        spec_file.write_text(json.dumps({"swagger": "2.0", "info": {}}), encoding="utf-8")
        with pytest.raises(SpecParseError, match="Swagger 2.0 is not supported"):
            load_document(str(spec_file))


# ---------------------------------------------------------------------------
# Individual readers
# ---------------------------------------------------------------------------


class TestLoadFromFile:
    """Reading documents from disk."""

    def test_missing_file(self) -> None:
        with pytest.raises(SpecParseError, match="not found"):
            _load_from_file("/nonexistent/spec.json")

    def test_empty_file(self, tmp_path: Path) -> None:
        empty = tmp_path / "empty.json"
        empty.write_text("   \n", encoding="utf-8")
        with pytest.raises(SpecParseError, match="empty"):
            _load_from_file(str(empty))

    def test_invalid_json_with_json_extension(self, tmp_path: Path) -> None:
        bad = tmp_path / "bad.json"
        bad.write_text("{not json", encoding="utf-8")
        with pytest.raises(SpecParseError, match="Invalid JSON"):
            _load_from_file(str(bad))

    def test_top_level_array_rejected(self, tmp_path: Path) -> None:
        array_file = tmp_path / "array.json"
        array_file.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(SpecParseError, match="must be a JSON/YAML object"):
            _load_from_file(str(array_file))


class TestLoadFromStdin:
    """Reading documents from stdin."""

    def test_yaml_from_stdin(self) -> None:
        with patch("specir.parser.loader.sys") as mock_sys:
            mock_sys.stdin = io.StringIO("openapi: '3.0.0'\ninfo:\n  title: Piped\n")
            result = _load_from_stdin()
        assert result["info"]["title"] == "Piped"

    def test_blank_stdin(self) -> None:
        with patch("specir.parser.loader.sys") as mock_sys:
            mock_sys.stdin = io.StringIO(" \n\t")
            with pytest.raises(SpecParseError, match="No input"):
                _load_from_stdin()


class TestLoadFromUrl:
    """Fetching documents over HTTP."""

    def test_yaml_content_type(self) -> None:
        url = "https://example.com/openapi"
        response = _response(
            200,
            url,
            text="openapi: '3.0.1'\ninfo: {title: Y, version: '1'}\n",
            headers={"content-type": "application/yaml"},
        )
        with patch("specir.parser.loader.httpx.get", return_value=response):
            assert _load_from_url(url)["openapi"] == "3.0.1"

    def test_http_error_status(self) -> None:
        url = "https://example.com/missing.json"
        with patch("specir.parser.loader.httpx.get", return_value=_response(404, url)):
            with pytest.raises(SpecParseError, match="HTTP 404"):
                _load_from_url(url)

    def test_network_error(self) -> None:
        url = "https://unreachable.example.com/spec.json"
        error = httpx.ConnectError("connection refused", request=httpx.Request("GET", url))
        with patch("specir.parser.loader.httpx.get", side_effect=error):
            with pytest.raises(SpecParseError, match="Failed to fetch"):
                _load_from_url(url)


class TestParseContent:
    """JSON-first parsing with YAML fallback."""

    def test_json(self) -> None:
        assert _parse_content('{"openapi": "3.0.0"}') == {"openapi": "3.0.0"}

    def test_yaml_fallback(self) -> None:
        assert _parse_content("openapi: 3.0.0\n")["openapi"] == "3.0.0"

    def test_neither_parses(self) -> None:
        with pytest.raises(SpecParseError, match="Failed to parse spec"):
            _parse_content("{ this: is: [not valid")

    def test_scalar_rejected(self) -> None:
        with pytest.raises(SpecParseError, match="must be a JSON/YAML object"):
            _parse_content("just a string")


class TestValidateOpenapiVersion:
    """Only OpenAPI 3.x documents are accepted."""

    @pytest.mark.parametrize("version", ["3.0.0", "3.0.3", "3.1.0"])
    def test_accepts_3x(self, version: str) -> None:
        assert validate_openapi_version({"openapi": version}) == version

    def test_missing_field(self) -> None:
        with pytest.raises(SpecParseError, match="Missing 'openapi' field"):
            validate_openapi_version({"info": {}})

    def test_rejects_other_major(self) -> None:
        with pytest.raises(SpecParseError, match="Unsupported OpenAPI version: 4.0.0"):
            validate_openapi_version({"openapi": "4.0.0"})
