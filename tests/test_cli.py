"""
Tests for the index-preprocessor command line.
"""
import json

from typer.testing import CliRunner

from index_preprocessor.cli import app

runner = CliRunner()


class TestSupports:
    """mdBook asks `supports <renderer>` before running the preprocessor."""

    def test_supported(self):
        assert runner.invoke(app, ["supports", "html"]).exit_code == 0
        assert runner.invoke(app, ["supports", "asciidoc"]).exit_code == 0

    def test_not_supported(self):
        assert runner.invoke(app, ["supports", "not-supported"]).exit_code == 1


class TestPreprocess:
    """Running without a command processes the book from stdin."""

    def test_processes_book(self, mdbook_payload):
        result = runner.invoke(app, [], input=json.dumps(mdbook_payload))

        assert result.exit_code == 0, result.output
        out = json.loads(result.stdout)
        chapters = [item["Chapter"] for item in out["sections"] if isinstance(item, dict) and "Chapter" in item]
        basics, index_chapter = chapters
        assert basics["content"].startswith('See the unit type<a name="a001"></a>')
        assert index_chapter["content"] == (
            "# Index\n\n"
            "Option, [1](basics.md#a002)<br/>\n"
            "internal, [1](basics.md#a003)<br/>\n"
            "unit type, [1](basics.md#a001)<br/>\n"
        )
        assert out["sections"][1] == "Separator"
        assert "__non_exhaustive" in out

    def test_skip_renderer(self, mdbook_payload):
        mdbook_payload[0]["config"]["preprocessor"]["indexing"]["skip_renderer"] = "html"

        result = runner.invoke(app, [], input=json.dumps(mdbook_payload))

        assert result.exit_code == 0, result.output
        out = json.loads(result.stdout)
        assert out["sections"][0]["Chapter"]["content"] == "See the unit type *Option* and  detail."
        assert out["sections"][3]["Chapter"]["content"] == "placeholder"

    def test_bad_config_fails_build(self, mdbook_payload):
        mdbook_payload[0]["config"]["preprocessor"]["indexing"]["see_instead"] = "nope"

        result = runner.invoke(app, [], input=json.dumps(mdbook_payload))

        assert result.exit_code == 1
        assert "Error" in result.output

    def test_malformed_input_fails_build(self):
        result = runner.invoke(app, [], input="not json")

        assert result.exit_code == 1
        assert "Error" in result.output


class TestAuthorCommands:
    """check-config and render-index."""

    def test_check_config(self, tmp_path):
        path = tmp_path / "book.toml"
        path.write_text(
            '[preprocessor.indexing]\nskip_renderer = "markdown"\n\n'
            '[preprocessor.indexing.nest_under]\n"generic type" = "generics"\n',
            encoding="utf-8",
        )

        result = runner.invoke(app, ["check-config", str(path)])

        assert result.exit_code == 0, result.output
        assert "Skip renderers: markdown" in result.output
        assert "generic type → under generics" in result.output

    def test_check_config_type_error(self, tmp_path):
        path = tmp_path / "book.toml"
        path.write_text("[preprocessor.indexing]\nuse_chapter_names = 1\n", encoding="utf-8")

        result = runner.invoke(app, ["check-config", str(path)])

        assert result.exit_code == 1

    def test_check_config_missing_file(self, tmp_path):
        result = runner.invoke(app, ["check-config", str(tmp_path / "absent.toml")])

        assert result.exit_code == 1

    def test_render_index(self, tmp_path, mdbook_payload):
        path = tmp_path / "input.json"
        path.write_text(json.dumps(mdbook_payload), encoding="utf-8")

        result = runner.invoke(app, ["render-index", str(path)])

        assert result.exit_code == 0, result.output
        assert result.stdout.startswith("# Index\n\nOption, [1](basics.md#a002)")

    def test_render_index_asciidoc(self, tmp_path, mdbook_payload):
        path = tmp_path / "input.json"
        path.write_text(json.dumps(mdbook_payload), encoding="utf-8")

        result = runner.invoke(app, ["render-index", str(path), "--renderer", "asciidoc"])

        assert result.exit_code == 0, result.output
        assert result.stdout == "[index]\n== Index\n"
