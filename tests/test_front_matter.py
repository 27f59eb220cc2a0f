"""
Tests for the front matter reader — delimiters, body, errors and hints.
"""

import textwrap
from pathlib import Path

from scaffoldkit.adapters.mock import MemoryFileSystem
from scaffoldkit.core.engine.front_matter import (
    HINT_ACTION_COLON,
    HINT_QUESTION_FIELDS,
    HINT_QUOTE_TEMPLATE,
    HINT_VARS_DATA,
    FrontMatterError,
    NoFrontMatter,
    parse_front_matter,
    read_action_file,
)
from scaffoldkit.core.errors import ActionParseError
from scaffoldkit.core.models.action import Exec, Generate, InjectMavenDependency, Vars
from scaffoldkit.core.models.action_file import ActionFile


def _parse(text: str, delimiter: str = "-"):
    return parse_front_matter(textwrap.dedent(text), delimiter)


# ── Detection ───────────────────────────────────────────────────────


class TestDetection:
    def test_empty_text(self):
        result = parse_front_matter("")
        assert isinstance(result, NoFrontMatter)

    def test_no_delimiter_on_first_line(self):
        result = parse_front_matter("Just a README\n---\n")
        assert isinstance(result, NoFrontMatter)

    def test_unclosed_header(self):
        result = _parse("""\
            ---
            action:
              generate:
                to: a.txt
        """)
        assert isinstance(result, NoFrontMatter)
        assert "not closed" in result.reason

    def test_longer_delimiters_accepted(self):
        result = _parse("""\
            -----
            action:
              generate:
                to: a.txt
            -----
            body
        """)
        assert isinstance(result, ActionFile)
        assert result.text == "body"

    def test_tilde_delimiter(self):
        result = _parse(
            """\
            ~~~
            action:
              generate:
                to: deploy.yaml
            ~~~
            ---
            kind: Service
            """,
            delimiter="~",
        )
        assert isinstance(result, ActionFile)
        assert result.text == "---\nkind: Service"


# ── Parsing ─────────────────────────────────────────────────────────


class TestParsing:
    def test_generate_with_body(self):
        result = _parse("""\
            ---
            action:
              generate:
                to: "{{ name }}.txt"
            ---
            Hello {{ name }}
            Bye
        """)
        assert isinstance(result, ActionFile)
        action = result.action
        assert isinstance(action, Generate)
        assert action.to == "{{ name }}.txt"
        assert action.overwrite is False
        assert result.text == "Hello {{ name }}\nBye"
        assert result.front_matter.engine == "jinja"

    def test_header_only_has_no_body(self):
        result = _parse("""\
            ---
            action:
              exec:
                command: ls
            ---
        """)
        assert isinstance(result, ActionFile)
        assert result.text is None

    def test_unknown_keys_are_ignored(self):
        result = _parse("""\
            ---
            action:
              generate:
                to: a.txt
                colour: blue
            something-else: 1
            ---
        """)
        assert isinstance(result, ActionFile)

    def test_exec_fields(self):
        result = _parse("""\
            ---
            action:
              exec:
                command-file: script.sh
                json-path: $.id
                define: project-id
                in: true
                continue-on-error: true
            ---
        """)
        assert isinstance(result, ActionFile)
        action = result.action
        assert isinstance(action, Exec)
        assert action.command_file == "script.sh"
        assert action.json_path == "$.id"
        assert action.define is not None and action.define.name == "project-id"
        assert action.stdin is True
        assert action.continue_on_error is True

    def test_short_maven_spelling(self):
        result = _parse("""\
            ---
            action:
              inject-dependency:
                text: <dependency/>
            ---
        """)
        assert isinstance(result, ActionFile)
        assert isinstance(result.action, InjectMavenDependency)
        assert result.action.to == "pom.xml"

    def test_vars_with_questions(self):
        result = _parse("""\
            ---
            action:
              vars:
                questions:
                  - question:
                    name: language
                    label: Which language?
                    type: dropdown
                    options:
                      choices: [java, kotlin]
                data:
                  port: 8080
            ---
        """)
        assert isinstance(result, ActionFile)
        action = result.action
        assert isinstance(action, Vars)
        assert action.questions[0].name == "language"
        assert action.questions[0].options.choices == ["java", "kotlin"]
        assert action.data == {"port": 8080}

    def test_conditional(self):
        result = _parse("""\
            ---
            action:
              generate:
                to: a.txt
            conditional:
              artifact-id: demo
              if: "name == 'x'"
            ---
        """)
        assert isinstance(result, ActionFile)
        conditional = result.front_matter.conditional
        assert conditional.artifact_id == "demo"
        assert conditional.if_ == "name == 'x'"


# ── Errors ──────────────────────────────────────────────────────────


class TestErrors:
    def test_invalid_yaml_has_location(self):
        result = _parse("""\
            ---
            action:
              generate:
                to: [unclosed
            ---
        """)
        assert isinstance(result, FrontMatterError)
        assert result.line is not None
        assert result.line >= 2

    def test_missing_action(self):
        result = _parse("""\
            ---
            engine: jinja
            ---
        """)
        assert isinstance(result, FrontMatterError)
        assert "action" in result.message

    def test_two_action_types(self):
        result = _parse("""\
            ---
            action:
              generate:
                to: a.txt
              exec:
                command: ls
            ---
        """)
        assert isinstance(result, FrontMatterError)
        assert "exactly one" in result.message

    def test_unknown_action_type(self):
        result = _parse("""\
            ---
            action:
              frobnicate:
                to: a.txt
            ---
        """)
        assert isinstance(result, FrontMatterError)
        assert "found: none" in result.message

    def test_generate_requires_to(self):
        result = _parse("""\
            ---
            action:
              generate:
                overwrite: true
            ---
        """)
        assert isinstance(result, FrontMatterError)
        assert "to" in result.message

    def test_to_exception(self):
        error = FrontMatterError("Bad header", line=3, column=5, hints=["check it"])
        exc = error.to_exception()
        assert isinstance(exc, ActionParseError)
        assert "(line 3, column 5)" in str(exc)
        assert "hint: check it" in str(exc)


class TestHints:
    def test_missing_colon_after_action(self):
        result = _parse("""\
            ---
            action
              generate:
                to: a.txt
            ---
        """)
        assert isinstance(result, FrontMatterError)
        assert HINT_ACTION_COLON in result.hints

    def test_unquoted_template(self):
        result = _parse("""\
            ---
            action:
              generate:
                to: {{ name }}.txt
            ---
        """)
        assert isinstance(result, FrontMatterError)
        assert HINT_QUOTE_TEMPLATE in result.hints

    def test_question_without_name(self):
        result = _parse("""\
            ---
            action:
              vars:
                questions:
                  - label: What name?
            ---
        """)
        assert isinstance(result, FrontMatterError)
        assert HINT_QUESTION_FIELDS in result.hints

    def test_vars_data_not_a_mapping(self):
        result = _parse("""\
            ---
            action:
              vars:
                data: [a, b]
            ---
        """)
        assert isinstance(result, FrontMatterError)
        assert HINT_VARS_DATA in result.hints


# ── Reading files ───────────────────────────────────────────────────


class TestReadActionFile:
    def test_reads_through_filesystem(self):
        path = Path("/p/hello.txt")
        fs = MemoryFileSystem({path: "---\naction:\n  generate:\n    to: out.txt\n---\nHi\n"})
        result = read_action_file(path, fs)
        assert isinstance(result, ActionFile)
        assert result.path == str(path)
        assert result.text == "Hi"

    def test_falls_back_to_tilde(self):
        path = Path("/p/deploy.yaml")
        text = "~~~\naction:\n  generate:\n    to: k8s/deploy.yaml\n~~~\n---\nkind: Deployment\n"
        result = read_action_file(path, MemoryFileSystem({path: text}))
        assert isinstance(result, ActionFile)
        assert result.text == "---\nkind: Deployment"

    def test_keeps_first_error_when_fallback_fails(self):
        path = Path("/p/broken.txt")
        text = "---\naction:\n  generate:\n    to: [x\n---\n"
        result = read_action_file(path, MemoryFileSystem({path: text}))
        assert isinstance(result, FrontMatterError)

    def test_plain_file(self):
        path = Path("/p/notes.md")
        result = read_action_file(path, MemoryFileSystem({path: "# Notes\n"}))
        assert isinstance(result, NoFrontMatter)
