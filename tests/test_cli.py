"""
Tests for the substitute CLI.
Covers rendering, checking, variable sources and exit codes.
"""

import os
from unittest.mock import patch

import pytest

from substituter.cli.main import create_parser, main


@pytest.fixture
def template_file(tmp_path):
    path = tmp_path / "greeting.txt"
    path.write_text("Hello @{user} from @h (@@support)\n")
    return path


class TestRender:
    """Test the render command."""

    def test_render_to_file(self, tmp_path, template_file):
        out_path = tmp_path / "out" / "greeting.txt"

        exit_code = main([
            'render', str(template_file),
            '--var', 'user=ada', '--var', 'h=host1',
            '--out', str(out_path),
        ])

        assert exit_code == 0
        assert out_path.read_text() == "Hello ada from host1 (@support)\n"

    def test_render_to_stdout(self, template_file, capsys):
        exit_code = main(['render', str(template_file), '--var', 'user=ada', '--var', 'h=x'])

        assert exit_code == 0
        assert capsys.readouterr().out == "Hello ada from x (@support)\n"

    def test_vars_file_and_override(self, tmp_path, template_file, capsys):
        vars_path = tmp_path / "vars.yaml"
        vars_path.write_text("user: grace\nh: 42\n")

        exit_code = main([
            'render', str(template_file),
            '--vars', str(vars_path), '--var', 'user=ada',
        ])

        assert exit_code == 0
        assert capsys.readouterr().out == "Hello ada from 42 (@support)\n"

    def test_json_vars_file(self, tmp_path, template_file, capsys):
        vars_path = tmp_path / "vars.json"
        vars_path.write_text('{"user": "linus", "h": "box"}')

        assert main(['render', str(template_file), '--vars', str(vars_path)]) == 0
        assert capsys.readouterr().out == "Hello linus from box (@support)\n"

    def test_env_variables(self, template_file, capsys):
        with patch.dict(os.environ, {'user': 'from-env'}):
            exit_code = main(['render', str(template_file), '--env', 'user', '--var', 'h=x'])

        assert exit_code == 0
        assert capsys.readouterr().out == "Hello from-env from x (@support)\n"

    def test_env_collision(self, template_file):
        exit_code = main(['render', str(template_file), '--var', 'user=a', '--env', 'user'])
        assert exit_code == 2

    def test_undefined_variable_strict(self, template_file, capsys):
        exit_code = main(['render', str(template_file), '--var', 'user=ada'])

        assert exit_code == 2
        assert capsys.readouterr().out == ""

    def test_undefined_variable_lenient(self, template_file, capsys):
        exit_code = main(['render', str(template_file), '--var', 'user=ada', '--lenient'])

        assert exit_code == 0
        assert capsys.readouterr().out == "Hello ada from @h (@support)\n"

    def test_missing_template(self, tmp_path):
        assert main(['render', str(tmp_path / "absent.txt")]) == 1

    def test_template_path_is_directory(self, tmp_path):
        assert main(['render', str(tmp_path)]) == 1

    def test_invalid_var_pair(self, template_file):
        assert main(['render', str(template_file), '--var', 'novalue']) == 2

    def test_vars_file_must_be_mapping(self, tmp_path, template_file):
        vars_path = tmp_path / "vars.yaml"
        vars_path.write_text("- a\n- b\n")
        assert main(['render', str(template_file), '--vars', str(vars_path)]) == 2


class TestCheck:
    """Test the check command."""

    def test_lists_referenced_names(self, template_file, capsys):
        exit_code = main(['check', str(template_file), '--var', 'user=', '--var', 'h=', '--var', 'unused='])

        assert exit_code == 0
        assert capsys.readouterr().out.split() == ['user', 'h']

    def test_strict_failure(self, template_file):
        assert main(['check', str(template_file)]) == 2

    def test_unreadable_template_path(self, tmp_path):
        """A directory in place of the template file is an I/O error, exit 1."""
        assert main(['check', str(tmp_path)]) == 1

    def test_lenient_lists_resolved_only(self, template_file, capsys):
        exit_code = main(['check', str(template_file), '--var', 'h=', '--lenient'])

        assert exit_code == 0
        assert capsys.readouterr().out.split() == ['h']


class TestParser:
    """Test argument parsing."""

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 1
        assert 'usage' in capsys.readouterr().out

    def test_repeatable_options(self):
        args = create_parser().parse_args(['render', 't', '--var', 'a=1', '--var', 'b=2', '--env', 'HOME'])
        assert args.var == ['a=1', 'b=2']
        assert args.env == ['HOME']
        assert args.lenient is False
