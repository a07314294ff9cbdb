import argparse
import os
import sys
import shutil
import tempfile
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

import pytest

import Program
from Program import build_modification, build_parser, main, parse_contribution

FIXTURES_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), 'mcp_server_tests', 'fixtures'))


@pytest.fixture
def input_dir(monkeypatch):
    temp_dir = tempfile.mkdtemp()
    shutil.copytree(os.path.join(FIXTURES_PATH, 'testsnapshot'), os.path.join(temp_dir, 'testsnapshot'))
    monkeypatch.setattr(Program, 'INPUT_DIR', temp_dir)
    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)


def test_parse_contribution():
    assert parse_contribution('tfsa=750') == ('tfsa', 750.0)
    with pytest.raises(argparse.ArgumentTypeError):
        parse_contribution('tfsa')
    with pytest.raises(argparse.ArgumentTypeError):
        parse_contribution('=750')
    with pytest.raises(argparse.ArgumentTypeError):
        parse_contribution('tfsa=lots')


def test_parser_defaults():
    args = build_parser().parse_args(['example'])
    assert args.snapshot_name == 'example'
    assert args.mode == 'Summary'
    assert args.years == 10
    assert args.scenario == 'moderate'
    assert build_modification(args).is_empty


def test_parser_modification():
    args = build_parser().parse_args([
        'example', '--mode', 'Scenario', '--exclude-debt', 'car-loan', '--exclude-debt', 'visa',
        '--windfall', '5000', '--income-adjustment', '-100', '--contribution', 'tfsa=900',
    ])
    modification = build_modification(args)
    assert modification.excluded_debt_ids == frozenset({'car-loan', 'visa'})
    assert modification.windfall == 5000
    assert modification.income_adjustment == -100
    assert modification.contribution_overrides == (('tfsa', 900.0),)


def test_parser_rejects_unknown_mode():
    with pytest.raises(SystemExit):
        build_parser().parse_args(['example', '--mode', 'Balances'])


def test_main_summary(input_dir, capsys):
    main(['testsnapshot'])
    out = capsys.readouterr().out
    assert 'FINANCIAL SUMMARY: testsnapshot' in out
    assert '213,000.00' in out


def test_main_projection(input_dir, capsys):
    main(['testsnapshot', '-m', 'Projection', '-y', '30', '-s', 'optimistic'])
    out = capsys.readouterr().out
    assert 'NET WORTH PROJECTION (OPTIMISTIC)' in out
    assert '30 yrs' in out


def test_main_scenario(input_dir, capsys):
    main(['testsnapshot', '--mode', 'Scenario', '--windfall', '10000'])
    out = capsys.readouterr().out
    assert '+12,834' in out


def test_main_missing_snapshot(input_dir, capsys):
    with pytest.raises(SystemExit) as exc_info:
        main(['nosuchsnapshot'])
    assert exc_info.value.code == 1
    assert 'Snapshot file not found' in capsys.readouterr().out


def test_main_negative_years(input_dir):
    with pytest.raises(SystemExit) as exc_info:
        main(['testsnapshot', '--years', '-1'])
    assert exc_info.value.code == 2


def test_main_bad_jurisdiction(input_dir, capsys):
    path = os.path.join(input_dir, 'testsnapshot', 'snapshot.json')
    with open(path, 'r') as f:
        content = f.read()
    bad_dir = os.path.join(input_dir, 'badsnapshot')
    os.makedirs(bad_dir)
    with open(os.path.join(bad_dir, 'snapshot.json'), 'w') as f:
        f.write(content.replace('"jurisdiction": "ON"', '"jurisdiction": "ZZ"'))

    with pytest.raises(SystemExit) as exc_info:
        main(['badsnapshot'])
    assert exc_info.value.code == 1
    assert 'Error: Unknown CA jurisdiction code' in capsys.readouterr().out


def test_main_bad_income_frequency(input_dir, capsys):
    bad_dir = os.path.join(input_dir, 'badfrequency')
    os.makedirs(bad_dir)
    with open(os.path.join(bad_dir, 'snapshot.json'), 'w') as f:
        f.write('{"income": [{"id": "job", "amount": 5000, "frequency": "fortnightly"}]}')

    with pytest.raises(SystemExit) as exc_info:
        main(['badfrequency'])
    assert exc_info.value.code == 1
    assert 'Error:' in capsys.readouterr().out
