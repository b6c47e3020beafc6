"""
Tests for the convertToCylindrical command line.
"""

import pytest

from foamcyl.cli import build_parser, main


def run(case_dir, *args):
    return main(['-case', str(case_dir), *args])


class TestParser:

    def test_defaults(self):
        args = build_parser().parse_args([])
        assert args.case == '.'
        assert args.dict == 'dynamicMeshDict'
        assert not args.unitVectors
        assert args.time is None

    def test_openfoam_options(self):
        args = build_parser().parse_args(['-latestTime', '-noZero', '-time', '0.1:1', '-region', 'rotor'])
        assert args.latestTime and args.noZero
        assert args.time == '0.1:1'
        assert args.region == 'rotor'

    def test_no_abbreviations(self):
        with pytest.raises(SystemExit) as excinfo:
            build_parser().parse_args(['-latest'])
        assert excinfo.value.code == 2

    @pytest.mark.parametrize('option', ['-unit', '-no', '-ca', '-logF=out.log'])
    def test_partial_options_rejected(self, option, capsys):
        with pytest.raises(SystemExit) as excinfo:
            build_parser().parse_args([option])
        assert excinfo.value.code == 2
        assert option in capsys.readouterr().err

    def test_partial_option_rejected_by_main(self, rotating_case):
        with pytest.raises(SystemExit) as excinfo:
            run(rotating_case, '-latest')
        assert excinfo.value.code == 2
        assert not (rotating_case / '0.2' / 'Ucyl').exists()

    def test_option_values_not_checked(self):
        assert build_parser().parse_args(['-time', '-1']).time == '-1'
        assert build_parser().parse_args(['-time=0.1']).time == '0.1'


class TestMain:

    def test_converts_every_time(self, rotating_case):
        assert run(rotating_case) == 0
        assert (rotating_case / '0' / 'Ucyl').is_file()
        assert (rotating_case / '0.1' / 'Ucyl').is_file()
        assert not (rotating_case / '0.2' / 'Ucyl').exists()

    def test_skipped_time_exits_zero(self, rotating_case, caplog):
        assert run(rotating_case, '-latestTime', '-unitVectors') == 0
        assert (rotating_case / '0.2' / 'cRad').is_file()
        assert (rotating_case / '0.2' / 'cTheta').is_file()
        assert not (rotating_case / '0.2' / 'Ucyl').exists()
        assert not (rotating_case / '0.1' / 'Ucyl').exists()
        assert "No existing U field" in caplog.text

    def test_time_option(self, rotating_case):
        assert run(rotating_case, '-time', '0.1') == 0
        assert (rotating_case / '0.1' / 'Ucyl').is_file()
        assert not (rotating_case / '0' / 'Ucyl').exists()

    def test_log_file(self, rotating_case, tmp_path):
        log_file = tmp_path / 'convert.log'
        assert run(rotating_case, '-noZero', '-logFile', str(log_file)) == 0
        text = log_file.read_text()
        assert "Reading dynamic mesh properties" in text
        assert "Time = 0.1" in text
        assert "End" in text

    def test_missing_dictionary(self, rotating_case, caplog):
        (rotating_case / 'constant' / 'dynamicMeshDict').unlink()
        assert run(rotating_case) == 1
        assert "dynamicMeshDict" in caplog.text
        assert not (rotating_case / '0.1' / 'Ucyl').exists()

    def test_bad_time_argument(self, rotating_case):
        assert run(rotating_case, '-time', 'latest') == 1

    def test_broken_mesh(self, rotating_case, caplog):
        (rotating_case / 'constant' / 'polyMesh' / 'points').unlink()
        assert run(rotating_case) == 1
        assert "time 0" in caplog.text

    def test_unknown_option(self, rotating_case):
        with pytest.raises(SystemExit) as excinfo:
            run(rotating_case, '-parallel')
        assert excinfo.value.code == 2
