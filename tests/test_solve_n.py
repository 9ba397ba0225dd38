import pytest

from nsolver.solve_n import Solution, format_elapsed, format_summary, main, parse_numbers


class TestParseNumbers:

    def test_valid_tokens(self):
        assert parse_numbers(["1", "2.5", " ", "-3"]) == [1.0, 2.5, -3.0]

    def test_first_invalid_token_empties_input(self):
        assert parse_numbers(["1", "abc", "3"]) == []

    def test_empty(self):
        assert parse_numbers([]) == []


class TestFormatting:

    @pytest.mark.parametrize("elapsed_ns, expected", [
        (2_500_000, "(milliseconds): 2"),
        (2_500, "(microseconds): 2"),
        (999, "(nanoseconds): 999"),
        (0, "(nanoseconds): 0"),
    ])
    def test_format_elapsed(self, elapsed_ns, expected):
        assert format_elapsed(elapsed_ns) == expected

    def test_summary_pluralization(self):
        assert format_summary(0, 5) == "-=- No solution, time taken (nanoseconds): 5 -=-"
        assert format_summary(1, 5) == "-=- 1 solution, time taken (nanoseconds): 5 -=-"
        assert format_summary(2, 5) == "-=- 2 solutions, time taken (nanoseconds): 5 -=-"


class TestSolution:

    def setup_method(self):
        self.solver = Solution([4, 6], target=24)

    def test_find_all_solutions(self):
        self.solver.find_all_solutions()
        assert len(self.solver.get_all_solutions()) == 2
        assert self.solver.elapsed_ns >= 0

    def test_max_generated(self):
        self.solver.set_max_generated(1)
        self.solver.find_all_solutions()
        assert self.solver.get_max_generated() == 1
        assert len(self.solver.get_all_solutions()) == 1

    def test_print_solutions(self, capsys):
        self.solver.find_all_solutions()
        self.solver.print_solutions()
        out = capsys.readouterr().out
        assert "4*6: 24, " in out
        assert out.count("======") == 2


class TestMain:

    def test_requires_numbers(self, capsys):
        assert main([]) == 1
        assert "requires at least one number to work with!" in capsys.readouterr().out

    def test_solutions_summary(self, capsys):
        assert main(["4", "6"]) == 0
        last_line = capsys.readouterr().out.strip().splitlines()[-1]
        assert last_line.startswith("-=- 2 solutions, time taken (")
        assert last_line.endswith(" -=-")

    def test_comma_separated_numbers(self, capsys):
        assert main(["--numbers", "4,6"]) == 0
        assert "-=- 2 solutions" in capsys.readouterr().out

    def test_invalid_token_yields_no_solution(self, capsys):
        assert main(["4", "x"]) == 0
        assert "-=- No solution" in capsys.readouterr().out

    def test_custom_target_and_traces(self, capsys):
        assert main(["1", "1", "--target", "2", "--show-traces"]) == 0
        out = capsys.readouterr().out
        assert "1+1: 2, " in out
        assert "result: 2" in out
        assert "-=- 1 solution," in out

    def test_tree_mode(self, capsys):
        assert main(["1", "5", "5", "5", "--mode", "tree"]) == 0
        assert "-=- 2 solutions" in capsys.readouterr().out

    def test_log_level_is_case_insensitive(self, capsys):
        assert main(["4", "6", "--log-level", "debug"]) == 0
        assert "-=- 2 solutions" in capsys.readouterr().out

    def test_unknown_log_level_is_a_usage_error(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["4", "--log-level", "foo"])
        assert exc_info.value.code == 2
        assert "invalid choice" in capsys.readouterr().err
