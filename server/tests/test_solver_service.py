import pytest
from unittest.mock import patch
from pydantic import ValidationError

from nsolver import GroupingMode, InvariantViolation
from ..config import Settings
from ..schemas import SolveRequest
from ..services.solver_service import InputTooLongError, SolverService, solver_service


class TestSolverService:
    """Test suite for SolverService."""

    def setup_method(self):
        """Set up test fixtures."""
        self.service = SolverService(max_input_length=4, workers=1)

    def test_resolve_text(self):
        numbers = self.service.resolve_numbers(SolveRequest(text="4  6"))
        assert numbers == [4.0, 6.0]

    def test_resolve_text_with_invalid_token(self):
        assert self.service.resolve_numbers(SolveRequest(text="4 six")) == []

    def test_text_cap_applies_before_parsing(self):
        with pytest.raises(InputTooLongError) as exc_info:
            self.service.resolve_numbers(SolveRequest(text="1 2 3 4 bad"))
        assert exc_info.value.length == 5

    def test_numbers_cap(self):
        with pytest.raises(InputTooLongError, match="greater than 4"):
            self.service.resolve_numbers(SolveRequest(numbers=[1, 2, 3, 4, 5]))

    def test_solve(self):
        response = self.service.solve(SolveRequest(numbers=[1, 1], target=2))

        assert response.count == 1
        assert response.mode == "clamped"
        assert response.solutions[0].expression == "1 + 1"
        assert response.solutions[0].steps[0].text == "1+1: 2, "

    def test_solve_without_traces(self):
        response = self.service.solve(SolveRequest(numbers=[4, 6], include_traces=False))

        assert response.count == 2
        assert all(s.trace is None for s in response.solutions)

    def test_explicit_zero_length_cap_is_kept(self):
        service = SolverService(max_input_length=0)

        assert service.max_input_length == 0
        with pytest.raises(InputTooLongError):
            service.check_length(1)

    @patch('server.services.solver_service.Solution.find_all_solutions')
    def test_invariant_violation_propagates(self, mock_find):
        mock_find.side_effect = InvariantViolation("digit out of range")

        with pytest.raises(InvariantViolation):
            self.service.solve(SolveRequest(numbers=[4, 6]))


class TestSolveRequest:
    """Test request validation."""

    def test_requires_exactly_one_input(self):
        with pytest.raises(ValidationError):
            SolveRequest()
        with pytest.raises(ValidationError):
            SolveRequest(numbers=[1.0], text="1")

    def test_rejects_non_finite_numbers(self):
        with pytest.raises(ValidationError):
            SolveRequest(numbers=[float("inf"), 1.0])

    def test_mode_is_a_grouping_mode(self):
        assert SolveRequest(numbers=[4.0, 6.0], mode="tree").mode is GroupingMode.TREE
        with pytest.raises(ValidationError):
            SolveRequest(numbers=[4.0, 6.0], mode="bogus")


class TestSettings:
    """Test configuration validation."""

    def test_default_settings_are_valid(self):
        Settings().validate_settings()

    def test_unknown_default_mode(self):
        with pytest.raises(ValueError, match="default_mode"):
            Settings(default_mode="bogus").validate_settings()

    def test_tree_default_mode(self):
        Settings(default_mode="tree").validate_settings()


class TestGlobalSolverService:
    """Test global solver service instance."""

    def test_global_instance(self):
        """Test that global instance exists."""
        assert isinstance(solver_service, SolverService)
        assert solver_service.max_input_length >= 1
