"""
Tests for assignment progress aggregation.
"""
import dataclasses
import itertools
import pytest

from wastewatch.container_states import ContainerState
from wastewatch.errors import UnknownStateError
from wastewatch.progress import compute_progress, container_progress, percentage_complete

OVERFLOWING = ContainerState.OVERFLOWING
DAMAGED = ContainerState.DAMAGED
DIRTY = ContainerState.DIRTY


class TestWorkedExamples:
    """Two containers, activities {overflowing, damaged}."""

    def test_one_of_two_containers_done(self, assignment):
        progress = compute_progress(assignment, {'A': ['overflowing'], 'B': []})

        a, b = progress.container_statuses
        assert a.container_id == 'A'
        assert a.is_complete is False
        assert a.pending_activities == (OVERFLOWING,)
        assert a.completed_activities == (DAMAGED,)
        assert b.is_complete is True
        assert b.completed_activities == (OVERFLOWING, DAMAGED)
        assert progress.completed_containers == 1
        assert progress.total_containers == 2
        assert progress.percentage_complete == 50

    def test_problem_fixed_on_recompute(self, assignment):
        compute_progress(assignment, {'A': ['overflowing'], 'B': []})
        progress = compute_progress(assignment, {'A': [], 'B': []})

        assert progress.completed_containers == 2
        assert progress.percentage_complete == 100

    def test_states_outside_activities_do_not_block(self, assignment):
        """Only the assignment's activities count toward completion."""
        progress = compute_progress(assignment, {'A': ['dirty'], 'B': ['bulkyWaste']})
        assert progress.completed_containers == 2


class TestSnapshots:
    """Snapshot sources and unavailable data."""

    def test_missing_container_counts_as_no_states(self, assignment):
        progress = compute_progress(assignment, {'A': ['damaged']})
        assert [s.is_complete for s in progress.container_statuses] == [False, True]

    def test_none_snapshot_counts_as_no_states(self, assignment):
        progress = compute_progress(assignment, {'A': None, 'B': None})
        assert progress.percentage_complete == 100

    def test_callable_provider(self, assignment):
        calls = []

        def provider(container_id):
            calls.append(container_id)
            return ['overflowing'] if container_id == 'B' else None

        progress = compute_progress(assignment, provider)
        assert calls == ['A', 'B']
        assert progress.completed_containers == 1

    def test_unknown_tag_in_snapshot_is_rejected(self, assignment):
        with pytest.raises(UnknownStateError):
            compute_progress(assignment, {'A': ['melted']})

    def test_inputs_are_not_mutated(self, assignment):
        snapshot = {'A': ['overflowing', 'dirty'], 'B': ['damaged']}
        before = {k: list(v) for k, v in snapshot.items()}

        compute_progress(assignment, snapshot)
        assert snapshot == before

    def test_public_numbers_are_attached(self, assignment):
        progress = compute_progress(assignment, {}, {'A': 'SO-0012'})
        assert progress.container_statuses[0].public_number == 'SO-0012'
        assert progress.container_statuses[1].public_number is None


class TestDeterminism:
    """Idempotence, order independence and monotonicity."""

    def test_idempotent(self, assignment):
        snapshot = {'A': ['overflowing'], 'B': ['dirty']}
        assert compute_progress(assignment, snapshot) == compute_progress(assignment, snapshot)

    def test_container_order_only_changes_result_order(self):
        from wastewatch.assignments import Assignment

        snapshot = {'A': ['overflowing'], 'B': [], 'C': ['damaged', 'dirty'], 'D': ['dirty']}
        reference = None
        for order in itertools.permutations('ABCD'):
            assignment = Assignment(
                id='a', title='t', containers=order, assigned_to='w',
                activities=frozenset({OVERFLOWING, DAMAGED}),
            )
            progress = compute_progress(assignment, snapshot)
            counts = (progress.total_containers, progress.completed_containers,
                      progress.percentage_complete)
            if reference is None:
                reference = counts
            assert counts == reference
            assert [s.container_id for s in progress.container_statuses] == list(order)

        assert reference == (4, 2, 50)

    def test_fixing_a_problem_never_lowers_completion(self, assignment):
        before = compute_progress(assignment, {'A': ['overflowing', 'damaged'], 'B': ['damaged']})
        after = compute_progress(assignment, {'A': ['overflowing'], 'B': ['damaged']})
        fixed = compute_progress(assignment, {'A': ['overflowing'], 'B': []})

        assert after.completed_containers >= before.completed_containers
        assert fixed.completed_containers >= after.completed_containers

    def test_container_progress_sets(self):
        result = container_progress('X', {OVERFLOWING, DAMAGED, DIRTY}, ['dirty', 'fallen'])
        assert result.pending_activities == (DIRTY,)
        assert result.completed_activities == (OVERFLOWING, DAMAGED)


class TestPercentage:
    """Nearest integer, halves rounded up."""

    @pytest.mark.parametrize('completed,total,expected', [
        (1, 8, 13),    # 12.5
        (3, 8, 38),    # 37.5
        (1, 3, 33),
        (2, 3, 67),
        (1, 200, 1),   # 0.5
        (0, 5, 0),
        (5, 5, 100),
    ])
    def test_round_half_up(self, completed, total, expected):
        assert percentage_complete(completed, total) == expected

    def test_range_and_formula(self):
        for total in range(1, 41):
            for completed in range(total + 1):
                value = percentage_complete(completed, total)
                assert 0 <= value <= 100
                assert value == (200 * completed + total) // (2 * total)

    def test_zero_total_is_rejected(self):
        with pytest.raises(ValueError):
            percentage_complete(0, 0)

    def test_to_dict_shape(self, assignment):
        body = compute_progress(assignment, {'A': ['overflowing']}).to_dict()
        assert body['assignmentId'] == 'assignment-1'
        assert body['percentageComplete'] == 50
        assert body['containerStatuses'][0] == {
            'containerId': 'A',
            'publicNumber': None,
            'isComplete': False,
            'completedActivities': ['damaged'],
            'pendingActivities': ['overflowing'],
        }

    def test_assignment_is_untouched(self, assignment):
        copy = dataclasses.replace(assignment)
        compute_progress(assignment, {'A': ['overflowing']})
        assert assignment == copy
