"""
Tests for the container state catalog.
"""
import pytest

from wastewatch.container_states import (
    ContainerState,
    DEFAULT_MARKER_COLOR,
    STATE_COLORS,
    all_states,
    color_of,
    marker_color,
    parse_states,
    primary_state,
    signal_status_color,
    states_to_list,
)
from wastewatch.errors import UnknownStateError


class TestCatalog:
    """Closed vocabulary and color mapping."""

    def test_every_state_has_a_color(self):
        """colorOf is total over the enumeration."""
        for state in all_states():
            color = color_of(state)
            assert color.startswith('#') and len(color) == 7

    def test_color_accepts_raw_tags(self):
        assert color_of('bulkyWaste') == STATE_COLORS[ContainerState.BULKY_WASTE]

    @pytest.mark.parametrize('value', ['onFire', 'Overflowing', '', None, 42])
    def test_unknown_value_raises(self, value):
        with pytest.raises(UnknownStateError) as exc_info:
            color_of(value)
        assert exc_info.value.value == value

    def test_catalog_order_is_stable(self):
        states = all_states()
        assert states[0] == ContainerState.OVERFLOWING
        assert states[1] == ContainerState.BULKY_WASTE
        assert len(states) == len(set(states)) == len(STATE_COLORS)


class TestParsing:
    """Deserialization boundary for state sets."""

    def test_duplicates_collapse(self):
        states = parse_states(['damaged', 'overflowing', 'damaged'])
        assert states == frozenset({ContainerState.DAMAGED, ContainerState.OVERFLOWING})

    def test_none_means_no_states(self):
        assert parse_states(None) == frozenset()

    def test_bare_string_is_rejected(self):
        """A string is not a list of tags."""
        with pytest.raises(UnknownStateError):
            parse_states('dirty')

    @pytest.mark.parametrize('values', [{'dirty': True}, b'dirty'])
    def test_non_collection_is_rejected(self, values):
        with pytest.raises(UnknownStateError):
            parse_states(values)

    def test_sets_are_accepted(self):
        assert parse_states({'dirty'}) == frozenset({ContainerState.DIRTY})

    def test_one_unknown_tag_rejects_the_whole_set(self):
        with pytest.raises(UnknownStateError):
            parse_states(['dirty', 'haunted'])

    def test_serialized_in_catalog_order(self):
        states = {ContainerState.DIRTY, ContainerState.OVERFLOWING, ContainerState.DAMAGED}
        assert states_to_list(states) == ['overflowing', 'damaged', 'dirty']


class TestPriority:
    """Marker priority follows catalog order."""

    def test_bulky_waste_wins_over_lower_states(self):
        assert primary_state(['dirty', 'bulkyWaste', 'damaged']) == ContainerState.BULKY_WASTE

    def test_overflowing_wins_over_bulky_waste(self):
        assert primary_state(['bulkyWaste', 'overflowing']) == ContainerState.OVERFLOWING

    def test_empty_set_has_no_primary_state(self):
        assert primary_state([]) is None
        assert marker_color([]) == DEFAULT_MARKER_COLOR

    def test_marker_color_is_primary_state_color(self):
        assert marker_color(['dirty', 'damaged']) == STATE_COLORS[ContainerState.DAMAGED]

    def test_signal_status_colors(self):
        assert signal_status_color('pending') == '#F59E0B'
        assert signal_status_color('resolved') == '#10B981'
        with pytest.raises(UnknownStateError):
            signal_status_color('archived')
