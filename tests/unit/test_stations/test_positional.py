"""Unit tests for the positional index and station join."""

import pytest

from src.stations.metrics import DecoderMetrics
from src.stations.models import Coords, SystemCoords
from src.stations.positional import PositionalIndex
from tests.helpers.stations import make_station
from tests.helpers.time import FIXED_NOW


class TestPositionalIndex:
    """Tests for PositionalIndex."""

    @pytest.mark.unit
    def test_lookup(self) -> None:
        """Test building an index and looking up systems."""
        index = PositionalIndex.from_records(
            [SystemCoords(id=1, coords=Coords(x=1, y=2, z=3))]
        )

        assert len(index) == 1
        assert 1 in index
        assert index.get(1) == Coords(x=1, y=2, z=3)
        assert index.get(2) is None

    @pytest.mark.unit
    def test_later_record_wins(self) -> None:
        """Test that a repeated system id keeps the last position."""
        index = PositionalIndex.from_records(
            [
                SystemCoords(id=1, coords=Coords(x=1)),
                SystemCoords(id=1, coords=Coords(x=9)),
            ]
        )

        assert index.get(1) == Coords(x=9)

    @pytest.mark.unit
    def test_join_patches_coordinates_and_keeps_order(self) -> None:
        """Test that joined stations carry their system position."""
        DecoderMetrics.reset()
        index = PositionalIndex.from_records(
            [
                SystemCoords(id=10, coords=Coords(x=5)),
                SystemCoords(id=20, coords=Coords(y=7)),
            ]
        )
        stations = [
            make_station(1, "A", system_id=20),
            make_station(2, "B", system_id=30),
            make_station(3, "C", system_id=10),
        ]

        result = index.join(stations, last_modified=FIXED_NOW)

        assert [s.id for s in result] == [1, 3]
        assert result.stations[0].coords == Coords(y=7)
        assert result.stations[1].coords == Coords(x=5)
        assert [s.id for s in result.missing_coords] == [2]
        assert result.last_modified == FIXED_NOW
        assert DecoderMetrics.get_instance().stations_missing_coords == 1

    @pytest.mark.unit
    def test_records_round_trip(self) -> None:
        """Test that the index can be written back as records."""
        records = [SystemCoords(id=1, coords=Coords(x=1)), SystemCoords(id=2, coords=Coords())]

        index = PositionalIndex.from_records(records)

        assert list(index.records()) == records


class TestCoords:
    """Tests for Coords."""

    @pytest.mark.unit
    def test_distance(self) -> None:
        """Test Euclidean distance."""
        assert Coords(x=0, y=0, z=0).distance_to(Coords(x=3, y=4, z=0)) == pytest.approx(5.0)

    @pytest.mark.unit
    def test_accepts_sequence(self) -> None:
        """Test that journal-style lists are accepted."""
        assert Coords.model_validate([1.0, 2.0, 3.0]) == Coords(x=1, y=2, z=3)

    @pytest.mark.unit
    def test_rejects_wrong_length(self) -> None:
        """Test that a sequence must have three components."""
        with pytest.raises(ValueError):
            Coords.model_validate([1.0, 2.0])
