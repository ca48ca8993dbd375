"""Unit tests for text and JSON rendering."""

import io
import json
from datetime import UTC

import pytest

from src.filters.models import EvaluationContext
from src.freshness.evaluator import Freshness
from src.ranker.models import RankedRecord, RankerResult, Score
from src.renderer.json_renderer import JsonRenderer
from src.renderer.text import CLEAR_LINES, TextRenderer, si_format
from src.stations.models import Category
from tests.helpers.stations import make_station
from tests.helpers.time import FIXED_NOW


def _record(rank: int = 1, visited: bool = True, arrival: float | None = 523.1) -> RankedRecord:
    context = EvaluationContext(
        station=make_station(7, "Alpha", system_name="Lave", distance_to_arrival=arrival),
        distance=12.5,
        visited=visited,
        freshness={
            Category.INFORMATION: Freshness(days_since_update=412, flagged_stale=412),
            Category.MARKET: Freshness(days_since_update=40, flagged_stale=40),
        },
    )
    return RankedRecord(rank=rank, context=context, score=Score.compute(412, 12.5, arrival))


class TestSiFormat:
    """Tests for si_format."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (None, "unknown"),
            (5.0, "5.00 "),
            (99.994, "99.99 "),
            (523.14, "523.1 "),
            (1234.0, "1.23k"),
            (56789.0, "56.8k"),
            (250000.0, "250k"),
        ],
    )
    def test_ranges(self, value: float | None, expected: str) -> None:
        """Test each magnitude range."""
        assert si_format(value) == expected


class TestTextRenderer:
    """Tests for TextRenderer."""

    @pytest.mark.unit
    def test_header(self) -> None:
        """Test the summary line."""
        renderer = TextRenderer(tz=UTC)

        assert renderer.header(3, FIXED_NOW) == (
            "Total 3 stations. Last update is 2023-06-13 12:00:00 UTC."
        )

    @pytest.mark.unit
    def test_row_layout(self) -> None:
        """Test the fixed-width row."""
        expected = (
            "  1*  12.50 Ly +   523.1  Ls  412d [IM  ]  "
            + "Alpha".ljust(25)
            + " "
            + "Lave".ljust(12)
            + " (Coriolis)"
        )

        assert TextRenderer().row(_record()) == expected

    @pytest.mark.unit
    def test_unvisited_and_unknown_arrival(self) -> None:
        """Test the visited marker and unknown arrival distance."""
        row = TextRenderer().row(_record(rank=12, visited=False, arrival=None))

        assert row.startswith(" 12   12.50 Ly +  unknown Ls")

    @pytest.mark.unit
    def test_print_and_clear(self) -> None:
        """Test writing a table and clearing the screen."""
        output = io.StringIO()
        renderer = TextRenderer(output=output, tz=UTC)
        result = RankerResult(records=(_record(),), total=1)

        renderer.clear()
        renderer.print(result, FIXED_NOW)

        text = output.getvalue()
        assert text.startswith("\n" * CLEAR_LINES + "Total 1 stations.")
        assert text.endswith("(Coriolis)\n")
        assert len(text.splitlines()) == CLEAR_LINES + 2


class TestJsonRenderer:
    """Tests for JsonRenderer."""

    @pytest.mark.unit
    def test_document(self) -> None:
        """Test the JSON document fields."""
        result = RankerResult(records=(_record(),), total=4, truncated=True)

        data = json.loads(JsonRenderer().render(result, FIXED_NOW))

        assert data["last_modified"] == "2023-06-13T12:00:00+00:00"
        assert data["total"] == 4
        assert data["truncated"] is True
        station = data["stations"][0]
        assert station["name"] == "Alpha"
        assert station["visited"] is True
        assert station["freshness"]["information"]["flagged_stale"] == 412
        assert station["score"]["stale_days"] == 412

    @pytest.mark.unit
    def test_render_is_deterministic(self) -> None:
        """Test that rendering twice gives identical text."""
        renderer = JsonRenderer()
        result = RankerResult(records=(_record(),), total=1)

        assert renderer.render(result, FIXED_NOW) == renderer.render(result, FIXED_NOW)
