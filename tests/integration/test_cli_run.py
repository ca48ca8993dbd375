"""End-to-end runs of the CLI against mocked dump downloads."""

import gzip
import json
from datetime import UTC, datetime
from pathlib import Path

import httpx
import pytest
from click.testing import CliRunner

from src.cli import main as cli_main
from src.config.schemas.search import SearchConfig
from src.fetch.cache import EtagStore
from src.fetch.client import DumpFetcher
from src.observability.metrics import reset_metrics
from tests.helpers.stations import days_ago, dump_lines, station_payload


LAST_MODIFIED = "Tue, 13 Jun 2023 06:00:00 GMT"

SYSTEMS = [
    {"id": 100, "name": "Here", "coords": {"x": 0, "y": 0, "z": 0}},
    {"id": 101, "name": "Near", "coords": {"x": 1, "y": 0, "z": 0}},
    {"id": 102, "name": "Mid", "coords": {"x": 2, "y": 0, "z": 0}},
    {"id": 105, "name": "Far", "coords": {"x": 5, "y": 0, "z": 0}},
]


def _stations(now: datetime) -> list[dict[str, object]]:
    def update(information: int, market: int | None = None) -> dict[str, str]:
        times = {"information": days_ago(information, now)}
        if market is not None:
            times["market"] = days_ago(market, now)
        return times

    return [
        station_payload(1, "Alpha Port", "Far", 105, updateTime=update(40)),
        station_payload(2, "Beta Hub", "Mid", 102, updateTime=update(10)),
        station_payload(3, "Gamma Dock", "Near", 101, updateTime=update(1, 90)),
        station_payload(4, "Jameson Memorial", "Here", 100, updateTime=update(900)),
        station_payload(5, "Lost Outpost", "Nowhere", 999, updateTime=update(500)),
    ]


class DumpServer:
    """MockTransport handler serving the two dumps."""

    def __init__(self, now: datetime) -> None:
        self.requests: list[httpx.Request] = []
        self._stations = dump_lines(_stations(now))
        self._systems = dump_lines(SYSTEMS)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path.endswith("systemsPopulated.json"):
            return httpx.Response(200, content=self._systems)
        if request.headers.get("If-None-Match") == '"stations-v1"':
            return httpx.Response(304)
        return httpx.Response(
            200,
            content=self._stations,
            headers={"ETag": '"stations-v1"', "Last-Modified": LAST_MODIFIED},
        )

    def paths(self) -> list[str]:
        return [request.url.path for request in self.requests]


@pytest.fixture(autouse=True)
def fresh_metrics() -> None:
    """Reset component metrics between runs."""
    reset_metrics()


@pytest.fixture
def server(monkeypatch: pytest.MonkeyPatch) -> DumpServer:
    """Route every CLI download through a mock transport."""
    dump_server = DumpServer(datetime.now(UTC))

    def build_fetcher(search: SearchConfig, data_dir: Path, run_id: str) -> DumpFetcher:
        etags = EtagStore(data_dir / search.fetch.etag_cache_file)
        return DumpFetcher(
            search.fetch, etags, run_id, transport=httpx.MockTransport(dump_server)
        )

    monkeypatch.setattr(cli_main, "_build_fetcher", build_fetcher)
    return dump_server


@pytest.fixture
def env(tmp_path: Path) -> dict[str, str]:
    """Journal and data directories for the CLI."""
    journal_dir = tmp_path / "journal"
    journal_dir.mkdir()
    (journal_dir / "Journal.2023-06-13T080000.01.log").write_text(
        json.dumps(
            {"event": "Location", "StarSystem": "Here", "StarPos": [0.0, 0.0, 0.0]}
        )
        + "\n"
        + json.dumps({"event": "Docked", "StationName": "Gamma Dock", "MarketID": 1003})
        + "\n",
        encoding="utf-8",
    )
    data_dir = tmp_path / "data"
    return {"ELITE_JOURNAL_DIR": str(journal_dir), "STALE_STATIONS_DATA_DIR": str(data_dir)}


@pytest.fixture
def config(tmp_path: Path) -> Path:
    """Configuration excluding the Jameson station."""
    path = tmp_path / "config.yaml"
    path.write_text(
        "max_dist: 50\n"
        "freshness:\n"
        "  threshold_days: 30\n"
        "filter:\n"
        "  exclude_names: ['Jameson']\n",
        encoding="utf-8",
    )
    return path


class TestRunCommand:
    """Tests for the run command."""

    @pytest.mark.integration
    def test_oneshot_text_table(
        self, server: DumpServer, env: dict[str, str], config: Path
    ) -> None:
        """Test a complete oneshot run rendered as text."""
        result = CliRunner().invoke(cli_main.cli, ["run", "--config", str(config)], env=env)

        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert lines[0].startswith("Total 2 stations. Last update is ")
        assert "Gamma Dock" in lines[1]
        assert lines[1].startswith("  1*")
        assert "Alpha Port" in lines[2]
        assert "Jameson" not in result.output
        assert "Beta Hub" not in result.output
        assert server.paths() == ["/dump/stations.json", "/dump/systemsPopulated.json"]

    @pytest.mark.integration
    def test_json_output_and_conditional_refresh(
        self, server: DumpServer, env: dict[str, str], config: Path
    ) -> None:
        """Test JSON output and that a second run reuses both local files."""
        runner = CliRunner()
        runner.invoke(cli_main.cli, ["run", "--config", str(config)], env=env)

        result = runner.invoke(
            cli_main.cli, ["run", "--config", str(config), "--format", "json"], env=env
        )

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert [s["name"] for s in data["stations"]] == ["Gamma Dock", "Alpha Port"]
        assert data["last_modified"] == "2023-06-13T06:00:00+00:00"
        assert server.paths()[2:] == ["/dump/stations.json"]
        assert server.requests[2].headers["If-None-Match"] == '"stations-v1"'

    @pytest.mark.integration
    def test_sol_origin_and_row_limit(
        self, server: DumpServer, env: dict[str, str], config: Path
    ) -> None:
        """Test command line overrides of origin and row count."""
        result = CliRunner().invoke(
            cli_main.cli,
            ["run", "--config", str(config), "--pos-origin", "Sol", "-n", "1"],
            env=env,
        )

        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert lines[0].startswith("Total 2 stations.")
        assert len(lines) == 2
        assert "Gamma Dock" in lines[1]

    @pytest.mark.integration
    def test_zero_row_limit_shows_every_match(
        self, server: DumpServer, env: dict[str, str], config: Path
    ) -> None:
        """Test that a row limit of zero removes the cap."""
        result = CliRunner().invoke(
            cli_main.cli, ["run", "--config", str(config), "-n", "0"], env=env
        )

        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert lines[0].startswith("Total 2 stations.")
        assert len(lines) == 3

    @pytest.mark.integration
    def test_cut_off_coordinates_cache_fails(
        self, server: DumpServer, env: dict[str, str], config: Path
    ) -> None:
        """Test that a damaged compressed cache is reported, not raised."""
        data_dir = Path(env["STALE_STATIONS_DATA_DIR"])
        data_dir.mkdir()
        payload = gzip.compress(dump_lines(SYSTEMS * 200))
        (data_dir / "coordinates.json.gz").write_bytes(payload[: len(payload) // 2])

        result = CliRunner().invoke(cli_main.cli, ["run", "--config", str(config)], env=env)

        assert result.exit_code == 1
        assert "Error: Truncated or corrupt compressed stream" in result.output
        assert "Traceback" not in result.output

    @pytest.mark.integration
    def test_missing_journal_fails(
        self, server: DumpServer, env: dict[str, str], config: Path, tmp_path: Path
    ) -> None:
        """Test that an unreadable journal directory is reported."""
        env["ELITE_JOURNAL_DIR"] = str(tmp_path / "no-journal")

        result = CliRunner().invoke(cli_main.cli, ["run", "--config", str(config)], env=env)

        assert result.exit_code == 1
        assert "Error: " in result.output
        assert "is not a directory" in result.output

    @pytest.mark.integration
    def test_server_error_fails(
        self, env: dict[str, str], config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test that a failed download exits with an error."""

        def build_fetcher(search: SearchConfig, data_dir: Path, run_id: str) -> DumpFetcher:
            transport = httpx.MockTransport(lambda request: httpx.Response(404))
            return DumpFetcher(
                search.fetch, EtagStore(data_dir / ".cache.json"), run_id, transport=transport
            )

        monkeypatch.setattr(cli_main, "_build_fetcher", build_fetcher)

        result = CliRunner().invoke(cli_main.cli, ["run", "--config", str(config)], env=env)

        assert result.exit_code == 1
        assert "Error: Client error (404)" in result.output


class TestStatsCommand:
    """Tests for the stats command."""

    @pytest.mark.integration
    def test_writes_histograms(
        self, server: DumpServer, env: dict[str, str], config: Path, tmp_path: Path
    ) -> None:
        """Test histogram files for a downloaded dump."""
        out_dir = tmp_path / "stats"

        result = CliRunner().invoke(
            cli_main.cli,
            ["stats", "--config", str(config), "--output-dir", str(out_dir)],
            env=env,
        )

        assert result.exit_code == 0, result.output
        assert "days_information.txt" in result.output
        information = (out_dir / "days_information.txt").read_text().splitlines()
        # Jameson Memorial is excluded; the four other stations are counted
        assert information[-1].split("\t")[2] == "4"
        market = (out_dir / "days_market.txt").read_text().splitlines()
        assert market[1:] == ["90\t1\t1"]
        assert server.paths() == ["/dump/stations.json"]
