"""Tests for release listing and ordinal selection."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from rich.console import Console

from chartdeck.cli.shared.console import CLIConsole
from chartdeck.config.settings import ChartDescriptor
from chartdeck.deployment.chart_operator.constants import Archetype
from chartdeck.deployment.chart_operator.errors import (
    ClusterError,
    ReleaseNotFoundError,
    SelectionError,
    SelectionParseError,
    SelectionRangeError,
)
from chartdeck.deployment.chart_operator.release_index import (
    Release,
    ReleaseIndexer,
    ReleaseListing,
)
from chartdeck.deployment.shell_commands.types import CommandResult


def _seed(fake_helm, name: str, chart: str, tag: str) -> None:
    fake_helm.releases[name] = {
        "namespace": "game-ns",
        "chart": chart,
        "values": {"image": {"tag": tag}},
        "revision": 1,
    }


@pytest.fixture
def seeded_helm(fake_helm):
    _seed(fake_helm, "game-api10", "game-api-0.1.0", "1.0")
    _seed(fake_helm, "game-host10", "game-host-0.1.0", "1.0")
    _seed(fake_helm, "custom", "other-chart-2.0.0", "9.9")
    return fake_helm


@pytest.fixture
def indexer(
    mock_commands: MagicMock, mock_console: MagicMock, descriptor: ChartDescriptor
) -> ReleaseIndexer:
    return ReleaseIndexer(mock_commands, mock_console, descriptor)


class TestReleaseListing:
    """Tests for ReleaseListing.resolve."""

    @pytest.fixture
    def listing(self) -> ReleaseListing:
        return ReleaseListing(
            (
                Release(name="a", version="1", namespace="ns"),
                Release(name="b", version="2", namespace="ns"),
                Release(name="c", version="3", namespace="ns"),
            )
        )

    @pytest.mark.parametrize(("token", "name"), [("1", "a"), ("2", "b"), (3, "c")])
    def test_resolves_one_based_ordinals(
        self, listing: ReleaseListing, token: str | int, name: str
    ) -> None:
        assert listing.resolve(token).name == name

    def test_surrounding_whitespace_is_ignored(self, listing: ReleaseListing) -> None:
        assert listing.resolve(" 2\n").name == "b"

    @pytest.mark.parametrize("token", ["", "abc", "1.5", "two"])
    def test_non_integer_raises_parse_error(
        self, listing: ReleaseListing, token: str
    ) -> None:
        with pytest.raises(SelectionParseError):
            listing.resolve(token)

    @pytest.mark.parametrize("token", ["0", "4", "-1", "100"])
    def test_out_of_range_raises_range_error(
        self, listing: ReleaseListing, token: str
    ) -> None:
        with pytest.raises(SelectionRangeError):
            listing.resolve(token)

    def test_empty_listing_rejects_any_ordinal(self) -> None:
        with pytest.raises(SelectionRangeError) as excinfo:
            ReleaseListing(()).resolve("1")
        assert excinfo.value.details == "No releases are deployed"

    def test_selection_errors_share_a_base(self) -> None:
        assert issubclass(SelectionParseError, SelectionError)
        assert issubclass(SelectionRangeError, SelectionError)


class TestReleaseIndexer:
    """Tests for ReleaseIndexer."""

    def test_fetch_keeps_cluster_order(
        self, indexer: ReleaseIndexer, seeded_helm
    ) -> None:
        listing = indexer.fetch_releases()

        assert [r.name for r in listing] == ["game-api10", "game-host10", "custom"]

    def test_fetch_reads_version_and_archetype(
        self, indexer: ReleaseIndexer, seeded_helm
    ) -> None:
        api, host, custom = indexer.fetch_releases()

        assert api.version == "1.0"
        assert api.archetype is Archetype.API
        assert host.archetype is Archetype.HOST
        assert custom.archetype is None
        assert custom.version == "9.9"
        assert api.namespace == "game-ns"

    def test_list_then_resolve_returns_printed_release(
        self,
        mock_commands: MagicMock,
        descriptor: ChartDescriptor,
        seeded_helm,
    ) -> None:
        rich_console = Console(record=True, width=200)
        indexer = ReleaseIndexer(mock_commands, CLIConsole(rich_console), descriptor)

        listing = indexer.list_releases()
        lines = rich_console.export_text().splitlines()

        for ordinal in range(1, len(listing) + 1):
            release = listing.resolve(ordinal)
            row = next(line for line in lines if release.name in line)
            assert row.split()[1] == str(ordinal)

    def test_empty_namespace_warns(
        self, indexer: ReleaseIndexer, mock_console: MagicMock
    ) -> None:
        listing = indexer.list_releases()

        assert len(listing) == 0
        mock_console.warn.assert_called_once()

    def test_list_failure_raises_cluster_error(
        self, descriptor: ChartDescriptor, mock_console: MagicMock
    ) -> None:
        commands = MagicMock()
        commands.helm.list_releases.return_value = (
            CommandResult(success=False, stderr="Kubernetes cluster unreachable"),
            [],
        )
        indexer = ReleaseIndexer(commands, mock_console, descriptor)

        with pytest.raises(ClusterError) as excinfo:
            indexer.fetch_releases()

        assert "unreachable" in str(excinfo.value.details)

    def test_find_release_by_name(self, indexer: ReleaseIndexer, seeded_helm) -> None:
        assert indexer.find_release("game-host10").archetype is Archetype.HOST

    def test_find_missing_release_raises_not_found(
        self, indexer: ReleaseIndexer, seeded_helm
    ) -> None:
        with pytest.raises(ReleaseNotFoundError):
            indexer.find_release("nope")

    def test_archetype_of_prefers_longest_chart_name(
        self, indexer: ReleaseIndexer
    ) -> None:
        names = {"game": Archetype.HOST, "game-api": Archetype.API}
        assert indexer.archetype_of("game-api-1.0.0", names) is Archetype.API
        assert indexer.archetype_of("game-1.0.0", names) is Archetype.HOST
        assert indexer.archetype_of("unrelated-1.0.0", names) is None
