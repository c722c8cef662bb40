from __future__ import annotations

import json
from pathlib import Path

import pytest

from facet_filters import cli


def _write_catalog(tmp_path: Path) -> Path:
    catalog = tmp_path / "catalog.jsonl"
    catalog.write_text(
        '{"id": "p1", "sport": "volleyball", "category": "action", "lighting": "natural"}\n'
        '{"id": "p2", "sport": "volleyball", "category": "celebration", "lighting": "natural"}\n'
        '{"id": "p3", "sport": "basketball", "category": "action", "play_type": "dunk", '
        '"lighting": "dramatic"}\n'
    )
    return catalog


def test_cli_counts(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    catalog = _write_catalog(tmp_path)

    assert cli.main(["--catalog", str(catalog), "counts", "sport=volleyball"]) == 0

    data = json.loads(capsys.readouterr().out)
    assert data["active_filter_count"] == 1
    categories = next(d for d in data["dimensions"] if d["dimension"] == "category")
    assert {o["name"]: o["count"] for o in categories["options"]} == {
        "action": 1,
        "celebration": 1,
    }


def test_cli_select_reports_cleared_filters(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    catalog = _write_catalog(tmp_path)

    code = cli.main(
        [
            "--catalog",
            str(catalog),
            "select",
            "sport",
            "volleyball",
            "--query",
            "category=celebration&lighting=natural&lighting=dramatic",
        ]
    )
    assert code == 0

    captured = capsys.readouterr()
    data = json.loads(captured.out)
    assert data["query"] == "sport=volleyball&category=celebration&lighting=natural"
    assert data["cleared_labels"] == ["Lighting (dramatic)"]
    assert "Cleared Lighting (dramatic) (incompatible with volleyball)" in captured.err


def test_cli_distributions(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    catalog = _write_catalog(tmp_path)

    assert cli.main(["--catalog", str(catalog), "distributions"]) == 0

    data = json.loads(capsys.readouterr().out)
    assert data["sports"][0] == {"name": "volleyball", "count": 2, "percentage": 66.7}


def test_cli_rejects_unknown_dimension(tmp_path: Path) -> None:
    catalog = _write_catalog(tmp_path)

    with pytest.raises(SystemExit):
        cli.main(["--catalog", str(catalog), "select", "weather", "sunny"])
